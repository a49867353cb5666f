"""Remote page store that tasks are mirrored into."""

from ..config import Settings
from .base import PageStore, RemotePage, StoreResult
from .notion import NotionPageStore

__all__ = [
    "PageStore",
    "RemotePage",
    "StoreResult",
    "NotionPageStore",
    "get_page_store",
]


def get_page_store(settings: Settings) -> PageStore:
    """Get the page store for the configured Notion workspace.

    Args:
        settings: Application settings holding the Notion token

    Returns:
        PageStore implementation
    """
    return NotionPageStore(settings)
