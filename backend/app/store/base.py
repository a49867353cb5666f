"""Base classes for the remote page store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal, Optional

TitleOperator = Literal["starts_with", "contains"]


@dataclass
class RemotePage:
    """A page in the remote store, reduced to what the sync reads.

    Attributes:
        id: Page identifier in the remote store
        title: Plain text of the page's title property
    """

    id: str
    title: str


@dataclass
class StoreResult:
    """Result of a call to the remote store.

    Calls never raise for transport or API errors; callers inspect
    ``success`` and decide how to degrade.

    Attributes:
        success: Whether the call completed successfully
        message: Human-readable result message
        page_id: ID of the created or updated page
        pages: Pages returned by a query
    """

    success: bool
    message: str
    page_id: Optional[str] = None
    pages: list[RemotePage] = field(default_factory=list)


class PageStore(ABC):
    """Abstract base class for the page database tasks are mirrored into."""

    @abstractmethod
    async def query_by_title(
        self, database_id: str, operator: TitleOperator, value: str
    ) -> StoreResult:
        """Query a database by its title property.

        The remote filter is approximate; callers re-check titles locally.

        Args:
            database_id: Database (collection) to query
            operator: "starts_with" or "contains"
            value: Text to match against page titles

        Returns:
            StoreResult with matching pages
        """
        pass

    @abstractmethod
    async def create_page(self, database_id: str, properties: dict) -> StoreResult:
        """Create a page in a database.

        Returns:
            StoreResult with page_id of the created page
        """
        pass

    @abstractmethod
    async def update_page(self, page_id: str, properties: dict) -> StoreResult:
        """Replace the given properties on an existing page."""
        pass

    async def aclose(self) -> None:
        """Release any open connections."""
        return None
