"""Look up existing Notion pages for tasks and projects."""

import logging
from typing import Optional

from .config import Settings
from .store import PageStore, RemotePage

logger = logging.getLogger(__name__)


class PageResolver:
    """Resolve natural keys to existing pages in the task and project databases."""

    def __init__(self, store: PageStore, settings: Settings):
        self.store = store
        self.task_database_id = settings.notion_task_database_id
        self.project_database_id = settings.notion_project_database_id

    async def find_task_page(self, task_id: str) -> Optional[RemotePage]:
        """Find the page whose title starts with the composite task id.

        Page titles are ``{id} {summary}``, so the id is matched as a prefix.
        The remote filter is case-insensitive and would also match ``ABC-12``
        for ``ABC-1``, hence the local re-check on the id boundary.

        Returns:
            The first matching page, or None if absent or the lookup failed
        """
        result = await self.store.query_by_title(
            self.task_database_id, "starts_with", task_id
        )
        if not result.success:
            logger.warning(
                f"Task page lookup for {task_id} failed, treating as absent: "
                f"{result.message}"
            )
            return None

        for page in result.pages:
            if page.title == task_id or page.title.startswith(f"{task_id} "):
                return page
        return None

    async def find_project_page(self, project_name: str) -> Optional[RemotePage]:
        """Find the first project page whose title contains the project name.

        Returns:
            The first matching page, or None if absent or the lookup failed
        """
        result = await self.store.query_by_title(
            self.project_database_id, "contains", project_name
        )
        if not result.success:
            logger.warning(
                f"Project page lookup for '{project_name}' failed, treating as "
                f"absent: {result.message}"
            )
            return None

        for page in result.pages:
            if project_name in page.title:
                return page
        return None
