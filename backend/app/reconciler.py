"""Mirror normalized tasks into the Notion task database.

Each task maps to one page, keyed by the composite id at the start of its
title. A sync looks up the task's own page, its parent's page and its project's
page, then creates or fully updates the task page. Concurrent deliveries for
the same task are not coordinated; the last write wins and a race can produce
a duplicate page.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Optional

from .config import Settings
from .resolver import PageResolver
from .store import PageStore, RemotePage
from .task_models import DateRange, Task

logger = logging.getLogger(__name__)

# Notion caps a single rich text / title segment at 2000 characters
TEXT_LIMIT = 2000


@dataclass
class SyncResult:
    """Outcome of reconciling one task.

    Attributes:
        task_id: Composite task id
        action: "create" if no page existed, "update" otherwise
        success: Whether the remote write succeeded
        message: Human-readable result message
        page_id: Notion page that was written (if successful)
    """

    task_id: str
    action: Literal["create", "update"]
    success: bool
    message: str
    page_id: Optional[str] = None


def _text(content: str) -> list[dict]:
    return [{"type": "text", "text": {"content": content[:TEXT_LIMIT]}}]


def _date(window: Optional[DateRange]) -> dict:
    if window is None:
        return {"date": None}
    return {"date": {"start": window.start.isoformat(), "end": window.end.isoformat()}}


def _relation(page: Optional[RemotePage]) -> dict:
    return {"relation": [{"id": page.id}] if page else []}


def build_task_properties(
    task: Task,
    task_url: str,
    parent_page: Optional[RemotePage] = None,
    project_page: Optional[RemotePage] = None,
) -> dict:
    """Build the full Notion property set for a task page.

    Every tracked property is always present so that an update replaces
    stale values (cleared dates, removed tags, dropped relations).
    """
    return {
        "Name": {"title": _text(task.name)},
        "Tags": {"multi_select": [{"name": tag} for tag in task.tags]},
        "Priority": {"select": {"name": task.priority} if task.priority else None},
        "Status": {"status": {"name": task.status.value}},
        "Assignees": {
            "multi_select": [{"name": name} for name in task.assignees or []]
        },
        "Summary": {"rich_text": _text(task.summary)},
        "Dev Due Date": _date(task.dev_due_date),
        "Release Due Date": _date(task.release_due_date),
        "Backlog URL": {"url": task_url},
        "Parent Task": _relation(parent_page),
        "Project": _relation(project_page),
    }


async def _lookup(
    finder: Callable[[str], Awaitable[Optional[RemotePage]]], key: Optional[str]
) -> Optional[RemotePage]:
    if not key:
        return None
    return await finder(key)


class TaskReconciler:
    """Create-or-update task pages in Notion."""

    def __init__(self, store: PageStore, resolver: PageResolver, settings: Settings):
        self.store = store
        self.resolver = resolver
        self.task_database_id = settings.notion_task_database_id
        self.backlog_base_url = settings.backlog_base_url.rstrip("/")

    def task_url(self, task: Task) -> str:
        """Backlog view link for a task."""
        return f"{self.backlog_base_url}/view/{task.id}"

    async def sync_task(self, task: Task) -> SyncResult:
        """Mirror a task into Notion.

        Lookup failures are treated as "page absent"; a failed create or
        update is logged and reported in the result, never raised.

        Args:
            task: Normalized task to mirror

        Returns:
            SyncResult describing what was attempted and whether it succeeded
        """
        existing, parent_page, project_page = await asyncio.gather(
            self.resolver.find_task_page(task.id),
            _lookup(self.resolver.find_task_page, task.parent_task_id),
            _lookup(self.resolver.find_project_page, task.project),
        )

        if task.parent_task_id and parent_page is None:
            logger.info(f"Parent {task.parent_task_id} of {task.id} not in Notion")
        if task.project and project_page is None:
            logger.info(f"Project '{task.project}' of {task.id} not in Notion")

        properties = build_task_properties(
            task, self.task_url(task), parent_page, project_page
        )

        if existing is None:
            action = "create"
            result = await self.store.create_page(self.task_database_id, properties)
        else:
            action = "update"
            result = await self.store.update_page(existing.id, properties)

        if not result.success:
            logger.error(f"Failed to {action} Notion page for {task.id}: {result.message}")
        else:
            logger.info(f"Notion page {action}d for {task.id} ({result.page_id})")

        return SyncResult(
            task_id=task.id,
            action=action,
            success=result.success,
            message=result.message,
            page_id=result.page_id,
        )
