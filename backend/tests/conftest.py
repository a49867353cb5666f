"""Pytest configuration and fixtures."""

import copy
from typing import Optional

import pytest

from app.config import Settings
from app.store.base import PageStore, RemotePage, StoreResult


class FakePageStore(PageStore):
    """In-memory page store mimicking Notion's title filters.

    Title filters match case-insensitively, like Notion, so callers still
    have to re-check results locally.
    """

    def __init__(self):
        self.databases: dict[str, dict[str, dict]] = {}
        self.created: list[tuple[str, dict]] = []
        self.updated: list[tuple[str, dict]] = []
        self.queries: list[tuple[str, str, str]] = []
        self.fail_queries = False
        self.fail_writes = False
        self._next_id = 1

    def add_page(self, database_id: str, title: str, properties: Optional[dict] = None) -> str:
        page_id = f"page-{self._next_id}"
        self._next_id += 1
        self.databases.setdefault(database_id, {})[page_id] = {
            "title": title,
            "properties": properties or {},
        }
        return page_id

    def page(self, page_id: str) -> dict:
        for pages in self.databases.values():
            if page_id in pages:
                return pages[page_id]
        raise KeyError(page_id)

    async def query_by_title(self, database_id, operator, value):
        self.queries.append((database_id, operator, value))
        if self.fail_queries:
            return StoreResult(success=False, message="Could not connect to Notion")

        needle = value.lower()
        pages = []
        for page_id, page in self.databases.get(database_id, {}).items():
            title = page["title"].lower()
            if operator == "starts_with" and title.startswith(needle):
                pages.append(RemotePage(id=page_id, title=page["title"]))
            elif operator == "contains" and needle in title:
                pages.append(RemotePage(id=page_id, title=page["title"]))
        return StoreResult(success=True, message=f"Found {len(pages)} pages", pages=pages)

    async def create_page(self, database_id, properties):
        self.created.append((database_id, copy.deepcopy(properties)))
        if self.fail_writes:
            return StoreResult(success=False, message="Notion server error (502)")
        title = properties["Name"]["title"][0]["text"]["content"]
        page_id = self.add_page(database_id, title, copy.deepcopy(properties))
        return StoreResult(success=True, message="Page created", page_id=page_id)

    async def update_page(self, page_id, properties):
        self.updated.append((page_id, copy.deepcopy(properties)))
        if self.fail_writes:
            return StoreResult(success=False, message="Notion server error (502)")
        page = self.page(page_id)
        page["properties"] = copy.deepcopy(properties)
        page["title"] = properties["Name"]["title"][0]["text"]["content"]
        return StoreResult(success=True, message="Page updated", page_id=page_id)


@pytest.fixture
def test_settings():
    """Explicit settings, independent of the environment."""
    return Settings(
        _env_file=None,
        notion_api_token="test-token",
        notion_task_database_id="task-db",
        notion_project_database_id="project-db",
        backlog_base_url="https://team.backlog.com",
        marker_category="GGJVN",
        user_timezone="UTC",
    )


@pytest.fixture
def fake_store():
    """Create an empty in-memory page store."""
    return FakePageStore()


@pytest.fixture
def make_webhook():
    """Factory for Backlog webhook payloads (plain dicts)."""

    def _make(description: str = "", **content_overrides) -> dict:
        payload = {
            "id": 9001,
            "project": {"id": 1, "projectKey": "ABC", "name": "Alpha"},
            "type": 2,
            "content": {
                "id": 5012,
                "key_id": 12,
                "summary": "Login button does nothing",
                "description": description,
                "parentIssueId": None,
                "startDate": None,
                "dueDate": None,
                "priority": {"id": 3, "name": "Normal"},
                "status": {"id": 1, "name": "Open"},
                "category": [{"id": 7, "name": "GGJVN"}],
                "assignee": {"id": 42, "name": "Tanaka"},
            },
        }
        payload["content"].update(content_overrides)
        return payload

    return _make
