"""Notion page store backed by the Notion REST API."""

from typing import Optional

import httpx

from ..config import Settings
from .base import PageStore, RemotePage, StoreResult, TitleOperator

# Raised while reading a 2xx body that is not the expected page JSON
MALFORMED_RESPONSE_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


def describe_error(e: Exception) -> str:
    """Turn an httpx exception into a short categorized message."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 400:
            return "Notion rejected the request (400) - check property schema"
        elif status == 401:
            return "Authentication failed (401) - check Notion token"
        elif status == 403:
            return "Permission denied (403) - share the database with the integration"
        elif status == 404:
            return "Not found (404) - check database/page ID"
        elif status == 429:
            return "Rate limited by Notion (429)"
        elif status >= 500:
            return f"Notion server error ({status})"
        else:
            return f"Notion error {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Request to Notion timed out"
    elif isinstance(e, httpx.ConnectError):
        return "Could not connect to Notion"
    elif isinstance(e, httpx.RequestError):
        return f"Connection error: {e}"
    return str(e)


def _page_title(item: dict) -> str:
    """Plain text of the title property of a page object."""
    for prop in item.get("properties", {}).values():
        if prop.get("type") == "title":
            return "".join(part.get("plain_text", "") for part in prop.get("title", []))
    return ""


class NotionPageStore(PageStore):
    """Page store for Notion databases."""

    API_BASE = "https://api.notion.com/v1"

    def __init__(self, settings: Settings):
        self.token = settings.notion_api_token
        self.api_version = settings.notion_api_version
        self.title_property = settings.notion_title_property
        self.timeout = settings.notion_timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Notion-Version": self.api_version,
                },
                timeout=self.timeout,
            )
        return self._client

    async def query_by_title(
        self, database_id: str, operator: TitleOperator, value: str
    ) -> StoreResult:
        """Query a Notion database with a title filter."""
        try:
            client = await self._get_client()
            response = await client.post(
                f"{self.API_BASE}/databases/{database_id}/query",
                json={
                    "filter": {
                        "property": self.title_property,
                        "title": {operator: value},
                    }
                },
            )
            response.raise_for_status()
            pages = [
                RemotePage(id=item["id"], title=_page_title(item))
                for item in response.json().get("results", [])
            ]
            return StoreResult(
                success=True, message=f"Found {len(pages)} pages", pages=pages
            )

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            return StoreResult(success=False, message=describe_error(e))
        except MALFORMED_RESPONSE_ERRORS:
            return StoreResult(success=False, message="Unexpected Notion response")

    async def create_page(self, database_id: str, properties: dict) -> StoreResult:
        """Create a page in a Notion database."""
        try:
            client = await self._get_client()
            response = await client.post(
                f"{self.API_BASE}/pages",
                json={"parent": {"database_id": database_id}, "properties": properties},
            )
            response.raise_for_status()
            data = response.json()

            return StoreResult(
                success=True, message="Page created in Notion", page_id=data["id"]
            )

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            return StoreResult(success=False, message=describe_error(e))
        except MALFORMED_RESPONSE_ERRORS:
            return StoreResult(success=False, message="Unexpected Notion response")

    async def update_page(self, page_id: str, properties: dict) -> StoreResult:
        """Update page properties in Notion."""
        try:
            client = await self._get_client()
            response = await client.patch(
                f"{self.API_BASE}/pages/{page_id}",
                json={"properties": properties},
            )
            response.raise_for_status()
            return StoreResult(
                success=True, message="Page updated in Notion", page_id=page_id
            )

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            return StoreResult(success=False, message=describe_error(e))

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
