"""Pydantic models for inbound Backlog issue webhooks.

Only the fields the sync reads are modelled; anything else in the payload is
ignored. Most fields are optional so that out-of-scope events can still be
acknowledged as skipped instead of rejected.
"""

from typing import Optional, Union

from pydantic import BaseModel


class NamedRef(BaseModel):
    """An ``{id, name}`` pair (priority, status, category, user)."""

    id: Optional[int] = None
    name: str = ""


class BacklogProject(BaseModel):
    """The Backlog project the issue lives in."""

    id: Optional[int] = None
    projectKey: Optional[str] = None
    name: Optional[str] = None


class IssueContent(BaseModel):
    """The ``content`` section of an issue event."""

    id: Optional[int] = None
    key_id: Optional[Union[int, str]] = None
    summary: str = ""
    description: Optional[str] = None
    parentIssueId: Optional[int] = None
    startDate: Optional[str] = None
    dueDate: Optional[str] = None
    priority: Optional[NamedRef] = None
    status: Optional[NamedRef] = None
    category: Optional[list[NamedRef]] = None
    assignee: Optional[NamedRef] = None


class BacklogWebhook(BaseModel):
    """A Backlog issue webhook delivery."""

    id: Optional[int] = None
    project: Optional[BacklogProject] = None
    type: Optional[int] = None
    content: Optional[IssueContent] = None

    @property
    def issue_key(self) -> str:
        """Human readable ``PROJ-12`` key for log lines."""
        project_key = self.project.projectKey if self.project else None
        key_id = self.content.key_id if self.content else None
        return f"{project_key or '?'}-{key_id if key_id is not None else '?'}"
