"""Pydantic models for the normalized task record."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TaskStatus(str, Enum):
    """Task status, valued by the label used in the Notion status field."""

    NOT_STARTED = "Not Started"
    PENDING = "Pending"
    DEPEND_JP = "Depend JP"
    IN_PROGRESS = "In Progress"
    VN_VERIFY = "VN Verify"
    JP_VERIFY = "JP Verify"
    REVIEWING = "Reviewing"
    DONE = "Done"


# Keywords accepted by the "!Status:" directive (compared lowercased)
STATUS_KEYWORDS = {
    "open": TaskStatus.NOT_STARTED,
    "pending": TaskStatus.PENDING,
    "depend": TaskStatus.DEPEND_JP,
    "doing": TaskStatus.IN_PROGRESS,
    "vnverify": TaskStatus.VN_VERIFY,
    "jpverify": TaskStatus.JP_VERIFY,
    "reviewing": TaskStatus.REVIEWING,
    "done": TaskStatus.DONE,
}


class DateRange(BaseModel):
    """A calendar date window."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date


class Task(BaseModel):
    """Canonical task record built from one Backlog event.

    Attributes:
        id: Composite ``{projectKey}-{issueKey}`` id
        summary: Display summary (directive override or issue title)
        priority: Backlog priority label
        status: Mapped task status
        project: Notion project name override, if any
        assignees: Display names, or None when nobody is assigned
        tags: Free-form labels
        dev_due_date: Development window from the "!Dev:" directive
        release_due_date: Window from the issue start and due dates
        parent_task_id: Composite id of the parent issue, if any
    """

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str
    priority: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    project: Optional[str] = None
    assignees: Optional[list[str]] = None
    tags: list[str] = []
    dev_due_date: Optional[DateRange] = None
    release_due_date: Optional[DateRange] = None
    parent_task_id: Optional[str] = None

    @property
    def name(self) -> str:
        """Page title: the composite id followed by the summary."""
        return f"{self.id} {self.summary}"
