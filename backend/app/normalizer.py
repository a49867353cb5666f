"""Build normalized Task records from Backlog webhook events."""

import logging
from datetime import date
from typing import Optional

from .backlog_models import BacklogWebhook
from .dates import parse_date
from .directive_parser import parse_directives
from .task_models import DateRange, Task
from .webhook_gate import InvalidWebhookError

logger = logging.getLogger(__name__)


def derive_release_window(
    start_date: Optional[str],
    due_date: Optional[str],
    today: Optional[date] = None,
) -> Optional[DateRange]:
    """Release window from the issue's start and due dates.

    A missing or unparseable start date means "starting today". Without a
    usable due date, or when the start falls after the due date, there is no
    window at all.
    """
    start = parse_date(start_date) or today or date.today()
    due = parse_date(due_date)
    if due is None or start > due:
        return None
    return DateRange(start=start, end=due)


def extract_task_info(event: BacklogWebhook, today: Optional[date] = None) -> Task:
    """Convert a gated Backlog event into a Task.

    The event is expected to have passed ``webhook_gate.validate`` already.
    Directive values from the description take precedence; each field falls
    back to the structural webhook data independently.

    Args:
        event: Parsed webhook payload
        today: Calendar date used for open-ended windows (defaults to today)

    Returns:
        A new immutable Task

    Raises:
        InvalidWebhookError: If the project key, issue key or priority is missing
    """
    today = today or date.today()
    content = event.content
    project_key = event.project.projectKey if event.project else None

    if content is None or not project_key or content.key_id in (None, ""):
        raise InvalidWebhookError("Webhook is missing the project or issue key")
    if content.priority is None:
        raise InvalidWebhookError(f"Issue {event.issue_key} has no priority")

    directives = parse_directives(content.description, today=today)
    task_id = f"{project_key}-{content.key_id}"

    # An empty directive list counts as absent
    assignees = directives.assignees or None
    if assignees is None and content.assignee and content.assignee.name:
        assignees = [content.assignee.name]

    parent_task_id = None
    if content.parentIssueId:
        parent_task_id = f"{project_key}-{content.parentIssueId}"

    task = Task(
        id=task_id,
        summary=directives.summary or content.summary,
        priority=content.priority.name,
        status=directives.status,
        project=directives.project,
        assignees=assignees,
        tags=directives.tags,
        dev_due_date=directives.dev_window,
        release_due_date=derive_release_window(
            content.startDate, content.dueDate, today=today
        ),
        parent_task_id=parent_task_id,
    )
    logger.debug(f"Extracted task {task.id}: status={task.status.value}")
    return task
