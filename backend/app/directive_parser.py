"""Directive parser for Backlog issue descriptions.

Issue descriptions can carry ``!Keyword: value`` lines that override or
supply task fields::

    !Project: Mobile App
    !Assignee: Lan, Minh
    !Status: doing
    !Tag: ui, bug
    !Dev: 2024/01/10 - 2024/01/20
    !Summary: Fix login crash

Keywords are matched case-insensitively anywhere in a line and the value runs
to the end of that line. If a directive appears more than once only the first
occurrence is used. Malformed or missing directives never raise; each kind
falls back to its documented default.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional

from .dates import parse_date
from .task_models import STATUS_KEYWORDS, DateRange, TaskStatus

logger = logging.getLogger(__name__)


class DirectiveKind(str, Enum):
    """Directive keywords recognised in descriptions."""

    PROJECT = "project"
    ASSIGNEE = "assignee"
    STATUS = "status"
    TAGS = "tags"
    DEV = "dev"
    SUMMARY = "summary"


# One capture group per kind: the rest of the line after the colon
DIRECTIVE_PATTERNS = {
    DirectiveKind.PROJECT: re.compile(r"!Project:[ \t]*(.*)", re.IGNORECASE),
    DirectiveKind.ASSIGNEE: re.compile(r"!Assignees?:[ \t]*(.*)", re.IGNORECASE),
    DirectiveKind.STATUS: re.compile(r"!Status:[ \t]*(.*)", re.IGNORECASE),
    DirectiveKind.TAGS: re.compile(r"!Tags?:[ \t]*(.*)", re.IGNORECASE),
    DirectiveKind.DEV: re.compile(r"!Dev:[ \t]*(.*)", re.IGNORECASE),
    DirectiveKind.SUMMARY: re.compile(r"!Summary:[ \t]*(.*)", re.IGNORECASE),
}

# A dash with whitespace on at least one side separates the two window dates,
# so ISO dates like 2024-01-10 are not split apart
WINDOW_SEPARATOR = re.compile(r"\s+-\s*|\s*-\s+")


def _capture(text: Optional[str], kind: DirectiveKind) -> Optional[str]:
    """Return the trimmed value of the first ``kind`` directive, if any."""
    if not text:
        return None
    match = DIRECTIVE_PATTERNS[kind].search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def split_list(value: Optional[str]) -> list[str]:
    """Split a comma separated directive value, dropping empty segments."""
    if value is None:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_status_keyword(value: Optional[str]) -> TaskStatus:
    """Map a status keyword to a TaskStatus, defaulting to NOT_STARTED."""
    if value is None:
        return TaskStatus.NOT_STARTED
    status = STATUS_KEYWORDS.get(value.strip().lower())
    if status is None:
        logger.debug(f"Unknown status keyword '{value}', using default")
        return TaskStatus.NOT_STARTED
    return status


def _split_window(value: str) -> list[str]:
    if WINDOW_SEPARATOR.search(value):
        return [part.strip() for part in WINDOW_SEPARATOR.split(value)]
    if value.count("-") == 1:
        return [part.strip() for part in value.split("-")]
    return [value.strip()]


def parse_dev_window(value: Optional[str], today: date) -> Optional[DateRange]:
    """Parse a ``!Dev:`` value into a date window.

    A single date is a deadline starting today, even when that deadline has
    already passed (logged as a warning). Two dates form an explicit
    window and are discarded entirely if either is unparseable or the start
    is after the end. Anything else is ignored.
    """
    if value is None:
        return None

    parts = _split_window(value)

    if len(parts) == 1:
        end = parse_date(parts[0])
        if end is None:
            logger.debug(f"Ignoring unparseable dev date '{value}'")
            return None
        if end < today:
            # Kept as {today, end}: an overdue deadline still shows in Notion
            logger.warning(f"Dev deadline {end} is before today ({today}); window is inverted")
        return DateRange(start=today, end=end)

    if len(parts) == 2:
        start, end = parse_date(parts[0]), parse_date(parts[1])
        if start is None or end is None or start > end:
            logger.debug(f"Ignoring invalid dev window '{value}'")
            return None
        return DateRange(start=start, end=end)

    logger.debug(f"Ignoring ambiguous dev window '{value}'")
    return None


def _as_string(value: Optional[str], today: date) -> Optional[str]:
    return value


def _as_list(value: Optional[str], today: date) -> list[str]:
    return split_list(value)


def _as_status(value: Optional[str], today: date) -> TaskStatus:
    return parse_status_keyword(value)


@dataclass(frozen=True)
class Directive:
    """Rule table entry: which kind fills which field, and how."""

    field: str
    kind: DirectiveKind
    convert: Callable[[Optional[str], date], Any]


DIRECTIVES = [
    Directive("project", DirectiveKind.PROJECT, _as_string),
    Directive("assignees", DirectiveKind.ASSIGNEE, _as_list),
    Directive("status", DirectiveKind.STATUS, _as_status),
    Directive("tags", DirectiveKind.TAGS, _as_list),
    Directive("dev_window", DirectiveKind.DEV, parse_dev_window),
    Directive("summary", DirectiveKind.SUMMARY, _as_string),
]


@dataclass
class ParsedDirectives:
    """Typed values extracted from a description."""

    project: Optional[str] = None
    assignees: list[str] = field(default_factory=list)
    status: TaskStatus = TaskStatus.NOT_STARTED
    tags: list[str] = field(default_factory=list)
    dev_window: Optional[DateRange] = None
    summary: Optional[str] = None


def parse_directives(text: Optional[str], today: Optional[date] = None) -> ParsedDirectives:
    """Run every directive rule over a description.

    Args:
        text: Issue description (may be empty or None)
        today: Date used as the implicit start of a single-date dev window

    Returns:
        ParsedDirectives with defaults for anything absent
    """
    today = today or date.today()
    values = {d.field: d.convert(_capture(text, d.kind), today) for d in DIRECTIVES}
    return ParsedDirectives(**values)


def extract_string(text: Optional[str], kind: DirectiveKind) -> Optional[str]:
    """Value of the first ``kind`` directive, or None."""
    return _capture(text, kind)


def extract_array_string(text: Optional[str], kind: DirectiveKind) -> list[str]:
    """Comma separated values of the first ``kind`` directive (never None)."""
    return split_list(_capture(text, kind))


def extract_status(text: Optional[str]) -> TaskStatus:
    """Task status from the ``!Status:`` directive."""
    return parse_status_keyword(_capture(text, DirectiveKind.STATUS))


def extract_dev_window(text: Optional[str], today: Optional[date] = None) -> Optional[DateRange]:
    """Development window from the ``!Dev:`` directive."""
    return parse_dev_window(_capture(text, DirectiveKind.DEV), today or date.today())
