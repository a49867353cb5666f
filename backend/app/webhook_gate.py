"""Webhook gate - decides whether a Backlog event should be synced."""

import logging

from .backlog_models import BacklogWebhook

logger = logging.getLogger(__name__)

# Category that opts a Backlog issue into the Notion sync
MARKER_CATEGORY = "GGJVN"


class InvalidWebhookError(ValueError):
    """Inbound webhook is structurally unusable (reject, don't skip)."""


def validate(event: BacklogWebhook, marker_category: str = MARKER_CATEGORY) -> bool:
    """Check whether an event is in scope for syncing.

    Args:
        event: Parsed webhook payload
        marker_category: Category name that marks an issue for sync

    Returns:
        True if the issue carries the marker category and belongs to a
        project with a key, False if it should be acknowledged and skipped

    Raises:
        InvalidWebhookError: If the event has no content or no category list
    """
    if event.content is None or event.content.category is None:
        raise InvalidWebhookError("Webhook has no content category")

    if not any(c.name == marker_category for c in event.content.category):
        logger.debug(f"Skipping {event.issue_key}: no '{marker_category}' category")
        return False

    if event.project is None or not event.project.projectKey:
        logger.debug(f"Skipping {event.issue_key}: no project key")
        return False

    return True
