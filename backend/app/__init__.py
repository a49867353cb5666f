"""Backlog to Notion task sync service."""
