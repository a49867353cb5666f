"""Backlog to Notion Task Sync - FastAPI Application.

Receives Backlog issue webhooks, extracts a normalized task from issues tagged
with the marker category, and mirrors it into a Notion task database in the
background.
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .backlog_models import BacklogWebhook
from .config import Settings, get_settings
from .dates import local_today
from .dispatcher import SyncDispatcher
from .normalizer import extract_task_info
from .reconciler import TaskReconciler
from .resolver import PageResolver
from .store import get_page_store
from .webhook_gate import InvalidWebhookError, validate

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Sync pipeline, built once from the settings
store = get_page_store(settings)
reconciler = TaskReconciler(store, PageResolver(store, settings), settings)
dispatcher = SyncDispatcher(reconciler)


def get_dispatcher() -> SyncDispatcher:
    """Get the process-wide sync dispatcher."""
    return dispatcher


# =============================================================================
# App Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Backlog Notion sync...")
    if not settings.notion_api_token:
        logger.warning("NOTION_API_TOKEN not set - Notion writes will fail")
    if not settings.notion_task_database_id:
        logger.warning("NOTION_TASK_DATABASE_ID not set - Notion writes will fail")

    yield

    # Shutdown
    if dispatcher.pending:
        logger.info(f"Waiting for {dispatcher.pending} pending syncs...")
    await dispatcher.drain()
    await store.aclose()
    logger.info("Backlog Notion sync stopped")


app = FastAPI(
    title="Backlog Notion Sync",
    description="Mirror tagged Backlog issues into a Notion task database",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Pydantic Models
# =============================================================================


class MessageResponse(BaseModel):
    message: str


def bad_request() -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": "Bad Request"})


# =============================================================================
# API Routes
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@app.post("/api/notion/tasks", response_model=MessageResponse)
async def backlog_webhook(
    request: Request,
    app_settings: Settings = Depends(get_settings),
    sync_dispatcher: SyncDispatcher = Depends(get_dispatcher),
):
    """Handle Backlog issue webhook events.

    Responds before the Notion sync runs; sync failures only show in logs.
    """
    body = await request.body()

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Rejected Backlog webhook: invalid JSON")
        return bad_request()

    try:
        event = BacklogWebhook.model_validate(payload)
        logger.info(f"Backlog webhook: {event.issue_key} (type {event.type})")
        logger.debug(f"Webhook content: {payload.get('content')}")

        if not validate(event, marker_category=app_settings.marker_category):
            logger.info(f"Skipped {event.issue_key}: not in sync scope")
            return MessageResponse(message="Skipped")

        task = extract_task_info(event, today=local_today(app_settings.user_timezone))

    except (ValidationError, InvalidWebhookError) as e:
        logger.warning(f"Rejected Backlog webhook: {e}")
        return bad_request()

    sync_dispatcher.dispatch(task)
    logger.info(f"Queued Notion sync for {task.id}")
    return MessageResponse(message="OK")
