"""Background dispatch of task syncs.

The webhook endpoint acknowledges Backlog immediately and hands the task to
the dispatcher, which runs the Notion sync on the event loop. ``drain`` waits
for outstanding syncs (used on shutdown and in tests).
"""

import asyncio
import logging
from typing import Optional

from .reconciler import SyncResult, TaskReconciler
from .task_models import Task

logger = logging.getLogger(__name__)


class SyncDispatcher:
    """Runs reconciler syncs as fire-and-forget asyncio tasks."""

    def __init__(self, reconciler: TaskReconciler):
        self.reconciler = reconciler
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of syncs still running."""
        return len(self._pending)

    def dispatch(self, task: Task) -> asyncio.Task:
        """Schedule a sync without waiting for it.

        Must be called from a running event loop.

        Returns:
            The scheduled asyncio task, resolving to a SyncResult (or None if
            the sync crashed)
        """
        job = asyncio.create_task(self._run(task), name=f"sync:{task.id}")
        # Keep a strong reference until the job finishes
        self._pending.add(job)
        job.add_done_callback(self._pending.discard)
        return job

    async def _run(self, task: Task) -> Optional[SyncResult]:
        try:
            return await self.reconciler.sync_task(task)
        except Exception:
            logger.exception(f"Unexpected error while syncing {task.id}")
            return None

    async def drain(self) -> None:
        """Wait until every dispatched sync has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
