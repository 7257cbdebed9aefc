from __future__ import annotations

import asyncio
import logging
from typing import Any
from uuid import uuid4

from core.queue.tasks import execute_registered_task
from core.queue.types import QueueJobResult, QueueTaskKey

logger = logging.getLogger(__name__)


class InlineQueueProvider:
    """Runs tasks on the current event loop; used when no broker is configured."""

    backend_name = "inline"

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[Any]] = set()

    async def _run(self, task_key: str, payload: dict[str, Any]) -> Any:
        try:
            return await execute_registered_task(task_key=task_key, payload=payload)
        except Exception:
            logger.exception("Inline task '%s' failed", task_key)
            return None

    def enqueue(self, task_key: QueueTaskKey, payload: dict[str, Any]) -> QueueJobResult:
        job = asyncio.get_running_loop().create_task(self._run(str(task_key), payload))
        self._pending.add(job)
        job.add_done_callback(self._pending.discard)
        return QueueJobResult(task_id=uuid4().hex, backend=self.backend_name, status="running")

    async def drain(self) -> None:
        if self._pending:
            logger.info("Waiting for %d inline task(s) to finish", len(self._pending))
            await asyncio.gather(*list(self._pending))
