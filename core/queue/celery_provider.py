from __future__ import annotations

from typing import Any

from core.queue.types import QueueJobResult, QueueTaskKey

RUN_TASK_NAME = "celery_worker.run_async_task"


class CeleryQueueProvider:
    backend_name = "celery"

    def __init__(self, celery_app: Any, task_name: str = RUN_TASK_NAME) -> None:
        self._celery_app = celery_app
        self._task_name = task_name

    def enqueue(self, task_key: QueueTaskKey, payload: dict[str, Any]) -> QueueJobResult:
        result = self._celery_app.send_task(self._task_name, args=[str(task_key), payload])
        return QueueJobResult(task_id=result.id, backend=self.backend_name, status="queued")
