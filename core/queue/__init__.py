from core.queue.celery_provider import CeleryQueueProvider
from core.queue.inline_provider import InlineQueueProvider
from core.queue.manager import QueueManager
from core.queue.tasks import execute_registered_task, list_registered_task_keys, register_task, task

__all__ = [
    "CeleryQueueProvider",
    "InlineQueueProvider",
    "QueueManager",
    "execute_registered_task",
    "list_registered_task_keys",
    "register_task",
    "task",
]
