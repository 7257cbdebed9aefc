import asyncio

from celery import Celery

from core import task as _task_registration  # noqa: F401
from core.logging_config import setup_logging
from core.queue.tasks import execute_registered_task
from core.settings import get_settings

settings = get_settings()
setup_logging(settings.env)

celery_app = Celery("pi_docs_worker", broker=settings.celery_broker_url, backend=settings.celery_result_backend)
celery_app.conf.update(task_track_started=True)


@celery_app.task(name="celery_worker.run_async_task")
def run_async_task(task_key: str, kwargs: dict):
    return asyncio.run(execute_registered_task(task_key=task_key, payload=kwargs))
