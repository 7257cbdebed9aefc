import asyncio

import pytest

import main
from core.queue import InlineQueueProvider, QueueManager, list_registered_task_keys
from core.queue.celery_provider import RUN_TASK_NAME, CeleryQueueProvider
from core.queue.tasks import execute_registered_task, register_task
from core.task import SEND_EMAIL_TASK


@pytest.mark.asyncio
async def test_queue_registry_executes_task():
    async def _sample_task(value: int) -> int:
        return value + 1

    register_task("test_queue_registry_executes_task", _sample_task)
    result = await execute_registered_task(
        task_key="test_queue_registry_executes_task",
        payload={"value": 2},
    )
    assert result == 3


def test_register_task_rejects_a_second_function_for_the_same_key():
    async def _first() -> None:
        return None

    async def _second() -> None:
        return None

    register_task("test_queue_registry_duplicate", _first)
    register_task("test_queue_registry_duplicate", _first)

    with pytest.raises(ValueError):
        register_task("test_queue_registry_duplicate", _second)


@pytest.mark.asyncio
async def test_unknown_task_key_lists_available_keys():
    with pytest.raises(ValueError) as exc_info:
        await execute_registered_task(task_key="missing-task", payload={})

    assert "missing-task" in str(exc_info.value)
    assert SEND_EMAIL_TASK in str(exc_info.value)


def test_send_email_task_is_registered():
    assert SEND_EMAIL_TASK in list_registered_task_keys()


@pytest.mark.asyncio
async def test_inline_provider_runs_task_on_current_loop():
    calls: list[str] = []

    async def _record(value: str) -> None:
        calls.append(value)

    register_task("test_inline_provider_record", _record)
    provider = InlineQueueProvider()
    QueueManager.configure(provider)
    try:
        job = QueueManager.get_instance().enqueue("test_inline_provider_record", {"value": "hello"})
        await provider.drain()
    finally:
        QueueManager.reset()

    assert job.backend == "inline"
    assert calls == ["hello"]


@pytest.mark.asyncio
async def test_inline_provider_logs_and_swallows_task_failures(caplog):
    async def _boom() -> None:
        raise RuntimeError("smtp down")

    register_task("test_inline_provider_boom", _boom)
    provider = InlineQueueProvider()
    provider.enqueue("test_inline_provider_boom", {})
    await provider.drain()

    assert "test_inline_provider_boom" in caplog.text


def test_celery_provider_sends_wrapped_task():
    sent: dict = {}

    class _Result:
        id = "celery-task-1"

    class _CeleryApp:
        def send_task(self, name, args):
            sent["name"] = name
            sent["args"] = args
            return _Result()

    job = CeleryQueueProvider(celery_app=_CeleryApp()).enqueue("send_email", {"to": "a@b.co"})

    assert sent == {"name": RUN_TASK_NAME, "args": ["send_email", {"to": "a@b.co"}]}
    assert job.task_id == "celery-task-1"
    assert job.status == "queued"


def test_queue_manager_requires_configuration():
    QueueManager.reset()
    with pytest.raises(RuntimeError):
        QueueManager.get_instance()


@pytest.mark.asyncio
async def test_app_shutdown_waits_for_inline_tasks():
    delivered: list[str] = []

    async def _slow_send(value: str) -> None:
        await asyncio.sleep(0.05)
        delivered.append(value)

    register_task("test_app_shutdown_slow_send", _slow_send)

    async with main.lifespan(main.app):
        assert isinstance(QueueManager.get_instance().provider, InlineQueueProvider)
        QueueManager.get_instance().enqueue("test_app_shutdown_slow_send", {"value": "verification"})
        assert delivered == []

    assert delivered == ["verification"]
    with pytest.raises(RuntimeError):
        QueueManager.get_instance()
