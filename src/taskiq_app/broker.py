"""Taskiq broker and scheduler for background subscription sync."""

import importlib

import taskiq_fastapi
from taskiq import AsyncBroker, InMemoryBroker, TaskiqScheduler
from taskiq.schedule_sources import LabelScheduleSource
from taskiq_redis import RedisAsyncResultBackend, RedisStreamBroker

from src.config import Settings, get_settings


def create_broker(settings: Settings) -> AsyncBroker:
    """In-memory broker for tests, Redis streams everywhere else."""

    if settings.taskiq_testing:
        return InMemoryBroker()

    result_backend = RedisAsyncResultBackend(
        redis_url=settings.redis_url,
        result_ex_time=settings.task_result_ttl_seconds,
    )
    return RedisStreamBroker(
        url=settings.redis_url,
        queue_name=f"{settings.app_name}:tasks",
        consumer_group_name=settings.app_name,
    ).with_result_backend(result_backend)


broker = create_broker(get_settings())

taskiq_fastapi.init(broker, "src.main:app")

scheduler = TaskiqScheduler(
    broker=broker,
    sources=[LabelScheduleSource(broker)],
)

importlib.import_module("src.taskiq_app.tasks")

__all__ = ["broker", "create_broker", "scheduler"]
