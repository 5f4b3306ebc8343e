from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any, cast

import pytest

import src.taskiq_app.tasks as task_module
from conftest import make_user
from src.errors import BillingError
from src.models.user import User
from src.taskiq_app.dedup import (
    acquire_dedup_lock,
    build_dedup_key,
    release_dedup_lock,
)
from src.taskiq_app.tasks import (
    enqueue_sync_agent_subscription,
    sync_agent_subscription,
    sync_all_subscriptions,
)


class _FakeDatabase:
    def __init__(self) -> None:
        self.sessions_opened = 0

    @asynccontextmanager
    async def session(self) -> AsyncIterator[object]:
        self.sessions_opened += 1
        yield object()


def _request(database: _FakeDatabase) -> Any:
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(database=database)))


@pytest.mark.anyio
async def test_sync_agent_subscription_reports_cached_state(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_sync(self: object, agent_id: str) -> User:  # noqa: ARG001
        return make_user(
            agent_id, subscription_plan="silver", subscription_status="active"
        )

    monkeypatch.setattr(
        "src.taskiq_app.tasks.SubscriptionService.sync_subscription", fake_sync
    )
    database = _FakeDatabase()

    result = await sync_agent_subscription("agent-a", request=_request(database))

    assert result == {
        "agent_id": "agent-a",
        "plan": "silver",
        "subscription_status": "active",
        "status": "ok",
    }
    assert database.sessions_opened == 1


@pytest.mark.anyio
async def test_sync_agent_subscription_skips_agent_without_subscription(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_sync(self: object, agent_id: str) -> None:  # noqa: ARG001
        return None

    monkeypatch.setattr(
        "src.taskiq_app.tasks.SubscriptionService.sync_subscription", fake_sync
    )

    result = await sync_agent_subscription(
        "agent-a", request=_request(_FakeDatabase())
    )

    assert result["status"] == "skipped_no_subscription"


@pytest.mark.anyio
async def test_sync_all_subscriptions_counts_billing_failures(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_fetch(session: object) -> list[User]:  # noqa: ARG001
        return [make_user("agent-a"), make_user("agent-b"), make_user("agent-c")]

    async def fake_sync(self: object, agent_id: str) -> User:  # noqa: ARG001
        if agent_id == "agent-b":
            raise BillingError("No such subscription")
        return make_user(agent_id)

    monkeypatch.setattr(
        "src.taskiq_app.tasks.fetch_users_with_subscription", fake_fetch
    )
    monkeypatch.setattr(
        "src.taskiq_app.tasks.SubscriptionService.sync_subscription", fake_sync
    )

    result = await sync_all_subscriptions(request=_request(_FakeDatabase()))

    assert result == {"synced": 2, "failed": 1, "status": "ok"}


@pytest.mark.anyio
async def test_sync_all_subscriptions_skips_when_lock_held() -> None:
    key = build_dedup_key(
        scope="execution", task_name="sync_all_subscriptions", fingerprint="default"
    )
    assert await acquire_dedup_lock(key, 60)
    database = _FakeDatabase()

    try:
        result = await sync_all_subscriptions(request=_request(database))
    finally:
        await release_dedup_lock(key)

    assert result["status"] == "skipped_duplicate_execution"
    assert database.sessions_opened == 0


@pytest.mark.anyio
async def test_sync_all_subscriptions_releases_lock_after_run(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_fetch(session: object) -> list[User]:  # noqa: ARG001
        return []

    monkeypatch.setattr(
        "src.taskiq_app.tasks.fetch_users_with_subscription", fake_fetch
    )

    first = await sync_all_subscriptions(request=_request(_FakeDatabase()))
    second = await sync_all_subscriptions(request=_request(_FakeDatabase()))

    assert first["status"] == "ok"
    assert second["status"] == "ok"


@pytest.mark.anyio
async def test_enqueue_sync_agent_subscription(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    kicked: list[tuple[object, ...]] = []

    async def fake_kiq(*args: object, **kwargs: object):  # noqa: ARG001
        kicked.append(args)
        return SimpleNamespace(task_id="task-1")

    task_fn = cast(Any, sync_agent_subscription)
    monkeypatch.setattr(task_fn, "kiq", fake_kiq)

    result = await enqueue_sync_agent_subscription("agent-a")

    assert result == {"enqueued": True, "task_id": "task-1"}
    assert kicked == [("agent-a",)]


@pytest.mark.anyio
async def test_hourly_schedule_is_registered() -> None:
    task = cast(Any, task_module.sync_all_subscriptions)

    assert task.labels["schedule"] == [{"cron": "0 * * * *"}]
