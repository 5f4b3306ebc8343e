"""Taskiq tasks that refresh cached subscription state."""

import logging
from typing import Any, cast

from fastapi import Request
from taskiq import TaskiqDepends

from src.billing.client import BillingClient
from src.config import get_settings
from src.db.repositories import fetch_users_with_subscription
from src.db.session import Database
from src.errors import BillingError
from src.services.subscription_service import SubscriptionService
from src.taskiq_app.broker import broker
from src.taskiq_app.dedup import build_dedup_key, dedup_lock

logger = logging.getLogger(__name__)
settings = get_settings()


def _database(request: Request) -> Database:
    return request.app.state.database


@broker.task(
    task_name="sync_agent_subscription",
    retry_on_error=True,
    max_retries=3,
)
async def sync_agent_subscription(
    agent_id: str, request: Request = TaskiqDepends()
) -> dict[str, object]:
    async with _database(request).session() as session:
        service = SubscriptionService(session, BillingClient())
        user = await service.sync_subscription(agent_id)

    if user is None:
        return {"agent_id": agent_id, "status": "skipped_no_subscription"}

    return {
        "agent_id": agent_id,
        "plan": user.subscription_plan,
        "subscription_status": user.subscription_status,
        "status": "ok",
    }


@broker.task(
    task_name="sync_all_subscriptions",
    schedule=[{"cron": "0 * * * *"}],
    retry_on_error=True,
    max_retries=3,
)
async def sync_all_subscriptions(
    request: Request = TaskiqDepends(),
) -> dict[str, object]:
    dedup_key = build_dedup_key(
        scope="execution", task_name="sync_all_subscriptions", fingerprint="default"
    )
    async with dedup_lock(
        dedup_key, settings.subscription_sync_dedup_ttl_seconds
    ) as acquired:
        if not acquired:
            logger.info("sync_all_subscriptions skipped due to dedup lock")
            return {"synced": 0, "failed": 0, "status": "skipped_duplicate_execution"}

        synced = 0
        failed = 0
        async with _database(request).session() as session:
            agents = await fetch_users_with_subscription(session)
            service = SubscriptionService(session, BillingClient())
            for agent in agents:
                try:
                    await service.sync_subscription(agent.id)
                except BillingError:
                    logger.warning("Subscription sync failed for agent %s", agent.id)
                    failed += 1
                    continue
                synced += 1

        logger.info("Subscription sync finished: %s synced, %s failed", synced, failed)
        return {"synced": synced, "failed": failed, "status": "ok"}


async def enqueue_sync_agent_subscription(agent_id: str) -> dict[str, object]:
    """Queue a subscription refresh for one agent."""

    task_kicker = cast(Any, sync_agent_subscription)
    task = await task_kicker.kiq(agent_id)
    return {"enqueued": True, "task_id": task.task_id}
