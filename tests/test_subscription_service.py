from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from conftest import make_user
from src.billing.client import BillingSubscription
from src.config.settings import Settings
from src.errors import ValidationError
from src.models.user import User
from src.services.subscription_service import SubscriptionService


def _settings() -> Settings:
    return Settings(billing_price_ids="bronze:price_bronze,gold:price_gold")


def _billing(status: str = "incomplete", price_id: str = "price_gold") -> AsyncMock:
    billing = AsyncMock()
    billing.create_customer.return_value = "cus_new"
    subscription = BillingSubscription(
        id="sub_new", status=status, price_id=price_id, client_secret="pi_secret"
    )
    billing.create_subscription.return_value = subscription
    billing.retrieve_subscription.return_value = subscription
    return billing


@pytest.fixture
def stored_users(monkeypatch: pytest.MonkeyPatch) -> dict[str, User]:
    users: dict[str, User] = {}

    async def fake_fetch_user(session: object, user_id: str) -> User | None:  # noqa: ARG001
        return users.get(user_id)

    async def fake_update_user_billing(
        session: object, user: User, **changes: Any
    ) -> User:  # noqa: ARG001
        if changes.get("customer_id") is not None:
            user.billing_customer_id = changes["customer_id"]
        if changes.get("subscription_id") is not None:
            user.billing_subscription_id = changes["subscription_id"]
        if changes.get("plan") is not None:
            user.subscription_plan = changes["plan"]
        if changes.get("status") is not None:
            user.subscription_status = changes["status"]
        return user

    monkeypatch.setattr(
        "src.services.subscription_service.fetch_user", fake_fetch_user
    )
    monkeypatch.setattr(
        "src.services.subscription_service.update_user_billing",
        fake_update_user_billing,
    )
    return users


@pytest.mark.anyio
async def test_start_subscription_creates_customer_and_subscription(
    stored_users: dict[str, User], session: AsyncMock
) -> None:
    agent = make_user("agent-a")
    billing = _billing()

    result = await SubscriptionService(session, billing, _settings()).start_subscription(
        agent, "gold"
    )

    assert result.subscription_id == "sub_new"
    assert result.client_secret == "pi_secret"
    billing.create_customer.assert_awaited_once_with(
        email="agent-a@example.com", name="Alex Martin"
    )
    billing.create_subscription.assert_awaited_once_with(
        customer_id="cus_new", price_id="price_gold"
    )
    assert agent.billing_customer_id == "cus_new"
    assert agent.billing_subscription_id == "sub_new"
    assert agent.subscription_plan == "gold"
    # Awaiting first payment: no cached status yet.
    assert agent.subscription_status is None


@pytest.mark.anyio
async def test_start_subscription_returns_existing_subscription(
    stored_users: dict[str, User], session: AsyncMock
) -> None:
    agent = make_user("agent-a", billing_subscription_id="sub_existing")
    billing = _billing()

    await SubscriptionService(session, billing, _settings()).start_subscription(
        agent, "gold"
    )

    billing.retrieve_subscription.assert_awaited_once_with("sub_existing")
    billing.create_customer.assert_not_awaited()
    billing.create_subscription.assert_not_awaited()


@pytest.mark.anyio
async def test_start_subscription_reuses_stored_customer(
    stored_users: dict[str, User], session: AsyncMock
) -> None:
    agent = make_user("agent-a", billing_customer_id="cus_existing")
    billing = _billing()

    await SubscriptionService(session, billing, _settings()).start_subscription(
        agent, "bronze"
    )

    billing.create_customer.assert_not_awaited()
    billing.create_subscription.assert_awaited_once_with(
        customer_id="cus_existing", price_id="price_bronze"
    )


@pytest.mark.anyio
async def test_start_subscription_reports_email_and_plan_problems_together(
    stored_users: dict[str, User], session: AsyncMock
) -> None:
    agent = make_user("agent-a", email=None)
    billing = _billing()

    with pytest.raises(ValidationError) as exc_info:
        await SubscriptionService(session, billing, _settings()).start_subscription(
            agent, "silver"
        )

    assert [error.field for error in exc_info.value.errors] == ["email", "plan"]
    billing.create_customer.assert_not_awaited()


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("provider_status", "cached_status"),
    [
        ("active", "active"),
        ("trialing", "active"),
        ("canceled", "canceled"),
        ("past_due", "expired"),
        ("incomplete_expired", "expired"),
    ],
)
async def test_sync_subscription_caches_plan_and_status(
    stored_users: dict[str, User],
    session: AsyncMock,
    provider_status: str,
    cached_status: str,
) -> None:
    stored_users["agent-a"] = make_user("agent-a", billing_subscription_id="sub_new")

    user = await SubscriptionService(
        session, _billing(provider_status), _settings()
    ).sync_subscription("agent-a")

    assert user is not None
    assert user.subscription_plan == "gold"
    assert user.subscription_status == cached_status


@pytest.mark.anyio
async def test_sync_subscription_skips_agents_without_subscription(
    stored_users: dict[str, User], session: AsyncMock
) -> None:
    stored_users["agent-a"] = make_user("agent-a")
    billing = _billing()

    user = await SubscriptionService(session, billing, _settings()).sync_subscription(
        "agent-a"
    )

    assert user is None
    billing.retrieve_subscription.assert_not_awaited()


@pytest.mark.anyio
async def test_listing_capacity_requires_active_subscription() -> None:
    gold = make_user(subscription_plan="gold", subscription_status="active")
    bronze = make_user(subscription_plan="bronze", subscription_status="active")
    lapsed = make_user(subscription_plan="gold", subscription_status="canceled")

    assert gold.listing_capacity == 20
    assert bronze.listing_capacity == 5
    assert lapsed.listing_capacity == 0
    assert make_user().listing_capacity == 0
