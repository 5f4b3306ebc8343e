"""Business logic for agent subscriptions at the billing provider."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.billing.client import BillingClient
from src.config import Settings, get_settings
from src.db.repositories import fetch_user, update_user_billing
from src.errors import FieldError, ValidationError
from src.models.user import User
from src.schemas.user import SubscriptionOut
from src.services.base import storage_guard

logger = logging.getLogger(__name__)

# Provider states collapsed onto the cached active/canceled/expired set;
# anything else (e.g. awaiting first payment) leaves the cache untouched.
SUBSCRIPTION_STATUS_MAP: dict[str, str] = {
    "active": "active",
    "trialing": "active",
    "canceled": "canceled",
    "incomplete_expired": "expired",
    "past_due": "expired",
    "unpaid": "expired",
}


class SubscriptionService:
    """Start subscriptions and cache their plan/status on the agent."""

    def __init__(
        self,
        session: AsyncSession,
        billing: BillingClient,
        settings: Settings | None = None,
    ) -> None:
        self._session = session
        self._billing = billing
        self._settings = settings or get_settings()

    def plan_for_price(self, price_id: str | None) -> str | None:
        for plan, configured_price_id in self._settings.billing_price_ids.items():
            if configured_price_id == price_id:
                return plan
        return None

    @storage_guard
    async def start_subscription(self, agent: User, plan: str) -> SubscriptionOut:
        """Return the agent's pending subscription, creating it if needed."""

        if agent.billing_subscription_id:
            existing = await self._billing.retrieve_subscription(
                agent.billing_subscription_id
            )
            return SubscriptionOut(
                subscription_id=existing.id, client_secret=existing.client_secret
            )

        errors = []
        if not agent.email:
            errors.append(FieldError("email", "No user email on file"))
        price_id = self._settings.billing_price_ids.get(plan)
        if not price_id:
            errors.append(FieldError("plan", f"Plan {plan!r} is not available"))
        if errors:
            raise ValidationError(errors)

        customer_id = agent.billing_customer_id
        if not customer_id:
            name = " ".join(
                part for part in (agent.first_name, agent.last_name) if part
            )
            customer_id = await self._billing.create_customer(
                email=agent.email, name=name or None
            )
            await update_user_billing(self._session, agent, customer_id=customer_id)

        subscription = await self._billing.create_subscription(
            customer_id=customer_id, price_id=price_id
        )
        await update_user_billing(
            self._session,
            agent,
            subscription_id=subscription.id,
            plan=plan,
            status=SUBSCRIPTION_STATUS_MAP.get(subscription.status),
        )
        logger.info(
            "Subscription %s created for agent %s (%s)", subscription.id, agent.id, plan
        )
        return SubscriptionOut(
            subscription_id=subscription.id, client_secret=subscription.client_secret
        )

    @storage_guard
    async def sync_subscription(self, agent_id: str) -> User | None:
        """Refresh the cached plan/status from the billing provider."""

        user = await fetch_user(self._session, agent_id)
        if user is None or not user.billing_subscription_id:
            return None

        subscription = await self._billing.retrieve_subscription(
            user.billing_subscription_id
        )
        return await update_user_billing(
            self._session,
            user,
            plan=self.plan_for_price(subscription.price_id),
            status=SUBSCRIPTION_STATUS_MAP.get(subscription.status),
        )
