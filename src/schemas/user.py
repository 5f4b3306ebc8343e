"""Agent account and subscription schemas."""

from datetime import datetime
from typing import Literal

from src.schemas.base import InputModel, OutputModel
from src.schemas.listing import AgentProfile

SubscriptionPlan = Literal["bronze", "silver", "gold"]


class AgentAccountOut(AgentProfile):
    """The caller's own record, including cached subscription state."""

    subscription_plan: str | None = None
    subscription_status: str | None = None
    listing_capacity: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubscriptionCreate(InputModel):
    plan: SubscriptionPlan


class SubscriptionOut(OutputModel):
    subscription_id: str
    client_secret: str | None = None
