"""User table model (agents and their cached subscription state)."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base

# Listing capacity unlocked by each subscription plan.
PLAN_LISTING_LIMITS: dict[str, int] = {"bronze": 5, "silver": 10, "gold": 20}


class User(Base):
    """Authenticated user; agents own listings and receive inquiries."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    billing_customer_id: Mapped[str | None] = mapped_column(String, nullable=True)
    billing_subscription_id: Mapped[str | None] = mapped_column(
        String, nullable=True
    )
    subscription_plan: Mapped[str | None] = mapped_column(String, nullable=True)
    subscription_status: Mapped[str | None] = mapped_column(String, nullable=True)
    agency_name: Mapped[str | None] = mapped_column(String, nullable=True)
    license_number: Mapped[str | None] = mapped_column(String, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    whatsapp_number: Mapped[str | None] = mapped_column(String, nullable=True)
    languages_spoken: Mapped[list[str] | None] = mapped_column(
        ARRAY(Text), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def listing_capacity(self) -> int:
        """Number of listings the current subscription allows."""

        if self.subscription_status != "active" or not self.subscription_plan:
            return 0
        return PLAN_LISTING_LIMITS.get(self.subscription_plan, 0)
