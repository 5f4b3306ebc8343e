"""Buyer inquiry table model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Inquiry(Base):
    """Contact request from a buyer about one listing."""

    __tablename__ = "property_inquiries"
    __table_args__ = (
        Index("idx_property_inquiries_agent_created", "agent_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    property_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    # Snapshot of the listing owner when the inquiry was submitted.
    agent_id: Mapped[str] = mapped_column(
        String, ForeignKey("users.id"), nullable=False
    )
    inquirer_name: Mapped[str] = mapped_column(String, nullable=False)
    inquirer_email: Mapped[str] = mapped_column(String, nullable=False)
    inquirer_phone: Mapped[str | None] = mapped_column(String, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="new", server_default="new"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
