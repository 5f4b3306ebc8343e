"""Property listing table model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Listing(Base):
    """Property listing published by an agent."""

    __tablename__ = "properties"
    __table_args__ = (
        Index("idx_properties_status_created", "status", "created_at"),
        Index("idx_properties_agent", "agent_id"),
        Index("idx_properties_price", "price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    agent_id: Mapped[str] = mapped_column(
        String, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    listing_type: Mapped[str] = mapped_column(String, nullable=False)
    property_type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="active", server_default="active"
    )

    country: Mapped[str] = mapped_column(String, nullable=False)
    city: Mapped[str] = mapped_column(String, nullable=False)
    street_address: Mapped[str] = mapped_column(String, nullable=False)
    state_province: Mapped[str | None] = mapped_column(String, nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String, nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 8), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(11, 8), nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        String, nullable=False, default="USD", server_default="USD"
    )
    payment_frequency: Mapped[str] = mapped_column(String, nullable=False)
    is_negotiable: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    accepts_crypto: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    accepted_cryptos: Mapped[list[str] | None] = mapped_column(
        ARRAY(Text), nullable=True
    )
    maintenance_fees: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    property_taxes: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )

    total_area: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    living_area: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True
    )
    lot_size: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    area_unit: Mapped[str] = mapped_column(
        String, nullable=False, default="sqm", server_default="sqm"
    )
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    floors: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parking_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    furnishing_status: Mapped[str | None] = mapped_column(String, nullable=True)
    floor_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_elevator: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    view: Mapped[str | None] = mapped_column(String, nullable=True)
    energy_rating: Mapped[str | None] = mapped_column(String, nullable=True)

    features: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    nearby_places: Mapped[list[str] | None] = mapped_column(
        ARRAY(Text), nullable=True
    )

    cover_image: Mapped[str | None] = mapped_column(String, nullable=True)
    gallery_images: Mapped[list[str] | None] = mapped_column(
        ARRAY(Text), nullable=True
    )
    video_tour_url: Mapped[str | None] = mapped_column(String, nullable=True)
    virtual_tour_url: Mapped[str | None] = mapped_column(String, nullable=True)
    floor_plan_image: Mapped[str | None] = mapped_column(String, nullable=True)

    available_from: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    ownership_type: Mapped[str | None] = mapped_column(String, nullable=True)
    title_deed_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    exclusive_listing: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    # Derived from city/state_province/country; never written by callers.
    searchable_location: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
