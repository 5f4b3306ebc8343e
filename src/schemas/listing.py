"""Listing schemas: create/update bodies, search criteria, and responses."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

import pydantic
from pydantic import AliasChoices, Field, field_validator

from src.errors import ValidationError
from src.models.base import INT4_MAX
from src.schemas.base import CamelModel, InputModel, NonEmptyStr, OutputModel

ListingType = Literal["for_sale", "for_rent", "pre_sale"]
PropertyType = Literal["apartment", "villa", "commercial", "land"]
ListingStatus = Literal["active", "pending", "archived", "sold", "removed"]
PaymentFrequency = Literal["one_time", "monthly", "yearly"]
AreaUnit = Literal["sqm", "sqft"]
FurnishingStatus = Literal["yes", "partially", "no"]
OwnershipType = Literal["freehold", "leasehold"]

Price = Annotated[Decimal, Field(ge=0, max_digits=15, decimal_places=2)]
Fee = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
Area = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
Latitude = Annotated[Decimal, Field(ge=-90, le=90)]
Longitude = Annotated[Decimal, Field(ge=-180, le=180)]
Count = Annotated[int, Field(ge=0, le=INT4_MAX)]
FloorNumber = Annotated[int, Field(ge=-INT4_MAX - 1, le=INT4_MAX)]
NonNegative = Annotated[int, Field(ge=0)]
TagList = list[NonEmptyStr]


def _unique_tags(value: object) -> object:
    if not isinstance(value, list):
        return value
    seen: set[str] = set()
    tags: list[object] = []
    for item in value:
        key = item.strip() if isinstance(item, str) else item
        if key in seen:
            continue
        seen.add(key)
        tags.append(key)
    return tags


class ListingCreate(InputModel):
    """Full listing body submitted by the listing wizard."""

    title: NonEmptyStr
    description: str | None = None
    listing_type: ListingType
    property_type: PropertyType
    status: ListingStatus = "active"

    country: NonEmptyStr
    city: NonEmptyStr
    street_address: NonEmptyStr
    state_province: str | None = None
    postal_code: str | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None

    price: Price
    currency: NonEmptyStr = "USD"
    payment_frequency: PaymentFrequency
    is_negotiable: bool = False
    accepts_crypto: bool = False
    accepted_cryptos: TagList = Field(default_factory=list)
    maintenance_fees: Fee | None = None
    property_taxes: Fee | None = None

    total_area: Area | None = None
    living_area: Area | None = None
    lot_size: Area | None = None
    area_unit: AreaUnit = "sqm"
    year_built: Annotated[int, Field(ge=1000, le=9999)] | None = None
    bedrooms: Count | None = None
    bathrooms: Count | None = None
    floors: Count | None = None
    parking_spaces: Count | None = None
    furnishing_status: FurnishingStatus | None = None
    floor_number: FloorNumber | None = None
    has_elevator: bool = False
    view: str | None = None
    energy_rating: str | None = None

    features: TagList = Field(default_factory=list)
    nearby_places: TagList = Field(default_factory=list)

    cover_image: str | None = None
    gallery_images: list[str] = Field(default_factory=list)
    video_tour_url: str | None = None
    virtual_tour_url: str | None = None
    floor_plan_image: str | None = None

    available_from: datetime | None = None
    ownership_type: OwnershipType | None = None
    title_deed_available: bool = False
    exclusive_listing: bool = False

    @field_validator("features", "nearby_places", "accepted_cryptos", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: object) -> object:
        return _unique_tags(value)


class ListingUpdate(InputModel):
    """Partial listing body.

    Omitted fields keep their stored value. Columns that cannot be empty are
    typed without ``None`` so an explicit null is reported as a field error;
    the owner is not part of the body at all.
    """

    title: NonEmptyStr = None
    description: str | None = None
    listing_type: ListingType = None
    property_type: PropertyType = None
    status: ListingStatus = None

    country: NonEmptyStr = None
    city: NonEmptyStr = None
    street_address: NonEmptyStr = None
    state_province: str | None = None
    postal_code: str | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None

    price: Price = None
    currency: NonEmptyStr = None
    payment_frequency: PaymentFrequency = None
    is_negotiable: bool = None
    accepts_crypto: bool = None
    accepted_cryptos: TagList | None = None
    maintenance_fees: Fee | None = None
    property_taxes: Fee | None = None

    total_area: Area | None = None
    living_area: Area | None = None
    lot_size: Area | None = None
    area_unit: AreaUnit = None
    year_built: Annotated[int, Field(ge=1000, le=9999)] | None = None
    bedrooms: Count | None = None
    bathrooms: Count | None = None
    floors: Count | None = None
    parking_spaces: Count | None = None
    furnishing_status: FurnishingStatus | None = None
    floor_number: FloorNumber | None = None
    has_elevator: bool = None
    view: str | None = None
    energy_rating: str | None = None

    features: TagList | None = None
    nearby_places: TagList | None = None

    cover_image: str | None = None
    gallery_images: list[str] | None = None
    video_tour_url: str | None = None
    virtual_tour_url: str | None = None
    floor_plan_image: str | None = None

    available_from: datetime | None = None
    ownership_type: OwnershipType | None = None
    title_deed_available: bool = None
    exclusive_listing: bool = None

    @field_validator("features", "nearby_places", "accepted_cryptos", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: object) -> object:
        return _unique_tags(value)

    def changes(self) -> dict[str, object]:
        """Only the fields the caller actually sent."""

        return self.model_dump(exclude_unset=True)


class ListingSearchCriteria(CamelModel):
    """Optional public search criteria; every supplied one narrows the result."""

    model_config = pydantic.ConfigDict(extra="ignore")

    location: str | None = None
    min_price: Price | None = None
    max_price: Price | None = None
    property_type: PropertyType | None = None
    min_bedrooms: NonNegative | None = Field(
        default=None, validation_alias=AliasChoices("minBedrooms", "bedrooms")
    )
    min_bathrooms: NonNegative | None = Field(
        default=None, validation_alias=AliasChoices("minBathrooms", "bathrooms")
    )
    features: list[str] = Field(default_factory=list)
    # 0 behaves like an absent limit: the default page size applies.
    limit: NonNegative | None = None
    offset: NonNegative = 0

    @field_validator("location", "property_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator(
        "min_price",
        "max_price",
        "min_bedrooms",
        "min_bathrooms",
        "limit",
        mode="before",
    )
    @classmethod
    def _blank_number_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _split_features(cls, value: object) -> list[str]:
        if value is None:
            return []
        raw_items = [value] if isinstance(value, str) else value
        if not isinstance(raw_items, list | tuple):
            raise ValueError("features must be a comma-separated string or list")

        features: list[str] = []
        for raw_item in raw_items:
            for part in str(raw_item).split(","):
                feature = part.strip()
                if feature and feature not in features:
                    features.append(feature)
        return features

    @classmethod
    def from_query(cls, params: Mapping[str, object]) -> ListingSearchCriteria:
        """Validate raw query parameters, raising our ValidationError."""

        try:
            return cls.model_validate(dict(params))
        except pydantic.ValidationError as exc:
            raise ValidationError.from_pydantic(exc, "Invalid search criteria") from exc


class AgentProfile(OutputModel):
    """Public agent fields shown next to a listing."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    profile_image_url: str | None = None
    agency_name: str | None = None
    license_number: str | None = None
    phone_number: str | None = None
    whatsapp_number: str | None = None
    languages_spoken: list[str] | None = None


class ListingOut(OutputModel):
    id: int
    agent_id: str
    title: str
    description: str | None
    listing_type: str
    property_type: str
    status: str

    country: str
    city: str
    street_address: str
    state_province: str | None
    postal_code: str | None
    latitude: Decimal | None
    longitude: Decimal | None
    searchable_location: str | None

    price: Decimal
    currency: str
    payment_frequency: str
    is_negotiable: bool
    accepts_crypto: bool
    accepted_cryptos: list[str] | None
    maintenance_fees: Decimal | None
    property_taxes: Decimal | None

    total_area: Decimal | None
    living_area: Decimal | None
    lot_size: Decimal | None
    area_unit: str
    year_built: int | None
    bedrooms: int | None
    bathrooms: int | None
    floors: int | None
    parking_spaces: int | None
    furnishing_status: str | None
    floor_number: int | None
    has_elevator: bool
    view: str | None
    energy_rating: str | None

    features: list[str] | None
    nearby_places: list[str] | None

    cover_image: str | None
    gallery_images: list[str] | None
    video_tour_url: str | None
    virtual_tour_url: str | None
    floor_plan_image: str | None

    available_from: datetime | None
    ownership_type: str | None
    title_deed_available: bool
    exclusive_listing: bool

    created_at: datetime
    updated_at: datetime


class ListingWithAgentOut(ListingOut):
    agent: AgentProfile
