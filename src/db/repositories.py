"""Repository helpers for listing, inquiry, and agent persistence."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Select, delete, false, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import INT4_MAX
from src.models.inquiry import Inquiry
from src.models.listing import Listing
from src.models.user import User

ACTIVE_STATUS = "active"
LOCATION_FIELDS = frozenset({"city", "state_province", "country"})

_WHITESPACE_RE = re.compile(r"\s+")
_LIKE_ESCAPE = "\\"


@dataclass(slots=True)
class ListingSearchFilters:
    """Conjunctive criteria for the public listing search."""

    location: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    property_type: str | None = None
    min_bedrooms: int | None = None
    min_bathrooms: int | None = None
    features: list[str] = field(default_factory=list)
    limit: int = 20
    offset: int = 0


@dataclass(slots=True)
class ListingWithAgent:
    """Listing row joined with its owning agent."""

    listing: Listing
    agent: User


@dataclass(slots=True)
class InquiryInsert:
    """Payload used to insert buyer inquiries."""

    property_id: int
    agent_id: str
    inquirer_name: str
    inquirer_email: str
    inquirer_phone: str | None = None
    message: str | None = None


@dataclass(slots=True)
class UserUpsert:
    """Identity claims handed over by the identity provider."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


def build_searchable_location(
    city: str | None, state_province: str | None, country: str | None
) -> str:
    """Join the non-empty location parts into one normalized string."""

    parts = []
    for raw in (city, state_province, country):
        if raw is None:
            continue
        part = _WHITESPACE_RE.sub(" ", raw).strip()
        if part:
            parts.append(part)
    return ", ".join(parts)


def _contains_pattern(text: str) -> str:
    escaped = (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _is_storable_id(listing_id: int) -> bool:
    return 1 <= listing_id <= INT4_MAX


def build_listing_search_statement(
    filters: ListingSearchFilters,
) -> Select[tuple[Listing, User]]:
    """Build the public search query; only active listings are eligible."""

    stmt = (
        select(Listing, User)
        .join(User, Listing.agent_id == User.id)
        .where(Listing.status == ACTIVE_STATUS)
    )

    if filters.location:
        pattern = _contains_pattern(filters.location)
        stmt = stmt.where(
            or_(
                Listing.city.ilike(pattern, escape=_LIKE_ESCAPE),
                Listing.country.ilike(pattern, escape=_LIKE_ESCAPE),
                Listing.searchable_location.ilike(pattern, escape=_LIKE_ESCAPE),
            )
        )

    if filters.min_price is not None:
        stmt = stmt.where(Listing.price >= filters.min_price)

    if filters.max_price is not None:
        stmt = stmt.where(Listing.price <= filters.max_price)

    if filters.property_type:
        stmt = stmt.where(Listing.property_type == filters.property_type)

    for column, minimum in (
        (Listing.bedrooms, filters.min_bedrooms),
        (Listing.bathrooms, filters.min_bathrooms),
    ):
        if minimum is None:
            continue
        # No stored count can reach a minimum above the int4 range.
        stmt = stmt.where(column >= minimum if minimum <= INT4_MAX else false())

    if filters.features:
        # Any one of the requested tags is enough.
        stmt = stmt.where(Listing.features.overlap(list(filters.features)))

    return (
        stmt.order_by(Listing.created_at.desc(), Listing.id.desc())
        .offset(filters.offset)
        .limit(filters.limit)
    )


async def fetch_listings(
    session: AsyncSession, filters: ListingSearchFilters
) -> list[ListingWithAgent]:
    """Run the public listing search, newest first."""

    result = await session.execute(build_listing_search_statement(filters))
    return [ListingWithAgent(listing=row[0], agent=row[1]) for row in result.all()]


async def fetch_listing_by_id(
    session: AsyncSession, listing_id: int
) -> ListingWithAgent | None:
    """Fetch one listing of any status together with its agent."""

    if not _is_storable_id(listing_id):
        return None
    stmt = (
        select(Listing, User)
        .join(User, Listing.agent_id == User.id)
        .where(Listing.id == listing_id)
    )
    row = (await session.execute(stmt)).first()
    if row is None:
        return None
    return ListingWithAgent(listing=row[0], agent=row[1])


async def fetch_listing(session: AsyncSession, listing_id: int) -> Listing | None:
    """Fetch a bare listing row for mutation."""

    if not _is_storable_id(listing_id):
        return None
    return await session.get(Listing, listing_id)


async def fetch_listings_by_agent(
    session: AsyncSession, agent_id: str
) -> list[Listing]:
    """Fetch every listing owned by an agent regardless of status."""

    stmt = (
        select(Listing)
        .where(Listing.agent_id == agent_id)
        .order_by(Listing.created_at.desc(), Listing.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def insert_listing(
    session: AsyncSession, values: Mapping[str, object]
) -> Listing:
    """Insert a listing, deriving its searchable location and timestamps."""

    now = datetime.now(UTC)
    listing = Listing(**values)
    listing.searchable_location = build_searchable_location(
        listing.city, listing.state_province, listing.country
    )
    listing.created_at = now
    listing.updated_at = now
    session.add(listing)
    await session.commit()
    return listing


async def update_listing(
    session: AsyncSession, listing: Listing, changes: Mapping[str, object]
) -> Listing:
    """Merge changes into a loaded listing and persist them."""

    for name, value in changes.items():
        setattr(listing, name, value)

    if LOCATION_FIELDS & changes.keys():
        listing.searchable_location = build_searchable_location(
            listing.city, listing.state_province, listing.country
        )
    listing.updated_at = datetime.now(UTC)

    await session.commit()
    return listing


async def delete_listing(session: AsyncSession, listing_id: int) -> bool:
    """Delete a listing permanently. Returns False when nothing matched."""

    if not _is_storable_id(listing_id):
        return False
    stmt = delete(Listing).where(Listing.id == listing_id).returning(Listing.id)
    result = await session.execute(stmt)
    deleted_ids = result.scalars().all()
    await session.commit()
    return len(deleted_ids) > 0


async def insert_inquiry(session: AsyncSession, row: InquiryInsert) -> Inquiry:
    """Insert a new inquiry with status ``new``."""

    inquiry = Inquiry(**asdict(row), status="new", created_at=datetime.now(UTC))
    session.add(inquiry)
    await session.commit()
    return inquiry


async def fetch_inquiries_by_agent(
    session: AsyncSession, agent_id: str
) -> list[Inquiry]:
    """Fetch inquiries captured for an agent, newest first."""

    stmt = (
        select(Inquiry)
        .where(Inquiry.agent_id == agent_id)
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_user(session: AsyncSession, user_id: str) -> User | None:
    return await session.get(User, user_id)


async def upsert_user(session: AsyncSession, row: UserUpsert) -> User:
    """Insert a user or refresh its identity claims."""

    values = asdict(row)
    dialect_name = session.get_bind().dialect.name

    if dialect_name == "postgresql":
        claims = {
            key: value
            for key, value in values.items()
            if key != "id" and value is not None
        }
        stmt = pg_insert(User).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.id],
            set_={**claims, "updated_at": datetime.now(UTC)},
        ).returning(User)
        user = (
            await session.scalars(stmt, execution_options={"populate_existing": True})
        ).one()
        await session.commit()
        return user

    user = await session.get(User, row.id)
    if user is None:
        user = User(**values)
        session.add(user)
    else:
        for name, value in values.items():
            if value is not None:
                setattr(user, name, value)
    await session.commit()
    return user


async def update_user_billing(
    session: AsyncSession,
    user: User,
    *,
    customer_id: str | None = None,
    subscription_id: str | None = None,
    plan: str | None = None,
    status: str | None = None,
) -> User:
    """Store billing identifiers and the cached subscription state."""

    if customer_id is not None:
        user.billing_customer_id = customer_id
    if subscription_id is not None:
        user.billing_subscription_id = subscription_id
    if plan is not None:
        user.subscription_plan = plan
    if status is not None:
        user.subscription_status = status
    user.updated_at = datetime.now(UTC)
    await session.commit()
    return user


async def fetch_users_with_subscription(session: AsyncSession) -> list[User]:
    """Fetch agents that have a billing subscription on file."""

    stmt = (
        select(User)
        .where(User.billing_subscription_id.is_not(None))
        .order_by(User.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
