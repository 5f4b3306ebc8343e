from __future__ import annotations

# ruff: noqa: E402

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import cast

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.db.repositories import UserUpsert, upsert_user
from src.db.session import Database
from src.models.inquiry import Inquiry
from src.models.listing import Listing
from src.schemas.listing import ListingCreate
from src.services.listing_service import ListingService

SEED_AGENT_ID = "demo-seed-agent"


@dataclass(frozen=True)
class CliArgs:
    cleanup: bool


def _parse_args() -> CliArgs:
    parser = argparse.ArgumentParser(
        description="Seed a demo agent with listings for manual API checks."
    )
    _ = parser.add_argument(
        "--cleanup",
        action="store_true",
        help=f"Delete listings owned by '{SEED_AGENT_ID}' before reseeding.",
    )
    namespace = parser.parse_args()
    return CliArgs(cleanup=cast(bool, namespace.cleanup))


def _build_seed_listings() -> list[ListingCreate]:
    return [
        ListingCreate(
            title="Haussmann apartment near the Seine",
            listing_type="for_sale",
            property_type="apartment",
            country="France",
            city="Paris",
            state_province="Ile-de-France",
            street_address="12 Quai de Bourbon",
            price=Decimal("850000.00"),
            currency="EUR",
            payment_frequency="one_time",
            bedrooms=3,
            bathrooms=2,
            has_elevator=True,
            features=["Balcony", "City View"],
            nearby_places=["Metro Station", "Park"],
        ),
        ListingCreate(
            title="Sea-view villa with pool",
            listing_type="for_sale",
            property_type="villa",
            country="Spain",
            city="Marbella",
            state_province="Andalusia",
            street_address="Camino del Mar 4",
            price=Decimal("1450000.00"),
            currency="EUR",
            payment_frequency="one_time",
            bedrooms=5,
            bathrooms=4,
            accepts_crypto=True,
            accepted_cryptos=["BTC", "ETH"],
            features=["Swimming Pool", "Garden", "Sea View"],
            nearby_places=["Beach", "Restaurant"],
        ),
        ListingCreate(
            title="Furnished studio close to campus",
            listing_type="for_rent",
            property_type="apartment",
            country="Germany",
            city="Berlin",
            street_address="Invalidenstrasse 42",
            price=Decimal("1150.00"),
            currency="EUR",
            payment_frequency="monthly",
            bedrooms=1,
            bathrooms=1,
            furnishing_status="yes",
            features=["Furnished", "Gym"],
            nearby_places=["University", "Supermarket"],
        ),
        ListingCreate(
            title="Retail unit on main street",
            listing_type="pre_sale",
            property_type="commercial",
            country="United States",
            city="Austin",
            state_province="Texas",
            street_address="600 Congress Ave",
            price=Decimal("499999.99"),
            payment_frequency="one_time",
            status="pending",
            features=["Parking"],
        ),
    ]


async def _cleanup_seed_rows(session: AsyncSession) -> dict[str, int]:
    listing_ids = list(
        (
            await session.execute(
                select(Listing.id).where(Listing.agent_id == SEED_AGENT_ID)
            )
        )
        .scalars()
        .all()
    )
    inquiries_deleted = 0
    if listing_ids:
        inquiries_deleted = (
            await session.execute(
                select(func.count(Inquiry.id)).where(
                    Inquiry.agent_id == SEED_AGENT_ID
                )
            )
        ).scalar_one_or_none() or 0
        _ = await session.execute(
            delete(Inquiry).where(Inquiry.agent_id == SEED_AGENT_ID)
        )
        _ = await session.execute(
            delete(Listing).where(Listing.agent_id == SEED_AGENT_ID)
        )
    await session.commit()
    return {
        "listings_deleted": len(listing_ids),
        "inquiries_deleted": int(inquiries_deleted),
    }


async def _run(args: CliArgs) -> dict[str, object]:
    database = Database.from_settings()
    cleanup: dict[str, int] | None = None
    try:
        if args.cleanup:
            async with database.session() as session:
                cleanup = await _cleanup_seed_rows(session)

        seed_listings = _build_seed_listings()
        created_ids: list[int] = []
        async with database.session() as session:
            await upsert_user(
                session,
                UserUpsert(
                    id=SEED_AGENT_ID,
                    email="demo.agent@example.com",
                    first_name="Demo",
                    last_name="Agent",
                ),
            )
            service = ListingService(session)
            for payload in seed_listings:
                listing = await service.create_listing(SEED_AGENT_ID, payload)
                created_ids.append(listing.id)
    finally:
        await database.dispose()

    return {
        "status": "success" if len(created_ids) == len(seed_listings) else "failure",
        "executed_at": datetime.now(UTC).isoformat(),
        "seed_agent_id": SEED_AGENT_ID,
        "cleanup_requested": args.cleanup,
        "cleanup": cleanup,
        "created_listing_ids": created_ids,
    }


async def _async_main() -> int:
    args = _parse_args()
    try:
        report = await _run(args)
    except Exception as exc:  # noqa: BLE001
        error_report = {
            "status": "failure",
            "executed_at": datetime.now(UTC).isoformat(),
            "error": str(exc),
        }
        print(json.dumps(error_report, ensure_ascii=False, indent=2))
        return 1

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0 if report.get("status") == "success" else 1


def main() -> None:
    raise SystemExit(asyncio.run(_async_main()))


if __name__ == "__main__":
    main()
