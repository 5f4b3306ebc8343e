"""Initial marketplace tables: users, properties, property inquiries.

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("profile_image_url", sa.String(), nullable=True),
        sa.Column("billing_customer_id", sa.String(), nullable=True),
        sa.Column("billing_subscription_id", sa.String(), nullable=True),
        sa.Column("subscription_plan", sa.String(), nullable=True),
        sa.Column("subscription_status", sa.String(), nullable=True),
        sa.Column("agency_name", sa.String(), nullable=True),
        sa.Column("license_number", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("whatsapp_number", sa.String(), nullable=True),
        sa.Column("languages_spoken", postgresql.ARRAY(sa.Text()), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("agent_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("listing_type", sa.String(), nullable=False),
        sa.Column("property_type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), server_default="active", nullable=False),
        sa.Column("country", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("street_address", sa.String(), nullable=False),
        sa.Column("state_province", sa.String(), nullable=True),
        sa.Column("postal_code", sa.String(), nullable=True),
        sa.Column("latitude", sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column("longitude", sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column("price", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("currency", sa.String(), server_default="USD", nullable=False),
        sa.Column("payment_frequency", sa.String(), nullable=False),
        sa.Column(
            "is_negotiable", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "accepts_crypto", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("accepted_cryptos", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("maintenance_fees", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("property_taxes", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("total_area", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("living_area", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("lot_size", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("area_unit", sa.String(), server_default="sqm", nullable=False),
        sa.Column("year_built", sa.Integer(), nullable=True),
        sa.Column("bedrooms", sa.Integer(), nullable=True),
        sa.Column("bathrooms", sa.Integer(), nullable=True),
        sa.Column("floors", sa.Integer(), nullable=True),
        sa.Column("parking_spaces", sa.Integer(), nullable=True),
        sa.Column("furnishing_status", sa.String(), nullable=True),
        sa.Column("floor_number", sa.Integer(), nullable=True),
        sa.Column(
            "has_elevator", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("view", sa.String(), nullable=True),
        sa.Column("energy_rating", sa.String(), nullable=True),
        sa.Column("features", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("nearby_places", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("cover_image", sa.String(), nullable=True),
        sa.Column("gallery_images", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("video_tour_url", sa.String(), nullable=True),
        sa.Column("virtual_tour_url", sa.String(), nullable=True),
        sa.Column("floor_plan_image", sa.String(), nullable=True),
        sa.Column("available_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ownership_type", sa.String(), nullable=True),
        sa.Column(
            "title_deed_available",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "exclusive_listing",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("searchable_location", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(
            ["agent_id"], ["users.id"], name="fk_properties_agent_id_users"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_properties"),
    )
    op.create_index(
        "idx_properties_status_created",
        "properties",
        ["status", "created_at"],
        unique=False,
    )
    op.create_index("idx_properties_agent", "properties", ["agent_id"], unique=False)
    op.create_index("idx_properties_price", "properties", ["price"], unique=False)

    op.create_table(
        "property_inquiries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=True),
        sa.Column("agent_id", sa.String(), nullable=False),
        sa.Column("inquirer_name", sa.String(), nullable=False),
        sa.Column("inquirer_email", sa.String(), nullable=False),
        sa.Column("inquirer_phone", sa.String(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), server_default="new", nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["properties.id"],
            name="fk_property_inquiries_property_id_properties",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["agent_id"], ["users.id"], name="fk_property_inquiries_agent_id_users"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_property_inquiries"),
    )
    op.create_index(
        "idx_property_inquiries_agent_created",
        "property_inquiries",
        ["agent_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index(
        "idx_property_inquiries_agent_created", table_name="property_inquiries"
    )
    op.drop_table("property_inquiries")
    op.drop_index("idx_properties_price", table_name="properties")
    op.drop_index("idx_properties_agent", table_name="properties")
    op.drop_index("idx_properties_status_created", table_name="properties")
    op.drop_table("properties")
    op.drop_table("users")
