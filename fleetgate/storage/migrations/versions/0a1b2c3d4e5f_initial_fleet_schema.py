"""initial fleet schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel.sql.sqltypes
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0a1b2c3d4e5f"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_TENANT_ID = "00000000-0000-0000-0000-000000000001"

_str = sqlmodel.sql.sqltypes.AutoString

# Tables that carry their own tenant_id, in creation order
TENANT_SCOPED = (
    "clients",
    "drivers",
    "vehicles",
    "locations",
    "contacts",
    "logistics_officers",
    "manifests",
    "vehicle_combinations",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _tenant_fk() -> list[sa.Column | sa.ForeignKeyConstraint]:
    return [
        sa.Column("tenant_id", _str(), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"]),
    ]


def upgrade() -> None:
    """Create tenants, users, the tenant-scoped directories and offenses."""
    # --- 1. Tenancy and identity ---
    op.create_table(
        "tenants",
        sa.Column("id", _str(), nullable=False),
        sa.Column("slug", _str(), nullable=False),
        sa.Column("name", _str(), nullable=False),
        sa.Column("settings_json", _str(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenants_slug"), "tenants", ["slug"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("email", _str(), nullable=False),
        sa.Column("name", _str(), nullable=False, server_default=""),
        sa.Column("role", _str(), nullable=False, server_default="VIEWER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # --- 2. Tenant-scoped directories ---
    op.create_table(
        "clients",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("company_id", sa.Integer(), nullable=True),
        sa.Column("entity_type_description", _str(), nullable=False, server_default=""),
        sa.Column("name", _str(), nullable=False),
        sa.Column("address", _str(), nullable=True),
        sa.Column("display_value", _str(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clients_name"), "clients", ["name"])

    op.create_table(
        "drivers",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("driver_number", sa.Integer(), nullable=True),
        sa.Column("name", _str(), nullable=False),
        sa.Column("contact_nr", _str(), nullable=True),
        sa.Column("id_number", _str(), nullable=False, server_default=""),
        sa.Column("country_of_origin", _str(), nullable=False, server_default=""),
        sa.Column("display_value", _str(), nullable=False, server_default=""),
        sa.Column("active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_drivers_name"), "drivers", ["name"])

    op.create_table(
        "vehicles",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("vehicle_number", sa.Integer(), nullable=True),
        sa.Column("registration", _str(), nullable=False),
        sa.Column("entity_type_description", _str(), nullable=False, server_default="HORSE"),
        sa.Column("country_of_origin", _str(), nullable=False, server_default=""),
        sa.Column("display_value", _str(), nullable=False, server_default=""),
        sa.Column("status", _str(), nullable=False, server_default="Active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vehicles_registration"), "vehicles", ["registration"])

    op.create_table(
        "locations",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("name", _str(), nullable=False),
        sa.Column("description", _str(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", _str(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "contacts",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("name", _str(), nullable=False),
        sa.Column("contact_nr", _str(), nullable=False, server_default=""),
        sa.Column("id_number", _str(), nullable=False, server_default=""),
        sa.Column("country_of_origin", _str(), nullable=False, server_default=""),
        sa.Column("display_value", _str(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "logistics_officers",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("name", _str(), nullable=False),
        sa.Column("phone", _str(), nullable=False, server_default=""),
        sa.Column("email", _str(), nullable=True),
        sa.Column("country_of_origin", _str(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "manifests",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("title", _str(), nullable=False, server_default=""),
        sa.Column("tracking_id", _str(), nullable=True),
        sa.Column("status", _str(), nullable=False, server_default="SCHEDULED"),
        sa.Column("route", _str(), nullable=True),
        sa.Column("date_time_added", sa.DateTime(), nullable=False),
        sa.Column("date_time_updated", sa.DateTime(), nullable=False),
        sa.Column("date_time_ended", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_manifests_tracking_id"), "manifests", ["tracking_id"])

    op.create_table(
        "vehicle_combinations",
        sa.Column("id", _str(), nullable=False),
        *_tenant_fk(),
        sa.Column("horse_id", _str(), nullable=False),
        sa.Column("driver", _str(), nullable=False, server_default=""),
        sa.Column("status", _str(), nullable=False, server_default="Active"),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("cargo", _str(), nullable=True),
        sa.Column("route", _str(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["horse_id"], ["vehicles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_vehicle_combinations_horse_id"), "vehicle_combinations", ["horse_id"]
    )

    for table in TENANT_SCOPED + ("users",):
        op.create_index(op.f(f"ix_{table}_tenant_id"), table, ["tenant_id"])

    # --- 3. Owner-following records (no tenant_id column) ---
    op.create_table(
        "offenses",
        sa.Column("id", _str(), nullable=False),
        sa.Column("driver_id", _str(), nullable=True),
        sa.Column("vehicle_id", _str(), nullable=True),
        sa.Column("kind", _str(), nullable=False),
        sa.Column("severity", _str(), nullable=False, server_default="MINOR"),
        sa.Column("notes", _str(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["driver_id"], ["drivers.id"]),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_offenses_driver_id"), "offenses", ["driver_id"])
    op.create_index(op.f("ix_offenses_vehicle_id"), "offenses", ["vehicle_id"])

    # --- 4. Bootstrap the default tenant ---
    op.execute(
        sa.text(
            "INSERT INTO tenants (id, slug, name, settings_json, created_at, updated_at) "
            "VALUES (:id, 'default', 'Default Tenant', '{}', "
            "CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)"
        ).bindparams(id=DEFAULT_TENANT_ID)
    )


def downgrade() -> None:
    """Drop everything created in upgrade, children first."""
    op.drop_table("offenses")
    for table in reversed(TENANT_SCOPED):
        op.drop_table(table)
    op.drop_table("users")
    op.drop_index(op.f("ix_tenants_slug"), table_name="tenants")
    op.drop_table("tenants")
