"""SQLModel database table models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC time as naive datetime for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _new_uuid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Tenancy and identity
# ---------------------------------------------------------------------------


class Tenant(SQLModel, table=True):
    __tablename__ = "tenants"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    slug: str = Field(unique=True, index=True)
    name: str
    settings_json: str = Field(default="{}")
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    email: str = Field(unique=True, index=True)
    name: str = ""
    role: str = Field(default="VIEWER")  # ADMIN | MANAGER | OPERATOR | VIEWER
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Tenant-scoped directories (each row carries its own mutable tenant_id)
# ---------------------------------------------------------------------------


class Client(SQLModel, table=True):
    __tablename__ = "clients"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    company_id: int | None = None
    entity_type_description: str = ""
    name: str = Field(index=True)
    address: str | None = None
    display_value: str = ""
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Driver(SQLModel, table=True):
    __tablename__ = "drivers"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    driver_number: int | None = None
    name: str = Field(index=True)
    contact_nr: str | None = None
    id_number: str = ""
    country_of_origin: str = ""
    display_value: str = ""
    active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Vehicle(SQLModel, table=True):
    __tablename__ = "vehicles"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    vehicle_number: int | None = None
    registration: str = Field(index=True)
    entity_type_description: str = Field(default="HORSE")  # HORSE | TRAILER
    country_of_origin: str = ""
    display_value: str = ""
    status: str = Field(default="Active")
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Location(SQLModel, table=True):
    __tablename__ = "locations"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    name: str
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Contact(SQLModel, table=True):
    __tablename__ = "contacts"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    name: str
    contact_nr: str = ""
    id_number: str = ""
    country_of_origin: str = ""
    display_value: str = ""
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class LogisticsOfficer(SQLModel, table=True):
    __tablename__ = "logistics_officers"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    name: str
    phone: str = ""
    email: str | None = None
    country_of_origin: str | None = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Manifest(SQLModel, table=True):
    __tablename__ = "manifests"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    title: str = ""
    tracking_id: str | None = Field(default=None, index=True)
    status: str = Field(default="SCHEDULED")  # SCHEDULED | IN_PROGRESS | COMPLETED | CANCELLED
    route: str | None = None
    date_time_added: datetime = Field(default_factory=_utc_now)
    date_time_updated: datetime = Field(default_factory=_utc_now)
    date_time_ended: datetime | None = None


class VehicleCombination(SQLModel, table=True):
    __tablename__ = "vehicle_combinations"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    horse_id: str = Field(foreign_key="vehicles.id", index=True)
    driver: str = ""
    status: str = Field(default="Active")
    start_date: datetime = Field(default_factory=_utc_now)
    cargo: str | None = None
    route: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Owner-following records (no tenant_id; visibility comes from the owner)
# ---------------------------------------------------------------------------


class Offense(SQLModel, table=True):
    __tablename__ = "offenses"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    driver_id: str | None = Field(default=None, foreign_key="drivers.id", index=True)
    vehicle_id: str | None = Field(default=None, foreign_key="vehicles.id", index=True)
    kind: str  # SPEEDING | PARKING_VIOLATION | TRAFFIC_VIOLATION | SAFETY_VIOLATION | OTHER
    severity: str = Field(default="MINOR")  # MINOR | MODERATE | MAJOR | CRITICAL
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
