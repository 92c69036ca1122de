"""API request/response schemas for FastAPI endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fleetgate.types import OffenseKind, OffenseSeverity

# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class ClientCreate(BaseModel):
    company_id: int | None = None
    entity_type_description: str = ""
    name: str = Field(min_length=1, max_length=200)
    address: str | None = None
    display_value: str = ""


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = None
    display_value: str | None = None
    entity_type_description: str | None = None


class ClientResponse(BaseModel):
    id: str
    tenant_id: str
    company_id: int | None
    entity_type_description: str
    name: str
    address: str | None
    display_value: str
    created_at: datetime


class DriverCreate(BaseModel):
    driver_number: int | None = None
    name: str = Field(min_length=1, max_length=200)
    contact_nr: str | None = None
    id_number: str = ""
    country_of_origin: str = ""
    display_value: str = ""


class DriverUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    contact_nr: str | None = None
    id_number: str | None = None
    country_of_origin: str | None = None
    active: bool | None = None


class DriverResponse(BaseModel):
    id: str
    tenant_id: str
    driver_number: int | None
    name: str
    contact_nr: str | None
    id_number: str
    country_of_origin: str
    display_value: str
    active: bool
    created_at: datetime


class CountryCount(BaseModel):
    country: str
    count: int


class DriverStatsResponse(BaseModel):
    total_drivers: int
    active_drivers: int
    drivers_with_offenses: int
    countries: list[CountryCount]


class VehicleCreate(BaseModel):
    vehicle_number: int | None = None
    registration: str = Field(min_length=1, max_length=50)
    entity_type_description: str = "HORSE"
    country_of_origin: str = ""
    display_value: str = ""
    status: str = "Active"


class VehicleResponse(BaseModel):
    id: str
    tenant_id: str
    vehicle_number: int | None
    registration: str
    entity_type_description: str
    country_of_origin: str
    display_value: str
    status: str
    created_at: datetime


class VehicleStatsResponse(BaseModel):
    total_vehicles: int
    active_vehicles: int
    horses: int
    trailers: int
    maintenance_vehicles: int


class LocationResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: str | None
    latitude: float | None
    longitude: float | None
    address: str | None


class ContactResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    contact_nr: str
    id_number: str
    country_of_origin: str
    display_value: str


class LogisticsOfficerResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    phone: str
    email: str | None
    country_of_origin: str | None
    is_active: bool


class LocationPage(BaseModel):
    items: list[LocationResponse]
    total: int


class ContactPage(BaseModel):
    items: list[ContactResponse]
    total: int


class LogisticsOfficerPage(BaseModel):
    officers: list[LogisticsOfficerResponse]
    total: int


# ---------------------------------------------------------------------------
# Manifests and combinations
# ---------------------------------------------------------------------------


class ManifestResponse(BaseModel):
    id: str
    tenant_id: str
    title: str
    tracking_id: str | None
    status: str
    route: str | None
    date_time_added: datetime
    date_time_updated: datetime
    date_time_ended: datetime | None


class ManifestPage(BaseModel):
    items: list[ManifestResponse]
    total: int


class VehicleCombinationCreate(BaseModel):
    horse_id: str
    driver: str = Field(min_length=1)
    status: str = "Active"
    start_date: datetime
    cargo: str | None = None
    route: str | None = None


class VehicleCombinationResponse(BaseModel):
    id: str
    tenant_id: str
    horse_id: str
    driver: str
    status: str
    start_date: datetime
    cargo: str | None
    route: str | None


# ---------------------------------------------------------------------------
# Offenses
# ---------------------------------------------------------------------------


class OffenseCreate(BaseModel):
    driver_id: str | None = None
    vehicle_id: str | None = None
    kind: OffenseKind
    severity: OffenseSeverity
    notes: str | None = None


class DriverOffenseCreate(BaseModel):
    kind: OffenseKind
    severity: OffenseSeverity = OffenseSeverity.MINOR
    notes: str | None = None


class OwnerSummary(BaseModel):
    id: str
    tenant_id: str
    label: str


class OffenseResponse(BaseModel):
    id: str
    driver_id: str | None
    vehicle_id: str | None
    kind: str
    severity: str
    notes: str | None
    created_at: datetime
    driver: OwnerSummary | None = None
    vehicle: OwnerSummary | None = None


# ---------------------------------------------------------------------------
# Tenant administration
# ---------------------------------------------------------------------------


class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=64, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    settings: dict[str, Any] = Field(default_factory=dict)


class TenantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(
        default=None, min_length=1, max_length=64, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
    )
    settings: dict[str, Any] | None = None


class TenantResponse(BaseModel):
    id: str
    slug: str
    name: str
    settings: dict[str, Any]
    created_at: datetime


class ReassignTenantRequest(BaseModel):
    tenant_id: str = Field(min_length=1)
