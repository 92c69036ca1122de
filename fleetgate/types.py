"""Enums and type aliases for FleetGate."""

from enum import StrEnum


class Role(StrEnum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    OPERATOR = "OPERATOR"
    VIEWER = "VIEWER"


class EntityKind(StrEnum):
    CLIENT = "client"
    DRIVER = "driver"
    VEHICLE = "vehicle"
    LOCATION = "location"
    CONTACT = "contact"
    LOGISTICS_OFFICER = "logistics_officer"
    MANIFEST = "manifest"
    VEHICLE_COMBINATION = "vehicle_combination"
    OFFENSE = "offense"


class IsolationStrategy(StrEnum):
    DIRECT = "direct"
    FOLLOWS_OWNER = "follows_owner"


class OffenseKind(StrEnum):
    SPEEDING = "SPEEDING"
    PARKING_VIOLATION = "PARKING_VIOLATION"
    TRAFFIC_VIOLATION = "TRAFFIC_VIOLATION"
    SAFETY_VIOLATION = "SAFETY_VIOLATION"
    OTHER = "OTHER"


class OffenseSeverity(StrEnum):
    MINOR = "MINOR"
    MODERATE = "MODERATE"
    MAJOR = "MAJOR"
    CRITICAL = "CRITICAL"


class ManifestStatus(StrEnum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class VehicleType(StrEnum):
    HORSE = "HORSE"
    TRAILER = "TRAILER"
