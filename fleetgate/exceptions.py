"""Exception hierarchy for FleetGate."""


class FleetGateError(Exception):
    """Base exception for all FleetGate errors."""


class ConfigError(FleetGateError):
    """Raised when configuration is invalid."""


class PolicyConfigError(ConfigError):
    """Raised when the entity policy table fails validation."""


class UnknownEntityKind(ConfigError):  # noqa: N818
    """Raised when an entity kind has no entry in the policy table.

    This is a wiring defect, never a user error: callers must not fall back
    to an unfiltered or an empty query.
    """

    def __init__(self, kind: object) -> None:
        super().__init__(f"No tenant isolation policy registered for {kind!r}")
        self.kind = kind


class OwnerLookupFailed(FleetGateError):  # noqa: N818
    """Raised when the current tenant of an owner entity cannot be read."""

    def __init__(self, owner_kind: str, owner_id: str, reason: str = "") -> None:
        detail = f"Could not resolve tenant of {owner_kind} {owner_id}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)
        self.owner_kind = owner_kind
        self.owner_id = owner_id


class StorageError(FleetGateError):
    """Raised when storage operations fail."""


class NotFoundError(FleetGateError):
    """Raised when a row is missing or not visible to the caller."""


class TenantNotFoundError(NotFoundError):
    """Raised when a tenant id does not exist."""


class DuplicateError(StorageError):
    """Raised when a unique value (e.g. a tenant slug) is already taken."""
