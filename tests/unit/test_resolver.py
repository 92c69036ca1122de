"""Unit tests for TenantScopeResolver: list filters and single-row checks."""

from __future__ import annotations

import pytest
from sqlalchemy.sql.elements import False_, True_

from fleetgate.access.policy import POLICY_TABLE, EntityPolicy
from fleetgate.access.resolver import TenantScopeResolver
from fleetgate.exceptions import OwnerLookupFailed, UnknownEntityKind
from fleetgate.models.database import Client, Driver, Offense, Tenant, Vehicle
from fleetgate.types import EntityKind, IsolationStrategy, Role
from tests.helpers import TENANT_A, TENANT_B, make_principal


class FakeOwnerLookup:
    """In-memory owner store; ``tenants`` can be edited between calls."""

    def __init__(self, tenants: dict[tuple[EntityKind, str], str] | None = None) -> None:
        self.tenants = tenants or {}
        self.calls: list[tuple[EntityKind, str]] = []
        self.fail_for: set[str] = set()

    async def current_tenant(self, kind: EntityKind, owner_id: str) -> str | None:
        self.calls.append((kind, owner_id))
        if owner_id in self.fail_for:
            raise OwnerLookupFailed(str(kind), owner_id, "connection reset")
        return self.tenants.get((kind, owner_id))


def _sql(expr: object) -> str:
    return str(expr.compile(compile_kwargs={"literal_binds": True}))  # type: ignore[attr-defined]


@pytest.fixture()
def lookup() -> FakeOwnerLookup:
    return FakeOwnerLookup(
        {
            (EntityKind.DRIVER, "driver-a"): TENANT_A,
            (EntityKind.DRIVER, "driver-b"): TENANT_B,
            (EntityKind.VEHICLE, "vehicle-a"): TENANT_A,
            (EntityKind.VEHICLE, "vehicle-b"): TENANT_B,
        }
    )


@pytest.fixture()
def resolver(lookup: FakeOwnerLookup) -> TenantScopeResolver:
    return TenantScopeResolver(lookup)


@pytest.mark.unit
class TestBuildFilter:
    def test_admin_gets_no_restriction(self, resolver: TenantScopeResolver) -> None:
        admin = make_principal(role=Role.ADMIN)
        for kind in EntityKind:
            assert isinstance(resolver.build_filter(admin, kind), True_)

    def test_direct_kind_compares_tenant_column(self, resolver: TenantScopeResolver) -> None:
        sql = _sql(resolver.build_filter(make_principal(TENANT_A), EntityKind.CLIENT))
        assert sql == f"clients.tenant_id = '{TENANT_A}'"

    def test_same_filter_for_every_non_admin_role(self, resolver: TenantScopeResolver) -> None:
        sqls = {
            _sql(resolver.build_filter(make_principal(TENANT_B, role), EntityKind.DRIVER))
            for role in (Role.MANAGER, Role.OPERATOR, Role.VIEWER)
        }
        assert sqls == {f"drivers.tenant_id = '{TENANT_B}'"}

    def test_offense_filter_reads_owner_tenants_live(
        self, resolver: TenantScopeResolver
    ) -> None:
        sql = _sql(resolver.build_filter(make_principal(TENANT_A), EntityKind.OFFENSE))
        assert "offenses.driver_id IN (SELECT drivers.id" in sql
        assert "offenses.vehicle_id IN (SELECT vehicles.id" in sql
        assert f"drivers.tenant_id = '{TENANT_A}'" in sql
        assert f"vehicles.tenant_id = '{TENANT_A}'" in sql
        assert " OR " in sql

    def test_offense_filter_never_references_own_tenant_column(
        self, resolver: TenantScopeResolver
    ) -> None:
        sql = _sql(resolver.build_filter(make_principal(TENANT_A), EntityKind.OFFENSE))
        assert "offenses.tenant_id" not in sql

    def test_follows_owner_without_owners_matches_nothing(
        self, lookup: FakeOwnerLookup
    ) -> None:
        table = dict(POLICY_TABLE)
        table[EntityKind.OFFENSE] = EntityPolicy(
            kind=EntityKind.OFFENSE, model=Offense, strategy=IsolationStrategy.FOLLOWS_OWNER
        )
        resolver = TenantScopeResolver(lookup, table)
        assert isinstance(resolver.build_filter(make_principal(), EntityKind.OFFENSE), False_)

    def test_unknown_kind_raises(self, resolver: TenantScopeResolver) -> None:
        with pytest.raises(UnknownEntityKind):
            resolver.build_filter(make_principal(), "trailer_hitch")

    def test_unknown_kind_raises_for_admin(self, resolver: TenantScopeResolver) -> None:
        with pytest.raises(UnknownEntityKind):
            resolver.build_filter(make_principal(role=Role.ADMIN), "trailer_hitch")

    def test_build_filter_does_no_lookups(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        resolver.build_filter(make_principal(), EntityKind.OFFENSE)
        assert lookup.calls == []


@pytest.mark.unit
class TestIsVisible:
    async def test_direct_same_tenant(self, resolver: TenantScopeResolver) -> None:
        client = Client(tenant_id=TENANT_A, name="Acme")
        assert await resolver.is_visible(make_principal(TENANT_A), client)

    async def test_direct_other_tenant(self, resolver: TenantScopeResolver) -> None:
        client = Client(tenant_id=TENANT_B, name="Acme")
        assert not await resolver.is_visible(make_principal(TENANT_A), client)

    async def test_viewer_and_operator_agree(self, resolver: TenantScopeResolver) -> None:
        driver = Driver(tenant_id=TENANT_B, name="Thabo")
        for role in (Role.MANAGER, Role.OPERATOR, Role.VIEWER):
            assert not await resolver.is_visible(make_principal(TENANT_A, role), driver)

    async def test_admin_sees_other_tenant(self, resolver: TenantScopeResolver) -> None:
        vehicle = Vehicle(tenant_id=TENANT_B, registration="ND 123-456")
        assert await resolver.is_visible(make_principal(TENANT_A, Role.ADMIN), vehicle)

    async def test_offense_visible_through_driver(self, resolver: TenantScopeResolver) -> None:
        offense = Offense(kind="SPEEDING", driver_id="driver-a")
        assert await resolver.is_visible(make_principal(TENANT_A), offense)
        assert not await resolver.is_visible(make_principal(TENANT_B), offense)

    async def test_offense_visible_through_vehicle_only(
        self, resolver: TenantScopeResolver
    ) -> None:
        offense = Offense(kind="PARKING_VIOLATION", vehicle_id="vehicle-b")
        assert await resolver.is_visible(make_principal(TENANT_B), offense)
        assert not await resolver.is_visible(make_principal(TENANT_A), offense)

    async def test_offense_with_owners_in_two_tenants_is_visible_to_both(
        self, resolver: TenantScopeResolver
    ) -> None:
        offense = Offense(kind="SPEEDING", driver_id="driver-a", vehicle_id="vehicle-b")
        assert await resolver.is_visible(make_principal(TENANT_A), offense)
        assert await resolver.is_visible(make_principal(TENANT_B), offense)

    async def test_offense_follows_reassigned_driver(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        offense = Offense(kind="SPEEDING", driver_id="driver-a")
        assert await resolver.is_visible(make_principal(TENANT_A), offense)

        lookup.tenants[(EntityKind.DRIVER, "driver-a")] = TENANT_B

        assert not await resolver.is_visible(make_principal(TENANT_A), offense)
        assert await resolver.is_visible(make_principal(TENANT_B), offense)

    async def test_each_check_asks_the_owner_again(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        offense = Offense(kind="SPEEDING", driver_id="driver-a")
        await resolver.is_visible(make_principal(TENANT_A), offense)
        await resolver.is_visible(make_principal(TENANT_A), offense)
        assert lookup.calls == [
            (EntityKind.DRIVER, "driver-a"),
            (EntityKind.DRIVER, "driver-a"),
        ]

    async def test_offense_without_owners_hidden_from_non_admin(
        self, resolver: TenantScopeResolver
    ) -> None:
        offense = Offense(kind="OTHER")
        assert not await resolver.is_visible(make_principal(TENANT_A), offense)
        assert await resolver.is_visible(make_principal(TENANT_A, Role.ADMIN), offense)

    async def test_missing_owner_does_not_grant_visibility(
        self, resolver: TenantScopeResolver
    ) -> None:
        offense = Offense(kind="SPEEDING", driver_id="deleted-driver")
        assert not await resolver.is_visible(make_principal(TENANT_A), offense)

    async def test_lookup_failure_hides_the_row(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        lookup.fail_for.add("driver-a")
        offense = Offense(kind="SPEEDING", driver_id="driver-a")
        assert not await resolver.is_visible(make_principal(TENANT_A), offense)

    async def test_lookup_failure_on_one_owner_hides_even_if_other_matches(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        lookup.fail_for.add("vehicle-a")
        offense = Offense(kind="SPEEDING", driver_id="driver-a", vehicle_id="vehicle-a")
        assert not await resolver.is_visible(make_principal(TENANT_A), offense)

    async def test_admin_skips_owner_lookup(
        self, resolver: TenantScopeResolver, lookup: FakeOwnerLookup
    ) -> None:
        lookup.fail_for.add("driver-a")
        offense = Offense(kind="SPEEDING", driver_id="driver-a")
        assert await resolver.is_visible(make_principal(role=Role.ADMIN), offense)
        assert lookup.calls == []

    async def test_unregistered_model_raises(self, resolver: TenantScopeResolver) -> None:
        tenant = Tenant(slug="x", name="X")
        with pytest.raises(UnknownEntityKind):
            await resolver.is_visible(make_principal(role=Role.ADMIN), tenant)


@pytest.mark.unit
class TestKindOf:
    def test_kind_of_model_and_instance(self, resolver: TenantScopeResolver) -> None:
        assert resolver.kind_of(Driver) == EntityKind.DRIVER
        assert resolver.kind_of(Offense(kind="OTHER")) == EntityKind.OFFENSE
