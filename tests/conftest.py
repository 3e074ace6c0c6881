"""Pytest fixtures for bizrbac tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from bizrbac.application.dto.audit_dto import AuditLogFilters
from bizrbac.domain.entities import (
    AuditLogEntry,
    Permission,
    ResourceOwner,
    Role,
    RolePermission,
    UserSnapshot,
)
from bizrbac.domain.exceptions import NotFound
from bizrbac.domain.value_objects import Condition, parse_conditions
from bizrbac.infrastructure.permission import (
    AuditLogger,
    ConditionEvaluator,
    OwnershipRegistry,
    PermissionResolver,
    UserPermissionCache,
)

# Monday 2026-10-19, 10:00 UTC
MONDAY_10AM = datetime(2026, 10, 19, 10, 0, tzinfo=UTC)


# --- Fake clock ---


class FakeClock:
    """Settable clock."""

    def __init__(self, now: datetime = MONDAY_10AM) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def set(self, now: datetime) -> None:
        self.current = now

    def advance(self, delta: timedelta) -> None:
        self.current += delta


# --- Fake repositories ---


class FakeUserRepository:
    """In-memory user store.

    ``error`` makes every read raise; ``delay`` slows reads down; ``hold``
    pauses the next read (after the snapshot was taken) until it is set.
    """

    def __init__(self) -> None:
        self._users: dict[str, UserSnapshot] = {}
        self.reads = 0
        self.error: Exception | None = None
        self.delay: float = 0
        self.hold: asyncio.Event | None = None
        self.entered = asyncio.Event()

    def add(self, user: UserSnapshot) -> UserSnapshot:
        self._users[user.id] = user
        return user

    async def get_user(self, user_id: str) -> UserSnapshot | None:
        self.reads += 1
        if self.error:
            raise self.error
        user = self._users.get(user_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.hold is not None:
            hold, self.hold = self.hold, None
            self.entered.set()
            await hold.wait()
        return user

    async def set_custom_permission(
        self, user_id: str, permission: str, granted: bool
    ) -> None:
        user = self._users.get(user_id)
        if not user:
            raise NotFound("User", user_id)
        overrides = {**user.custom_permissions, permission: granted}
        self._users[user_id] = replace(user, custom_permissions=overrides)

    async def set_role(self, user_id: str, role_id: UUID) -> None:
        user = self._users.get(user_id)
        if not user:
            raise NotFound("User", user_id)
        self._users[user_id] = replace(user, role_id=role_id)


class FakeCatalogRepository:
    """In-memory roles, permissions and bindings."""

    def __init__(self) -> None:
        self._roles: dict[UUID, Role] = {}
        self._permissions: dict[str, Permission] = {}
        self._bindings: dict[tuple[UUID, str], RolePermission] = {}
        self.error: Exception | None = None

    def add_role(self, role: Role) -> Role:
        self._roles[role.id] = role
        return role

    def add_permission(self, permission: Permission) -> Permission:
        self._permissions[permission.name] = permission
        return permission

    def add_binding(
        self, role: Role, permission_name: str, conditions: tuple[Condition, ...] = ()
    ) -> RolePermission:
        binding = RolePermission(role=role, permission_name=permission_name, conditions=conditions)
        self._bindings[(role.id, permission_name)] = binding
        return binding

    async def get_role_by_id(self, role_id: UUID) -> Role | None:
        if self.error:
            raise self.error
        return self._roles.get(role_id)

    async def get_role_by_name(self, name: str) -> Role | None:
        if self.error:
            raise self.error
        return next((r for r in self._roles.values() if r.name == name), None)

    async def get_permission(self, name: str) -> Permission | None:
        return self._permissions.get(name)

    async def list_permissions(self) -> list[Permission]:
        return sorted(self._permissions.values(), key=lambda p: (p.category, p.name))

    async def get_role_permission(
        self, role_id: UUID, permission_name: str
    ) -> RolePermission | None:
        if self.error:
            raise self.error
        return self._bindings.get((role_id, permission_name))

    async def list_role_permissions(
        self, role_id: UUID | None = None
    ) -> list[RolePermission]:
        return [
            b
            for (rid, _), b in sorted(self._bindings.items(), key=lambda kv: kv[0][1])
            if role_id is None or rid == role_id
        ]

    async def bind(
        self,
        role_id: UUID,
        permission_name: str,
        conditions: tuple[Condition, ...] = (),
    ) -> None:
        self.add_binding(self._roles[role_id], permission_name, conditions)

    async def unbind(self, role_id: UUID, permission_name: str) -> bool:
        return self._bindings.pop((role_id, permission_name), None) is not None


class FakeAuditLogRepository:
    """In-memory append-only audit log.

    ``fail`` makes appends raise; ``delay`` slows them down.
    """

    def __init__(self) -> None:
        self.entries: list[AuditLogEntry] = []
        self.fail = False
        self.delay: float = 0

    async def append(self, entry: AuditLogEntry) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("audit storage unavailable")
        self.entries.append(entry)

    async def query(
        self, filters: AuditLogFilters, limit: int, offset: int
    ) -> tuple[list[AuditLogEntry], int]:
        def matches(e: AuditLogEntry) -> bool:
            return (
                (filters.user_id is None or e.user_id == filters.user_id)
                and (filters.tenant_id is None or e.tenant_id == filters.tenant_id)
                and (filters.resource is None or e.resource == filters.resource)
                and (filters.action is None or e.action == filters.action)
                and (filters.result is None or e.result == filters.result)
                and (filters.start is None or e.created_at >= filters.start)
                and (filters.end is None or e.created_at <= filters.end)
            )

        items = sorted(
            (e for e in self.entries if matches(e)),
            key=lambda e: e.created_at,
            reverse=True,
        )
        return items[offset : offset + limit], len(items)


class FakeOwnerRepository:
    """In-memory ownership view for orders or customers."""

    def __init__(self) -> None:
        self._owners: dict[str, ResourceOwner] = {}

    def add(self, owner: ResourceOwner) -> ResourceOwner:
        self._owners[owner.resource_id] = owner
        return owner

    async def get_owner(self, resource_id: str) -> ResourceOwner | None:
        return self._owners.get(resource_id)


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.users = FakeUserRepository()
        self.catalog = FakeCatalogRepository()
        self.audit_logs = FakeAuditLogRepository()
        self.orders = FakeOwnerRepository()
        self.customers = FakeOwnerRepository()
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same FakeUnitOfWork, so state is shared across calls."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow
        await uow.commit()

    return _factory


# --- Catalog seed ---

ROLES = {
    "OWNER": ("İşletme Sahibi", 4),
    "MANAGER": ("Yönetici", 3),
    "EMPLOYEE": ("Çalışan", 2),
    "DRIVER": ("Sürücü", 1),
}

PERMISSIONS = {
    "users:create": "USER_MANAGEMENT",
    "users:read": "USER_MANAGEMENT",
    "users:update": "USER_MANAGEMENT",
    "users:delete": "USER_MANAGEMENT",
    "business:manage": "BUSINESS",
    "customers:read": "CUSTOMERS",
    "customers:delete": "CUSTOMERS",
    "orders:create": "ORDERS",
    "orders:read": "ORDERS",
    "orders:update": "ORDERS",
    "invoices:create": "INVOICES",
    "reports:financial": "REPORTS",
    "settings:read": "SETTINGS",
}

BINDINGS = {
    "MANAGER": [
        "users:read", "users:update", "customers:read", "orders:create",
        "orders:read", "orders:update", "invoices:create", "settings:read",
    ],
    "EMPLOYEE": ["users:read", "customers:read", "orders:read", "orders:create", "settings:read"],
}

ORDER_OWNERSHIP = {"resourceOwnership": True, "resourceType": "order"}


def seed_catalog(uow: FakeUnitOfWork) -> dict[str, Role]:
    """Built-in roles, a slice of the permission catalog and the default bindings."""
    roles = {
        name: uow.catalog.add_role(
            Role(id=uuid4(), name=name, display_name=display, level=level, is_system=True)
        )
        for name, (display, level) in ROLES.items()
    }
    for name, category in PERMISSIONS.items():
        uow.catalog.add_permission(Permission(name=name, category=category))
    for name in PERMISSIONS:
        uow.catalog.add_binding(roles["OWNER"], name)
    for role_name, names in BINDINGS.items():
        for name in names:
            uow.catalog.add_binding(roles[role_name], name)
    for name in ("orders:read", "orders:update"):
        uow.catalog.add_binding(roles["DRIVER"], name, parse_conditions(ORDER_OWNERSHIP))
    return roles


def make_resolver(uow_factory, clock: FakeClock, timeout: float | None = None) -> PermissionResolver:
    ownership = OwnershipRegistry(uow_factory)
    return PermissionResolver(
        unit_of_work_factory=uow_factory,
        cache=UserPermissionCache(clock),
        condition_evaluator=ConditionEvaluator(ownership, clock),
        audit_logger=AuditLogger(uow_factory),
        clock=clock,
        timeout=timeout,
    )


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the shared fake_uow."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def roles(fake_uow: FakeUnitOfWork) -> dict[str, Role]:
    """Seeded built-in roles by name."""
    return seed_catalog(fake_uow)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resolver(uow_factory, clock: FakeClock, roles) -> PermissionResolver:
    """Resolver over the seeded catalog with an isolated cache."""
    return make_resolver(uow_factory, clock)
