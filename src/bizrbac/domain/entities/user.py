"""User snapshot - the identity data the engine resolves decisions from."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from uuid import UUID

from bizrbac.domain.value_objects.legacy_role import LegacyRole


@dataclass(frozen=True)
class UserSnapshot:
    """Resolved user: tenant, role assignment, overrides, active flag.

    ``role_id`` is unset for accounts created before role migration; those
    resolve their role through ``legacy_role`` by name.
    """

    id: str
    tenant_id: str
    role_id: UUID | None = None
    legacy_role: LegacyRole | None = None
    custom_permissions: Mapping[str, bool] = field(default_factory=dict)
    is_active: bool = True

    def __post_init__(self) -> None:
        # Snapshots are shared through the cache; freeze the override map.
        object.__setattr__(
            self,
            "custom_permissions",
            MappingProxyType(dict(self.custom_permissions)),
        )

    def override_for(self, permission: str) -> bool | None:
        """Return the custom override for permission, or None if absent."""
        return self.custom_permissions.get(permission)
