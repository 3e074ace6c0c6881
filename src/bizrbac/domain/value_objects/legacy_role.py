"""Legacy enum-based role labels and their compatibility rule."""

from enum import StrEnum


class LegacyRole(StrEnum):
    """Role labels stored on accounts created before role migration."""

    OWNER = "OWNER"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"

    def allows(self, permission: str) -> bool:
        """Fixed compatibility rule, independent of the RBAC tables."""
        if self is LegacyRole.OWNER:
            return True
        if self is LegacyRole.MANAGER:
            return permission.startswith("users:read") or permission.startswith(
                "users:update"
            )
        return permission == "users:read"

    @classmethod
    def parse(cls, value: str | None) -> "LegacyRole | None":
        """Parse stored label; unknown labels have no legacy semantics."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None
