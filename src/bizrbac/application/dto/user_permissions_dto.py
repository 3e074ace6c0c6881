"""Effective permissions DTO."""

from dataclasses import dataclass, field

from bizrbac.domain.entities import Role


@dataclass
class UserPermissionsOutput:
    """Role bindings with custom overrides applied."""

    user_id: str
    role: Role | None
    role_permissions: list[str] = field(default_factory=list)
    custom_permissions: dict[str, bool] = field(default_factory=dict)
    effective_permissions: list[str] = field(default_factory=list)
