"""RolePermission entity - binding of a permission to a role."""

from dataclasses import dataclass

from bizrbac.domain.entities.role import Role
from bizrbac.domain.value_objects.conditions import Condition


@dataclass(frozen=True)
class RolePermission:
    """Binding of permission to role, optionally guarded by conditions.

    Conditions are kept in evaluation order (ownership before time). An
    empty tuple means the grant is unconditional.
    """

    role: Role
    permission_name: str
    conditions: tuple[Condition, ...] = ()

    @property
    def is_conditional(self) -> bool:
        return bool(self.conditions)
