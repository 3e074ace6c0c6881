"""Role entity for RBAC."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Role:
    """Role - named bundle of permissions. Level is informational only."""

    id: UUID
    name: str
    display_name: str
    level: int = 0
    is_system: bool = False
