"""Permission entity - named capability in resource:action form."""

from dataclasses import dataclass

from bizrbac.domain.exceptions import ValidationError


def split_permission_name(name: str) -> tuple[str, str]:
    """Split 'orders:update' into ('orders', 'update')."""
    resource, sep, action = name.partition(":")
    if not sep or not resource or not action:
        raise ValidationError(
            f"Permission name must be in format 'resource:action', got {name!r}"
        )
    return resource, action


@dataclass(frozen=True)
class Permission:
    """Permission - globally unique by name."""

    name: str
    category: str
    description: str | None = None

    def __post_init__(self) -> None:
        split_permission_name(self.name)

    @property
    def resource(self) -> str:
        return self.name.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.name.split(":", 1)[1]
