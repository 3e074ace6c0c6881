"""Request context an authorization decision is evaluated against."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class AuthorizationContext:
    """Who is asking, in which tenant, about which resource.

    When ``tenant_id`` is omitted the tenant isolation check is skipped;
    callers that care about isolation must supply it.
    """

    user_id: str
    tenant_id: str | None = None
    resource_id: str | None = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
