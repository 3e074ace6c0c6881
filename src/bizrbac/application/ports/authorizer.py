"""Authorizer port - RBAC authorization decisions."""

from typing import Protocol

from bizrbac.domain.entities import Role
from bizrbac.domain.value_objects import AuthorizationContext, Decision


class Authorizer(Protocol):
    """Port for deciding whether a caller holds a permission."""

    async def authorize(
        self,
        permission: str,
        context: AuthorizationContext,
        timeout: float | None = None,
    ) -> Decision: ...

    async def authorize_all(
        self,
        permissions: list[str],
        context: AuthorizationContext,
        timeout: float | None = None,
    ) -> dict[str, Decision]: ...

    async def effective_role(
        self,
        user_id: str,
        tenant_id: str | None = None,
        timeout: float | None = None,
    ) -> Role | None: ...
