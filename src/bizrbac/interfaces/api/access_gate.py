"""AccessGate - permission and role gates around Falcon responders.

Usage inside a resource::

    self.on_get = gate.protect("users:read", resource_id=path_param("user_id"))(self._get)
    self.on_put = gate.owner_only()(self._update)

Denials never reach the responder: 401 when there is no verified caller,
400 when the caller acts in no business, 403 with ``{error, code,
required, granted, reason}`` when the decision policy (any/all) is not met
and 403 with ``{error, code, required, current}`` when a role gate is not.
"""

import functools
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import falcon
import falcon.asgi

from bizrbac.application.ports import Authorizer
from bizrbac.domain.entities import Role
from bizrbac.domain.exceptions import AuthenticationRequired, ResolutionError
from bizrbac.domain.value_objects import AuthorizationContext, GateMode

logger = logging.getLogger(__name__)

ResourceIdExtractor = Callable[[falcon.asgi.Request, Mapping[str, Any]], str | None]
MetadataExtractor = Callable[[falcon.asgi.Request], Mapping[str, Any]]
Responder = Callable[..., Awaitable[None]]

AUTH_REQUIRED_BODY = {"error": "Authentication required", "code": "AUTH_REQUIRED"}
NO_BUSINESS_CONTEXT_BODY = {
    "error": "Business association required",
    "code": "NO_BUSINESS_CONTEXT",
}
RBAC_ERROR_BODY = {"error": "Permission check failed", "code": "RBAC_ERROR"}

OWNER_ROLES = ("OWNER",)
MANAGER_OR_ABOVE_ROLES = ("OWNER", "MANAGER")


@dataclass
class GateOutcome:
    """Result of a gate check, ready to be written to a response."""

    allowed: bool
    status: str
    body: dict[str, Any] | None = None
    granted: list[str] = field(default_factory=list)
    context: AuthorizationContext | None = None
    role: Role | None = None


def path_param(name: str = "id") -> ResourceIdExtractor:
    """Resource id extractor reading a URI template field."""

    def extract(req: falcon.asgi.Request, params: Mapping[str, Any]) -> str | None:
        value = params.get(name)
        return str(value) if value is not None else None

    return extract


def request_metadata(req: falcon.asgi.Request) -> dict[str, Any]:
    """Source IP and user agent for the audit trail."""
    forwarded = req.get_header("X-Forwarded-For")
    ip = (
        (forwarded.split(",")[0].strip() if forwarded else None)
        or req.get_header("X-Real-IP")
        or req.remote_addr
        or "unknown"
    )
    return {"ip_address": ip, "user_agent": req.user_agent or "unknown"}


def _business_context_denial(identity) -> GateOutcome | None:
    if identity is None:
        raise AuthenticationRequired("Authentication required")
    if not identity.tenant_id:
        return GateOutcome(
            allowed=False, status=falcon.HTTP_400, body=dict(NO_BUSINESS_CONTEXT_BODY)
        )
    return None


class AccessGate:
    """Builds the authorization context and applies permission or role policy."""

    def __init__(self, authorizer: Authorizer, timeout: float | None = None) -> None:
        self._authorizer = authorizer
        self._timeout = timeout

    async def check(
        self,
        identity,
        required: list[str],
        mode: GateMode = GateMode.ANY,
        resource_id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> GateOutcome:
        """Authorize identity for required permissions (framework independent).

        Raises AuthenticationRequired when there is no verified caller.
        """
        denial = _business_context_denial(identity)
        if denial is not None:
            return denial

        required = list(dict.fromkeys(required))
        context = AuthorizationContext(
            user_id=identity.user_id,
            tenant_id=identity.tenant_id,
            resource_id=resource_id,
            metadata=metadata or {},
        )
        decisions = await self._authorizer.authorize_all(required, context, self._timeout)
        granted = [p for p in required if decisions[p].granted]

        if mode is GateMode.ALL:
            allowed = len(granted) == len(required)
        else:
            allowed = bool(granted)

        if not allowed:
            denied = next(p for p in required if not decisions[p].granted)
            return GateOutcome(
                allowed=False,
                status=falcon.HTTP_403,
                body={
                    "error": "Insufficient permissions",
                    "code": "PERMISSION_DENIED",
                    "required": required,
                    "granted": granted,
                    "reason": decisions[denied].reason or "Permission denied",
                },
                granted=granted,
                context=context,
            )
        return GateOutcome(allowed=True, status=falcon.HTTP_200, granted=granted, context=context)

    async def check_role(self, identity, roles: Iterable[str]) -> GateOutcome:
        """Allow only callers whose effective role is one of roles.

        Raises AuthenticationRequired when there is no verified caller.
        """
        denial = _business_context_denial(identity)
        if denial is not None:
            return denial

        allowed_roles = list(dict.fromkeys(roles))
        try:
            role = await self._authorizer.effective_role(
                identity.user_id, identity.tenant_id, self._timeout
            )
        except ResolutionError:
            logger.exception("Role check error: user=%s", identity.user_id)
            return GateOutcome(allowed=False, status=falcon.HTTP_500, body=dict(RBAC_ERROR_BODY))

        if role is None or role.name not in allowed_roles:
            return GateOutcome(
                allowed=False,
                status=falcon.HTTP_403,
                body={
                    "error": "Insufficient role permissions",
                    "code": "ROLE_DENIED",
                    "required": allowed_roles,
                    "current": role.name if role else None,
                },
                role=role,
            )
        return GateOutcome(allowed=True, status=falcon.HTTP_200, role=role)

    async def check_business_context(self, identity) -> GateOutcome:
        """Allow any verified caller acting in a business.

        Raises AuthenticationRequired when there is no verified caller.
        """
        denial = _business_context_denial(identity)
        return denial or GateOutcome(allowed=True, status=falcon.HTTP_200)

    def protect(
        self,
        permissions: str | Iterable[str],
        mode: GateMode = GateMode.ANY,
        resource_id: ResourceIdExtractor | None = None,
        metadata: MetadataExtractor | None = None,
    ) -> Callable[[Responder], Responder]:
        """Decorator for ``async (req, resp, **params)`` responders."""
        required = [permissions] if isinstance(permissions, str) else list(permissions)
        if not required:
            raise ValueError("protect() needs at least one permission")

        async def evaluate(req: falcon.asgi.Request, params: Mapping[str, Any]) -> GateOutcome:
            meta = request_metadata(req)
            if metadata:
                meta.update(metadata(req))
            return await self.check(
                getattr(req.context, "user", None),
                required,
                mode,
                resource_id(req, params) if resource_id else None,
                meta,
            )

        return _guard(evaluate)

    def require_role(self, roles: str | Iterable[str]) -> Callable[[Responder], Responder]:
        """Decorator admitting only callers whose role name is in roles."""
        allowed = [roles] if isinstance(roles, str) else list(roles)
        if not allowed:
            raise ValueError("require_role() needs at least one role")

        async def evaluate(req: falcon.asgi.Request, params: Mapping[str, Any]) -> GateOutcome:
            return await self.check_role(getattr(req.context, "user", None), allowed)

        return _guard(evaluate)

    def owner_only(self) -> Callable[[Responder], Responder]:
        return self.require_role(OWNER_ROLES)

    def manager_or_above(self) -> Callable[[Responder], Responder]:
        return self.require_role(MANAGER_OR_ABOVE_ROLES)

    def require_business_context(self) -> Callable[[Responder], Responder]:
        """Decorator admitting any verified caller that acts in a business."""

        async def evaluate(req: falcon.asgi.Request, params: Mapping[str, Any]) -> GateOutcome:
            return await self.check_business_context(getattr(req.context, "user", None))

        return _guard(evaluate)


def _guard(
    evaluate: Callable[[falcon.asgi.Request, Mapping[str, Any]], Awaitable[GateOutcome]],
) -> Callable[[Responder], Responder]:
    """Run evaluate before the responder; write the rejection when it denies."""

    def decorator(responder: Responder) -> Responder:
        @functools.wraps(responder)
        async def wrapper(
            req: falcon.asgi.Request, resp: falcon.asgi.Response, *args, **params
        ) -> None:
            try:
                outcome = await evaluate(req, params)
            except AuthenticationRequired:
                resp.status = falcon.HTTP_401
                resp.media = dict(AUTH_REQUIRED_BODY)
                return
            if not outcome.allowed:
                resp.status = outcome.status
                resp.media = outcome.body
                return
            if outcome.context is not None:
                req.context.permission_context = outcome.context
                req.context.granted_permissions = outcome.granted
            if outcome.role is not None:
                req.context.role = outcome.role
            await responder(req, resp, *args, **params)

        return wrapper

    return decorator
