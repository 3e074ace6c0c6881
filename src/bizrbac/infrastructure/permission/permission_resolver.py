"""Permission resolver - the authorize decision.

Resolution order for ``authorize(permission, context)``:

1. load the user snapshot (cache, then storage on miss);
2. deny inactive users;
3. deny when a supplied tenant differs from the user's tenant;
4. custom per-user override, authoritative in both directions;
5. effective role: ``role_id``, else the role named by the legacy label;
6. role binding, evaluating its conditions when present;
7. legacy label fallback when nothing above granted.

Exactly one audit entry is written per call, after the decision is final.
The timeout bounds the whole call: resolution may use all but
``AUDIT_SHARE`` of it and the audit write gets the rest, never less than
``AUDIT_SHARE``.
Storage failures and timeouts deny with a generic reason (result ERROR);
the detail only goes to the server log.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar
from uuid import uuid4

from bizrbac.application.ports import Clock
from bizrbac.domain.entities import AuditLogEntry, Role, RolePermission, UserSnapshot
from bizrbac.domain.exceptions import (
    BusinessContextMismatch,
    ConditionFailed,
    InvalidCondition,
    PermissionDenied,
    PermissionNotAssigned,
    ResolutionError,
    UserInactive,
)
from bizrbac.domain.value_objects import (
    AuthorizationContext,
    Decision,
    ResourceOwnership,
)
from bizrbac.infrastructure.permission.audit_logger import AuditLogger
from bizrbac.infrastructure.permission.cache import UserPermissionCache
from bizrbac.infrastructure.permission.condition_evaluator import ConditionEvaluator

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_NOT_FOUND = "user not found"
USER_INACTIVE = "user is inactive"
CONTEXT_MISMATCH = "business context mismatch"
CUSTOM_GRANTED = "custom permission granted"
CUSTOM_DENIED = "custom permission denied"
NO_ROLE = "no role assigned"
NOT_ASSIGNED = "permission not assigned to role"
NOT_GRANTED = "permission not granted by role"
CHECK_FAILED = "permission check failed"

AUDIT_SHARE = 0.2


class PermissionResolver:
    """Authorizer combining overrides, role bindings, conditions and legacy labels."""

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: UserPermissionCache,
        condition_evaluator: ConditionEvaluator,
        audit_logger: AuditLogger,
        clock: Clock,
        timeout: float | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._conditions = condition_evaluator
        self._audit = audit_logger
        self._clock = clock
        self._timeout = timeout

    @property
    def cache(self) -> UserPermissionCache:
        return self._cache

    async def verify_catalog(self, ownership=None) -> int:
        """Load every binding so malformed conditions fail at startup.

        Returns the number of bindings checked. Raises InvalidCondition.
        """
        async with self._uow_factory() as uow:
            bindings = await uow.catalog.list_role_permissions()
        if ownership is not None:
            for binding in bindings:
                for condition in binding.conditions:
                    if isinstance(condition, ResourceOwnership) and not ownership.supports(
                        condition.resource_type
                    ):
                        raise InvalidCondition(
                            f"Unknown ownership resource type {condition.resource_type!r} "
                            f"on {binding.role.name}/{binding.permission_name}"
                        )
        logger.info("Verified %d role-permission bindings", len(bindings))
        return len(bindings)

    async def authorize(
        self,
        permission: str,
        context: AuthorizationContext,
        timeout: float | None = None,
    ) -> Decision:
        """Decide whether context.user_id holds permission. Never raises on denial."""
        deadline = timeout if timeout is not None else self._timeout
        loop = asyncio.get_running_loop()
        started = loop.time()
        user: UserSnapshot | None = None
        try:
            decision, user = await _bounded(
                None if deadline is None else deadline * (1 - AUDIT_SHARE),
                self._resolve(permission, context),
            )
        except ResolutionError:
            logger.exception(
                "Permission check error: user=%s permission=%s",
                context.user_id,
                permission,
            )
            decision = Decision.error(CHECK_FAILED)

        audit_budget = None
        if deadline is not None:
            audit_budget = max(deadline - (loop.time() - started), deadline * AUDIT_SHARE)
        await self._audit.record(
            self._audit_entry(permission, context, decision, user), audit_budget
        )
        logger.debug(
            "authorize user=%s permission=%s granted=%s reason=%s",
            context.user_id,
            permission,
            decision.granted,
            decision.reason,
        )
        return decision

    async def authorize_all(
        self,
        permissions: list[str],
        context: AuthorizationContext,
        timeout: float | None = None,
    ) -> dict[str, Decision]:
        """Evaluate each permission independently; no short-circuit."""
        unique = list(dict.fromkeys(permissions))
        decisions = await asyncio.gather(
            *(self.authorize(p, context, timeout) for p in unique)
        )
        return dict(zip(unique, decisions))

    async def effective_role(
        self,
        user_id: str,
        tenant_id: str | None = None,
        timeout: float | None = None,
    ) -> Role | None:
        """Role the user currently acts under, for role gates. Not audited.

        None for unknown, inactive or other-tenant users and users without
        a role. Raises ResolutionError on storage failure or timeout.
        """
        deadline = timeout if timeout is not None else self._timeout
        return await _bounded(deadline, self._role_of(user_id, tenant_id))

    async def _role_of(self, user_id: str, tenant_id: str | None) -> Role | None:
        user = await self._load_user(user_id)
        if user is None:
            return None
        try:
            _check_standing(user, AuthorizationContext(user_id=user_id, tenant_id=tenant_id))
        except PermissionDenied:
            return None
        async with self._uow_factory() as uow:
            return await self._effective_role(uow.catalog, user)

    async def _resolve(
        self, permission: str, context: AuthorizationContext
    ) -> tuple[Decision, UserSnapshot | None]:
        user = await self._load_user(context.user_id)
        if user is None:
            return Decision.deny(USER_NOT_FOUND), None
        try:
            _check_standing(user, context)
        except PermissionDenied as e:
            return Decision.deny(str(e)), user

        override = user.override_for(permission)
        if override is not None:
            return Decision(granted=override, reason=CUSTOM_GRANTED if override else CUSTOM_DENIED), user

        try:
            return await self._check_role(user, permission, context), user
        except PermissionDenied as e:
            denial = e

        if user.legacy_role is not None and user.legacy_role.allows(permission):
            return Decision.grant(f"granted by legacy role fallback ({user.legacy_role})"), user

        logger.debug(
            "Role check denied user=%s permission=%s: %s", user.id, permission, denial
        )
        if isinstance(denial, ConditionFailed):
            return Decision.deny(denial.reason), user
        return Decision.deny(NOT_GRANTED), user

    async def _load_user(self, user_id: str) -> UserSnapshot | None:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached
        token = self._cache.begin_fetch(user_id)
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_user(user_id)
            if user is not None:
                self._cache.put(user_id, user, token)
        finally:
            self._cache.end_fetch(user_id)
        return user

    async def _effective_role(self, catalog, user: UserSnapshot) -> Role | None:
        if user.role_id is not None:
            return await catalog.get_role_by_id(user.role_id)
        if user.legacy_role is not None:
            return await catalog.get_role_by_name(str(user.legacy_role))
        return None

    async def _check_role(
        self, user: UserSnapshot, permission: str, context: AuthorizationContext
    ) -> Decision:
        """Grant through the role binding, or raise the PermissionDenied explaining why not."""
        async with self._uow_factory() as uow:
            role = await self._effective_role(uow.catalog, user)
            if role is None:
                raise PermissionNotAssigned(NO_ROLE)
            binding = await uow.catalog.get_role_permission(role.id, permission)

        if binding is None:
            raise PermissionNotAssigned(NOT_ASSIGNED)
        if not binding.is_conditional:
            return Decision.grant(_granted_via(binding))

        satisfied = await self._conditions.require(binding.conditions, context, user)
        return Decision.grant(f"{_granted_via(binding)} ({satisfied})", binding.conditions)

    def _audit_entry(
        self,
        permission: str,
        context: AuthorizationContext,
        decision: Decision,
        user: UserSnapshot | None,
    ) -> AuditLogEntry:
        tenant_id = context.tenant_id or (user.tenant_id if user else None)
        metadata = dict(context.metadata)
        return AuditLogEntry(
            id=uuid4(),
            user_id=context.user_id,
            permission=permission,
            resource=permission.split(":", 1)[0] or "unknown",
            resource_id=context.resource_id,
            result=decision.result,
            reason=decision.reason,
            tenant_id=tenant_id,
            metadata=metadata,
            ip_address=_str_or_none(metadata.get("ip_address")),
            user_agent=_str_or_none(metadata.get("user_agent")),
            created_at=self._clock.now(),
        )


def _granted_via(binding: RolePermission) -> str:
    return f"granted via role {binding.role.display_name}"


def _str_or_none(value: object) -> str | None:
    return None if value is None else str(value)


def _check_standing(user: UserSnapshot, context: AuthorizationContext) -> None:
    if not user.is_active:
        raise UserInactive(USER_INACTIVE)
    if context.tenant_id and context.tenant_id != user.tenant_id:
        raise BusinessContextMismatch(CONTEXT_MISMATCH)


async def _bounded(deadline: float | None, work: Awaitable[T]) -> T:
    """Await work under deadline; any failure becomes ResolutionError."""
    try:
        async with asyncio.timeout(deadline):
            return await work
    except TimeoutError as e:
        raise ResolutionError(f"Permission resolution timed out after {deadline}s") from e
    except Exception as e:
        raise ResolutionError(f"Permission resolution failed: {e!r}") from e
