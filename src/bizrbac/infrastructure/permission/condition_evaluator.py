"""Evaluation of conditional role-permission grants."""

from bizrbac.application.ports import Clock, OwnershipLookup
from bizrbac.domain.entities import UserSnapshot
from bizrbac.domain.exceptions import ConditionFailed
from bizrbac.domain.value_objects import (
    AuthorizationContext,
    Condition,
    Decision,
    ResourceOwnership,
    TimeRestriction,
)

OWNERSHIP_REQUIRED = "resource ownership required"
DAY_RESTRICTED = "access restricted by day of week"


def _ordered(conditions: tuple[Condition, ...]) -> list[Condition]:
    # Ownership before time, regardless of storage order.
    return sorted(conditions, key=lambda c: 0 if isinstance(c, ResourceOwnership) else 1)


class ConditionEvaluator:
    """Checks ownership and time-window conditions, stopping at the first failure."""

    def __init__(self, ownership: OwnershipLookup, clock: Clock) -> None:
        self._ownership = ownership
        self._clock = clock

    async def require(
        self,
        conditions: tuple[Condition, ...],
        context: AuthorizationContext,
        user: UserSnapshot,
    ) -> str:
        """Raise ConditionFailed at the first failing condition.

        Returns a description of the conditions that held.
        """
        ordered = _ordered(conditions)
        for condition in ordered:
            if isinstance(condition, ResourceOwnership):
                await self._check_ownership(condition, context, user)
            else:
                self._check_time(condition)
        return "; ".join(c.describe() for c in ordered)

    async def evaluate(
        self,
        conditions: tuple[Condition, ...],
        context: AuthorizationContext,
        user: UserSnapshot,
    ) -> Decision:
        """Return a granting Decision, or a denial carrying the failed check's reason."""
        try:
            satisfied = await self.require(conditions, context, user)
        except ConditionFailed as e:
            return Decision.deny(e.reason)
        return Decision.grant(satisfied, conditions)

    async def _check_ownership(
        self,
        condition: ResourceOwnership,
        context: AuthorizationContext,
        user: UserSnapshot,
    ) -> None:
        if not context.resource_id:
            raise ConditionFailed("ownership", OWNERSHIP_REQUIRED)
        owned = await self._ownership.is_owner(
            condition.resource_type, context.resource_id, user.id, user.tenant_id
        )
        if not owned:
            raise ConditionFailed("ownership", OWNERSHIP_REQUIRED)

    def _check_time(self, condition: TimeRestriction) -> None:
        now = self._clock.now()
        if condition.allowed_hours is not None:
            start, end = condition.allowed_hours
            if not start <= now.hour <= end:
                raise ConditionFailed(
                    "time", f"access restricted to hours {start}:00 - {end}:00"
                )
        if condition.allowed_days is not None:
            # isoweekday: Monday=1 .. Sunday=7; stored days use 0=Sunday.
            if now.isoweekday() % 7 not in condition.allowed_days:
                raise ConditionFailed("time", DAY_RESTRICTED)
