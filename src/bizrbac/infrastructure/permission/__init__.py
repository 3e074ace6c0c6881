"""Authorization decision engine."""

from bizrbac.infrastructure.permission.audit_logger import AuditLogger
from bizrbac.infrastructure.permission.cache import UserPermissionCache
from bizrbac.infrastructure.permission.clock import SystemClock
from bizrbac.infrastructure.permission.condition_evaluator import ConditionEvaluator
from bizrbac.infrastructure.permission.ownership import (
    CustomerOwnershipChecker,
    OrderOwnershipChecker,
    OwnershipRegistry,
    UserOwnershipChecker,
)
from bizrbac.infrastructure.permission.permission_resolver import PermissionResolver

__all__ = [
    "AuditLogger",
    "ConditionEvaluator",
    "CustomerOwnershipChecker",
    "OrderOwnershipChecker",
    "OwnershipRegistry",
    "PermissionResolver",
    "SystemClock",
    "UserOwnershipChecker",
    "UserPermissionCache",
]
