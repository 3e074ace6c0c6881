"""Domain value objects."""

from bizrbac.domain.value_objects.audit_result import AuditResult
from bizrbac.domain.value_objects.authorization_context import AuthorizationContext
from bizrbac.domain.value_objects.conditions import (
    Condition,
    ResourceOwnership,
    TimeRestriction,
    dump_conditions,
    parse_conditions,
)
from bizrbac.domain.value_objects.decision import Decision
from bizrbac.domain.value_objects.gate_mode import GateMode
from bizrbac.domain.value_objects.legacy_role import LegacyRole
from bizrbac.domain.value_objects.permission_patterns import PermissionPatterns

__all__ = [
    "AuditResult",
    "AuthorizationContext",
    "Condition",
    "Decision",
    "GateMode",
    "LegacyRole",
    "PermissionPatterns",
    "ResourceOwnership",
    "TimeRestriction",
    "dump_conditions",
    "parse_conditions",
]
