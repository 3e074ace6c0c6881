"""Authorization decision value object."""

from dataclasses import dataclass

from bizrbac.domain.value_objects.audit_result import AuditResult
from bizrbac.domain.value_objects.conditions import Condition


@dataclass(frozen=True)
class Decision:
    """Granted/denied plus a human-readable reason."""

    granted: bool
    reason: str
    result: AuditResult | None = None
    conditions: tuple[Condition, ...] = ()

    def __post_init__(self) -> None:
        if self.result is None:
            object.__setattr__(
                self,
                "result",
                AuditResult.GRANTED if self.granted else AuditResult.DENIED,
            )

    @classmethod
    def grant(cls, reason: str, conditions: tuple[Condition, ...] = ()) -> "Decision":
        return cls(granted=True, reason=reason, conditions=conditions)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(granted=False, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "Decision":
        return cls(granted=False, reason=reason, result=AuditResult.ERROR)
