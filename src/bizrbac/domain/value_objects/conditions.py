"""Conditional grant variants and their stored JSON format.

Stored shape (``role_permission.conditions``)::

    {"resourceOwnership": true, "resourceType": "order",
     "timeRestrictions": {"allowedHours": [9, 17], "allowedDays": [1, 2, 3]},
     "businessScope": "own"}

Conditions are parsed once when bindings are loaded; unknown keys and
malformed values raise InvalidCondition instead of failing at evaluation.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bizrbac.domain.exceptions import InvalidCondition

_KNOWN_KEYS = frozenset(
    {"resourceOwnership", "resourceType", "timeRestrictions", "businessScope"}
)
_TIME_KEYS = frozenset({"allowedHours", "allowedDays"})


@dataclass(frozen=True)
class ResourceOwnership:
    """Caller must own (or share a tenant with) the target resource."""

    resource_type: str

    def describe(self) -> str:
        return f"resource ownership ({self.resource_type})"


@dataclass(frozen=True)
class TimeRestriction:
    """Grant only within an hour window and/or on given weekdays (0=Sunday)."""

    allowed_hours: tuple[int, int] | None = None
    allowed_days: frozenset[int] | None = None

    def describe(self) -> str:
        parts = []
        if self.allowed_hours is not None:
            start, end = self.allowed_hours
            parts.append(f"hours {start}:00 - {end}:00")
        if self.allowed_days is not None:
            days = ",".join(str(d) for d in sorted(self.allowed_days))
            parts.append(f"days {days}")
        return "time restriction (" + "; ".join(parts) + ")" if parts else "time restriction"


Condition = ResourceOwnership | TimeRestriction


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_hours(raw: Any) -> tuple[int, int]:
    if isinstance(raw, Mapping):
        if set(raw) != {"start", "end"}:
            raise InvalidCondition(f"allowedHours needs start and end, got {dict(raw)!r}")
        start, end = raw["start"], raw["end"]
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        start, end = raw
    else:
        raise InvalidCondition(f"allowedHours must be [start, end], got {raw!r}")
    if not (_is_int(start) and _is_int(end) and 0 <= start <= end <= 23):
        raise InvalidCondition(f"allowedHours out of range: {raw!r}")
    return (start, end)


def _parse_days(raw: Any) -> frozenset[int]:
    if not isinstance(raw, (list, tuple, set, frozenset)):
        raise InvalidCondition(f"allowedDays must be a list of weekdays, got {raw!r}")
    if not all(_is_int(d) and 0 <= d <= 6 for d in raw):
        raise InvalidCondition(f"allowedDays must contain 0..6 (0=Sunday), got {raw!r}")
    return frozenset(raw)


def _parse_time(raw: Any) -> TimeRestriction:
    if not isinstance(raw, Mapping):
        raise InvalidCondition(f"timeRestrictions must be an object, got {raw!r}")
    unknown = set(raw) - _TIME_KEYS
    if unknown:
        raise InvalidCondition(f"Unknown timeRestrictions keys: {sorted(unknown)}")
    hours = raw.get("allowedHours")
    days = raw.get("allowedDays")
    return TimeRestriction(
        allowed_hours=_parse_hours(hours) if hours is not None else None,
        allowed_days=_parse_days(days) if days is not None else None,
    )


def parse_conditions(raw: str | Mapping[str, Any] | None) -> tuple[Condition, ...]:
    """Parse stored condition data into ordered variants (ownership first)."""
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidCondition(f"Conditions are not valid JSON: {e}") from e
        if raw is None:
            return ()
    if not isinstance(raw, Mapping):
        raise InvalidCondition(f"Conditions must be an object, got {raw!r}")

    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise InvalidCondition(f"Unknown condition keys: {sorted(unknown)}")

    scope = raw.get("businessScope")
    if scope is not None and scope != "own":
        raise InvalidCondition(f"Unsupported businessScope: {scope!r}")

    conditions: list[Condition] = []
    ownership = raw.get("resourceOwnership")
    if ownership is not None and not isinstance(ownership, bool):
        raise InvalidCondition("resourceOwnership must be a boolean")
    if ownership:
        resource_type = raw.get("resourceType")
        if not isinstance(resource_type, str) or not resource_type:
            raise InvalidCondition("resourceOwnership requires resourceType")
        conditions.append(ResourceOwnership(resource_type=resource_type))
    elif "resourceType" in raw:
        raise InvalidCondition("resourceType given without resourceOwnership")

    if raw.get("timeRestrictions") is not None:
        conditions.append(_parse_time(raw["timeRestrictions"]))
    return tuple(conditions)


def dump_conditions(conditions: tuple[Condition, ...]) -> dict[str, Any] | None:
    """Inverse of parse_conditions, for persistence."""
    if not conditions:
        return None
    out: dict[str, Any] = {}
    for cond in conditions:
        if isinstance(cond, ResourceOwnership):
            out["resourceOwnership"] = True
            out["resourceType"] = cond.resource_type
        else:
            time: dict[str, Any] = {}
            if cond.allowed_hours is not None:
                time["allowedHours"] = list(cond.allowed_hours)
            if cond.allowed_days is not None:
                time["allowedDays"] = sorted(cond.allowed_days)
            out["timeRestrictions"] = time
    return out
