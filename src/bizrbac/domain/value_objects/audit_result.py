"""Outcome recorded for an authorization decision."""

from enum import StrEnum


class AuditResult(StrEnum):
    """Result column of the permission audit log."""

    GRANTED = "GRANTED"
    DENIED = "DENIED"
    ERROR = "ERROR"
