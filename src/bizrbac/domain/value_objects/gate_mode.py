"""AccessGate policy for combining multiple required permissions."""

from enum import StrEnum


class GateMode(StrEnum):
    """ANY - at least one permission granted; ALL - every one granted."""

    ANY = "any"
    ALL = "all"
