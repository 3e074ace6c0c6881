"""Unit tests for condition parsing."""

import pytest

from bizrbac.domain.exceptions import InvalidCondition
from bizrbac.domain.value_objects import (
    ResourceOwnership,
    TimeRestriction,
    dump_conditions,
    parse_conditions,
)


@pytest.mark.parametrize("raw", [None, "", "null", {}])
def test_empty_conditions(raw) -> None:
    assert parse_conditions(raw) == ()


def test_ownership_condition() -> None:
    parsed = parse_conditions({"resourceOwnership": True, "resourceType": "order"})
    assert parsed == (ResourceOwnership(resource_type="order"),)


def test_ownership_false_is_unconditional() -> None:
    assert parse_conditions({"resourceOwnership": False}) == ()


def test_json_string_is_parsed() -> None:
    parsed = parse_conditions('{"timeRestrictions": {"allowedHours": [9, 17]}}')
    assert parsed == (TimeRestriction(allowed_hours=(9, 17)),)


def test_hours_as_start_end_object() -> None:
    parsed = parse_conditions({"timeRestrictions": {"allowedHours": {"start": 8, "end": 20}}})
    assert parsed[0].allowed_hours == (8, 20)


def test_ownership_is_ordered_before_time() -> None:
    parsed = parse_conditions(
        {
            "timeRestrictions": {"allowedDays": [1, 2, 3, 4, 5]},
            "resourceType": "customer",
            "resourceOwnership": True,
        }
    )
    assert isinstance(parsed[0], ResourceOwnership)
    assert parsed[1] == TimeRestriction(allowed_days=frozenset({1, 2, 3, 4, 5}))


def test_business_scope_own_is_accepted() -> None:
    assert parse_conditions({"businessScope": "own"}) == ()


@pytest.mark.parametrize(
    "raw",
    [
        {"ownedBy": "me"},
        {"businessScope": "all"},
        {"resourceOwnership": "yes", "resourceType": "order"},
        {"resourceOwnership": True},
        {"resourceType": "order"},
        {"timeRestrictions": {"allowedHours": [18, 9]}},
        {"timeRestrictions": {"allowedHours": [0, 24]}},
        {"timeRestrictions": {"allowedHours": [9]}},
        {"timeRestrictions": {"allowedHours": {"start": 9}}},
        {"timeRestrictions": {"allowedDays": [7]}},
        {"timeRestrictions": {"allowedDays": "weekdays"}},
        {"timeRestrictions": {"weekends": False}},
        {"timeRestrictions": [9, 17]},
        "[1, 2]",
        "{not json",
    ],
)
def test_malformed_conditions_rejected(raw) -> None:
    with pytest.raises(InvalidCondition):
        parse_conditions(raw)


def test_booleans_are_not_hours() -> None:
    with pytest.raises(InvalidCondition):
        parse_conditions({"timeRestrictions": {"allowedHours": [True, 17]}})


def test_dump_matches_stored_shape() -> None:
    stored = {
        "resourceOwnership": True,
        "resourceType": "order",
        "timeRestrictions": {"allowedHours": [9, 17], "allowedDays": [1, 5]},
    }
    assert dump_conditions(parse_conditions(stored)) == stored


def test_dump_empty_is_none() -> None:
    assert dump_conditions(()) is None


def test_describe() -> None:
    assert ResourceOwnership("order").describe() == "resource ownership (order)"
    assert (
        TimeRestriction(allowed_hours=(9, 17), allowed_days=frozenset({5, 1})).describe()
        == "time restriction (hours 9:00 - 17:00; days 1,5)"
    )
