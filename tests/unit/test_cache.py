"""Unit tests for UserPermissionCache."""

from datetime import timedelta

from bizrbac.domain.entities import UserSnapshot
from bizrbac.infrastructure.permission import UserPermissionCache

from tests.conftest import FakeClock


def _user(user_id: str = "u1", **overrides) -> UserSnapshot:
    return UserSnapshot(id=user_id, tenant_id="B1", custom_permissions=overrides)


def test_miss_then_hit() -> None:
    cache = UserPermissionCache(FakeClock())
    assert cache.get("u1") is None
    user = _user()
    assert cache.put("u1", user)
    assert cache.get("u1") is user
    assert len(cache) == 1


def test_entry_served_until_ttl() -> None:
    clock = FakeClock()
    cache = UserPermissionCache(clock, ttl=timedelta(minutes=5))
    cache.put("u1", _user())
    clock.advance(timedelta(minutes=4, seconds=59))
    assert cache.get("u1") is not None


def test_expired_entry_is_a_miss_and_evicted() -> None:
    clock = FakeClock()
    cache = UserPermissionCache(clock)
    cache.put("u1", _user())
    clock.advance(cache.ttl)
    assert cache.get("u1") is None
    assert len(cache) == 0


def test_invalidate_removes_entry() -> None:
    cache = UserPermissionCache(FakeClock())
    cache.put("u1", _user())
    cache.put("u2", _user("u2"))
    cache.invalidate("u1")
    assert cache.get("u1") is None
    assert cache.get("u2") is not None


def test_invalidate_all() -> None:
    cache = UserPermissionCache(FakeClock())
    cache.put("u1", _user())
    cache.put("u2", _user("u2"))
    cache.invalidate_all()
    assert len(cache) == 0


def test_put_after_invalidate_with_old_token_is_dropped() -> None:
    """A fetch that started before a revoke must not put the old snapshot back."""
    cache = UserPermissionCache(FakeClock())
    token = cache.begin_fetch("u1")
    cache.invalidate("u1")
    assert cache.put("u1", _user(**{"orders:update": True}), token) is False
    assert cache.get("u1") is None


def test_put_after_invalidate_all_with_old_token_is_dropped() -> None:
    cache = UserPermissionCache(FakeClock())
    token = cache.begin_fetch("u1")
    cache.invalidate_all()
    assert cache.put("u1", _user(), token) is False


def test_fresh_token_is_accepted() -> None:
    cache = UserPermissionCache(FakeClock())
    cache.invalidate("u1")
    token = cache.begin_fetch("u1")
    assert cache.put("u1", _user(), token)


def test_other_user_invalidation_does_not_drop_put() -> None:
    cache = UserPermissionCache(FakeClock())
    token = cache.begin_fetch("u1")
    cache.invalidate("u2")
    assert cache.put("u1", _user(), token)


def test_generations_forgotten_after_last_fetch_ends() -> None:
    cache = UserPermissionCache(FakeClock())
    first = cache.begin_fetch("u1")
    second = cache.begin_fetch("u1")
    cache.invalidate("u1")
    cache.end_fetch("u1")
    assert cache.tracked_generations == 1
    assert cache.put("u1", _user(), second) is False
    cache.end_fetch("u1")
    assert cache.tracked_generations == 0
    assert first.generation == 0


def test_invalidate_without_fetch_retains_nothing() -> None:
    cache = UserPermissionCache(FakeClock())
    for n in range(1000):
        cache.invalidate(f"user-{n}")
    assert cache.tracked_generations == 0
    token = cache.begin_fetch("user-1")
    assert cache.put("user-1", _user("user-1"), token)
