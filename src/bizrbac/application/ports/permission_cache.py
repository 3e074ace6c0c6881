"""Permission cache port - invalidation seen by administrative use cases."""

from typing import Protocol


class PermissionCache(Protocol):
    """Invalidation contract. Must complete before the mutation returns."""

    def invalidate(self, user_id: str) -> None: ...

    def invalidate_all(self) -> None: ...
