"""Ownership lookup port."""

from typing import Protocol


class OwnershipLookup(Protocol):
    """Decides whether a user owns a resource of a given type."""

    async def is_owner(
        self, resource_type: str, resource_id: str, user_id: str, tenant_id: str
    ) -> bool: ...

    def supports(self, resource_type: str) -> bool: ...
