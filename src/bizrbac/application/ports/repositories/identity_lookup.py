"""Identity lookup port - user records as the engine sees them."""

from typing import Protocol
from uuid import UUID

from bizrbac.domain.entities import UserSnapshot


class IdentityLookup(Protocol):
    """Port for user persistence."""

    async def get_user(self, user_id: str) -> UserSnapshot | None: ...

    async def set_custom_permission(
        self, user_id: str, permission: str, granted: bool
    ) -> None: ...

    async def set_role(self, user_id: str, role_id: UUID) -> None: ...
