"""Business record ports used by ownership checks."""

from typing import Protocol

from bizrbac.domain.entities import ResourceOwner


class OrderRepository(Protocol):
    """Port for order ownership data."""

    async def get_owner(self, order_id: str) -> ResourceOwner | None: ...


class CustomerRepository(Protocol):
    """Port for customer ownership data."""

    async def get_owner(self, customer_id: str) -> ResourceOwner | None: ...
