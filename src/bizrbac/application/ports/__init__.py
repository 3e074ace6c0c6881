"""Application ports - interfaces for external adapters."""

from bizrbac.application.ports.authorizer import Authorizer
from bizrbac.application.ports.clock import Clock
from bizrbac.application.ports.ownership_lookup import OwnershipLookup
from bizrbac.application.ports.permission_cache import PermissionCache
from bizrbac.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Authorizer",
    "Clock",
    "OwnershipLookup",
    "PermissionCache",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
