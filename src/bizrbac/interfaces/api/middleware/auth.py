"""Auth middleware - resolves the verified caller for AccessGate."""

import logging
from dataclasses import dataclass

import falcon.asgi

logger = logging.getLogger(__name__)


@dataclass
class RequestUser:
    """Caller identity stored on ``req.context.user``."""

    user_id: str
    tenant_id: str | None = None
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Sets req.context.user from a bearer token, or None.

    A token without a tenant claim still identifies the caller; AccessGate
    answers 400 NO_BUSINESS_CONTEXT for it on business-scoped routes.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        req.context.user = None
        scheme, _, token = (req.get_header("Authorization") or "").partition(" ")
        if scheme.lower() != "bearer" or not token or self._keycloak is None:
            return
        verified = self._keycloak.decode_token(token)
        if verified is None:
            return
        if not verified.tenant_id:
            logger.debug("Token for %s carries no tenant claim", verified.user_id)
        req.context.user = RequestUser(
            user_id=verified.user_id,
            tenant_id=verified.tenant_id,
            email=verified.email,
            username=verified.username,
        )
