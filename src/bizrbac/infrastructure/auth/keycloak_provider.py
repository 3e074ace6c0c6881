"""Keycloak OIDC provider for bearer token introspection."""

import logging
from dataclasses import dataclass
from typing import Any

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OIDCUser:
    """Verified caller: subject plus the business (tenant) it acts in."""

    user_id: str
    tenant_id: str | None
    email: str | None
    username: str | None


def _claim(token_info: dict[str, Any], path: str) -> str | None:
    """Read a dotted claim path; user attributes arrive as one-element lists."""
    value: Any = token_info
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    return str(value) if value not in (None, "") else None


class KeycloakProvider:
    """Introspects tokens with Keycloak and maps claims to an OIDCUser.

    ``tenant_claim`` may be nested, e.g. ``attributes.business_id``.
    """

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        tenant_claim: str = "business_id",
    ) -> None:
        self._client = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._tenant_claim = tenant_claim

    def decode_token(self, token: str) -> OIDCUser | None:
        """None for inactive, subject-less or unverifiable tokens."""
        try:
            token_info = self._client.introspect(token)
        except KeycloakError:
            logger.warning("Token introspection failed", exc_info=True)
            return None
        subject = _claim(token_info, "sub")
        if not token_info.get("active") or subject is None:
            return None
        return OIDCUser(
            user_id=subject,
            tenant_id=_claim(token_info, self._tenant_claim),
            email=_claim(token_info, "email"),
            username=_claim(token_info, "preferred_username"),
        )
