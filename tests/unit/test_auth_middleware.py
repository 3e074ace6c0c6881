"""Auth middleware and Keycloak provider tests."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from keycloak.exceptions import KeycloakError

from bizrbac.infrastructure.auth.keycloak_provider import KeycloakProvider, OIDCUser
from bizrbac.interfaces.api.middleware.auth import AuthMiddleware


def _req(authorization: str | None = None):
    return SimpleNamespace(
        context=SimpleNamespace(),
        get_header=lambda name: authorization if name == "Authorization" else None,
    )


@pytest.fixture
def provider():
    with patch("bizrbac.infrastructure.auth.keycloak_provider.KeycloakOpenID") as openid:
        instance = openid.return_value
        yield KeycloakProvider("http://kc", "realm", "client", "secret"), instance


def test_decode_active_token(provider) -> None:
    keycloak, openid = provider
    openid.introspect.return_value = {
        "active": True,
        "sub": "u1",
        "business_id": "B1",
        "email": "u1@example.com",
        "preferred_username": "u1",
    }
    assert keycloak.decode_token("t") == OIDCUser("u1", "B1", "u1@example.com", "u1")


@pytest.mark.parametrize("info", [{"active": False, "sub": "u1"}, {"active": True}])
def test_decode_inactive_or_anonymous(provider, info) -> None:
    keycloak, openid = provider
    openid.introspect.return_value = info
    assert keycloak.decode_token("t") is None


def test_decode_keycloak_error(provider) -> None:
    keycloak, openid = provider
    openid.introspect.side_effect = KeycloakError("unreachable")
    assert keycloak.decode_token("t") is None


@pytest.mark.asyncio
async def test_middleware_sets_user_from_bearer() -> None:
    keycloak = MagicMock()
    keycloak.decode_token.return_value = OIDCUser("u1", "B1", None, "u1")
    req = _req("Bearer abc")
    await AuthMiddleware(keycloak).process_request(req, None)
    keycloak.decode_token.assert_called_once_with("abc")
    assert req.context.user.user_id == "u1"
    assert req.context.user.tenant_id == "B1"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "Basic abc", "Bearer "])
async def test_middleware_without_valid_bearer(header) -> None:
    keycloak = MagicMock()
    keycloak.decode_token.return_value = None
    req = _req(header)
    await AuthMiddleware(keycloak).process_request(req, None)
    assert req.context.user is None


@pytest.mark.asyncio
async def test_middleware_without_provider() -> None:
    req = _req("Bearer abc")
    await AuthMiddleware(None).process_request(req, None)
    assert req.context.user is None


def test_decode_nested_tenant_attribute() -> None:
    with patch("bizrbac.infrastructure.auth.keycloak_provider.KeycloakOpenID") as openid:
        openid.return_value.introspect.return_value = {
            "active": True,
            "sub": "u2",
            "attributes": {"business_id": ["B7"]},
        }
        keycloak = KeycloakProvider(
            "http://kc", "realm", "client", "secret", tenant_claim="attributes.business_id"
        )
        user = keycloak.decode_token("t")
    assert user.tenant_id == "B7"
    assert user.email is None


def test_decode_token_without_tenant(provider) -> None:
    keycloak, openid = provider
    openid.introspect.return_value = {"active": True, "sub": "u1"}
    assert keycloak.decode_token("t").tenant_id is None


@pytest.mark.asyncio
async def test_middleware_keeps_identity_without_tenant() -> None:
    keycloak = MagicMock()
    keycloak.decode_token.return_value = OIDCUser("u1", None, None, "u1")
    req = _req("bearer abc")
    await AuthMiddleware(keycloak).process_request(req, None)
    keycloak.decode_token.assert_called_once_with("abc")
    assert req.context.user.user_id == "u1"
    assert req.context.user.tenant_id is None
