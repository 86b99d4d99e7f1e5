"""Unit tests for JWT tokens and password hashing."""

from datetime import timedelta

import pytest
from pydantic import SecretStr

from msls.core.config import JWTSettings
from msls.domain.enums import TokenType
from msls.infrastructure.security.jwt import TokenService
from msls.infrastructure.security.password import get_password_hash, verify_password


def _tokens(**overrides) -> TokenService:
    values = {"secret": SecretStr("unit-test-secret"), "issuer": "msls-test"}
    values.update(overrides)
    return TokenService(JWTSettings(**values))


def test_access_token_round_trip_claims() -> None:
    tokens = _tokens()
    token = tokens.create_access_token({"sub": "u1", "tenant_id": "t1", "roles": ["admin"]})
    payload = tokens.verify(token)
    assert payload["sub"] == "u1"
    assert payload["tenant_id"] == "t1"
    assert payload["type"] == "access"
    assert payload["iss"] == "msls-test"
    assert payload["exp"] - payload["iat"] == 15 * 60


def test_expired_token_is_rejected() -> None:
    tokens = _tokens(access_expires_in=timedelta(seconds=-10))
    token = tokens.create_access_token({"sub": "u1", "tenant_id": "t1"})
    with pytest.raises(ValueError, match="Invalid token"):
        tokens.verify(token)


def test_wrong_secret_or_issuer_is_rejected() -> None:
    token = _tokens().create_access_token({"sub": "u1", "tenant_id": "t1"})
    with pytest.raises(ValueError):
        _tokens(secret=SecretStr("other")).verify(token)
    with pytest.raises(ValueError):
        _tokens(issuer="someone-else").verify(token)


def test_missing_tenant_claim_is_rejected() -> None:
    tokens = _tokens()
    token = tokens.create_access_token({"sub": "u1"})
    with pytest.raises(ValueError, match="tenant_id"):
        tokens.verify(token)


def test_token_type_is_enforced() -> None:
    tokens = _tokens()
    refresh = tokens.create_refresh_token({"sub": "u1", "tenant_id": "t1"})
    assert tokens.verify(refresh, TokenType.REFRESH)["type"] == "refresh"
    with pytest.raises(ValueError, match="Expected access token"):
        tokens.verify(refresh)


def test_password_hash_and_verify() -> None:
    hashed = get_password_hash("hunter2-hunter2")
    assert hashed.startswith("$2")
    assert verify_password("hunter2-hunter2", hashed)
    assert not verify_password("hunter3", hashed)


def test_long_passwords_are_not_truncated() -> None:
    base = "x" * 80
    hashed = get_password_hash(base + "a")
    assert not verify_password(base + "b", hashed)


def test_verify_against_malformed_hash_is_false() -> None:
    assert verify_password("anything", "not-a-bcrypt-hash") is False
