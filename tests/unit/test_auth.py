from datetime import timedelta

import jwt
import pytest
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.core.config import get_settings
from src.domain.services.auth_service import hash_password, verify_password


def test_create_and_decode_token_roundtrip() -> None:
    token = create_access_token("user-123", role="ADMIN", email="user@example.com")

    payload = decode_access_token(token)

    assert payload["sub"] == "user-123"
    assert payload["role"] == "ADMIN"
    assert payload["email"] == "user@example.com"
    assert payload["exp"] > payload["iat"]


def test_create_token_rejects_unknown_role() -> None:
    with pytest.raises(TokenError):
        create_access_token("user-123", role="student")


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-123", role="RECRUITER", expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "user-123", "role": "ADMIN", "exp": 4102444800},
        "some-other-secret-that-is-long-enough-for-hs256",
        algorithm="HS256",
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_with_unsupported_role_claim_is_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"sub": "user-123", "role": "OWNER", "exp": 4102444800},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_role_staff_membership() -> None:
    assert Role.ADMIN.is_staff
    assert Role.SUPERADMIN.is_staff
    assert not Role.RECRUITER.is_staff


def test_password_hash_verifies_only_the_original_password() -> None:
    hashed = hash_password("Sup3rSecret!")

    assert hashed != "Sup3rSecret!"
    assert hashed.startswith("$2")
    assert verify_password("Sup3rSecret!", hashed)
    assert not verify_password("wrong-password", hashed)
