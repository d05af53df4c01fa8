from datetime import datetime, timedelta, timezone
import hashlib

import pytest
from bson.objectid import ObjectId
from jose import jwt

from bootcamp_directory.models.user import User
from bootcamp_directory.services.auth import (
    decode_session_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    issue_session_token,
    verify_password,
)
from bootcamp_directory.utils.config import Settings
from bootcamp_directory.utils.errors import AuthenticationError


def make_user(**overrides) -> User:
    fields = {"id": ObjectId(), "name": "Ann", "email": "ann@x.com", "role": "publisher"}
    fields.update(overrides)
    return User(**fields)


def test_password_hash_and_verify():
    pw = "S3cure!"
    hashed = hash_password(pw)
    assert hashed != pw
    assert verify_password(pw, hashed)
    assert not verify_password("wrong", hashed)


def test_password_hash_is_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_reset_token_only_hash_is_derived():
    plain, hashed = generate_reset_token(20)
    assert len(plain) == 40
    assert hashed == hashlib.sha256(plain.encode()).hexdigest()
    assert hashed != plain
    assert hash_reset_token(plain) == hashed


def test_reset_tokens_are_random():
    assert generate_reset_token()[0] != generate_reset_token()[0]


def test_session_token_claims(settings):
    user = make_user(token_version=3)
    result = issue_session_token(user, settings)

    decoded = jwt.decode(result.token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    assert decoded["sub"] == str(user.id)
    assert decoded["role"] == "publisher"
    assert decoded["tv"] == 3
    assert decoded["exp"] - decoded["iat"] == settings.jwt_expire_days * 24 * 3600
    assert result.body() == {"success": True, "token": result.token}


def test_cookie_options_outside_production(settings):
    cookie = issue_session_token(make_user(), settings).cookie
    expected = datetime.now(timezone.utc) + timedelta(days=settings.jwt_cookie_expire_days)

    assert cookie.httponly is True
    assert cookie.secure is False
    assert abs((cookie.expires - expected).total_seconds()) < 5


def test_cookie_is_secure_in_production():
    settings = Settings(jwt_secret_key="k", environment="production", _env_file=None)
    assert issue_session_token(make_user(), settings).cookie.secure is True


def test_decode_rejects_foreign_signature(settings):
    other = Settings(jwt_secret_key="someone-else", _env_file=None)
    token = issue_session_token(make_user(), other).token
    with pytest.raises(AuthenticationError):
        decode_session_token(token, settings)


def test_decode_rejects_garbage(settings):
    with pytest.raises(AuthenticationError) as exc:
        decode_session_token("not-a-jwt", settings)
    assert exc.value.status_code == 401
