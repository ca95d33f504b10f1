"""
Tests for bearer token handling.
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from mixtape.auth import create_access_token, decode_access_token, get_current_user_id


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip_yields_user_id():
    token = create_access_token("user-42")

    assert decode_access_token(token)["sub"] == "user-42"
    assert get_current_user_id(_bearer(token)) == "user-42"


def test_expired_token_is_rejected():
    token = create_access_token("user-42", expires_delta=timedelta(minutes=-5))

    assert decode_access_token(token) is None
    with pytest.raises(HTTPException) as exc:
        get_current_user_id(_bearer(token))
    assert exc.value.status_code == 401


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "mallory"}, "not-the-secret", algorithm="HS256")
    assert decode_access_token(token) is None


def test_token_without_subject_is_rejected(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "k")
    token = jwt.encode({"foo": "bar"}, "k", algorithm="HS256")
    assert decode_access_token(token) is None


def test_missing_credentials_is_401():
    with pytest.raises(HTTPException) as exc:
        get_current_user_id(None)
    assert exc.value.status_code == 401
    assert exc.value.headers == {"WWW-Authenticate": "Bearer"}


def test_missing_secret_key_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        create_access_token("user-42")
