from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Response
from starlette.requests import Request

from chatapp.auth.cookies import SessionCookies
from chatapp.auth.passwords import hash_password, verify_password
from chatapp.auth.tokens import InvalidToken, TokenExpired, create_token, decode_token

from conftest import JWT_SECRET

WEEK = timedelta(days=7)


def _request_with_cookie(name: str, value: str) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(b"cookie", f"{name}={value}".encode("latin-1"))],
    }
    return Request(scope)


def test_hash_and_verify_password():
    h = hash_password("s3cret-pass", cost=1)
    assert h != "s3cret-pass"
    assert verify_password(h, "s3cret-pass")
    assert not verify_password(h, "wrong-pass")


def test_hash_password_rejects_empty():
    with pytest.raises(ValueError):
        hash_password("")


def test_verify_password_with_missing_inputs():
    assert not verify_password("", "anything")
    assert not verify_password(hash_password("abcdef", cost=1), "")


def test_token_roundtrip_carries_identity():
    token = create_token("u1", "u1@example.com", WEEK, secret=JWT_SECRET)
    identity = decode_token(token, secret=JWT_SECRET)
    assert identity.id == "u1"
    assert identity.email == "u1@example.com"
    assert identity.expires_at > datetime.now(timezone.utc) + timedelta(days=6)


def test_token_accepted_one_day_after_issue():
    issued = datetime.now(timezone.utc) - timedelta(days=1)
    token = create_token("u1", "u1@example.com", WEEK, secret=JWT_SECRET, now=issued)
    assert decode_token(token, secret=JWT_SECRET).id == "u1"


def test_token_rejected_after_expiry():
    issued = datetime.now(timezone.utc) - timedelta(days=7, minutes=1)
    token = create_token("u1", "u1@example.com", WEEK, secret=JWT_SECRET, now=issued)
    with pytest.raises(TokenExpired):
        decode_token(token, secret=JWT_SECRET)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_rejected(token):
    with pytest.raises(InvalidToken):
        decode_token(token, secret=JWT_SECRET)


def test_token_with_wrong_secret_rejected():
    token = create_token("u1", "u1@example.com", WEEK, secret="other")
    with pytest.raises(InvalidToken):
        decode_token(token, secret=JWT_SECRET)


def test_cookie_attributes_follow_environment(settings, prod_settings):
    dev = SessionCookies(settings).attributes()
    prod = SessionCookies(prod_settings).attributes()
    assert dev["httponly"] and prod["httponly"]
    assert (dev["samesite"], dev["secure"]) == ("strict", False)
    assert (prod["samesite"], prod["secure"]) == ("none", True)


def test_cookie_set_then_read(settings):
    cookies = SessionCookies(settings)
    response = Response()
    expires = datetime.now(timezone.utc) + WEEK
    cookies.set(response, "the.jwt.value", expires)

    header = response.headers["set-cookie"]
    value = header.split(";", 1)[0].split("=", 1)[1]
    assert value != "the.jwt.value"
    assert cookies.read(_request_with_cookie(settings.cookie_name, value)) == "the.jwt.value"


def test_cookie_read_rejects_unsigned_value(settings):
    cookies = SessionCookies(settings)
    assert cookies.read(_request_with_cookie(settings.cookie_name, "the.jwt.value")) is None


def test_cookie_clear_expires_cookie(settings):
    response = Response()
    SessionCookies(settings).clear(response)
    header = response.headers["set-cookie"].lower()
    assert header.startswith(f"{settings.cookie_name}=")
    assert "max-age=0" in header
    assert "httponly" in header


def test_verify_password_with_foreign_hash_format():
    bcrypt_digest = "$2b$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"
    assert verify_password(bcrypt_digest, "analytical") is False


def test_hash_password_caps_memory_cost():
    h = hash_password("analytical", cost=1)
    assert "m=19456," in h
    assert "t=1," in h
