# tests/test_security.py
from datetime import timedelta

import pytest

from devboard.core.errors import Conflict, NotFound, Unauthorized
from devboard.core.security import TokenClaims, create_access_token, decode_token, hash_password, verify_password


def test_password_hash_is_salted_bcrypt():
    first, second = hash_password("secret123"), hash_password("secret123")
    assert first != second
    assert first.startswith("$2b$12$")
    assert verify_password("secret123", first)
    assert not verify_password("secret124", first)
    assert not verify_password("secret123", "not-a-hash")

def test_token_round_trip():
    claims = TokenClaims(user_id="64b000000000000000000001", email="a@example.com", role="admin")
    decoded = decode_token(create_access_token(claims))
    assert decoded == claims
    assert decoded.is_admin

def test_expired_token_reported_distinctly():
    claims = TokenClaims(user_id="64b000000000000000000001", email="a@example.com", role="user")
    token = create_access_token(claims, expires_delta=timedelta(seconds=-1))
    with pytest.raises(Unauthorized, match="expired"):
        decode_token(token)

def test_tampered_token_rejected():
    claims = TokenClaims(user_id="64b000000000000000000001", email="a@example.com", role="user")
    token = create_access_token(claims)
    with pytest.raises(Unauthorized, match="Invalid token"):
        decode_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))

def test_errors_fall_back_to_default_message():
    assert NotFound().message == "Not found"
    assert NotFound(None).status_code == 404
    assert Conflict("Job already saved").message == "Job already saved"
    assert Conflict().status_code == 400
