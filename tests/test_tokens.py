"""
Tests for session tokens and password hashing.
"""

import jwt
from datetime import datetime, timedelta, timezone

from rider_expense.config import get_settings
from rider_expense.utils.auth import (
    TOKEN_ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestAccessTokens:

    def test_round_trip(self):
        assert decode_access_token(create_access_token(42)) == 42

    def test_subject_is_the_only_identity_claim(self):
        token = create_access_token(7)
        payload = jwt.decode(token, options={"verify_signature": False})
        assert set(payload) == {"sub", "exp"}
        assert payload["sub"] == "7"

    def test_lifetime_is_seven_days(self):
        issued = datetime(2026, 10, 17, tzinfo=timezone.utc)
        payload = jwt.decode(create_access_token(1, now=issued), options={"verify_signature": False})
        assert payload["exp"] == int((issued + timedelta(days=7)).timestamp())

    def test_expired_token(self):
        token = create_access_token(1, now=datetime.now(timezone.utc) - timedelta(days=8))
        assert decode_access_token(token) is None

    def test_tampered_token(self):
        token = create_access_token(1)
        head, body, signature = token.split(".")
        flipped = signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")
        assert decode_access_token(".".join([head, body, flipped])) is None

    def test_other_secret(self):
        token = jwt.encode(
            {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            "some-other-secret-0123456789abcdefghij",
            algorithm=TOKEN_ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_missing_expiry(self):
        token = jwt.encode({"sub": "1"}, get_settings().JWT_SECRET, algorithm=TOKEN_ALGORITHM)
        assert decode_access_token(token) is None

    def test_non_numeric_subject(self):
        token = jwt.encode(
            {"sub": "abc", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            get_settings().JWT_SECRET,
            algorithm=TOKEN_ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_garbage(self):
        assert decode_access_token("garbage") is None
        assert decode_access_token("") is None


class TestPasswordHashing:

    def test_hash_is_salted(self):
        first = hash_password("Password123")
        second = hash_password("Password123")
        assert first != second
        assert "Password123" not in first

    def test_verify(self):
        hashed = hash_password("Password123")
        assert verify_password("Password123", hashed)
        assert not verify_password("Password124", hashed)
