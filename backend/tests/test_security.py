"""
OrderDesk Backend: Password Hashing & Token Tests
===================================================

What we test:
    ✅ bcrypt hash/verify round trip, fresh salt per hash
    ✅ Passwords over 72 bytes are rejected, never truncated
    ✅ Tokens carry the account username and a real expiry
    ✅ Rejection of: wrong secret, altered payload, expired token, wrong
       algorithm, "none" algorithm, missing username claim, garbage
    ✅ Header parsing accepts a "Bearer " prefix
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from orderdesk.dependencies import extract_token
from orderdesk.exceptions import HashingError, UnauthorizedError
from orderdesk.security import (
    EXPIRES_AT_CLAIM,
    USERNAME_CLAIM,
    TokenService,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-0123456789"


def b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse", rounds=4)
        assert hashed.startswith("$2")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True
        assert verify_password("wrong horse", hashed) is False

    def test_salt_differs_per_hash(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_72_bytes_is_accepted(self):
        hashed = hash_password("a" * 72, rounds=4)
        assert verify_password("a" * 72, hashed)

    def test_over_72_bytes_is_rejected(self):
        with pytest.raises(HashingError):
            hash_password("a" * 73, rounds=4)

    def test_multibyte_length_counts_bytes(self):
        # 25 × 3-byte characters = 75 bytes
        with pytest.raises(HashingError):
            hash_password("€" * 25, rounds=4)

    def test_verify_against_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False
        assert verify_password("anything", "") is False


class TestTokenService:
    def setup_method(self):
        self.tokens = TokenService(secret=SECRET, expire_minutes=60)

    def test_issue_and_validate(self):
        token = self.tokens.issue("alice")
        claims = self.tokens.validate(token)
        assert claims[USERNAME_CLAIM] == "alice"
        assert claims[EXPIRES_AT_CLAIM] == claims["exp"]
        assert self.tokens.is_valid(token)

    def test_expiry_is_relative_to_issue_time(self):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        token = self.tokens.issue("alice", now=now)
        claims = jwt.get_unverified_claims(token)
        assert claims["exp"] - claims["iat"] == 60 * 60

    def test_wrong_secret_is_rejected(self):
        token = TokenService(secret="some-other-secret").issue("alice")
        with pytest.raises(UnauthorizedError) as exc_info:
            self.tokens.validate(token)
        assert exc_info.value.message == "Permission denied"

    def test_altered_payload_is_rejected(self):
        header, _, signature = self.tokens.issue("alice").split(".")
        forged_claims = jwt.get_unverified_claims(self.tokens.issue("alice"))
        forged_claims[USERNAME_CLAIM] = "mallory"
        forged = ".".join([header, b64url(forged_claims), signature])
        assert not self.tokens.is_valid(forged)

    def test_expired_token_is_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self.tokens.issue("alice", now=issued)
        with pytest.raises(UnauthorizedError) as exc_info:
            self.tokens.validate(token)
        assert exc_info.value.reason == "token expired"

    def test_other_hmac_algorithm_is_rejected(self):
        token = TokenService(secret=SECRET, algorithm="HS512").issue("alice")
        with pytest.raises(UnauthorizedError) as exc_info:
            self.tokens.validate(token)
        assert "unexpected signing method" in exc_info.value.reason

    def test_none_algorithm_is_rejected(self):
        claims = jwt.get_unverified_claims(self.tokens.issue("alice"))
        token = f"{b64url({'alg': 'none', 'typ': 'JWT'})}.{b64url(claims)}."
        assert not self.tokens.is_valid(token)

    def test_missing_username_claim_is_rejected(self):
        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError) as exc_info:
            self.tokens.validate(token)
        assert exc_info.value.reason == "token has no account username"

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    def test_malformed_tokens_are_rejected(self, token):
        assert not self.tokens.is_valid(token)

    def test_constructor_rejects_bad_configuration(self):
        with pytest.raises(ValueError):
            TokenService(secret="")
        with pytest.raises(ValueError):
            TokenService(secret=SECRET, algorithm="RS256")


class TestExtractToken:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("abc.def.ghi", "abc.def.ghi"),
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("bearer   abc.def.ghi ", "abc.def.ghi"),
            ("   ", None),
            (None, None),
        ],
    )
    def test_extract(self, raw, expected):
        assert extract_token(raw) == expected
