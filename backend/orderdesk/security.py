"""
OrderDesk Backend: Password Hashing & Access Tokens
=====================================================

What:  The primitives behind the auth gate: bcrypt password hashing and
       HMAC-signed JWT issuance/validation.
Who:   AuthService (register/login), AccountService (create/update) and the
       `require_token` dependency.
When:  Hashing on every account create/update, verification on login,
       token validation on every guarded request.

Password hashing:
    bcrypt with a per-call random salt and a fixed work factor
    (settings.bcrypt_rounds, default 10). bcrypt only reads the first 72
    bytes of its input; longer passwords are rejected with HashingError
    rather than truncated, so two passwords sharing a 72-byte prefix can
    never verify against each other.

Token format:
    header.claims.signature (JWS compact serialization), HMAC-SHA256 by
    default. Claims:

        accountUsername  the account's username
        expiresAt        Unix seconds; read by existing API clients
        exp              same instant, the registered claim python-jose checks
        iat              issue time

    There is no revocation list. A token is valid iff it parses, its header
    names the configured HMAC algorithm, the signature verifies under the
    process-wide secret, and it has not expired.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from orderdesk.config import Settings, settings
from orderdesk.exceptions import HashingError, UnauthorizedError

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72

USERNAME_CLAIM = "accountUsername"
EXPIRES_AT_CLAIM = "expiresAt"


# ══════════════════════════════════════════════════════════════════════════
# Passwords
# ══════════════════════════════════════════════════════════════════════════

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plaintext password with bcrypt and a fresh salt.

    Args:
        password: Plaintext password
        rounds:   bcrypt cost factor; defaults to settings.bcrypt_rounds

    Returns:
        The bcrypt hash as text, e.g. "$2b$10$<22-char salt><31-char digest>"

    Raises:
        HashingError: The UTF-8 encoded password is longer than 72 bytes.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise HashingError(
            message=(
                f"Password is too long: at most {BCRYPT_MAX_PASSWORD_BYTES} bytes "
                "are supported"
            ),
            context={"length": len(encoded)},
        )
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    bcrypt.checkpw compares in constant time. A malformed stored hash or an
    over-long candidate yields False instead of an exception.
    """
    encoded = (password or "").encode("utf-8")
    if not password_hash or len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# ══════════════════════════════════════════════════════════════════════════
# Tokens
# ══════════════════════════════════════════════════════════════════════════

class TokenService:
    """
    Issues and validates signed access tokens.

    The secret is injected once at construction (from settings at import
    time for the `token_service` singleton) and is immutable afterwards.
    Tests build their own instances to sign with a different secret.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        if not secret:
            raise ValueError("Token secret must not be empty")
        if not algorithm.upper().startswith("HS"):
            raise ValueError(f"Only HMAC algorithms are supported, got {algorithm!r}")
        self._secret = secret
        self.algorithm = algorithm.upper()
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> "TokenService":
        return cls(
            secret=cfg.jwt_secret,
            algorithm=cfg.jwt_algorithm,
            expire_minutes=cfg.jwt_expire_minutes,
        )

    def issue(self, username: str, now: Optional[datetime] = None) -> str:
        """
        Create a signed token for `username`.

        Args:
            username: The account's username (becomes `accountUsername`)
            now:      Issue instant; defaults to the current UTC time

        Returns:
            Compact JWS string "header.claims.signature"
        """
        issued_at = now or datetime.now(timezone.utc)
        expires_at = int((issued_at + timedelta(minutes=self.expire_minutes)).timestamp())
        claims: Dict[str, Any] = {
            USERNAME_CLAIM: username,
            EXPIRES_AT_CLAIM: expires_at,
            "exp": expires_at,
            "iat": int(issued_at.timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def validate(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Rejects, in order: an empty token; a token whose header cannot be
        parsed; a header algorithm other than the configured one (this blocks
        "none" and algorithm-confusion tokens before any key is used); a bad
        signature; an expired token; a token without a username claim.

        Raises:
            UnauthorizedError: always with the message "Permission denied";
                               the concrete reason is in `exc.reason`.
        """
        if not token:
            raise UnauthorizedError(reason="missing token")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise UnauthorizedError(reason="malformed token")

        alg = header.get("alg")
        if alg != self.algorithm:
            raise UnauthorizedError(reason=f"unexpected signing method: {alg}")

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise UnauthorizedError(reason="token expired")
        except JWTError as e:
            raise UnauthorizedError(reason=str(e) or "invalid token")

        username = claims.get(USERNAME_CLAIM)
        if not isinstance(username, str) or not username:
            raise UnauthorizedError(reason="token has no account username")

        return claims

    def is_valid(self, token: Optional[str]) -> bool:
        """True iff validate() would accept the token."""
        try:
            self.validate(token)
        except UnauthorizedError:
            return False
        return True


# Process-wide instance; the secret is captured here, once
token_service = TokenService.from_settings()
