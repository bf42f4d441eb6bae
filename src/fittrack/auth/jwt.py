"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries everything needed to identify the caller (user id, username,
email), signed with HMAC-SHA256. Any process holding the secret can
verify it without a database round trip. There is no server-side
revocation: expiry is the only way a token dies.

Signature checking and expiry checking are separate steps here.
verify_signature_and_decode() only proves the token is ours;
is_expired() and validate() decide whether it is still usable.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from fittrack.auth.errors import ConfigurationError, InvalidToken
from fittrack.config import Settings

ALGORITHM = "HS256"
MIN_SECRET_LENGTH = 32


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Issues and verifies signed identity tokens."""

    def __init__(
        self,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        secret = settings.jwt_secret
        if not secret or not secret.strip():
            raise ConfigurationError("FITTRACK_JWT_SECRET must be configured")
        if len(secret) < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f"FITTRACK_JWT_SECRET must be at least {MIN_SECRET_LENGTH} "
                f"characters for {ALGORITHM}. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if settings.jwt_expiration_ms <= 0:
            raise ConfigurationError("FITTRACK_JWT_EXPIRATION_MS must be positive")

        self._secret = secret
        self._ttl = timedelta(milliseconds=settings.jwt_expiration_ms)
        self._clock = clock or utcnow

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int, username: str, email: str) -> str:
        """Create a signed token for the given identity."""
        now = self._clock()
        # exp is whole seconds on the wire; round up so the lifetime is never
        # shorter than the configured TTL
        expires_at = math.ceil((now + self._ttl).timestamp())
        payload = {
            "sub": username,
            "userId": user_id,
            "username": username,
            "email": email,
            "iat": now,
            "exp": expires_at,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify_signature_and_decode(self, token: str) -> dict:
        """Verify the signature and return the claims.

        Expiry is not enforced here; see is_expired().
        Raises InvalidToken on a bad signature or malformed token.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp", "iat"],
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}") from e

    def extract_username(self, token: str) -> str:
        claims = self.verify_signature_and_decode(token)
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("Invalid token: missing subject")
        return subject

    def is_expired(self, claims: dict) -> bool:
        """True when the token's expiry is strictly before now."""
        expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        return expires_at < self._clock()

    def validate(self, token: str, expected_username: str) -> bool:
        """Check the token belongs to expected_username and is still live.

        Decode failures propagate as InvalidToken rather than returning
        False. Callers treat that as "not authenticated".
        """
        claims = self.verify_signature_and_decode(token)
        return claims.get("sub") == expected_username and not self.is_expired(claims)
