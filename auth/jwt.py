"""
JWT session token creation and verification.

Tokens are HS256 JWTs carrying ``userId`` / ``username`` claims plus
``iat`` and ``exp``.  The secret is loaded once from ``config.jwt_secret``
(env var: ``JWT_SECRET``).  Verification is a pure function of the token,
the secret and the injected clock; there is no server-side revocation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from config.settings import FALLBACK_JWT_SECRET
from utils.schemas import SessionClaims

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
DEFAULT_EXPIRY_SECONDS = 24 * 60 * 60


class TokenError(Exception):
    """Base for token failures.  Never rendered to clients as-is."""


class InvalidToken(TokenError):
    pass


class MissingCredential(TokenError):
    pass


class MalformedCredential(TokenError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret: Optional[str],
        *,
        algorithm: str = "HS256",
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            secret = FALLBACK_JWT_SECRET
        self._secret = secret
        self._algorithm = algorithm
        self._expiry = timedelta(seconds=expiry_seconds)
        self._clock = clock

    @property
    def uses_fallback_secret(self) -> bool:
        return self._secret == FALLBACK_JWT_SECRET

    def issue(self, claims: SessionClaims) -> str:
        """Create a signed token for *claims*, valid for the configured lifetime."""
        now = self._clock()
        payload = {
            "userId": claims.user_id,
            "username": claims.username,
            "iat": now,
            "exp": now + self._expiry,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify *token* and return its claims.

        Raises ``InvalidToken`` for a bad signature, a malformed payload or
        an expired token, without saying which.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["exp", "userId", "username"],
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidToken("Invalid token") from exc

        exp = payload["exp"]
        user_id = payload["userId"]
        username = payload["username"]
        if (
            not isinstance(exp, (int, float))
            or isinstance(user_id, bool)
            or not isinstance(user_id, int)
            or not isinstance(username, str)
        ):
            logger.debug("Token rejected: malformed claims")
            raise InvalidToken("Invalid token")

        if self._clock().timestamp() >= exp:
            logger.debug("Token rejected: expired")
            raise InvalidToken("Invalid token")

        return SessionClaims(user_id=user_id, username=username)

    @staticmethod
    def extract_credential(authorization: Optional[str]) -> str:
        """Return the token part of a ``Bearer <token>`` header value."""
        if authorization is None:
            raise MissingCredential("Authorization header is required")
        if not authorization.startswith(BEARER_PREFIX):
            raise MalformedCredential("Authorization header must start with Bearer")
        return authorization[len(BEARER_PREFIX):]
