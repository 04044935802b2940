"""
Registration and login orchestration.

    register: validate → exists? → hash → create → issue token
    login:    validate → lookup → verify → issue token

Validation always runs before anything touches storage or bcrypt.  Any
unexpected failure from a collaborator is logged and surfaced as
``Internal``; its text only reaches the client in development mode.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.validation import validate_login, validate_registration
from database.repositories import UsernameTaken
from utils.errors import (
    INTERNAL_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    ApiError,
    Conflict,
    Internal,
    Unauthorized,
    ValidationFailed,
)
from utils.schemas import AuthData, Invalid, SessionClaims, UserOut

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    async def find_by_username(self, username: str) -> Any: ...

    async def exists(self, username: str) -> bool: ...

    async def create(self, username: str, password_hash: str) -> Any: ...


class AuthWorkflow:
    def __init__(
        self,
        hasher: PasswordHasher,
        tokens: TokenService,
        *,
        expose_internal_errors: bool = False,
    ):
        self.hasher = hasher
        self.tokens = tokens
        self.expose_internal_errors = expose_internal_errors

    async def register(self, users: UserStore, payload: Any) -> AuthData:
        try:
            return await self._register(users, payload)
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("Registration error")
            raise self._internal(exc) from exc

    async def login(self, users: UserStore, payload: Any) -> AuthData:
        try:
            return await self._login(users, payload)
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("Login error")
            raise self._internal(exc) from exc

    async def _register(self, users: UserStore, payload: Any) -> AuthData:
        result = validate_registration(payload)
        if isinstance(result, Invalid):
            raise ValidationFailed(result.errors)
        creds = result.value

        if await users.exists(creds.username):
            raise Conflict("Username already exists")

        password_hash = await self.hasher.hash_async(creds.password)
        try:
            user = await users.create(creds.username, password_hash)
        except UsernameTaken:
            raise Conflict("Username already exists")

        logger.info("Auth event: register (user %s)", user.id)
        return self._session_for(user, "User registered successfully")

    async def _login(self, users: UserStore, payload: Any) -> AuthData:
        result = validate_login(payload)
        if isinstance(result, Invalid):
            raise ValidationFailed(result.errors)
        creds = result.value

        user = await users.find_by_username(creds.username)
        if user is None:
            logger.info("Auth event: auth_failed (unknown username)")
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        if not await self.hasher.verify_async(creds.password, user.password_hash):
            logger.info("Auth event: auth_failed (user %s)", user.id)
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        logger.info("Auth event: login (user %s)", user.id)
        return self._session_for(user, "Login successful")

    def _session_for(self, user: Any, message: str) -> AuthData:
        token = self.tokens.issue(SessionClaims(user_id=user.id, username=user.username))
        return AuthData(
            message=message,
            token=token,
            user=UserOut(id=user.id, username=user.username),
        )

    def _internal(self, exc: Exception) -> Internal:
        if self.expose_internal_errors and str(exc):
            return Internal(str(exc))
        return Internal(INTERNAL_MESSAGE)
