"""
Request authentication.

``AuthGuard`` walks one request through
``Unauthenticated → TokenExtracted → TokenVerified → Authenticated``; any
failure along the way is collapsed into a single ``Unauthorized``.  The
``get_current_user`` dependency hands the verified ``SessionClaims`` to
the route, so a protected handler only runs once the guard has passed.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, Request

from auth.jwt import TokenError, TokenService
from auth.service import AuthWorkflow
from utils.errors import UNAUTHORIZED_MESSAGE, Unauthorized
from utils.schemas import SessionClaims

logger = logging.getLogger(__name__)


class AuthGuard:
    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> SessionClaims:
        try:
            token = self.tokens.extract_credential(authorization)
            return self.tokens.verify(token)
        except TokenError as exc:
            logger.debug("Auth event: auth_failed (%s)", type(exc).__name__)
            raise Unauthorized(UNAUTHORIZED_MESSAGE) from exc


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> SessionClaims:
    """Verify the Bearer token and return the caller's claims."""
    guard: AuthGuard = request.app.state.auth_guard
    return guard.authenticate(authorization)


def get_auth_workflow(request: Request) -> AuthWorkflow:
    return request.app.state.auth_workflow
