"""
Auth API routes — register, login.

Route prefix: /api/auth
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.dependencies import get_user_repository, read_json
from auth.dependencies import get_auth_workflow
from auth.service import AuthWorkflow
from database.repositories import UserRepository
from utils.errors import envelope

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: Any = Depends(read_json),
    users: UserRepository = Depends(get_user_repository),
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Register a new user and return a session token."""
    data = await workflow.register(users, payload)
    return envelope(status.HTTP_201_CREATED, [], data.model_dump())


@router.post("/login")
async def login(
    payload: Any = Depends(read_json),
    users: UserRepository = Depends(get_user_repository),
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Login with username + password."""
    data = await workflow.login(users, payload)
    return envelope(status.HTTP_200_OK, [], data.model_dump())
