"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

import json
from typing import Any, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from database.repositories import TodoRepository, UserRepository
from database.session import Database
from utils.errors import ValidationFailed


async def db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """One session per request: commit on success, roll back on error."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_user_repository(
    session: AsyncSession = Depends(db_session),
) -> UserRepository:
    return UserRepository(session)


async def get_todo_repository(
    session: AsyncSession = Depends(db_session),
) -> TodoRepository:
    return TodoRepository(session)


async def read_json(request: Request) -> Any:
    """Decode the request body; undecodable bodies are a 400, not a 500."""
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailed("body: Malformed JSON")
