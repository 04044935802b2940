"""
Repositories over the ORM models.

``UserRepository`` is the narrow user-store interface the auth workflow
depends on (``find_by_username`` / ``exists`` / ``create``).
``TodoRepository`` scopes every query by owner, so another user's item is
indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import TodoItem, User

logger = logging.getLogger(__name__)

# Upper bound of the Integer primary key column (int4 on PostgreSQL)
ID_MAX = 2**31 - 1


def storable_id(value: int) -> bool:
    """True if *value* can name a row; anything else cannot exist."""
    return 1 <= value <= ID_MAX


class UsernameTaken(Exception):
    """The username collided with an existing row at insert time."""


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def exists(self, username: str) -> bool:
        result = await self.session.execute(
            select(User.id).where(User.username == username)
        )
        return result.first() is not None

    async def create(self, username: str, password_hash: str) -> User:
        """
        Insert a user.  Raises ``UsernameTaken`` when the unique constraint
        fires, e.g. when two registrations race past the existence check.
        """
        user = User(username=username, password_hash=password_hash)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise UsernameTaken(username) from exc
        logger.debug("Database create: users (ID: %s)", user.id)
        return user


class TodoRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, todo_id: int, user_id: int) -> Optional[TodoItem]:
        if not storable_id(todo_id):
            return None
        result = await self.session.execute(
            select(TodoItem).where(TodoItem.id == todo_id, TodoItem.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_all_by_user(self, user_id: int) -> List[TodoItem]:
        result = await self.session.execute(
            select(TodoItem)
            .where(TodoItem.user_id == user_id)
            .order_by(TodoItem.created_at.desc(), TodoItem.id.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        user_id: int,
        title: str,
        description: Optional[str] = None,
        checked: bool = False,
    ) -> TodoItem:
        todo = TodoItem(
            user_id=user_id,
            title=title,
            description=description,
            checked=checked,
        )
        self.session.add(todo)
        await self.session.flush()
        await self.session.refresh(todo)
        logger.debug("Database create: todo_items (ID: %s)", todo.id)
        return todo

    async def update(
        self,
        todo_id: int,
        user_id: int,
        changes: Dict[str, Any],
    ) -> Optional[TodoItem]:
        """Apply *changes* to the caller's item; ``None`` if it is not theirs."""
        todo = await self.find_by_id(todo_id, user_id)
        if todo is None:
            return None
        for field, value in changes.items():
            setattr(todo, field, value)
        if changes:
            await self.session.flush()
            await self.session.refresh(todo)
        logger.debug("Database update: todo_items (ID: %s)", todo_id)
        return todo

    async def delete(self, todo_id: int, user_id: int) -> bool:
        if not storable_id(todo_id):
            return False
        result = await self.session.execute(
            delete(TodoItem).where(TodoItem.id == todo_id, TodoItem.user_id == user_id)
        )
        deleted = result.rowcount > 0
        if deleted:
            logger.debug("Database delete: todo_items (ID: %s)", todo_id)
        return deleted
