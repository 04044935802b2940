"""
Todo item routes.  Every route requires a verified Bearer token and every
query is scoped to the caller, so items owned by someone else come back
as 404 exactly like missing ones.

Route prefix: /api/todos
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_todo_repository, read_json
from auth.dependencies import get_current_user
from auth.validation import validate_todo_create, validate_todo_update
from database.repositories import TodoRepository
from utils.errors import NotFound, ValidationFailed, envelope
from utils.schemas import Invalid, SessionClaims, TodoOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["todos"])

TODO_NOT_FOUND = "Todo item not found"


def _out(todo) -> Dict[str, Any]:
    return TodoOut.model_validate(todo).model_dump(mode="json")


@router.get("")
async def list_todos(
    user: SessionClaims = Depends(get_current_user),
    todos: TodoRepository = Depends(get_todo_repository),
) -> Dict[str, Any]:
    items = await todos.find_all_by_user(user.user_id)
    return envelope(status.HTTP_200_OK, [], [_out(t) for t in items])


@router.get("/{todo_id}")
async def get_todo(
    todo_id: int,
    user: SessionClaims = Depends(get_current_user),
    todos: TodoRepository = Depends(get_todo_repository),
) -> Dict[str, Any]:
    todo = await todos.find_by_id(todo_id, user.user_id)
    if todo is None:
        raise NotFound(TODO_NOT_FOUND)
    return envelope(status.HTTP_200_OK, [], _out(todo))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo(
    user: SessionClaims = Depends(get_current_user),
    payload: Any = Depends(read_json),
    todos: TodoRepository = Depends(get_todo_repository),
) -> Dict[str, Any]:
    result = validate_todo_create(payload)
    if isinstance(result, Invalid):
        raise ValidationFailed(result.errors)
    fields = result.value

    todo = await todos.create(
        user.user_id,
        title=fields.title,
        description=fields.description,
        checked=fields.checked,
    )
    logger.info("Todo %s created by user %s", todo.id, user.user_id)
    return envelope(status.HTTP_201_CREATED, [], _out(todo))


@router.put("/{todo_id}")
async def update_todo(
    todo_id: int,
    user: SessionClaims = Depends(get_current_user),
    payload: Any = Depends(read_json),
    todos: TodoRepository = Depends(get_todo_repository),
) -> Dict[str, Any]:
    """Partial update: fields missing from the body are left untouched."""
    result = validate_todo_update(payload)
    if isinstance(result, Invalid):
        raise ValidationFailed(result.errors)

    todo = await todos.update(todo_id, user.user_id, result.value.changes())
    if todo is None:
        raise NotFound(TODO_NOT_FOUND)
    return envelope(status.HTTP_200_OK, [], _out(todo))


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: int,
    user: SessionClaims = Depends(get_current_user),
    todos: TodoRepository = Depends(get_todo_repository),
) -> Response:
    if not await todos.delete(todo_id, user.user_id):
        raise NotFound(TODO_NOT_FOUND)
    logger.info("Todo %s deleted by user %s", todo_id, user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
