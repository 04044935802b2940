"""
Structural validation of request payloads.

The rules live on the input models in ``utils.schemas``.  Each validator
here runs ``Model.model_validate`` on the raw decoded JSON body and
returns either ``Valid(value=<normalized model>)`` or
``Invalid(errors=[...])`` with every failure formatted as
``"<field>: <message>"``.
"""

from __future__ import annotations

from typing import Any, List, Type

from pydantic import BaseModel, ValidationError

from utils.schemas import (
    Invalid,
    LoginInput,
    RegisterInput,
    TodoCreate,
    TodoUpdate,
    Valid,
    ValidationResult,
)

NOT_AN_OBJECT = "body: Expected a JSON object"


def error_messages(model: Type[BaseModel], exc: ValidationError) -> List[str]:
    """Flatten ``exc.errors()`` into ``"<field>: <message>"`` strings."""
    templates = getattr(model, "error_messages", {})
    messages: List[str] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        ctx = err.get("ctx") or {}
        if err["type"] == "rules":
            messages.extend(f"{field}: {message}" for message in ctx["messages"])
            continue
        template = templates.get((field, err["type"]))
        text = template.format(**ctx) if template else err["msg"]
        messages.append(f"{field}: {text}")
    return messages


def _validate(model: Type[BaseModel], payload: Any) -> ValidationResult:
    if not isinstance(payload, dict):
        return Invalid(errors=[NOT_AN_OBJECT])
    try:
        return Valid(value=model.model_validate(payload))
    except ValidationError as exc:
        return Invalid(errors=error_messages(model, exc))


def validate_registration(payload: Any) -> ValidationResult:
    return _validate(RegisterInput, payload)


def validate_login(payload: Any) -> ValidationResult:
    """Login only checks presence; strength rules apply at registration."""
    return _validate(LoginInput, payload)


def validate_todo_create(payload: Any) -> ValidationResult:
    return _validate(TodoCreate, payload)


def validate_todo_update(payload: Any) -> ValidationResult:
    """Same rules as create, but only the fields present are checked."""
    return _validate(TodoUpdate, payload)
