"""
Pydantic schemas for the Todo API.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    List,
    Literal,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    StringConstraints,
    field_validator,
)
from pydantic_core import PydanticCustomError

T = TypeVar("T")


# ═══════════════════════════════════════════════════════════════════════════════
# Session / identity
# ═══════════════════════════════════════════════════════════════════════════════


class SessionClaims(BaseModel):
    """Identity payload embedded in a session token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str


# ═══════════════════════════════════════════════════════════════════════════════
# Validated input shapes
# ═══════════════════════════════════════════════════════════════════════════════

USERNAME_MIN = 3
USERNAME_MAX = 32
PASSWORD_MIN = 8
TITLE_MIN = 2
TITLE_MAX = 128
DESCRIPTION_MAX = 1024

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_WHITESPACE = re.compile(r"\s")
_LOWERCASE = re.compile(r"[a-z]")
_UPPERCASE = re.compile(r"[A-Z]")
_SPECIAL = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")

Rule = Tuple[Callable[[str], bool], str]

USERNAME_RULES: List[Rule] = [
    (lambda v: len(v) >= USERNAME_MIN, f"Username must be at least {USERNAME_MIN} characters long"),
    (lambda v: len(v) <= USERNAME_MAX, f"Username must not exceed {USERNAME_MAX} characters"),
    (lambda v: not _WHITESPACE.search(v), "Username cannot contain whitespace characters"),
]

PASSWORD_RULES: List[Rule] = [
    (lambda v: len(v) >= PASSWORD_MIN, f"Password must be at least {PASSWORD_MIN} characters long"),
    (lambda v: bool(_LOWERCASE.search(v)), "Password must contain at least one lowercase letter"),
    (lambda v: bool(_UPPERCASE.search(v)), "Password must contain at least one uppercase letter"),
    (lambda v: bool(_SPECIAL.search(v)), "Password must contain at least one special character"),
]


def enforce_rules(value: str, rules: List[Rule]) -> str:
    """
    Check *value* against every rule and raise one ``rules`` error that
    carries all failed messages in ``ctx["messages"]``.
    """
    failed = [message for check, message in rules if not check(value)]
    if failed:
        raise PydanticCustomError(
            "rules",
            "{summary}",
            {"summary": "; ".join(failed), "messages": failed},
        )
    return value


TrimmedStr = Annotated[StrictStr, StringConstraints(strip_whitespace=True)]
RequiredStr = Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]
Title = Annotated[
    StrictStr,
    StringConstraints(strip_whitespace=True, min_length=TITLE_MIN, max_length=TITLE_MAX),
]
Description = Annotated[StrictStr, StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX)]

# (field, pydantic error type) -> message template, formatted with the error ctx
Messages = Dict[Tuple[str, str], str]


class RegisterInput(BaseModel):
    username: TrimmedStr
    password: StrictStr

    error_messages: ClassVar[Messages] = {
        ("username", "missing"): "Username is required and must be a string",
        ("username", "string_type"): "Username is required and must be a string",
        ("password", "missing"): "Password is required and must be a string",
        ("password", "string_type"): "Password is required and must be a string",
    }

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return enforce_rules(value, USERNAME_RULES)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return enforce_rules(value, PASSWORD_RULES)


class LoginInput(BaseModel):
    """Presence only; strength rules apply at registration."""

    username: RequiredStr
    password: Annotated[StrictStr, StringConstraints(min_length=1)]

    error_messages: ClassVar[Messages] = {
        ("username", "missing"): "Username is required",
        ("username", "string_type"): "Username is required",
        ("username", "string_too_short"): "Username is required",
        ("password", "missing"): "Password is required",
        ("password", "string_type"): "Password is required",
        ("password", "string_too_short"): "Password is required",
    }


_TODO_MESSAGES: Messages = {
    ("title", "missing"): "Title is required",
    ("title", "string_type"): "Title must be a string",
    ("title", "string_too_short"): "Title must be at least {min_length} characters long",
    ("title", "string_too_long"): "Title must not exceed {max_length} characters",
    ("description", "string_type"): "Description must be a string",
    ("description", "string_too_long"): "Description must not exceed {max_length} characters",
    ("checked", "bool_type"): "Checked must be a boolean",
}


class _TodoFields(BaseModel):
    error_messages: ClassVar[Messages] = _TODO_MESSAGES

    @field_validator("description", check_fields=False)
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class TodoCreate(_TodoFields):
    title: Title
    description: Optional[Description] = None
    checked: StrictBool = False


class TodoUpdate(_TodoFields):
    """
    Partial update.  Only fields that were present in the request are
    *set*; use ``changes()`` to get them without the untouched defaults.

    ``title`` and ``checked`` are not nullable: their ``None`` default is
    never validated, but an explicit ``null`` in the body is rejected.
    """

    title: Title = None
    description: Optional[Description] = None
    checked: StrictBool = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class Valid(BaseModel, Generic[T]):
    ok: Literal[True] = True
    value: T


class Invalid(BaseModel):
    ok: Literal[False] = False
    errors: List[str] = Field(default_factory=list)


ValidationResult = Union[Valid, Invalid]


# ═══════════════════════════════════════════════════════════════════════════════
# API Request / Response helpers
# ═══════════════════════════════════════════════════════════════════════════════


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every JSON response body."""

    status: int
    errors: List[str] = Field(default_factory=list)
    data: Optional[T] = None


class UserOut(BaseModel):
    id: int
    username: str


class AuthData(BaseModel):
    message: str
    token: str
    user: UserOut


class TodoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    checked: bool
    user_id: int
    created_at: datetime
    updated_at: datetime
