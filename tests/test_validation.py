"""
Tests for credential and todo payload validation.
"""

import pytest
from pydantic import ValidationError

from auth.validation import (
    error_messages,
    validate_login,
    validate_registration,
    validate_todo_create,
    validate_todo_update,
)
from utils.schemas import Invalid, RegisterInput, SessionClaims, TodoCreate, Valid


def _errors(result) -> list[str]:
    assert isinstance(result, Invalid), result
    return result.errors


class TestRegistration:
    def test_valid_input_is_normalized(self):
        result = validate_registration({"username": "  alice  ", "password": "Valid123!"})
        assert isinstance(result, Valid)
        assert result.value.username == "alice"
        assert result.value.password == "Valid123!"

    def test_short_password_cites_minimum_length(self):
        errors = _errors(validate_registration({"username": "alice", "password": "short"}))
        assert "password: Password must be at least 8 characters long" in errors

    def test_missing_uppercase(self):
        errors = _errors(validate_registration({"username": "alice", "password": "alllowercase1!"}))
        assert errors == ["password: Password must contain at least one uppercase letter"]

    def test_missing_lowercase(self):
        errors = _errors(validate_registration({"username": "alice", "password": "ALLUPPER1!"}))
        assert errors == ["password: Password must contain at least one lowercase letter"]

    def test_missing_special_character(self):
        errors = _errors(validate_registration({"username": "alice", "password": "NoSpecial123"}))
        assert errors == ["password: Password must contain at least one special character"]

    def test_all_violations_are_reported_together(self):
        errors = _errors(validate_registration({"username": "a b", "password": "abc"}))
        assert errors == [
            "username: Username cannot contain whitespace characters",
            "password: Password must be at least 8 characters long",
            "password: Password must contain at least one uppercase letter",
            "password: Password must contain at least one special character",
        ]

    @pytest.mark.parametrize(
        "username, message",
        [
            ("ab", "username: Username must be at least 3 characters long"),
            ("   ab   ", "username: Username must be at least 3 characters long"),
            ("a" * 33, "username: Username must not exceed 32 characters"),
            ("al ice", "username: Username cannot contain whitespace characters"),
            ("al\tice", "username: Username cannot contain whitespace characters"),
        ],
    )
    def test_username_rules(self, username, message):
        errors = _errors(validate_registration({"username": username, "password": "Valid123!"}))
        assert message in errors

    def test_username_bounds_are_inclusive(self):
        assert isinstance(validate_registration({"username": "abc", "password": "Valid123!"}), Valid)
        assert isinstance(validate_registration({"username": "a" * 32, "password": "Valid123!"}), Valid)

    def test_missing_fields(self):
        errors = _errors(validate_registration({}))
        assert errors == [
            "username: Username is required and must be a string",
            "password: Password is required and must be a string",
        ]

    def test_non_string_fields(self):
        errors = _errors(validate_registration({"username": 123, "password": ["Valid123!"]}))
        assert len(errors) == 2

    @pytest.mark.parametrize("payload", [None, [], "alice", 42])
    def test_non_object_body(self, payload):
        assert _errors(validate_registration(payload)) == ["body: Expected a JSON object"]


class TestLogin:
    def test_no_complexity_rules(self):
        result = validate_login({"username": " bob ", "password": "x"})
        assert isinstance(result, Valid)
        assert result.value.username == "bob"

    def test_blank_username_and_empty_password(self):
        errors = _errors(validate_login({"username": "   ", "password": ""}))
        assert errors == ["username: Username is required", "password: Password is required"]

    def test_missing_fields(self):
        assert len(_errors(validate_login({}))) == 2


class TestTodoCreate:
    def test_valid_payload_is_trimmed(self):
        result = validate_todo_create({"title": "  Buy milk ", "description": "  2 litres  "})
        assert isinstance(result, Valid)
        assert result.value.title == "Buy milk"
        assert result.value.description == "2 litres"
        assert result.value.checked is False

    def test_title_required(self):
        assert _errors(validate_todo_create({})) == ["title: Title is required"]

    @pytest.mark.parametrize(
        "title, message",
        [
            ("a", "title: Title must be at least 2 characters long"),
            (" a ", "title: Title must be at least 2 characters long"),
            ("x" * 129, "title: Title must not exceed 128 characters"),
            (5, "title: Title must be a string"),
        ],
    )
    def test_title_rules(self, title, message):
        assert _errors(validate_todo_create({"title": title})) == [message]

    def test_description_limit(self):
        errors = _errors(validate_todo_create({"title": "ok", "description": "d" * 1025}))
        assert errors == ["description: Description must not exceed 1024 characters"]
        assert isinstance(validate_todo_create({"title": "ok", "description": "d" * 1024}), Valid)

    def test_checked_must_be_boolean(self):
        errors = _errors(validate_todo_create({"title": "ok", "checked": "yes"}))
        assert errors == ["checked: Checked must be a boolean"]


class TestTodoUpdate:
    def test_only_present_fields_are_returned(self):
        result = validate_todo_update({"checked": True})
        assert isinstance(result, Valid)
        assert result.value.changes() == {"checked": True}

    def test_empty_update_is_valid(self):
        result = validate_todo_update({})
        assert isinstance(result, Valid)
        assert result.value.changes() == {}

    def test_explicit_null_description_clears_it(self):
        result = validate_todo_update({"description": None})
        assert result.value.changes() == {"description": None}

    def test_present_fields_use_create_rules(self):
        errors = _errors(validate_todo_update({"title": "x", "description": 3}))
        assert errors == [
            "title: Title must be at least 2 characters long",
            "description: Description must be a string",
        ]

    def test_null_title_is_rejected(self):
        assert _errors(validate_todo_update({"title": None})) == ["title: Title must be a string"]

    def test_null_checked_is_rejected(self):
        assert _errors(validate_todo_update({"checked": None})) == ["checked: Checked must be a boolean"]

    @pytest.mark.parametrize("description", ["", "   ", "\n\t"])
    def test_blank_description_clears_it(self, description):
        result = validate_todo_update({"description": description})
        assert isinstance(result, Valid)
        assert result.value.changes() == {"description": None}


class TestDescriptionNormalization:
    @pytest.mark.parametrize("description", ["", "   "])
    def test_blank_description_on_create_is_none(self, description):
        result = validate_todo_create({"title": "ok", "description": description})
        assert result.value.description is None


class TestModelRules:
    def test_rules_live_on_the_models(self):
        with pytest.raises(ValidationError):
            RegisterInput.model_validate({"username": "alice", "password": "weak"})
        with pytest.raises(ValidationError):
            TodoCreate.model_validate({"title": "x"})

    def test_rules_error_carries_every_failed_message(self):
        with pytest.raises(ValidationError) as excinfo:
            RegisterInput.model_validate({"username": "alice", "password": "abc"})
        (err,) = excinfo.value.errors()
        assert err["type"] == "rules"
        assert err["loc"] == ("password",)
        assert len(err["ctx"]["messages"]) == 3

    def test_strict_types_do_not_coerce(self):
        assert _errors(validate_todo_create({"title": "ok", "checked": 1})) == [
            "checked: Checked must be a boolean"
        ]
        assert _errors(validate_login({"username": 42, "password": "x"})) == [
            "username: Username is required"
        ]

    def test_unknown_error_types_fall_back_to_pydantic_message(self):
        with pytest.raises(ValidationError) as excinfo:
            TodoCreate.model_validate({"title": "ok", "description": "d" * 1025})
        assert error_messages(TodoCreate, excinfo.value) == [
            "description: Description must not exceed 1024 characters"
        ]
        with pytest.raises(ValidationError) as excinfo:
            SessionClaims.model_validate({"user_id": "x", "username": "a"})
        assert error_messages(SessionClaims, excinfo.value)[0].startswith("user_id: ")
