"""Tests for the error taxonomy."""

import pytest

from taskapi.errors import (
    AccessDeniedError,
    ErrorKind,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    TaskAPIError,
    ValidationError,
    status_code_for,
)


@pytest.mark.parametrize(
    ("error", "kind", "code"),
    [
        (ValidationError("bad"), ErrorKind.VALIDATION, 400),
        (InvalidCredentialsError(), ErrorKind.INVALID_CREDENTIALS, 401),
        (InvalidTokenError(), ErrorKind.INVALID_TOKEN, 401),
        (AccessDeniedError(), ErrorKind.ACCESS_DENIED, 403),
        (NotFoundError(), ErrorKind.NOT_FOUND, 404),
    ],
)
def test_kind_maps_to_status(error: TaskAPIError, kind: ErrorKind, code: int) -> None:
    assert error.kind is kind
    assert status_code_for(error) == code


def test_status_ignores_message_text() -> None:
    """The message never decides the status code."""
    assert status_code_for(NotFoundError("access denied")) == 404
    assert status_code_for(AccessDeniedError("Task not found")) == 403


def test_default_messages() -> None:
    assert InvalidCredentialsError().message == "invalid email or password"
    assert str(InvalidTokenError()) == "Invalid or expired token"
    assert ValidationError("title is required").message == "title is required"
