"""Unit tests for Hypersave error classification."""

import pytest

from hypersave import (
    AuthenticationError,
    ErrorKind,
    HypersaveError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
    error_from_status,
    is_error_kind,
    is_hypersave_error,
)


@pytest.mark.parametrize(
    ("status_code", "error_class", "kind"),
    [
        (400, ValidationError, ErrorKind.VALIDATION),
        (401, AuthenticationError, ErrorKind.AUTHENTICATION),
        (403, AuthenticationError, ErrorKind.AUTHENTICATION),
        (404, NotFoundError, ErrorKind.NOT_FOUND),
        (408, RequestTimeoutError, ErrorKind.TIMEOUT),
        (429, RateLimitError, ErrorKind.RATE_LIMIT),
        (500, ServerError, ErrorKind.SERVER),
        (502, ServerError, ErrorKind.SERVER),
        (503, ServerError, ErrorKind.SERVER),
        (504, ServerError, ErrorKind.SERVER),
    ],
)
def test_error_from_status_mapped(status_code: int, error_class: type, kind: ErrorKind) -> None:
    """Test each mapped status code yields its error kind and keeps the message."""
    error = error_from_status(status_code, "something went wrong")

    assert type(error) is error_class
    assert error.kind == kind
    assert error.message == "something went wrong"
    assert str(error) == "something went wrong"


@pytest.mark.parametrize("status_code", [200, 302, 409, 418, 422, 501, 599])
def test_error_from_status_unmapped_is_generic(status_code: int) -> None:
    """Test unmapped status codes fall back to the generic error."""
    error = error_from_status(status_code, "odd status")

    assert type(error) is HypersaveError
    assert error.kind == ErrorKind.GENERIC
    assert error.status_code == status_code
    assert error.message == "odd status"


def test_server_error_keeps_status_code() -> None:
    error = error_from_status(503, "maintenance")

    assert isinstance(error, ServerError)
    assert error.status_code == 503


def test_validation_error_keeps_details() -> None:
    details = {"field": "content", "reason": "too long"}

    error = error_from_status(400, "bad request", details)

    assert isinstance(error, ValidationError)
    assert error.details == details
    assert error.status_code == 400


def test_auth_error_keeps_403_status() -> None:
    """Test 403 maps to the authentication kind and keeps its status code."""
    error = error_from_status(403, "forbidden")

    assert isinstance(error, AuthenticationError)
    assert error.status_code == 403

    assert error_from_status(401, "no key").status_code == 401


def test_rate_limit_retry_after_from_details() -> None:
    error = error_from_status(429, "slow down", {"retryAfter": 30})
    assert isinstance(error, RateLimitError)
    assert error.retry_after == 30

    error = error_from_status(429, "slow down", {"retryAfterSeconds": 12})
    assert error.retry_after == 12

    error = error_from_status(429, "slow down")
    assert error.retry_after is None


def test_timeout_from_408_details() -> None:
    error = error_from_status(408, "server gave up", {"timeoutMillis": 5000})
    assert isinstance(error, RequestTimeoutError)
    assert error.timeout_ms == 5000
    assert error.message == "server gave up"

    error = error_from_status(408, "server gave up")
    assert error.timeout_ms == 30000


def test_timeout_from_408_keeps_zero() -> None:
    error = error_from_status(408, "server gave up", {"timeoutMillis": 0})
    assert error.timeout_ms == 0


def test_error_from_status_is_deterministic() -> None:
    """Test identical inputs produce equal errors."""
    details = {"retryAfter": 5}

    first = error_from_status(429, "limited", details)
    second = error_from_status(429, "limited", details)

    assert type(first) is type(second)
    assert (first.message, first.status_code, first.retry_after) == (
        second.message,
        second.status_code,
        second.retry_after,
    )


def test_error_from_status_never_raises_on_odd_details() -> None:
    """Test malformed details are ignored rather than raising."""
    error = error_from_status(429, "limited", {"retryAfter": "soon"})
    assert error.retry_after is None

    error = error_from_status(408, "slow", {"timeout": None})
    assert error.timeout_ms == 30000


def test_default_messages() -> None:
    assert AuthenticationError().message == "Invalid or missing API key"
    assert AuthenticationError().status_code == 401
    assert RateLimitError().message == "Rate limit exceeded"
    assert RateLimitError().status_code == 429
    assert RequestTimeoutError(1500).message == "Request timed out after 1500ms"
    assert NetworkError().status_code is None
    assert ServerError().status_code == 500
    assert ParseError().raw_response is None


def test_network_error_keeps_cause() -> None:
    cause = ConnectionRefusedError("refused")

    error = NetworkError("Failed to connect", cause=cause)

    assert error.cause is cause
    assert error.kind == ErrorKind.NETWORK


def test_not_found_resource_fields() -> None:
    error = NotFoundError("Memory not found", resource_type="memory", resource_id="doc-1")

    assert error.resource_type == "memory"
    assert error.resource_id == "doc-1"


def test_is_error_kind() -> None:
    error = RateLimitError(retry_after=10)

    assert is_error_kind(error, ErrorKind.RATE_LIMIT)
    assert is_error_kind(error, "rate_limit")
    assert is_error_kind(error, RateLimitError)
    assert is_error_kind(error, HypersaveError)
    assert not is_error_kind(error, ErrorKind.SERVER)
    assert not is_error_kind(ValueError("nope"), ErrorKind.GENERIC)


def test_is_hypersave_error() -> None:
    assert is_hypersave_error(ParseError("bad", raw_response="x"))
    assert is_hypersave_error(HypersaveError("generic"))
    assert not is_hypersave_error(RuntimeError("other"))
    assert not is_hypersave_error(None)


def test_every_kind_subclasses_base_directly() -> None:
    """Test the error set is flat: one level below HypersaveError."""
    for error_class in (
        AuthenticationError,
        ValidationError,
        NotFoundError,
        RateLimitError,
        RequestTimeoutError,
        NetworkError,
        ServerError,
        ParseError,
    ):
        assert error_class.__bases__ == (HypersaveError,)
