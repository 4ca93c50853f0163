"""Custom exceptions for Hypersave SDK."""

from enum import Enum
from typing import Any

DEFAULT_TIMEOUT_MS = 30000


class ErrorKind(str, Enum):
    """Machine-readable error category carried by every Hypersave error."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVER = "server"
    PARSE = "parse"
    GENERIC = "generic"


class HypersaveError(Exception):
    """Base exception for all Hypersave errors.

    Raised directly for failures that have no more specific kind (unmapped
    HTTP status codes, unexpected exceptions).
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code!r})"


class AuthenticationError(HypersaveError):
    """Raised when the API key is missing or invalid (401/403)."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Invalid or missing API key", status_code: int = 401) -> None:
        super().__init__(message, status_code=status_code)


class ValidationError(HypersaveError):
    """Raised when request parameters are invalid (400 or local checks)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=400)
        self.details = details


class NotFoundError(HypersaveError):
    """Raised when a resource is not found (404)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(message, status_code=404)
        self.resource_type = resource_type
        self.resource_id = resource_id


class RateLimitError(HypersaveError):
    """Raised when rate limit is exceeded (429)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded", retry_after: int | None = None) -> None:
        super().__init__(message, status_code=429)
        # seconds until the limit resets
        self.retry_after = retry_after


class RequestTimeoutError(HypersaveError):
    """Raised when a request times out locally or the server answers 408."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int, message: str | None = None) -> None:
        super().__init__(message or f"Request timed out after {timeout_ms}ms", status_code=408)
        self.timeout_ms = timeout_ms


class NetworkError(HypersaveError):
    """Raised when the API cannot be reached."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str = "Network connection failed", cause: BaseException | None = None) -> None:
        super().__init__(message, cause=cause)


class ServerError(HypersaveError):
    """Raised when server returns 5xx error."""

    kind = ErrorKind.SERVER

    def __init__(self, message: str = "Internal server error", status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code)


class ParseError(HypersaveError):
    """Raised when the API response is malformed or unexpected."""

    kind = ErrorKind.PARSE

    def __init__(self, message: str = "Failed to parse API response", raw_response: str | None = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


def detail_int(details: dict[str, Any] | None, *keys: str) -> int | None:
    """Return the first integer value found under keys, or None."""
    if not isinstance(details, dict):
        return None
    for key in keys:
        value = details.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return int(value)
    return None


def error_from_status(
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
) -> HypersaveError:
    """
    Map an HTTP status code to the matching error.

    Pure and total: every status code yields exactly one error, and equal
    inputs always yield errors of the same kind with the same fields.

    Args:
        status_code: HTTP status code of the response
        message: User-facing error message
        details: Optional structured details from the response body

    Returns:
        The classified error (not raised)
    """
    if status_code == 400:
        return ValidationError(message, details)
    if status_code in (401, 403):
        return AuthenticationError(message, status_code)
    if status_code == 404:
        return NotFoundError(message)
    if status_code == 408:
        timeout_ms = detail_int(details, "timeout", "timeoutMillis")
        return RequestTimeoutError(DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms, message)
    if status_code == 429:
        return RateLimitError(message, detail_int(details, "retryAfter", "retryAfterSeconds"))
    if status_code in (500, 502, 503, 504):
        return ServerError(message, status_code)
    return HypersaveError(message, status_code)


def is_hypersave_error(error: Any) -> bool:
    """Check whether an object is a Hypersave error."""
    return isinstance(error, HypersaveError)


def is_error_kind(error: Any, kind: ErrorKind | str | type[HypersaveError]) -> bool:
    """
    Check whether an error is of a specific kind.

    Args:
        error: Any object, usually a caught exception
        kind: An ErrorKind, its string value, or an error class

    Returns:
        True if error is a Hypersave error of that kind

    Example:
        try:
            await client.ask("what did I save?")
        except HypersaveError as e:
            if is_error_kind(e, ErrorKind.RATE_LIMIT):
                await asyncio.sleep(e.retry_after or 1)
    """
    if not isinstance(error, HypersaveError):
        return False
    if isinstance(kind, type):
        return isinstance(error, kind)
    return error.kind == ErrorKind(kind)
