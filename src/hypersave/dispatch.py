"""Request building and response classification shared by the async and sync clients."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    HypersaveError,
    NetworkError,
    ParseError,
    RequestTimeoutError,
    detail_int,
    error_from_status,
)

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]
ModelT = TypeVar("ModelT", bound=BaseModel)

API_KEY_HEADER = "X-API-Key"
USER_ID_HEADER = "x-user-id"


@dataclass(frozen=True)
class RequestContext:
    """Everything needed to issue one API call."""

    method: HttpMethod
    path: str
    body: Optional[dict[str, Any]] = None
    user_id: Optional[str] = None
    params: Optional[dict[str, Any]] = None


def clean_body(body: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    """Drop keys whose value is None; they are omitted on the wire."""
    if body is None:
        return None
    return {k: v for k, v in body.items() if v is not None}


def build_url(base_url: str, path: str) -> str:
    return f"{base_url}{path}"


def resolve_user_id(
    override: Optional[str],
    body: Optional[Mapping[str, Any]],
    default: Optional[str],
) -> Optional[str]:
    """
    Resolve the user id sent with a request.

    Precedence: per-call override, then a ``userId`` key in the body, then
    the configured default. Empty strings count as absent.
    """
    if override:
        return override
    if body and body.get("userId"):
        return body["userId"]
    return default or None


def build_headers(api_key: str, user_id: Optional[str] = None) -> dict[str, str]:
    """Build request headers. Returns a new mapping on every call."""
    headers = {
        "Content-Type": "application/json",
        API_KEY_HEADER: api_key,
    }
    if user_id:
        headers[USER_ID_HEADER] = user_id
    return headers


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type")
    return bool(content_type) and "application/json" in content_type.lower()


def _retry_after_header(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("retry-after")
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_response(response: httpx.Response) -> Any:
    """
    Validate an API response envelope.

    Args:
        response: A fully read httpx response

    Returns:
        The decoded JSON body, unchanged

    Raises:
        ParseError: Success status with a non-JSON or malformed body
        HypersaveError: Failure status or ``success: false`` in the body,
            classified by status code
    """
    if not _is_json(response):
        text = response.text
        if not response.is_success:
            raise error_from_status(response.status_code, text or "Request failed")
        raise ParseError("Expected JSON response", raw_response=text)

    try:
        data = response.json()
    except ValueError:
        if not response.is_success:
            raise error_from_status(response.status_code, response.text or "Request failed")
        raise ParseError("Invalid JSON response", raw_response=response.text)

    if not isinstance(data, dict):
        if not response.is_success:
            raise error_from_status(response.status_code, "Request failed")
        raise ParseError("Expected JSON object", raw_response=response.text)

    if not response.is_success or data.get("success") is False:
        message = data.get("error") or data.get("message") or "Request failed"
        details = data.get("details") if isinstance(data.get("details"), dict) else None
        if response.status_code == 429:
            retry_after = _retry_after_header(response)
            if retry_after is not None and detail_int(details, "retryAfter", "retryAfterSeconds") is None:
                details = {**(details or {}), "retryAfter": retry_after}
        raise error_from_status(response.status_code, str(message), details)

    return data


def translate_exception(exc: BaseException, timeout_ms: int) -> HypersaveError:
    """
    Map an exception raised while sending a request to a Hypersave error.

    Hypersave errors are returned as-is so they are never wrapped twice.
    """
    if isinstance(exc, HypersaveError):
        return exc
    # httpx.TimeoutException is a TransportError, so it is checked first
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return RequestTimeoutError(timeout_ms)
    if isinstance(exc, httpx.TransportError):
        return NetworkError("Failed to connect to Hypersave API", cause=exc)
    return HypersaveError(str(exc) or "Unknown error", cause=exc)


def load_model(model: type[ModelT], data: Any) -> ModelT:
    """
    Validate a decoded response body into a response model.

    Raises:
        ParseError: The body does not have the expected shape
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.debug("Response did not match %s: %s", model.__name__, e)
        raise ParseError(
            f"Unexpected response shape for {model.__name__}",
            raw_response=json.dumps(data, default=str),
        ) from e
