"""Typed exceptions for xkepster API and webhook failures.

Every failure surfaces as exactly one :class:`XkepsterError`. Callers can
either catch the concrete subclass or switch on ``err.kind``::

    try:
        client.users.retrieve(user_id)
    except XkepsterError as err:
        if err.kind is ErrorKind.RATE_LIMIT_ERROR:
            ...
"""
from __future__ import annotations
import enum
from typing import Any, Optional

DEFAULT_ERROR_MESSAGE = "Request failed"


class ErrorKind(str, enum.Enum):
    """Closed set of failure kinds."""
    CONNECTION_ERROR = "connection_error"
    TIMEOUT_ERROR = "timeout_error"
    RESPONSE_PARSING_ERROR = "response_parsing_error"
    VALIDATION_ERROR = "validation_error"
    AUTHENTICATION_ERROR = "authentication_error"
    NOT_FOUND_ERROR = "not_found_error"
    RATE_LIMIT_ERROR = "rate_limit_error"
    SERVER_ERROR = "server_error"
    API_ERROR = "api_error"
    WEBHOOK_VERIFICATION_ERROR = "webhook_verification_error"
    INVALID_WEBHOOK_ERROR = "invalid_webhook_error"


_RETRYABLE_KINDS = frozenset({
    ErrorKind.CONNECTION_ERROR,
    ErrorKind.TIMEOUT_ERROR,
    ErrorKind.RATE_LIMIT_ERROR,
    ErrorKind.SERVER_ERROR,
})


class XkepsterError(Exception):
    """Base exception for all xkepster operations.

    Attributes:
        kind: Failure kind
        message: Human readable message
        status: HTTP status code (HTTP kinds only)
        code: Service error code, when the response carried one
        details: Parsed response body (HTTP kinds only, may be None)
    """
    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    @property
    def is_retryable(self) -> bool:
        """Whether a caller-side retry (with backoff) may succeed."""
        return self.kind in _RETRYABLE_KINDS

    def __str__(self) -> str:
        if self.status is not None:
            return f"[{self.status}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r}, status={self.status!r})"


# Transport / parsing failures (no HTTP status)
class NetworkConnectionError(XkepsterError):
    """Connection refused, DNS failure, TLS failure or other transport error."""
    kind = ErrorKind.CONNECTION_ERROR


class RequestTimeoutError(XkepsterError):
    """Connect or read timeout."""
    kind = ErrorKind.TIMEOUT_ERROR


class ResponseParsingError(XkepsterError):
    """A successful response carried a body that is not valid JSON."""
    kind = ErrorKind.RESPONSE_PARSING_ERROR


# HTTP failures (status + parsed body)
class ApiError(XkepsterError):
    """HTTP error from the xkepster API (generic fallback for unmapped statuses)."""
    kind = ErrorKind.API_ERROR


class ValidationError(ApiError):
    """Request rejected as invalid (400)."""
    kind = ErrorKind.VALIDATION_ERROR


class AuthenticationError(ApiError):
    """Missing API key, or credentials rejected (401/403)."""
    kind = ErrorKind.AUTHENTICATION_ERROR


class NotFoundError(ApiError):
    """Resource does not exist (404)."""
    kind = ErrorKind.NOT_FOUND_ERROR


class RateLimitError(ApiError):
    """Too many requests (429). Backing off is the caller's job."""
    kind = ErrorKind.RATE_LIMIT_ERROR


class ServerError(ApiError):
    """Service-side failure (5xx)."""
    kind = ErrorKind.SERVER_ERROR


# Webhook failures
class WebhookVerificationError(XkepsterError):
    """Webhook signature could not be verified."""
    kind = ErrorKind.WEBHOOK_VERIFICATION_ERROR


class InvalidWebhookError(XkepsterError):
    """Webhook was authentic but its payload is malformed."""
    kind = ErrorKind.INVALID_WEBHOOK_ERROR


def message_from(parsed: Any) -> str:
    """Pick the error message out of a parsed response body."""
    if not isinstance(parsed, dict):
        return DEFAULT_ERROR_MESSAGE
    for key in ("message", "error"):
        value = parsed.get(key)
        if isinstance(value, str) and value:
            return value
    return DEFAULT_ERROR_MESSAGE


def _code_from(parsed: Any) -> Optional[str]:
    if isinstance(parsed, dict) and isinstance(parsed.get("code"), str):
        return parsed["code"]
    return None


def error_class_for_status(status: int) -> type[ApiError]:
    """Map a non-success HTTP status onto its exception class."""
    if status == 400:
        return ValidationError
    if status in (401, 403):
        return AuthenticationError
    if status == 404:
        return NotFoundError
    if status == 429:
        return RateLimitError
    if 500 <= status <= 599:
        return ServerError
    return ApiError


def error_for_status(status: int, parsed: Any) -> ApiError:
    """Build the typed error for a non-success response.

    Args:
        status: HTTP status code
        parsed: Parsed response body, or None when empty/unparseable

    Returns:
        Exception instance ready to raise
    """
    error_cls = error_class_for_status(status)
    return error_cls(message_from(parsed), status=status, code=_code_from(parsed), details=parsed)
