"""Request/response logging for the xkepster client.

Messages go through stdlib ``logging``; nothing sensitive is written:
mapping keys that look like credentials and long header values are replaced
with ``[REDACTED]``.
"""
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from xkepster.config.settings import LogLevel

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
SENSITIVE_KEY_MARKERS = ("password", "secret", "token", "api_key", "auth", "authorization", "credential")
MAX_CLEAR_HEADER_LENGTH = 20


def is_sensitive_key(key: Any) -> bool:
    key_str = str(key).lower()
    return any(marker in key_str for marker in SENSITIVE_KEY_MARKERS)


def deep_sanitize(obj: Any) -> Any:
    """Return a copy of ``obj`` with sensitive mapping values redacted."""
    if isinstance(obj, Mapping):
        return {
            key: REDACTED if is_sensitive_key(key) else deep_sanitize(value)
            for key, value in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [deep_sanitize(item) for item in obj]
    return obj


def sanitize_data(data: Any) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, (str, bytes)):
        return data if isinstance(data, str) else data.decode("utf-8", errors="replace")
    return repr(deep_sanitize(data))


def sanitize_headers(headers: Optional[Mapping[str, Any]]) -> Optional[str]:
    if headers is None:
        return None
    sanitized = {
        key: REDACTED if len(str(value)) > MAX_CLEAR_HEADER_LENGTH else value
        for key, value in headers.items()
    }
    return repr(sanitized)


def response_log_level(status: int) -> int:
    if 200 <= status <= 299:
        return logging.INFO
    if 300 <= status <= 499:
        return logging.WARNING
    if 500 <= status <= 599:
        return logging.ERROR
    return logging.INFO


class RequestLogger:
    """Logs API traffic for one client.

    Args:
        enabled: Master switch; when False every method is a no-op
        level: Client-side threshold applied before the logger's own level
        target: Logger to write to (defaults to this module's logger)
    """

    def __init__(self, enabled: bool = False, level: LogLevel | str = LogLevel.INFO,
                 target: Optional[logging.Logger] = None):
        self.enabled = enabled
        self.level = LogLevel.parse(level)
        self.logger = target or logger

    def _log(self, level: int, message: str) -> None:
        if not self.enabled or level < self.level.logging_level:
            return
        self.logger.log(level, message)

    def log_request(self, method: str, path: str, params: Any = None, body: Any = None,
                    headers: Optional[Mapping[str, Any]] = None) -> None:
        if not self.enabled:
            return
        message = f"API Request: {method.upper()} {path}"
        if params:
            message += f" | Params: {sanitize_data(params)}"
        if body:
            message += f" | Body: {sanitize_data(body)}"
        if headers:
            message += f" | Headers: {sanitize_headers(headers)}"
        self._log(logging.INFO, message)

    def log_response(self, method: str, path: str, status: int, body: Any = None,
                     duration: Optional[float] = None) -> None:
        if not self.enabled:
            return
        message = f"API Response: {method.upper()} {path} | Status: {status}"
        if duration is not None:
            message += f" | Duration: {duration:.3f}s"
        if body not in (None, "", b""):
            message += f" | Body: {sanitize_data(body)}"
        self._log(response_log_level(status), message)

    def log_error(self, error: BaseException, method: Optional[str] = None,
                  path: Optional[str] = None) -> None:
        if not self.enabled:
            return
        message = f"API Error: {type(error).__name__} - {error}"
        if method and path:
            message += f" | {method.upper()} {path}"
        self._log(logging.ERROR, message)
