"""Low-level HTTP client for the xkepster API.

Handles header construction, request execution, timing and mapping of
transport/HTTP outcomes onto typed exceptions.
"""
from __future__ import annotations
import json
import threading
import time
from typing import Any, Dict, Mapping, Optional

import requests

from xkepster.config.settings import Configuration, LogLevel, get_config
from .exceptions import (
    AuthenticationError,
    NetworkConnectionError,
    RequestTimeoutError,
    ResponseParsingError,
    error_for_status,
)
from .http_logger import RequestLogger

MEDIA_TYPE = "application/vnd.api+json"
API_KEY_HEADER = "X-Kepster-Key"
MACHINE_TOKEN_HEADER = "X-Machine-Token"
ALLOWED_METHODS = frozenset({"GET", "POST", "PATCH", "DELETE"})


def flatten_params(params: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested query parameters into bracket notation.

    ``{"fields": {"users": "email"}}`` becomes ``{"fields[users]": "email"}``,
    which is how JSON:API sparse fieldsets travel on the query string.
    """
    flat: Dict[str, Any] = {}
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_params(value, name))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        else:
            flat[name] = value
    return flat


class XkepsterClient:
    """HTTP client for the xkepster API.

    Features:
    - Per-client configuration cloned from the process default
    - Lazily built, shared ``requests.Session``
    - Centralized status-to-exception mapping

    Usage:
        client = XkepsterClient(api_key="sk_live_...")
        users = client.users.list()
        client.get("realm")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        open_timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        machine_token: Optional[str] = None,
        webhook_secret: Optional[str] = None,
        logging_enabled: Optional[bool] = None,
        log_level: Optional[LogLevel | str] = None,
        logger=None,
        config: Optional[Configuration] = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key sent as X-Kepster-Key (defaults to XKEPSTER_API_KEY)
            base_url: API base URL (defaults to XKEPSTER_BASE_URL)
            timeout: Read timeout in seconds
            open_timeout: Connect timeout in seconds
            user_agent: User-Agent header value
            machine_token: Optional machine identity token sent as X-Machine-Token
            webhook_secret: Secret used by ``client.webhooks``
            logging_enabled: Log requests/responses through ``logging``
            log_level: Minimum level for request logging
            logger: Custom ``logging.Logger`` for request logging
            config: Explicit configuration; replaces the process default as base
        """
        base = config if config is not None else get_config()
        self._config = base.with_overrides(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            open_timeout=open_timeout,
            user_agent=user_agent,
            machine_token=machine_token,
            webhook_secret=webhook_secret,
            logging_enabled=logging_enabled,
            log_level=log_level,
            logger=logger,
        )
        self._session: Optional[requests.Session] = None
        self._session_lock = threading.Lock()
        self._request_logger = RequestLogger(
            enabled=self._config.logging_enabled,
            level=self._config.log_level,
            target=self._config.logger,
        )

        from .users import UserService
        from .groups import GroupService
        from .sms_auth import SmsAuthService
        from .email_auth import EmailAuthService
        from .sessions import SessionService
        from .tokens import TokenService
        from .operation_tokens import OperationTokenService
        from .audit_logs import AuditLogService
        from .realm import RealmService
        from .webhook import WebhookVerifier

        self.users = UserService(self)
        self.groups = GroupService(self)
        self.sms_auth = SmsAuthService(self)
        self.email_auth = EmailAuthService(self)
        self.sessions = SessionService(self)
        self.tokens = TokenService(self)
        self.operation_tokens = OperationTokenService(self)
        self.audit_logs = AuditLogService(self)
        self.realm = RealmService(self)
        self.webhooks = WebhookVerifier(config=self._config)

    @property
    def config(self) -> Configuration:
        return self._config

    def __repr__(self) -> str:
        return f"<XkepsterClient config={self._config!r}>"

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────
    @property
    def session(self) -> requests.Session:
        """Shared transport, built on first use."""
        session = self._session
        if session is None:
            with self._session_lock:
                if self._session is None:
                    self._session = self._build_session()
                session = self._session
        return session

    def _build_session(self) -> requests.Session:
        return requests.Session()

    def close(self) -> None:
        """Release the pooled connections, if any were opened."""
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def __enter__(self) -> "XkepsterClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Verb helpers
    # ─────────────────────────────────────────────────────────────────────────
    def get(self, path: str, params: Optional[Mapping[str, Any]] = None,
            headers: Optional[Mapping[str, str]] = None) -> Any:
        """Execute GET request."""
        return self.request("GET", path, params=params, headers=headers)

    def post(self, path: str, body: Any = None, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Execute POST request with a JSON:API body."""
        return self.request("POST", path, body=body, headers=headers)

    def patch(self, path: str, body: Any = None, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Execute PATCH request with a JSON:API body."""
        return self.request("PATCH", path, body=body, headers=headers)

    def delete(self, path: str, params: Optional[Mapping[str, Any]] = None,
               headers: Optional[Mapping[str, str]] = None) -> Any:
        """Execute DELETE request."""
        return self.request("DELETE", path, params=params, headers=headers)

    # ─────────────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────────────
    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Execute a single API request.

        Args:
            method: GET, POST, PATCH or DELETE
            path: Path relative to the base URL (e.g. "users/123")
            body: JSON-serializable request body
            params: Query parameters; nested mappings use bracket notation
            headers: Extra headers, applied over the defaults

        Returns:
            Parsed JSON body; ``{}`` for empty success responses

        Raises:
            AuthenticationError: API key missing, or 401/403
            ValidationError, NotFoundError, RateLimitError, ServerError, ApiError:
                Non-success HTTP status
            RequestTimeoutError: Connect or read timeout
            NetworkConnectionError: Any other transport failure
            ResponseParsingError: Success response with a non-JSON body
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        self._ensure_api_key()

        request_headers = self._default_headers()
        if headers:
            request_headers.update(headers)
        query = flatten_params(params) if params else None
        data = json.dumps(body) if body is not None else None

        self._request_logger.log_request(method, path, params=params, body=body, headers=headers)
        start = time.monotonic()
        try:
            resp = self.session.request(
                method,
                self._url(path),
                params=query,
                data=data,
                headers=request_headers,
                timeout=(self._config.open_timeout, self._config.timeout),
            )
        except requests.Timeout as e:
            self._request_logger.log_error(e, method=method, path=path)
            raise RequestTimeoutError(str(e) or "Request timed out") from e
        except requests.ConnectionError as e:
            self._request_logger.log_error(e, method=method, path=path)
            raise NetworkConnectionError(str(e) or "Connection failed") from e
        except requests.RequestException as e:
            self._request_logger.log_error(e, method=method, path=path)
            raise NetworkConnectionError(str(e) or "Request failed") from e
        duration = time.monotonic() - start

        return self._handle_response(resp, method, path, duration)

    def _ensure_api_key(self) -> None:
        if not self._config.has_api_key:
            raise AuthenticationError(
                "API key is missing. Set XKEPSTER_API_KEY or pass api_key to XkepsterClient"
            )

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            API_KEY_HEADER: self._config.api_key,
            "Content-Type": MEDIA_TYPE,
            "Accept": MEDIA_TYPE,
            "User-Agent": self._config.user_agent,
        }
        if self._config.machine_token:
            headers[MACHINE_TOKEN_HEADER] = self._config.machine_token
        return headers

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _handle_response(self, resp: requests.Response, method: str, path: str, duration: float) -> Any:
        """Centralized status handling.

        Raises:
            ApiError subclass: If the status is not a success code
            ResponseParsingError: If a success body is not JSON
        """
        status = resp.status_code

        if status in (200, 201, 202, 204):
            try:
                parsed = self._parse_body(resp)
            except ResponseParsingError as e:
                self._request_logger.log_response(method, path, status=status, body=resp.content,
                                                  duration=duration)
                self._request_logger.log_error(e, method=method, path=path)
                raise
            self._request_logger.log_response(method, path, status=status, body=parsed, duration=duration)
            return {} if parsed is None else parsed

        try:
            parsed = self._parse_body(resp)
        except ResponseParsingError:
            parsed = None
        self._request_logger.log_response(method, path, status=status, body=parsed, duration=duration)
        raise error_for_status(status, parsed)

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        content = resp.content
        if not content or not content.strip():
            return None
        try:
            return json.loads(content)
        except ValueError as e:
            raise ResponseParsingError(f"Invalid JSON in response body: {e}") from e
