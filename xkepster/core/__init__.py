"""xkepster API client library.

Architecture:
- client.py: HTTP dispatcher with status-to-exception mapping
- exceptions.py: Typed exceptions (ErrorKind + subclasses)
- http_logger.py: Redacting request/response logging
- webhook.py: Webhook signature verification and payload parsing
- base.py: JSON:API helpers shared by resource services
- users.py, groups.py, sessions.py, tokens.py, operation_tokens.py,
  sms_auth.py, email_auth.py, audit_logs.py, realm.py: resource services

Usage:
    from xkepster.core import XkepsterClient

    client = XkepsterClient(api_key="...")
    client.users.create(first_name="Alice", last_name="Doe", email="alice@example.com")
"""
from .client import XkepsterClient, flatten_params, MEDIA_TYPE
from .exceptions import (
    ErrorKind,
    XkepsterError,
    NetworkConnectionError,
    RequestTimeoutError,
    ResponseParsingError,
    ApiError,
    ValidationError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    WebhookVerificationError,
    InvalidWebhookError,
    error_for_status,
)
from .webhook import (
    WebhookVerifier,
    OtpWebhook,
    MagicLinkWebhook,
    WebhookPayload,
    OTP_EVENT,
    MAGIC_LINK_EVENT,
    SIGNATURE_HEADER,
    EVENT_HEADER,
)
from .users import UserService
from .groups import GroupService
from .sessions import SessionService
from .tokens import TokenService
from .operation_tokens import OperationTokenService
from .sms_auth import SmsAuthService
from .email_auth import EmailAuthService
from .audit_logs import AuditLogService
from .realm import RealmService

__all__ = [
    # Client
    "XkepsterClient",
    "flatten_params",
    "MEDIA_TYPE",

    # Exceptions
    "ErrorKind",
    "XkepsterError",
    "NetworkConnectionError",
    "RequestTimeoutError",
    "ResponseParsingError",
    "ApiError",
    "ValidationError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "WebhookVerificationError",
    "InvalidWebhookError",
    "error_for_status",

    # Webhooks
    "WebhookVerifier",
    "OtpWebhook",
    "MagicLinkWebhook",
    "WebhookPayload",
    "OTP_EVENT",
    "MAGIC_LINK_EVENT",
    "SIGNATURE_HEADER",
    "EVENT_HEADER",

    # Services
    "UserService",
    "GroupService",
    "SessionService",
    "TokenService",
    "OperationTokenService",
    "SmsAuthService",
    "EmailAuthService",
    "AuditLogService",
    "RealmService",
]
