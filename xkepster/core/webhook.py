"""Webhook signature verification and payload parsing.

xkepster notifies the host application about OTP and magic-link deliveries
with a signed POST. The ``X-Webhook-Signature`` header carries the lowercase
hex HMAC-SHA256 of the raw request body under the shared webhook secret.

The verifier only ever accepts the raw body (``bytes`` or ``str``) exactly as
received: re-serializing a parsed object can change whitespace or key order
and would not match the signature.

Usage:
    verifier = WebhookVerifier(webhook_secret=os.environ["XKEPSTER_WEBHOOK_SECRET"])
    event = verifier.parse_otp_webhook(
        request.headers[SIGNATURE_HEADER], request.get_data()
    )
    send_sms(event.recipient, event.code)
"""
from __future__ import annotations
import hashlib
import hmac
import json
import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

from xkepster.config.settings import Configuration, get_config
from .exceptions import InvalidWebhookError, WebhookVerificationError

logger = logging.getLogger(__name__)

OTP_EVENT = "otp"
MAGIC_LINK_EVENT = "magic_link"
SIGNATURE_HEADER = "X-Webhook-Signature"
EVENT_HEADER = "X-Webhook-Event"

SIGNATURE_PREFIX_LENGTH = 8
OTP_CODE_PATTERN = re.compile(r"[0-9]{6}")

RawBody = Union[bytes, bytearray, str]


@dataclass(frozen=True)
class OtpWebhook:
    """OTP delivery event."""
    recipient: str
    code: str
    timestamp: Any
    validity_seconds: int
    tenant: Optional[str] = None
    type: str = OTP_EVENT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MagicLinkWebhook:
    """Magic-link delivery event."""
    recipient: str
    link: str
    timestamp: Any
    validity_seconds: int
    tenant: Optional[str] = None
    type: str = MAGIC_LINK_EVENT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


WebhookPayload = Union[OtpWebhook, MagicLinkWebhook]


def compute_signature(secret: str, body: RawBody) -> str:
    """Lowercase hex HMAC-SHA256 of ``body`` under ``secret``."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), bytes(body), hashlib.sha256).hexdigest()


def secure_compare(a: str, b: str) -> bool:
    """Constant-time string comparison.

    Delegates to ``hmac.compare_digest`` over UTF-8 bytes: unequal lengths
    compare false, and equal-length inputs are scanned in full.
    """
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def _missing(payload: Dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [name for name in fields if name not in payload]


class WebhookVerifier:
    """Verifies and parses xkepster webhooks.

    Stateless apart from the secret, so one instance can serve concurrent
    requests.
    """

    def __init__(self, webhook_secret: Optional[str] = None, config: Optional[Configuration] = None):
        """Initialize the verifier.

        Args:
            webhook_secret: Shared secret
            config: Configuration to take the secret from when none is given
                (defaults to the process configuration, i.e. XKEPSTER_WEBHOOK_SECRET)
        """
        if webhook_secret is None:
            webhook_secret = (config if config is not None else get_config()).webhook_secret
        self.webhook_secret = webhook_secret

    def __repr__(self) -> str:
        return f"<WebhookVerifier secret={'[REDACTED]' if self.webhook_secret else None}>"

    # ─────────────────────────────────────────────────────────────────────────
    # Signature
    # ─────────────────────────────────────────────────────────────────────────
    def _signature_failure(self, signature: Optional[str], body: Optional[RawBody]) -> Optional[str]:
        """Return why the signature does not verify, or None when it does."""
        if not self.webhook_secret:
            return "webhook secret is not configured"
        if not signature or not isinstance(signature, str):
            return "signature is missing"
        if body is None:
            return "request body is missing"
        if not isinstance(body, (bytes, bytearray, str)):
            return f"request body must be the raw bytes as received, not {type(body).__name__}"

        expected = compute_signature(self.webhook_secret, body)
        if not secure_compare(signature, expected):
            return f"signature mismatch (received {signature[:SIGNATURE_PREFIX_LENGTH]}...)"
        return None

    def verify_signature(self, signature: Optional[str], body: Optional[RawBody]) -> bool:
        """Check the HMAC-SHA256 signature of a raw webhook body.

        Args:
            signature: The X-Webhook-Signature header value
            body: The raw request body

        Returns:
            True if the signature is valid; False otherwise (never raises)
        """
        return self._signature_failure(signature, body) is None

    # ─────────────────────────────────────────────────────────────────────────
    # Parsing
    # ─────────────────────────────────────────────────────────────────────────
    def verify_and_parse(
        self,
        signature: Optional[str],
        body: Optional[RawBody],
        expected_event_type: Optional[str] = None,
    ) -> WebhookPayload:
        """Verify the signature, then validate and parse the payload.

        Args:
            signature: The X-Webhook-Signature header value
            body: The raw request body
            expected_event_type: Event type from the X-Webhook-Event header, if any

        Returns:
            OtpWebhook or MagicLinkWebhook

        Raises:
            WebhookVerificationError: If the signature does not verify
            InvalidWebhookError: If the payload is malformed
        """
        failure = self._signature_failure(signature, body)
        if failure is not None:
            logger.warning(f"Rejected webhook: {failure}")
            raise WebhookVerificationError(f"Invalid webhook signature: {failure}")

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise InvalidWebhookError(f"Invalid JSON payload: {e}") from e

        return self._build_payload(payload, expected_event_type)

    def parse_otp_webhook(self, signature: Optional[str], body: Optional[RawBody]) -> OtpWebhook:
        """Verify and parse an OTP delivery webhook."""
        return self.verify_and_parse(signature, body, OTP_EVENT)

    def parse_magic_link_webhook(self, signature: Optional[str], body: Optional[RawBody]) -> MagicLinkWebhook:
        """Verify and parse a magic-link delivery webhook."""
        return self.verify_and_parse(signature, body, MAGIC_LINK_EVENT)

    def _build_payload(self, payload: Any, expected_event_type: Optional[str]) -> WebhookPayload:
        if not isinstance(payload, dict):
            raise InvalidWebhookError("Payload must be a JSON object")

        missing = _missing(payload, ("type", "timestamp"))
        if missing:
            raise InvalidWebhookError(f"Missing required fields: {', '.join(missing)}")

        event_type = payload["type"]
        if expected_event_type is not None and event_type != expected_event_type:
            raise InvalidWebhookError(f"Expected event type {expected_event_type}, got {event_type}")

        # validitySeconds is accepted as an alias of the canonical key
        if "validity_seconds" not in payload and "validitySeconds" in payload:
            payload["validity_seconds"] = payload["validitySeconds"]

        if event_type == OTP_EVENT:
            self._validate_otp(payload)
            return OtpWebhook(
                recipient=payload["recipient"],
                code=payload["code"],
                timestamp=payload["timestamp"],
                validity_seconds=payload["validity_seconds"],
                tenant=payload.get("tenant"),
            )
        if event_type == MAGIC_LINK_EVENT:
            self._validate_magic_link(payload)
            return MagicLinkWebhook(
                recipient=payload["recipient"],
                link=payload["link"],
                timestamp=payload["timestamp"],
                validity_seconds=payload["validity_seconds"],
                tenant=payload.get("tenant"),
            )
        raise InvalidWebhookError(f"Unknown webhook event type: {event_type}")

    @staticmethod
    def _validate_validity(payload: Dict[str, Any]) -> None:
        value = payload["validity_seconds"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidWebhookError("validity_seconds must be an integer")

    def _validate_otp(self, payload: Dict[str, Any]) -> None:
        missing = _missing(payload, ("recipient", "code", "validity_seconds"))
        if missing:
            raise InvalidWebhookError(f"OTP webhook missing required fields: {', '.join(missing)}")

        code = payload["code"]
        if not isinstance(code, str) or not OTP_CODE_PATTERN.fullmatch(code):
            raise InvalidWebhookError("Invalid OTP code format")
        self._validate_validity(payload)

    def _validate_magic_link(self, payload: Dict[str, Any]) -> None:
        missing = _missing(payload, ("recipient", "link", "validity_seconds"))
        if missing:
            raise InvalidWebhookError(f"Magic link webhook missing required fields: {', '.join(missing)}")

        link = payload["link"]
        if not isinstance(link, str) or not link.startswith("http"):
            raise InvalidWebhookError("Invalid magic link URL format")
        self._validate_validity(payload)
