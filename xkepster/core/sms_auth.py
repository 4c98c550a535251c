"""SMS one-time-password authentication flow."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .base import ResourceService, resource_document, to_one


class SmsAuthService(ResourceService):
    """Register a phone number, then verify the OTP delivered to it.

    The OTP itself reaches the host application through an ``otp`` webhook
    (see :meth:`WebhookVerifier.parse_otp_webhook`).
    """

    def register(self, phone_number: str, group_id: str) -> Any:
        """Start an SMS authentication for a phone number in a group."""
        relationships = {"group": to_one("groups", group_id)}
        document = resource_document("sms_auths", {"phone_number": phone_number}, relationships=relationships)
        return self.client.post("sms_auths", body=document)

    def verify_otp(self, sms_auth_id: str, otp: str, user_params: Optional[Dict[str, Any]] = None) -> Any:
        """Verify the OTP; ``user_params`` seed the user on first registration.

        Returns:
            Document carrying the session and access token on success
        """
        attributes = {"otp": otp, "user_params": user_params or {}}
        document = resource_document("sms_auths", attributes, resource_id=sms_auth_id)
        return self.client.patch(f"sms_auths/{sms_auth_id}", body=document)

    def resend_otp(self, sms_auth_id: str) -> Any:
        document = resource_document("sms_auths", {}, resource_id=sms_auth_id)
        return self.client.patch(f"sms_auths/{sms_auth_id}", body=document)
