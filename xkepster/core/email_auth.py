"""Email magic-link authentication flow."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .base import ResourceService, resource_document, to_one


class EmailAuthService(ResourceService):
    """Register an email address, then verify the magic-link token."""

    def register(self, email: str, group_id: str) -> Any:
        relationships = {"group": to_one("groups", group_id)}
        document = resource_document("email_auths", {"email": email}, relationships=relationships)
        return self.client.post("email_auths", body=document)

    def verify_token(self, email_auth_id: str, token: str, user_params: Optional[Dict[str, Any]] = None) -> Any:
        attributes = {"token": token, "user_params": user_params or {}}
        document = resource_document("email_auths", attributes, resource_id=email_auth_id)
        return self.client.patch(f"email_auths/{email_auth_id}", body=document)

    def resend_magic_link(self, email_auth_id: str) -> Any:
        document = resource_document("email_auths", {}, resource_id=email_auth_id)
        return self.client.patch(f"email_auths/{email_auth_id}", body=document)
