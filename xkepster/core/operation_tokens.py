"""Single-use operation tokens (step-up confirmation for sensitive actions)."""
from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from .base import Fields, ResourceService, resource_document, to_one


class OperationTokenService(ResourceService):
    """Service for issuing and consuming operation tokens."""

    def list(self, params: Optional[Mapping[str, Any]] = None, fields: Fields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        params = self._fields_and_inputs(params, "operation_tokens", fields, field_inputs)
        return self.client.get("operation_tokens", params=params)

    def create(self, purpose: str, expires_at: str, user_id: str,
               metadata: Optional[Dict[str, Any]] = None) -> Any:
        """Issue an operation token for a user.

        Args:
            purpose: What the token authorizes (checked again on consumption)
            expires_at: ISO 8601 expiry timestamp
            user_id: Owner of the token
            metadata: Free-form context stored with the token

        Returns:
            Created operation token document
        """
        attributes = {"purpose": purpose, "expires_at": expires_at, "metadata": metadata or {}}
        relationships = {"user": to_one("users", user_id)}
        document = resource_document("operation_tokens", attributes, relationships=relationships)
        return self.client.post("operation_tokens", body=document)

    def verify_and_consume(self, operation_token_id: str, token: str, purpose: str) -> Any:
        """Verify a token value against its purpose and mark it used.

        Raises:
            ValidationError: If the token is wrong, expired or already consumed
        """
        attributes = {"token": token, "purpose": purpose}
        document = resource_document("operation_tokens", attributes, resource_id=operation_token_id)
        return self.client.patch(f"operation_tokens/{operation_token_id}", body=document)
