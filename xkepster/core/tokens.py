"""Access token operations."""
from __future__ import annotations
from typing import Any, Mapping, Optional

from .base import Fields, ResourceService, resource_document


class TokenService(ResourceService):
    """Service for listing, rotating and revoking access tokens."""

    def list(self, params: Optional[Mapping[str, Any]] = None, fields: Fields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        params = self._fields_and_inputs(params, "tokens", fields, field_inputs)
        return self.client.get("tokens", params=params)

    def rotate(self, token_id: str) -> Any:
        """Issue a replacement token; the response carries the new secret."""
        return self.client.patch(f"tokens/{token_id}", body=resource_document("tokens", {}, resource_id=token_id))

    def revoke(self, token_id: str) -> Any:
        document = resource_document("tokens", {"revoked": True}, resource_id=token_id)
        return self.client.patch(f"tokens/{token_id}", body=document)
