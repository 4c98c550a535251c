"""xkepster session management operations."""
from __future__ import annotations
from typing import Any, Mapping, Optional

from .base import Fields, ResourceService, resource_document


class SessionService(ResourceService):
    """Service for managing end-user sessions."""

    def list(self, params: Optional[Mapping[str, Any]] = None, fields: Fields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """List sessions.

        Args:
            params: Filter and page parameters (e.g. ``{"filter": {"active": True}}``)
            fields: Sparse fieldset for the ``sessions`` type
            field_inputs: Arguments for calculated fields

        Returns:
            JSON:API collection document
        """
        params = self._fields_and_inputs(params, "sessions", fields, field_inputs)
        return self.client.get("sessions", params=params)

    def retrieve(self, session_id: str, fields: Fields = None,
                 field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        params = self._fields_and_inputs(None, "sessions", fields, field_inputs)
        return self.client.get(f"sessions/{session_id}", params=params)

    def revoke(self, session_id: str) -> Any:
        """Deactivate a session; its tokens stop working immediately."""
        document = resource_document("sessions", {"active": False}, resource_id=session_id)
        return self.client.patch(f"sessions/{session_id}", body=document)

    def update_activity(self, session_id: str) -> Any:
        """Touch a session to extend its idle timeout."""
        document = resource_document("sessions", {}, resource_id=session_id)
        return self.client.patch(f"sessions/{session_id}", body=document)
