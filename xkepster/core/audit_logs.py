"""Audit log queries."""
from __future__ import annotations
from typing import Any, Mapping, Optional

from .base import Fields, ResourceService


class AuditLogService(ResourceService):
    """Read-only access to the realm audit trail."""

    def list(self, params: Optional[Mapping[str, Any]] = None, fields: Fields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """List audit log entries (filters/pagination go in ``params``)."""
        params = self._fields_and_inputs(params, "audit_logs", fields, field_inputs)
        return self.client.get("audit_logs", params=params)

    def retrieve(self, audit_log_id: str, fields: Fields = None,
                 field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        params = self._fields_and_inputs(None, "audit_logs", fields, field_inputs)
        return self.client.get(f"audit_logs/{audit_log_id}", params=params)
