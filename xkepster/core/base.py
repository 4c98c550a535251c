"""Shared plumbing for xkepster resource services."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Sequence, Union

if TYPE_CHECKING:
    from .client import XkepsterClient

Fields = Union[Sequence[str], str, Mapping[str, str], None]


def resource_document(
    resource_type: str,
    attributes: Optional[Dict[str, Any]] = None,
    resource_id: Optional[str] = None,
    relationships: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a JSON:API request document.

    Returns:
        ``{"data": {"type": ..., "id"?: ..., "attributes": ..., "relationships"?: ...}}``
    """
    data: Dict[str, Any] = {"type": resource_type}
    if resource_id is not None:
        data["id"] = resource_id
    data["attributes"] = attributes or {}
    if relationships:
        data["relationships"] = relationships
    return {"data": data}


def to_one(resource_type: str, resource_id: str) -> Dict[str, Any]:
    """JSON:API to-one relationship linkage."""
    return {"data": {"type": resource_type, "id": resource_id}}


def to_many(resource_type: str, resource_ids: Iterable[str]) -> Dict[str, Any]:
    """JSON:API to-many relationship linkage."""
    return {"data": [{"type": resource_type, "id": resource_id} for resource_id in resource_ids]}


class ResourceService:
    """Base class for services bound to an XkepsterClient."""

    def __init__(self, client: "XkepsterClient"):
        """Initialize the service.

        Args:
            client: Configured xkepster client
        """
        self.client = client

    @staticmethod
    def _fields_and_inputs(
        params: Optional[Mapping[str, Any]],
        resource_type: str,
        fields: Fields = None,
        field_inputs: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Attach sparse fieldsets and field inputs to query params.

        Args:
            params: Caller supplied query params (not mutated)
            resource_type: JSON:API type the fieldset applies to
            fields: List (joined with commas), string, or full ``fields`` mapping
            field_inputs: Arguments for calculated fields

        Returns:
            New params dictionary
        """
        merged = dict(params or {})
        if isinstance(fields, str):
            merged["fields"] = {resource_type: fields}
        elif isinstance(fields, Mapping):
            merged["fields"] = dict(fields)
        elif fields:
            merged["fields"] = {resource_type: ",".join(fields)}
        if field_inputs:
            merged["field_inputs"] = dict(field_inputs)
        return merged
