"""xkepster group management operations."""
from __future__ import annotations
from typing import Any, Mapping, Optional, Sequence, Union

from .base import ResourceService, resource_document

GroupFields = Union[Sequence[str], str, Mapping[str, str], bool, None]

DEFAULT_GROUP_FIELDS = ("name", "description", "auth_strategy", "allow_registration")


class GroupService(ResourceService):
    """Service for managing xkepster groups.

    Group reads request the full default fieldset unless ``fields=False`` is
    passed.
    """

    @staticmethod
    def _group_fields(params: Optional[Mapping[str, Any]],
                      fields: GroupFields) -> dict:
        merged = dict(params or {})
        if fields is None:
            merged["fields"] = {"groups": ",".join(DEFAULT_GROUP_FIELDS)}
        elif isinstance(fields, str):
            merged["fields"] = {"groups": fields}
        elif isinstance(fields, Mapping):
            merged["fields"] = dict(fields)
        elif fields is not False:
            merged["fields"] = {"groups": ",".join(fields)}
        return merged

    def list(self, params: Optional[Mapping[str, Any]] = None,
             fields: GroupFields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """List groups in the realm.

        Args:
            params: Filter, sort and page parameters
            fields: Fieldset override; False sends no fieldset
            field_inputs: Arguments for calculated fields

        Returns:
            JSON:API collection document
        """
        params = self._group_fields(params, fields)
        params = self._fields_and_inputs(params, "groups", None, field_inputs)
        return self.client.get("groups", params=params)

    def create(self, name: str, description: str, auth_strategy: str, allow_registration: bool) -> Any:
        """Create a group.

        Args:
            name: Display name
            description: Free-text description
            auth_strategy: Authentication strategy for members (e.g. SMS or email)
            allow_registration: Whether unknown users may self-register
        """
        attributes = {
            "name": name,
            "description": description,
            "auth_strategy": auth_strategy,
            "allow_registration": allow_registration,
        }
        return self.client.post("groups", body=resource_document("groups", attributes))

    def retrieve(self, group_id: str, fields: GroupFields = None,
                 field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        params = self._group_fields(None, fields)
        params = self._fields_and_inputs(params, "groups", None, field_inputs)
        return self.client.get(f"groups/{group_id}", params=params)

    def update(
        self,
        group_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        auth_strategy: Optional[str] = None,
        allow_registration: Optional[bool] = None,
    ) -> Any:
        """Update only the attributes that were given."""
        attributes = {
            "name": name,
            "description": description,
            "auth_strategy": auth_strategy,
            "allow_registration": allow_registration,
        }
        attributes = {key: value for key, value in attributes.items() if value is not None}
        return self.client.patch(f"groups/{group_id}", body=resource_document("groups", attributes, resource_id=group_id))

    def delete(self, group_id: str) -> Any:
        return self.client.delete(f"groups/{group_id}")
