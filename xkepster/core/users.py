"""xkepster user management operations."""
from __future__ import annotations
from typing import Any, Dict, Mapping, Optional, Sequence

from .base import Fields, ResourceService, resource_document, to_many


class UserService(ResourceService):
    """Service for managing xkepster users."""

    def list(self, params: Optional[Mapping[str, Any]] = None, fields: Fields = None,
             field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """List users.

        Args:
            params: Filter, sort and page parameters
            fields: Sparse fieldset for the ``users`` type
            field_inputs: Arguments for calculated fields

        Returns:
            JSON:API collection document
        """
        params = self._fields_and_inputs(params, "users", fields, field_inputs)
        return self.client.get("users", params=params)

    def create(
        self,
        first_name: str,
        last_name: str,
        phone_number: Optional[str] = None,
        email: Optional[str] = None,
        role: str = "user",
        custom_fields: Optional[Dict[str, Any]] = None,
        group_ids: Optional[Sequence[str]] = None,
    ) -> Any:
        """Create a user, optionally placing it in groups.

        Args:
            first_name: First name
            last_name: Last name
            phone_number: E.164 phone number (SMS-authenticated groups)
            email: Email address (email-authenticated groups)
            role: "user" or "admin"
            custom_fields: Realm-defined custom attributes
            group_ids: Groups the user joins on creation

        Returns:
            Created user document
        """
        attributes = {
            "first_name": first_name,
            "last_name": last_name,
            "phone_number": phone_number,
            "email": email,
            "role": role,
            "custom_fields": custom_fields if custom_fields is not None else {},
        }
        attributes = {key: value for key, value in attributes.items() if value is not None}
        relationships = {"groups": to_many("groups", group_ids)} if group_ids else None
        return self.client.post("users", body=resource_document("users", attributes, relationships=relationships))

    def retrieve(self, user_id: str, fields: Fields = None,
                 field_inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """Fetch a single user by ID."""
        params = self._fields_and_inputs(None, "users", fields, field_inputs)
        return self.client.get(f"users/{user_id}", params=params)

    def update(
        self,
        user_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        role: Optional[str] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
        group_ids: Optional[Sequence[str]] = None,
    ) -> Any:
        """Update the given attributes; ``group_ids`` replaces memberships.

        Passing ``group_ids=[]`` removes the user from every group.
        """
        attributes = {
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "custom_fields": custom_fields,
        }
        attributes = {key: value for key, value in attributes.items() if value is not None}
        relationships = {"groups": to_many("groups", group_ids)} if group_ids is not None else None
        document = resource_document("users", attributes, resource_id=user_id, relationships=relationships)
        return self.client.patch(f"users/{user_id}", body=document)

    def lock(self, user_id: str, reason: str) -> Any:
        """Lock a user out, recording why."""
        attributes = {"locked": True, "locked_reason": reason}
        return self.client.patch(f"users/{user_id}", body=resource_document("users", attributes, resource_id=user_id))

    def unlock(self, user_id: str) -> Any:
        attributes = {"locked": False}
        return self.client.patch(f"users/{user_id}", body=resource_document("users", attributes, resource_id=user_id))

    def promote_to_admin(self, user_id: str) -> Any:
        attributes = {"role": "admin"}
        return self.client.patch(f"users/{user_id}", body=resource_document("users", attributes, resource_id=user_id))

    def delete(self, user_id: str) -> Any:
        return self.client.delete(f"users/{user_id}")
