"""Realm lookup."""
from __future__ import annotations
from typing import Any

from .base import ResourceService


class RealmService(ResourceService):
    """Read access to the realm the API key belongs to."""

    def get(self) -> Any:
        return self.client.get("realm")
