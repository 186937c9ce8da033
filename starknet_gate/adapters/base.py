"""Base adapter interface for platform specific implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Adapter(ABC):
    """Abstract adapter for communication platforms."""

    @abstractmethod
    async def remove_role(self, guild_id: str, member_id: str, role_id: str) -> None:
        """Take ``role_id`` away from ``member_id`` on ``guild_id``."""

    @abstractmethod
    async def get_guild_info(self, guild_id: str) -> dict[str, Any]:
        """Return guild metadata, at least its ``name``."""
