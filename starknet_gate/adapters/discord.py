"""Discord adapter implementing the :class:`~starknet_gate.adapters.base.Adapter`.

The adapter only covers the two REST calls the project needs: removing a
role from a member and reading guild metadata. It uses :mod:`httpx` so it
can be shared between the bot and the analytics web server without a
gateway connection.
"""

from __future__ import annotations

from typing import Any

import httpx

from .base import Adapter


class DiscordAdapter(Adapter):
    """Adapter that sends requests directly to the Discord HTTP API."""

    api_base = "https://discord.com/api/v10"

    def __init__(self, token: str, client: httpx.AsyncClient | None = None) -> None:
        """Store authentication ``token`` and optional HTTP ``client``."""
        self.token = token
        self.client = client or httpx.AsyncClient(timeout=10.0)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.token}"}

    # ------------------------------------------------------------------
    async def remove_role(self, guild_id: str, member_id: str, role_id: str) -> None:
        """Remove a role from a guild member.

        Parameters
        ----------
        guild_id:
            Identifier of the Discord guild.
        member_id:
            Identifier of the member losing the role.
        role_id:
            Identifier of the role to remove.

        """
        url = f"{self.api_base}/guilds/{guild_id}/members/{member_id}/roles/{role_id}"
        headers = {**self._headers, "X-Audit-Log-Reason": "Starknet wallet disconnected"}
        response = await self.client.delete(url, headers=headers)
        response.raise_for_status()

    async def get_guild_info(self, guild_id: str) -> dict[str, Any]:
        """Fetch a guild object; raises for unknown guilds."""
        url = f"{self.api_base}/guilds/{guild_id}"
        response = await self.client.get(url, headers=self._headers)
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
