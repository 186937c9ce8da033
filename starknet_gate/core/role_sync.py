"""Best-effort synchronisation of Discord roles with link state."""

from __future__ import annotations

import asyncio
import logging

from ..adapters.base import Adapter

log = logging.getLogger(__name__)


class RoleSync:
    """Schedule role removals without waiting for Discord to answer.

    The link record is the source of truth. A failed removal is logged with
    enough context for a reconciliation job to retry it and is never raised
    to the caller.
    """

    def __init__(self, adapter: Adapter) -> None:
        self.adapter = adapter
        self._pending: set[asyncio.Task[None]] = set()

    def schedule_removal(
        self, guild_id: str, member_id: str, role_id: str
    ) -> asyncio.Task[None]:
        """Start removing ``role_id`` from ``member_id`` in the background."""
        task = asyncio.get_running_loop().create_task(
            self._remove(guild_id, member_id, role_id)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _remove(self, guild_id: str, member_id: str, role_id: str) -> None:
        try:
            await self.adapter.remove_role(guild_id, member_id, role_id)
        except Exception:
            log.warning(
                "Role removal failed guild=%s member=%s role=%s",
                guild_id,
                member_id,
                role_id,
                exc_info=True,
            )
        else:
            log.info(
                "Removed role %s from member %s on guild %s",
                role_id,
                member_id,
                guild_id,
            )

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled removal, used on shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
