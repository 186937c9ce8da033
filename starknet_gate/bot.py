"""Discord bot hosting the wallet disconnect command."""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from .core.disconnect import DisconnectService
from .logging_config import setup_logging
from .ui.views import DisconnectView


class GateBot(commands.Bot):
    """Small ``discord.py`` based bot for Starknet wallet links."""

    def __init__(
        self,
        service: DisconnectService,
        *,
        sync_commands: bool = True,
        **kwargs: Any,
    ) -> None:
        """Initialize the bot with the minimal intents required."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # Slash commands and components only; no message content needed.
        intents.message_content = False
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", "!"),
            intents=intents,
            **kwargs,
        )
        self.log = setup_logging()
        self.service = service
        self.sync_commands = sync_commands

    async def setup_hook(self) -> None:
        """Register the persistent confirm view and sync slash commands."""
        # Buttons sent before a restart keep working because the view is
        # matched by its custom id.
        self.add_view(DisconnectView(self.service))

        if self.sync_commands:  # pragma: no cover - requires discord
            await self.tree.sync()

        await super().setup_hook()

    async def on_ready(self) -> None:  # pragma: no cover - requires discord
        """Log a short confirmation once the bot connected successfully."""
        self.log.info(
            "Logged in as %s (%s)",
            self.user,
            self.user.id if self.user else "?",
        )

    async def close(self) -> None:
        """Let outstanding role removals finish before disconnecting."""
        pending = self.service.role_sync.pending
        if pending:
            self.log.info("Waiting for %d role removal(s)", pending)
        await self.service.role_sync.drain()
        await super().close()


__all__ = ["GateBot"]
