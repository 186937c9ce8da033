from __future__ import annotations

import discord

from ..core.disconnect import DisconnectService

DISCONNECT_CONFIRM_ID = "disconnect-confirm"


class DisconnectView(discord.ui.View):
    """Confirmation prompt for ``/disconnect``.

    The view is persistent: the button keeps a fixed ``custom_id`` and no
    timeout, so the bot can answer it after a restart. Nothing about the
    member is stored on the view; the handler reads it from the interaction.
    """

    def __init__(self, service: DisconnectService) -> None:
        super().__init__(timeout=None)
        self.service = service

    @discord.ui.button(
        label="Disconnect",
        style=discord.ButtonStyle.primary,
        custom_id=DISCONNECT_CONFIRM_ID,
    )
    async def confirm(
        self, interaction: discord.Interaction, button: discord.ui.Button
    ) -> None:
        from ..commands.register import handle_disconnect_confirm

        await handle_disconnect_confirm(interaction, self.service)
