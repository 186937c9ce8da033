"""Registration and handlers of the ``/disconnect`` command."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from ..core.disconnect import DisconnectService
from ..ui.views import DisconnectView

log = logging.getLogger(__name__)

NO_WALLET_MESSAGE = "You haven't linked any Starknet wallet to this Discord server."
CONFIRM_MESSAGE = (
    "Do you really want to disconnect from your Starknet wallet? "
    "You will lose your Starknet-related role."
)
DISCONNECTED_MESSAGE = "Disconnected!"


def _identifiers(interaction: discord.Interaction) -> tuple[str, str] | None:
    user = getattr(interaction, "user", None)
    member_id = getattr(user, "id", None)
    guild_id = interaction.guild_id
    if not member_id or not guild_id:
        return None
    return str(member_id), str(guild_id)


async def handle_disconnect_command(
    interaction: discord.Interaction, service: DisconnectService
) -> None:
    """Ask the member to confirm before their wallet is unlinked."""
    ids = _identifiers(interaction)
    if ids is None:
        # outside a guild there is nothing to disconnect
        log.debug("Ignoring /disconnect without member or guild")
        return
    member_id, guild_id = ids

    if not service.has_active_link(member_id, guild_id):
        await interaction.response.send_message(NO_WALLET_MESSAGE, ephemeral=True)
        return

    await interaction.response.send_message(
        CONFIRM_MESSAGE,
        view=DisconnectView(service),
        ephemeral=True,
    )


async def handle_disconnect_confirm(
    interaction: discord.Interaction, service: DisconnectService
) -> None:
    """Unlink the wallet once the member pressed the confirm button."""
    ids = _identifiers(interaction)
    if ids is None:
        log.debug("Ignoring disconnect confirmation without member or guild")
        return
    member_id, guild_id = ids

    removed = service.confirm(member_id, guild_id)
    if not removed:
        # already disconnected, e.g. the button was pressed twice
        await interaction.response.defer()
        return

    await interaction.response.edit_message(content=DISCONNECTED_MESSAGE, view=None)


def register_commands(bot: commands.Bot, service: DisconnectService) -> None:
    """Attach the disconnect command to the bot's command tree."""
    tree = bot.tree

    @tree.command(
        name="disconnect",
        description="Disconnect your Starknet wallet from this server",
    )
    @discord.app_commands.guild_only()
    async def disconnect(interaction: discord.Interaction) -> None:
        await handle_disconnect_command(interaction, service)
