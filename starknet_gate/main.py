from __future__ import annotations

import asyncio

from .adapters.discord import DiscordAdapter
from .bot import GateBot
from .commands.register import register_commands
from .config import load_settings
from .core.disconnect import DisconnectService
from .core.role_sync import RoleSync
from .core.storage import JSONStorage
from .logging_config import setup_logging


def main() -> int:
    """Run the Discord bot."""
    settings = load_settings()
    log = setup_logging(settings.log_level)
    if not settings.token:
        log.error(
            "DISCORD_BOT_TOKEN is not set. "
            "Export it in your environment before running."
        )
        return 2
    storage = JSONStorage(settings.data_path)

    async def runner() -> int:
        adapter = DiscordAdapter(settings.token)
        service = DisconnectService(storage, RoleSync(adapter))
        bot = GateBot(service, sync_commands=settings.sync_commands)
        register_commands(bot, service)
        try:
            async with bot:
                await bot.start(settings.token)
        finally:
            await adapter.close()
        return 0

    try:
        return asyncio.run(runner())
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 0


def serve() -> int:
    """Run the analytics web server."""
    import uvicorn

    from .core.tokens import StoredTokenValidator
    from .web import create_app

    settings = load_settings()
    log = setup_logging(settings.log_level)
    if not settings.token:
        log.error("DISCORD_BOT_TOKEN is required to look up guild names.")
        return 2
    storage = JSONStorage(settings.data_path)
    app = create_app(
        settings,
        storage,
        StoredTokenValidator(storage),
        DiscordAdapter(settings.token),
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
