"""FastAPI application serving the token-gated analytics page."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, RedirectResponse

from .. import __version__
from ..adapters.base import Adapter
from ..config import Settings
from ..core.analytics import AnalyticsStatus, load_analytics
from ..core.storage import LinkRepository
from ..core.tokens import TokenValidator
from . import pages

log = logging.getLogger(__name__)

HOME = "/"


def create_app(
    settings: Settings,
    repository: LinkRepository,
    tokens: TokenValidator,
    guilds: Adapter,
) -> FastAPI:
    """Build the web app around explicitly passed collaborators."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        close = getattr(guilds, "close", None)
        if close is not None:
            await close()

    app = FastAPI(
        title="Starknet Gate",
        description="Per-guild analytics of linked Starknet wallets",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    @app.get(HOME, include_in_schema=False)
    async def home() -> HTMLResponse:
        return HTMLResponse(pages.home_page())

    # links missing the guild or the token go home
    @app.get("/analytics", include_in_schema=False)
    async def analytics_without_guild() -> RedirectResponse:
        return RedirectResponse(url=HOME, status_code=307)

    @app.get("/analytics/{guild_id}", include_in_schema=False)
    async def analytics_without_token(guild_id: str) -> RedirectResponse:
        return RedirectResponse(url=HOME, status_code=307)

    @app.get("/analytics/{guild_id}/{token_id}", response_model=None)
    async def analytics(guild_id: str, token_id: str) -> HTMLResponse | RedirectResponse:
        repository.refresh()
        result = await load_analytics(
            guild_id.strip(),
            token_id.strip(),
            repository=repository,
            tokens=tokens,
            guilds=guilds,
        )
        delay = settings.redirect_delay

        if result.status is AnalyticsStatus.REDIRECT:
            return RedirectResponse(url=HOME, status_code=307)
        if result.status is AnalyticsStatus.TOKEN_EXPIRED:
            return HTMLResponse(pages.session_expired(HOME, delay))
        if result.status is AnalyticsStatus.SERVER_NOT_FOUND:
            return HTMLResponse(pages.server_not_found(HOME, delay))
        if result.status is AnalyticsStatus.UNAVAILABLE:
            return HTMLResponse(pages.unavailable(HOME, delay))
        return HTMLResponse(pages.analytics_page(result.guild_name or "", result.stats))

    return app
