"""Token-gated network statistics for a guild."""

from __future__ import annotations

import enum
import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..adapters.base import Adapter
from .models import MembershipLink
from .storage import LinkRepository
from .tokens import TokenValidator

log = logging.getLogger(__name__)


class AnalyticsStatus(enum.Enum):
    REDIRECT = "redirect"
    TOKEN_EXPIRED = "token_expired"
    SERVER_NOT_FOUND = "server_not_found"
    UNAVAILABLE = "unavailable"
    OK = "ok"


@dataclass(frozen=True)
class AnalyticsResult:
    status: AnalyticsStatus
    guild_name: str | None = None
    stats: dict[str, int] = field(default_factory=dict)


def aggregate_networks(links: Iterable[MembershipLink]) -> dict[str, int]:
    """Count links per lower-cased network label."""
    counts: Counter[str] = Counter(link.network.lower() for link in links)
    return dict(counts)


def format_network_stats(stats: dict[str, int]) -> dict[str, int]:
    """Capitalise the first character of every network label for display."""
    return {label[:1].upper() + label[1:]: count for label, count in stats.items()}


async def load_analytics(
    guild_id: str | None,
    token_id: str | None,
    *,
    repository: LinkRepository,
    tokens: TokenValidator,
    guilds: Adapter,
) -> AnalyticsResult:
    """Resolve an analytics request into one of the page states.

    The token is checked before anything else is read so an invalid link
    reveals nothing about the guild.
    """
    if not guild_id or not token_id:
        return AnalyticsResult(AnalyticsStatus.REDIRECT)

    if not await tokens.is_valid(guild_id, token_id):
        log.info("Rejected analytics token for guild %s", guild_id)
        return AnalyticsResult(AnalyticsStatus.TOKEN_EXPIRED)

    if repository.find_server_by_guild(guild_id) is None:
        return AnalyticsResult(AnalyticsStatus.SERVER_NOT_FOUND)

    try:
        guild = await guilds.get_guild_info(guild_id)
        guild_name = str(guild["name"])
    except Exception:
        log.exception("Failed to fetch guild metadata for %s", guild_id)
        return AnalyticsResult(AnalyticsStatus.UNAVAILABLE)

    links = repository.find_links_by_guild(guild_id)
    stats = format_network_stats(aggregate_networks(links))
    return AnalyticsResult(AnalyticsStatus.OK, guild_name=guild_name, stats=stats)
