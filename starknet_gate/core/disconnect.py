"""State transitions of the wallet disconnect flow.

The flow has no session store. The confirmation prompt only lives in the
Discord message, so confirming re-reads everything from storage and a
second confirmation simply finds nothing left to remove.
"""

from __future__ import annotations

import logging

from .models import MembershipLink
from .role_sync import RoleSync
from .storage import LinkRepository

log = logging.getLogger(__name__)


class DisconnectService:
    """Look up and remove a member's wallet links on a guild."""

    def __init__(self, repository: LinkRepository, role_sync: RoleSync) -> None:
        self.repository = repository
        self.role_sync = role_sync

    def has_active_link(self, member_id: str, guild_id: str) -> bool:
        return self.repository.find_active_link(member_id, guild_id) is not None

    def confirm(self, member_id: str, guild_id: str) -> list[MembershipLink]:
        """Unlink every active wallet of the member and revoke the roles.

        Returns the removed links; an empty list means there was nothing to
        do. Links are tombstoned before any role call so a failing Discord
        request cannot leave an active link behind.
        """
        links = self.repository.find_active_links(member_id, guild_id)
        if not links:
            log.debug("No active link for member %s on guild %s", member_id, guild_id)
            return []

        self.repository.soft_remove(links)
        log.info(
            "Disconnected %d wallet link(s) for member %s on guild %s",
            len(links),
            member_id,
            guild_id,
        )

        for link in links:
            config = self.repository.get_server_config(link.server_config_id)
            if config is None:
                log.warning(
                    "Link %s references missing server config %s",
                    link.id,
                    link.server_config_id,
                )
                continue
            self.role_sync.schedule_removal(guild_id, member_id, config.role_id)
        return links
