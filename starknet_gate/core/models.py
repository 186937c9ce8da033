"""Data models for wallet links, server configuration and access tokens.

The models are implemented using :mod:`pydantic` so that they provide
runtime validation and convenient serialisation to and from dictionaries.
Discord snowflakes are kept as strings, the way the Discord HTTP API returns
them.
"""

from __future__ import annotations

import datetime
import uuid
from datetime import UTC

from pydantic import BaseModel, Field, field_validator


def _now() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class ServerConfig(BaseModel):
    """Per-guild configuration for the wallet role.

    Attributes
    ----------
    id:
        Internal unique identifier. Defaults to a random UUID4 string.
    guild_id:
        The Discord guild the configuration belongs to.
    role_id:
        The Discord role granted to members with an active wallet link.
    name:
        Optional label shown to server administrators.

    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    guild_id: str
    role_id: str
    name: str | None = None


class MembershipLink(BaseModel):
    """Association between a Discord member and a Starknet wallet.

    Links are never deleted. Disconnecting sets ``removed_at`` which keeps the
    row around as a tombstone.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    member_id: str
    guild_id: str
    server_config_id: str
    wallet_address: str
    network: str
    created_at: datetime.datetime = Field(default_factory=_now)
    removed_at: datetime.datetime | None = None

    @field_validator("network")
    @classmethod
    def _normalise_network(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_active(self) -> bool:
        return self.removed_at is None

    def mark_removed(self, when: datetime.datetime | None = None) -> None:
        """Tombstone the link. Removing twice keeps the first timestamp."""
        if self.removed_at is None:
            self.removed_at = when or _now()


class AccessToken(BaseModel):
    """Credential granting access to one guild's analytics page."""

    token: str
    guild_id: str
    expires_at: datetime.datetime
    revoked: bool = False

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime.datetime) -> datetime.datetime:
        # naive timestamps from the issuing service are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def is_expired(self, now: datetime.datetime | None = None) -> bool:
        return self.expires_at <= (now or _now())
