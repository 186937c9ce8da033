"""Validation of analytics access tokens."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .storage import JSONStorage


class TokenValidator(ABC):
    """Decides whether a token grants access to a guild's analytics."""

    @abstractmethod
    async def is_valid(self, guild_id: str, token_id: str) -> bool:
        """Return ``True`` when ``token_id`` is usable for ``guild_id``."""


class StoredTokenValidator(TokenValidator):
    """Check tokens persisted in :class:`JSONStorage` by the issuing service.

    Tokens are only read here; expiry and revocation are decided by whoever
    issued them.
    """

    def __init__(self, storage: JSONStorage) -> None:
        self.storage = storage

    async def is_valid(self, guild_id: str, token_id: str) -> bool:
        if not guild_id or not token_id:
            return False
        token = self.storage.get_token(token_id)
        if token is None:
            return False
        if token.guild_id != guild_id:
            return False
        return not token.revoked and not token.is_expired()
