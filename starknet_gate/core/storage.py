"""Repository contract and JSON-backed storage for wallet links."""

from __future__ import annotations

import json
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from .models import AccessToken, MembershipLink, ServerConfig


class LinkRepository(ABC):
    """Operations the disconnect and analytics flows need from persistence."""

    @abstractmethod
    def find_active_links(self, member_id: str, guild_id: str) -> list[MembershipLink]:
        """Return every active link of ``member_id`` on ``guild_id``."""

    @abstractmethod
    def soft_remove(self, links: MembershipLink | Iterable[MembershipLink]) -> None:
        """Mark ``links`` removed while keeping them in storage."""

    @abstractmethod
    def find_server_by_guild(self, guild_id: str) -> ServerConfig | None:
        """Return the server configuration of ``guild_id`` if there is one."""

    @abstractmethod
    def get_server_config(self, config_id: str) -> ServerConfig | None:
        """Return the server configuration with identifier ``config_id``."""

    @abstractmethod
    def find_links_by_guild(
        self, guild_id: str, include_removed: bool = False
    ) -> list[MembershipLink]:
        """Return the links stored for ``guild_id``."""

    def find_active_link(self, member_id: str, guild_id: str) -> MembershipLink | None:
        """Return the first active link of ``member_id`` on ``guild_id``."""
        return next(iter(self.find_active_links(member_id, guild_id)), None)

    def refresh(self) -> None:
        """Pick up changes written by another process. No-op by default."""


class JSONStorage(LinkRepository):
    """Persist links, server configurations and access tokens.

    Data is written to a single JSON file on every mutation. The bot, the
    analytics web server and the connect flow may run as separate processes
    over the same file, so every read and every mutation first reloads the
    file when it changed on disk. Mutations never write back a stale
    snapshot.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialise storage using JSON file at ``path``."""
        self.path = Path(path)
        self._lock = threading.Lock()
        self._links: dict[str, MembershipLink] = {}
        self._servers: dict[str, ServerConfig] = {}
        self._tokens: dict[str, AccessToken] = {}
        self._stamp: tuple[int, int, int] | None = None
        if self.path.exists():
            self._load()
        else:
            self._save()

    # ------------------------------------------------------------------
    # Internal helpers
    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self._links = {
            item["id"]: MembershipLink(**item) for item in data.get("links", [])
        }
        self._servers = {
            item["id"]: ServerConfig(**item) for item in data.get("servers", [])
        }
        self._tokens = {
            item["token"]: AccessToken(**item) for item in data.get("tokens", [])
        }
        self._stamp = self._file_stamp()

    def _save(self) -> None:
        data = {
            "links": [link.model_dump(mode="json") for link in self._links.values()],
            "servers": [s.model_dump(mode="json") for s in self._servers.values()],
            "tokens": [t.model_dump(mode="json") for t in self._tokens.values()],
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
        self._stamp = self._file_stamp()

    def _file_stamp(self) -> tuple[int, int, int]:
        # every save replaces the file, so the inode changes too
        st = self.path.stat()
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _sync(self) -> None:
        # caller holds the lock
        if self.path.exists() and self._file_stamp() != self._stamp:
            self._load()

    def refresh(self) -> None:
        """Reload the file if another process modified it."""
        with self._lock:
            self._sync()

    # ------------------------------------------------------------------
    # Server configuration
    def add_server_config(self, config: ServerConfig) -> None:
        """Persist a new server ``config``."""
        with self._lock:
            self._sync()
            previous = self._servers.get(config.id)
            self._servers[config.id] = config
            try:
                self._save()
            except Exception:
                if previous is None:
                    del self._servers[config.id]
                else:
                    self._servers[config.id] = previous
                raise

    def find_server_by_guild(self, guild_id: str) -> ServerConfig | None:
        with self._lock:
            self._sync()
            return next(
                (s for s in self._servers.values() if s.guild_id == guild_id),
                None,
            )

    def get_server_config(self, config_id: str) -> ServerConfig | None:
        with self._lock:
            self._sync()
            return self._servers.get(config_id)

    # ------------------------------------------------------------------
    # Links
    def add_link(self, link: MembershipLink) -> str | None:
        """Persist ``link``.

        Returns an error message instead when the member already has an
        active link on the guild.
        """
        with self._lock:
            self._sync()
            if link.is_active and any(
                other.is_active
                and other.member_id == link.member_id
                and other.guild_id == link.guild_id
                for other in self._links.values()
            ):
                return "An active wallet link already exists for this member."
            if link.server_config_id not in self._servers:
                return "Server configuration not found."
            self._links[link.id] = link
            try:
                self._save()
            except Exception:
                del self._links[link.id]
                raise
            return None

    def find_active_links(self, member_id: str, guild_id: str) -> list[MembershipLink]:
        with self._lock:
            self._sync()
            return [
                link
                for link in self._links.values()
                if link.is_active
                and link.member_id == member_id
                and link.guild_id == guild_id
            ]

    def find_links_by_guild(
        self, guild_id: str, include_removed: bool = False
    ) -> list[MembershipLink]:
        with self._lock:
            self._sync()
            return [
                link
                for link in self._links.values()
                if link.guild_id == guild_id and (include_removed or link.is_active)
            ]

    def soft_remove(self, links: MembershipLink | Iterable[MembershipLink]) -> None:
        if isinstance(links, MembershipLink):
            links = [links]
        with self._lock:
            self._sync()
            marked = []
            for link in links:
                # Work on the stored row, callers may hold a stale copy.
                stored = self._links.get(link.id)
                if stored is None or not stored.is_active:
                    continue
                stored.mark_removed()
                marked.append((link, stored))
            if not marked:
                return
            try:
                self._save()
            except Exception:
                # the file still holds these rows as active
                for _, stored in marked:
                    stored.removed_at = None
                raise
            for link, stored in marked:
                link.removed_at = stored.removed_at

    def all_links(self) -> list[MembershipLink]:
        """Return all stored links, removed ones included."""
        with self._lock:
            self._sync()
            return list(self._links.values())

    # ------------------------------------------------------------------
    # Access tokens
    def add_token(self, token: AccessToken) -> None:
        """Persist an access token issued elsewhere."""
        with self._lock:
            self._sync()
            previous = self._tokens.get(token.token)
            self._tokens[token.token] = token
            try:
                self._save()
            except Exception:
                if previous is None:
                    del self._tokens[token.token]
                else:
                    self._tokens[token.token] = previous
                raise

    def get_token(self, token: str) -> AccessToken | None:
        with self._lock:
            self._sync()
            return self._tokens.get(token)
