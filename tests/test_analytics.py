"""Tests for the analytics access flow."""

from __future__ import annotations

import asyncio
import datetime
from datetime import UTC

import httpx

from starknet_gate.adapters.base import Adapter
from starknet_gate.core.analytics import (
    AnalyticsStatus,
    aggregate_networks,
    format_network_stats,
    load_analytics,
)
from starknet_gate.core.models import AccessToken, MembershipLink, ServerConfig
from starknet_gate.core.storage import JSONStorage
from starknet_gate.core.tokens import StoredTokenValidator


class FakeGuilds(Adapter):
    def __init__(self, name="Starknet Club", error=None):
        self.name = name
        self.error = error
        self.calls: list[str] = []

    async def remove_role(self, guild_id, member_id, role_id):  # pragma: no cover
        raise AssertionError("analytics never touches roles")

    async def get_guild_info(self, guild_id):
        self.calls.append(guild_id)
        if self.error:
            raise self.error
        return {"id": guild_id, "name": self.name}


class CountingStorage(JSONStorage):
    """Storage that records which lookups the flow performed."""

    def __init__(self, path):
        super().__init__(path)
        self.server_lookups = 0
        self.link_fetches = 0

    def find_server_by_guild(self, guild_id):
        self.server_lookups += 1
        return super().find_server_by_guild(guild_id)

    def find_links_by_guild(self, guild_id, include_removed=False):
        self.link_fetches += 1
        return super().find_links_by_guild(guild_id, include_removed)


def link(network, member="1", guild="G", config_id="c"):
    return MembershipLink(
        member_id=member,
        guild_id=guild,
        server_config_id=config_id,
        wallet_address="0x1",
        network=network,
    )


def make_storage(tmp_path, networks=("starknet", "starknet", "ethereum")):
    storage = CountingStorage(tmp_path / "data.json")
    config = ServerConfig(guild_id="G", role_id="R")
    storage.add_server_config(config)
    for i, network in enumerate(networks):
        assert storage.add_link(link(network, member=str(i), config_id=config.id)) is None
    in_a_day = datetime.datetime.now(tz=UTC) + datetime.timedelta(days=1)
    storage.add_token(AccessToken(token="good", guild_id="G", expires_at=in_a_day))
    storage.add_token(
        AccessToken(
            token="old",
            guild_id="G",
            expires_at=datetime.datetime.now(tz=UTC) - datetime.timedelta(minutes=1),
        )
    )
    return storage


def run_flow(storage, guilds, guild_id="G", token_id="good"):
    return asyncio.run(
        load_analytics(
            guild_id,
            token_id,
            repository=storage,
            tokens=StoredTokenValidator(storage),
            guilds=guilds,
        )
    )


# --- Aggregation -------------------------------------------------------


def test_aggregate_lowercases_labels():
    links = [link("starknet"), link("starknet"), link("ethereum")]
    links[0].network = "StarkNet"
    assert aggregate_networks(links) == {"starknet": 2, "ethereum": 1}


def test_aggregate_of_nothing_is_empty():
    assert aggregate_networks([]) == {}
    assert format_network_stats({}) == {}


def test_format_capitalises_first_character_only():
    assert format_network_stats({"starknet-mainnet": 3, "ethereum": 1}) == {
        "Starknet-mainnet": 3,
        "Ethereum": 1,
    }


# --- Flow ----------------------------------------------------------------


def test_valid_token_returns_distribution(tmp_path):
    storage = make_storage(tmp_path)
    guilds = FakeGuilds()

    result = run_flow(storage, guilds)

    assert result.status is AnalyticsStatus.OK
    assert result.guild_name == "Starknet Club"
    assert result.stats == {"Starknet": 2, "Ethereum": 1}


def test_repeated_requests_give_identical_results(tmp_path):
    storage = make_storage(tmp_path)
    guilds = FakeGuilds()

    assert run_flow(storage, guilds) == run_flow(storage, guilds)


def test_expired_token_fails_fast(tmp_path):
    storage = make_storage(tmp_path)
    guilds = FakeGuilds()

    result = run_flow(storage, guilds, token_id="old")

    assert result.status is AnalyticsStatus.TOKEN_EXPIRED
    assert result.stats == {}
    assert storage.server_lookups == 0
    assert storage.link_fetches == 0
    assert guilds.calls == []


def test_token_of_another_guild_is_rejected(tmp_path):
    storage = make_storage(tmp_path)
    storage.add_server_config(ServerConfig(guild_id="H", role_id="R2"))

    result = run_flow(storage, FakeGuilds(), guild_id="H")

    assert result.status is AnalyticsStatus.TOKEN_EXPIRED


def test_invalid_token_for_unknown_guild_looks_like_expiry(tmp_path):
    storage = make_storage(tmp_path)

    result = run_flow(storage, FakeGuilds(), guild_id="nope", token_id="whatever")

    assert result.status is AnalyticsStatus.TOKEN_EXPIRED


def test_unknown_server_skips_metadata(tmp_path):
    storage = make_storage(tmp_path)
    in_a_day = datetime.datetime.now(tz=UTC) + datetime.timedelta(days=1)
    storage.add_token(AccessToken(token="orphan", guild_id="X", expires_at=in_a_day))
    guilds = FakeGuilds()

    result = run_flow(storage, guilds, guild_id="X", token_id="orphan")

    assert result.status is AnalyticsStatus.SERVER_NOT_FOUND
    assert guilds.calls == []
    assert storage.link_fetches == 0


def test_missing_parameters_redirect(tmp_path):
    storage = make_storage(tmp_path)
    guilds = FakeGuilds()

    assert run_flow(storage, guilds, guild_id="").status is AnalyticsStatus.REDIRECT
    assert run_flow(storage, guilds, token_id=None).status is AnalyticsStatus.REDIRECT
    assert guilds.calls == []


def test_metadata_failure_is_reported_as_unavailable(tmp_path):
    storage = make_storage(tmp_path)
    request = httpx.Request("GET", "https://discord.com/api/v10/guilds/G")
    error = httpx.HTTPStatusError(
        "boom", request=request, response=httpx.Response(500, request=request)
    )

    result = run_flow(storage, FakeGuilds(error=error))

    assert result.status is AnalyticsStatus.UNAVAILABLE
    assert result.stats == {}


def test_no_links_is_explicit_empty_state(tmp_path):
    storage = make_storage(tmp_path, networks=())

    result = run_flow(storage, FakeGuilds())

    assert result.status is AnalyticsStatus.OK
    assert result.stats == {}


def test_disconnected_members_are_not_counted(tmp_path):
    # Soft-removed links stay in storage but drop out of the distribution.
    storage = make_storage(tmp_path)
    ethereum = [x for x in storage.all_links() if x.network == "ethereum"]
    storage.soft_remove(ethereum)

    result = run_flow(storage, FakeGuilds())

    assert result.stats == {"Starknet": 2}
    assert len(storage.find_links_by_guild("G", include_removed=True)) == 3
