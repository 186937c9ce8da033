"""Tests for background role removal."""

import asyncio

from starknet_gate.adapters.base import Adapter
from starknet_gate.core.role_sync import RoleSync


class SlowAdapter(Adapter):
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.done = []

    async def remove_role(self, guild_id, member_id, role_id):
        await asyncio.sleep(0)
        if role_id in self.fail_for:
            raise RuntimeError(f"cannot remove {role_id}")
        self.done.append(role_id)

    async def get_guild_info(self, guild_id):  # pragma: no cover
        return {}


def test_schedule_does_not_wait():
    adapter = SlowAdapter()
    sync = RoleSync(adapter)

    async def run():
        sync.schedule_removal("g", "m", "r1")
        scheduled = (sync.pending, list(adapter.done))
        await sync.drain()
        return scheduled

    scheduled = asyncio.run(run())
    assert scheduled == (1, [])
    assert adapter.done == ["r1"]
    assert sync.pending == 0


def test_failures_are_logged_not_raised(caplog):
    adapter = SlowAdapter(fail_for={"bad"})
    sync = RoleSync(adapter)

    async def run():
        sync.schedule_removal("g", "m", "bad")
        sync.schedule_removal("g", "m", "good")
        await sync.drain()

    with caplog.at_level("WARNING", logger="starknet_gate"):
        asyncio.run(run())

    assert adapter.done == ["good"]
    assert "guild=g member=m role=bad" in caplog.text


def test_drain_without_work():
    asyncio.run(RoleSync(SlowAdapter()).drain())
