"""Tests for the board-wide mutation gate."""

import asyncio

import pytest

from tripboard.presenters.gate import UiGate


def test_rejects_inverted_limits() -> None:
    with pytest.raises(ValueError):
        UiGate(lower_limit=1.0, upper_limit=0.5)
    with pytest.raises(ValueError):
        UiGate(lower_limit=-0.1, upper_limit=0.5)


def test_hold_lasts_at_least_the_lower_limit() -> None:
    async def scenario() -> None:
        gate = UiGate(lower_limit=0.05, upper_limit=1.0)
        loop = asyncio.get_running_loop()
        started = loop.time()
        async with gate.hold():
            assert gate.is_blocked
        assert loop.time() - started >= 0.045
        assert not gate.is_blocked

    asyncio.run(scenario())


def test_reports_block_changes() -> None:
    changes: list[bool] = []

    async def scenario() -> None:
        gate = UiGate(lower_limit=0.0, upper_limit=1.0, on_change=changes.append)
        async with gate.hold():
            assert changes == [True]

    asyncio.run(scenario())
    assert changes == [True, False]


def test_holders_run_one_at_a_time() -> None:
    order: list[str] = []

    async def worker(gate: UiGate, name: str) -> None:
        async with gate.hold():
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    async def scenario() -> None:
        gate = UiGate(lower_limit=0.0, upper_limit=1.0)
        await asyncio.gather(worker(gate, "a"), worker(gate, "b"))

    asyncio.run(scenario())
    assert order == ["a-start", "a-end", "b-start", "b-end"]


def test_upper_limit_forces_release() -> None:
    changes: list[bool] = []

    async def scenario() -> None:
        gate = UiGate(lower_limit=0.0, upper_limit=0.02, on_change=changes.append)
        token = await gate.acquire()
        await asyncio.sleep(0.05)
        assert not gate.is_blocked
        assert changes == [True, False]

        # The next holder can proceed while the first is still running.
        second = await asyncio.wait_for(gate.acquire(), timeout=0.5)
        assert second != token

        # A late release of the forced hold must not free the new one.
        await gate.release(token)
        assert gate.is_blocked
        await gate.release(second)
        assert not gate.is_blocked

    asyncio.run(scenario())
    assert changes == [True, False, True, False]
