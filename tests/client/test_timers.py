"""Tests for the cancelable client timers."""

import asyncio

import pytest

from cinequiz.client.timers import OneShotTimer, RepeatingTimer


@pytest.mark.asyncio
async def test_repeating_timer_ticks_until_stopped() -> None:
    ticks = []
    timer = RepeatingTimer(0.01, lambda: ticks.append(1))
    timer.start()
    timer.start()
    await asyncio.sleep(0.055)
    await timer.stop()
    assert not timer.running

    count = len(ticks)
    assert count >= 3
    await asyncio.sleep(0.03)
    assert len(ticks) == count


@pytest.mark.asyncio
async def test_repeating_timer_survives_failing_callback() -> None:
    calls = []

    async def flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    timer = RepeatingTimer(0.01, flaky)
    timer.start()
    await asyncio.sleep(0.035)
    await timer.stop()
    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_one_shot_timer_fires_once() -> None:
    calls = []
    timer = OneShotTimer(0.01, lambda: calls.append(1))
    timer.restart()
    assert timer.pending
    await asyncio.sleep(0.05)
    assert calls == [1]
    assert not timer.pending


@pytest.mark.asyncio
async def test_one_shot_timer_cancel_and_restart() -> None:
    calls = []
    timer = OneShotTimer(0.03, lambda: calls.append(1))
    timer.restart()
    timer.cancel()
    await asyncio.sleep(0.05)
    assert calls == []

    timer.restart()
    await asyncio.sleep(0.02)
    timer.restart()
    await asyncio.sleep(0.02)
    assert calls == []
    await asyncio.sleep(0.03)
    assert calls == [1]
