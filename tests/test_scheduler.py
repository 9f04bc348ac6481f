import asyncio

import pytest

from conftest import settle
from services.scheduler import PollingScheduler


@pytest.mark.asyncio
async def test_fires_immediately_then_every_interval(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    calls = []

    async def producer():
        calls.append(len(calls))
        return len(calls)

    results = []
    handle = scheduler.start(producer, 3000, on_result=results.append)
    await settle()
    assert len(calls) == 1
    assert clock.requested == [3.0]

    await clock.advance()
    await clock.advance()
    assert len(calls) == 3
    assert results == [1, 2, 3]
    scheduler.stop(handle)


@pytest.mark.asyncio
async def test_stop_is_terminal_and_idempotent(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    calls = []

    async def producer():
        calls.append(1)

    handle = scheduler.start(producer, 1000)
    await settle()
    scheduler.stop(handle)
    scheduler.stop(handle)
    await clock.advance()
    await clock.advance()
    assert len(calls) == 1
    assert handle.stopped
    assert not scheduler.trigger(handle)
    assert scheduler.handles == []


@pytest.mark.asyncio
async def test_rejection_is_forwarded_and_schedule_continues(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    errors = []
    attempts = []

    async def producer():
        attempts.append(1)
        raise RuntimeError("backend down")

    handle = scheduler.start(producer, 1000, on_error=errors.append)
    await settle()
    await clock.advance()
    assert len(attempts) == 2
    assert [str(e) for e in errors] == ["backend down", "backend down"]
    scheduler.stop(handle)


@pytest.mark.asyncio
async def test_tick_does_not_wait_for_slow_call(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    gate = asyncio.Event()
    started = []

    async def producer():
        started.append(1)
        await gate.wait()

    handle = scheduler.start(producer, 1000)
    await settle()
    await clock.advance()
    assert len(started) == 2
    assert len(handle.in_flight) == 2
    gate.set()
    await settle()
    assert not handle.in_flight
    scheduler.stop(handle)


@pytest.mark.asyncio
async def test_stop_drops_in_flight_results(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    gate = asyncio.Event()
    results = []

    async def producer():
        await gate.wait()
        return "late"

    handle = scheduler.start(producer, 1000, on_result=results.append)
    await settle()
    scheduler.stop(handle)
    gate.set()
    await settle()
    assert results == []


@pytest.mark.asyncio
async def test_trigger_runs_an_extra_poll(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)
    calls = []

    async def producer():
        calls.append(1)

    handle = scheduler.start(producer, 5000)
    await settle()
    assert scheduler.trigger(handle)
    await settle()
    assert len(calls) == 2
    assert handle.ticks == 2
    scheduler.stop_all()
    assert handle.stopped


@pytest.mark.asyncio
async def test_rejects_non_positive_interval(clock):
    scheduler = PollingScheduler(sleep=clock.sleep)

    async def producer():
        return None

    with pytest.raises(ValueError):
        scheduler.start(producer, 0)
