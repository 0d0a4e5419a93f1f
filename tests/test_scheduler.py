import asyncio

import pytest

from caption_collector.transcript import Aggregator, AsyncioScheduler, VirtualScheduler


def test_virtual_scheduler_fires_in_due_order() -> None:
    scheduler = VirtualScheduler()
    fired: list[tuple[str, int]] = []
    scheduler.schedule(300, lambda: fired.append(("late", scheduler.elapsed_ms)))
    scheduler.schedule(100, lambda: fired.append(("early", scheduler.elapsed_ms)))
    scheduler.schedule(100, lambda: fired.append(("early-2", scheduler.elapsed_ms)))

    scheduler.advance(99)
    assert fired == []

    scheduler.advance(1000)
    assert fired == [("early", 100), ("early-2", 100), ("late", 300)]
    assert scheduler.elapsed_ms == 1099
    assert scheduler.pending() == 0


def test_virtual_scheduler_cancel_prevents_firing() -> None:
    scheduler = VirtualScheduler()
    fired: list[str] = []
    handle = scheduler.schedule(100, lambda: fired.append("x"))
    scheduler.cancel(handle)
    scheduler.cancel(handle)
    scheduler.cancel(None)

    scheduler.advance(500)
    assert fired == []
    assert scheduler.pending() == 0


def test_virtual_scheduler_runs_timers_armed_by_callbacks() -> None:
    scheduler = VirtualScheduler()
    fired: list[int] = []

    def first() -> None:
        fired.append(scheduler.elapsed_ms)
        scheduler.schedule(50, lambda: fired.append(scheduler.elapsed_ms))

    scheduler.schedule(100, first)
    scheduler.advance(200)
    assert fired == [100, 150]


def test_virtual_scheduler_clock_and_rewind() -> None:
    scheduler = VirtualScheduler()
    scheduler.advance_to(1500)
    assert scheduler.now() == scheduler.at(1500)
    with pytest.raises(ValueError):
        scheduler.advance(-1)


def test_asyncio_scheduler_commits_after_grace_period() -> None:
    async def scenario():
        aggregator = Aggregator(scheduler=AsyncioScheduler(), grace_ms=20)
        aggregator.on_caption_update("A", "Ana", "Hello")
        assert aggregator.records() == []
        await asyncio.sleep(0.2)
        return aggregator.records(), aggregator.open_speakers()

    records, open_speakers = asyncio.run(scenario())
    assert [r.text for r in records] == ["Hello"]
    assert open_speakers == []


def test_asyncio_scheduler_cancelled_timer_never_fires() -> None:
    async def scenario():
        fired: list[str] = []
        scheduler = AsyncioScheduler()
        handle = scheduler.schedule(10, lambda: fired.append("x"))
        scheduler.cancel(handle)
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == []
