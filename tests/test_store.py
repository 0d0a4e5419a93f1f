from datetime import datetime, timezone

from caption_collector.transcript import Chunk, TranscriptStore, VirtualScheduler, to_iso


def _open(store: TranscriptStore, scheduler: VirtualScheduler, key: str, text: str) -> Chunk:
    now = scheduler.now()
    chunk = Chunk(speaker_key=key, speaker_name=key.upper(), start_time=now, end_time=now, text=text)
    chunk.timer = scheduler.schedule(2000, lambda: store.commit(key))
    store.open_chunks[key] = chunk
    return chunk


def test_commit_without_open_chunk_is_noop() -> None:
    store = TranscriptStore(VirtualScheduler())
    assert store.commit("nobody") is None
    assert store.lines() == []


def test_commit_appends_formatted_line_and_cancels_timer() -> None:
    scheduler = VirtualScheduler()
    store = TranscriptStore(scheduler)
    chunk = _open(store, scheduler, "a", "hello")

    record = store.commit("a")
    assert record is not None
    assert record.format() == "[1970-01-01T00:00:00.000Z] [1970-01-01T00:00:00.000Z] A : hello"
    assert store.lines() == [record.format()]
    assert chunk.timer is None
    assert "a" not in store.open_chunks
    assert scheduler.pending() == 0

    # Second commit for the same key finds nothing
    assert store.commit("a") is None
    assert len(store.records()) == 1


def test_flush_all_commits_every_open_chunk() -> None:
    scheduler = VirtualScheduler()
    store = TranscriptStore(scheduler)
    _open(store, scheduler, "a", "one")
    _open(store, scheduler, "b", "two")

    assert store.flush_all() == 2
    assert store.open_chunks == {}
    assert store.text() == "\n".join(store.lines())
    assert scheduler.pending() == 0
    assert store.flush_all() == 0


def test_reset_drops_open_chunks_without_committing() -> None:
    scheduler = VirtualScheduler()
    store = TranscriptStore(scheduler)
    _open(store, scheduler, "a", "kept")
    store.commit("a")
    _open(store, scheduler, "b", "dropped")

    store.reset()
    assert store.lines() == []
    assert store.records() == []
    assert store.open_chunks == {}
    scheduler.advance(5000)
    assert store.lines() == []


def test_snapshots_are_copies() -> None:
    scheduler = VirtualScheduler()
    store = TranscriptStore(scheduler)
    _open(store, scheduler, "a", "x")
    store.commit("a")
    store.lines().clear()
    store.records().clear()
    assert len(store.lines()) == 1
    assert len(store.records()) == 1


def test_to_iso_uses_utc_milliseconds_and_z_suffix() -> None:
    instant = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert to_iso(instant) == "2024-05-01T10:00:00.123Z"
