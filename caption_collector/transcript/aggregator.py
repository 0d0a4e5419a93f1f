"""
Aggregator: one caption session. Owns the open chunks, last-seen text, transcript and scheduler.

Collaborators only use:
- on_caption_update(speaker_key, speaker_name, raw_text): feed one caption redraw; never raises.
- get_transcript(): commit every open chunk, then return the newline-joined records.
- get_transcript_lines(): same flush, one formatted entry per record.
- reset_transcript(): drop open chunks and the transcript; idempotent.

Every public call and every timer-fired commit holds one re-entrant lock, so flush-then-read
and reset are atomic with respect to commit callbacks.
"""
from __future__ import annotations

import logging
import threading

from caption_collector.config import get_settings
from caption_collector.transcript.models import TranscriptRecord
from caption_collector.transcript.scheduler import AsyncioScheduler, Scheduler
from caption_collector.transcript.store import TranscriptStore
from caption_collector.transcript.tracker import SpeakerChunkTracker

logger = logging.getLogger(__name__)


class Aggregator:
    def __init__(
        self,
        scheduler: Scheduler | None = None,
        grace_ms: int | None = None,
        speaker_placeholder: str | None = None,
        reset_clears_last_seen: bool | None = None,
    ) -> None:
        settings = get_settings()
        self._scheduler = scheduler or AsyncioScheduler()
        self._placeholder = (
            speaker_placeholder if speaker_placeholder is not None else settings.SPEAKER_PLACEHOLDER
        )
        self._reset_clears_last_seen = (
            reset_clears_last_seen
            if reset_clears_last_seen is not None
            else settings.RESET_CLEARS_LAST_SEEN
        )
        self._lock = threading.RLock()
        self._store = TranscriptStore(self._scheduler)
        self._tracker = SpeakerChunkTracker(
            self._store, self._scheduler, on_expire=self._commit, grace_ms=grace_ms
        )

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def grace_ms(self) -> int:
        return self._tracker.grace_ms

    def on_caption_update(
        self,
        speaker_key: str | None,
        speaker_name: str | None,
        raw_text: str | None,
    ) -> bool:
        """
        Feed one caption redraw. Missing name -> placeholder; missing key -> display name.
        Returns True when the update opened or extended a chunk.
        """
        name = (speaker_name or "").strip() or self._placeholder
        key = speaker_key or name
        try:
            with self._lock:
                return self._tracker.handle_caption(key, name, raw_text or "")
        except Exception:
            logger.exception("Caption update for %s dropped", key)
            return False

    def get_transcript(self) -> str:
        with self._lock:
            self._store.flush_all()
            return self._store.text()

    def get_transcript_lines(self) -> list[str]:
        """Like get_transcript(), one entry per record (a record's text may span lines)."""
        with self._lock:
            self._store.flush_all()
            return self._store.lines()

    def reset_transcript(self) -> None:
        with self._lock:
            self._store.reset()
            if self._reset_clears_last_seen:
                self._tracker.forget()

    def records(self) -> list[TranscriptRecord]:
        """Committed records so far (no flush)."""
        with self._lock:
            return self._store.records()

    def open_speakers(self) -> list[str]:
        with self._lock:
            return list(self._store.open_chunks)

    def _commit(self, speaker_key: str) -> None:
        # Grace timer expiry
        with self._lock:
            self._store.commit(speaker_key)
