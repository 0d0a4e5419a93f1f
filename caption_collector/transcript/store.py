"""
TranscriptStore: append-only record sequence plus the open chunks that feed it.

Commit order is the only ordering: each speaker's grace timer fires independently,
so records are not necessarily in speech order across speakers.
"""
from __future__ import annotations

import logging

from caption_collector.transcript.models import Chunk, TranscriptRecord
from caption_collector.transcript.scheduler import Scheduler

logger = logging.getLogger(__name__)


class TranscriptStore:
    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        # speaker_key -> open chunk; a key is present only until its commit
        self.open_chunks: dict[str, Chunk] = {}
        self._records: list[TranscriptRecord] = []
        self._lines: list[str] = []

    def commit(self, speaker_key: str) -> TranscriptRecord | None:
        """Finalize the open chunk for speaker_key. No open chunk (late timer, post-reset) -> no-op."""
        chunk = self.open_chunks.get(speaker_key)
        if chunk is None:
            return None
        record = chunk.to_record()
        self._records.append(record)
        self._lines.append(record.format())
        self._scheduler.cancel(chunk.timer)
        chunk.timer = None
        del self.open_chunks[speaker_key]
        logger.debug("Committed chunk for %s (%d chars)", speaker_key, len(record.text))
        return record

    def flush_all(self) -> int:
        """Commit every open chunk. Returns how many were committed."""
        keys = list(self.open_chunks)
        for key in keys:
            self.commit(key)
        if keys:
            logger.debug("Flushed %d open chunk(s)", len(keys))
        return len(keys)

    def reset(self) -> None:
        """Drop open chunks uncommitted, cancel their timers, clear the transcript."""
        for chunk in self.open_chunks.values():
            self._scheduler.cancel(chunk.timer)
            chunk.timer = None
        dropped = len(self.open_chunks)
        self.open_chunks.clear()
        self._records.clear()
        self._lines.clear()
        logger.info("Transcript reset (%d open chunk(s) discarded)", dropped)

    def records(self) -> list[TranscriptRecord]:
        return list(self._records)

    def lines(self) -> list[str]:
        return list(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)
