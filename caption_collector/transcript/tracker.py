"""
SpeakerChunkTracker: per-speaker debounce that coalesces caption redraws into one chunk.

Live captions redraw the same utterance many times a second. For each speaker key:
- Empty text is noise: ignored, no timer effect.
- Text equal (after normalize) to the last accepted text for that key is a duplicate: ignored,
  even when the previous chunk has already been committed.
- Otherwise: open a chunk (NoChunk -> Open) or extend it (Open -> Open), and re-arm the
  single commit timer for grace_ms from now.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Callable

from caption_collector.config import get_settings
from caption_collector.transcript.models import Chunk
from caption_collector.transcript.normalizer import normalize
from caption_collector.transcript.scheduler import Scheduler
from caption_collector.transcript.store import TranscriptStore

logger = logging.getLogger(__name__)


class SpeakerChunkTracker:
    def __init__(
        self,
        store: TranscriptStore,
        scheduler: Scheduler,
        on_expire: Callable[[str], None],
        grace_ms: int | None = None,
    ) -> None:
        settings = get_settings()
        self._store = store
        self._scheduler = scheduler
        self._on_expire = on_expire
        self._grace_ms = grace_ms if grace_ms is not None else settings.CHUNK_GRACE_MS
        # speaker_key -> last accepted normalized text; survives commits
        self.last_seen: dict[str, str] = {}

    @property
    def grace_ms(self) -> int:
        return self._grace_ms

    def handle_caption(self, speaker_key: str, speaker_name: str, raw_text: str) -> bool:
        """Apply one caption update. Returns True when it changed chunk state."""
        text = (raw_text or "").strip()
        if not text:
            return False

        norm = normalize(text)
        if self.last_seen.get(speaker_key) == norm:
            return False

        now = self._scheduler.now()
        existing = self._store.open_chunks.get(speaker_key)

        # Arm first: if scheduling fails, no state has changed and a redraw can retry.
        timer = self._arm(speaker_key)
        self.last_seen[speaker_key] = norm

        if existing is None:
            self._store.open_chunks[speaker_key] = Chunk(
                speaker_key=speaker_key,
                speaker_name=speaker_name,
                start_time=now,
                end_time=now,
                text=text,
                timer=timer,
            )
            logger.debug("Opened chunk for %s", speaker_key)
            return True

        self._scheduler.cancel(existing.timer)
        existing.timer = timer
        existing.end_time = now
        existing.text = text
        existing.speaker_name = speaker_name
        return True

    def forget(self) -> None:
        """Clear last-seen text for every speaker."""
        self.last_seen.clear()

    def _arm(self, speaker_key: str):
        return self._scheduler.schedule(self._grace_ms, partial(self._on_expire, speaker_key))
