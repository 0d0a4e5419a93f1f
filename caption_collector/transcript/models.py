"""
Chunk and committed record structures.

Each committed line has the form:
    [start ISO] [end ISO] speaker : text
with UTC instants at millisecond precision, e.g. 2024-05-01T10:00:00.000Z.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def to_iso(instant: datetime) -> str:
    """UTC ISO-8601 with milliseconds and Z suffix."""
    utc = instant.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_record_line(start_time: datetime, end_time: datetime, speaker_name: str, text: str) -> str:
    return f"[{to_iso(start_time)}] [{to_iso(end_time)}] {speaker_name} : {text}".strip()


@dataclass
class Chunk:
    """
    One open utterance for a speaker key.

    start_time is fixed at creation; end_time, text and speaker_name track the latest accepted update.
    timer is the single live commit handle while the chunk is open.
    """

    speaker_key: str
    speaker_name: str
    start_time: datetime
    end_time: datetime
    text: str
    timer: Any = None

    def to_record(self) -> "TranscriptRecord":
        return TranscriptRecord(
            speaker_key=self.speaker_key,
            speaker_name=self.speaker_name,
            start_time=self.start_time,
            end_time=self.end_time,
            text=self.text,
        )


@dataclass(frozen=True)
class TranscriptRecord:
    """Committed chunk snapshot; immutable."""

    speaker_key: str
    speaker_name: str
    start_time: datetime
    end_time: datetime
    text: str

    def format(self) -> str:
        return format_record_line(self.start_time, self.end_time, self.speaker_name, self.text)
