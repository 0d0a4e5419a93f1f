"""Caption aggregation: dedup, per-speaker chunking with a grace period, committed transcript."""
from .aggregator import Aggregator
from .models import Chunk, TranscriptRecord, to_iso
from .normalizer import normalize
from .scheduler import AsyncioScheduler, Scheduler, VirtualScheduler
from .store import TranscriptStore
from .tracker import SpeakerChunkTracker

__all__ = [
    "Aggregator",
    "AsyncioScheduler",
    "Chunk",
    "Scheduler",
    "SpeakerChunkTracker",
    "TranscriptRecord",
    "TranscriptStore",
    "VirtualScheduler",
    "normalize",
    "to_iso",
]
