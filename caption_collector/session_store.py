"""
In-memory session store. session_id -> Aggregator, generated on the backend.

State lives only as long as the process; nothing is persisted. Deleting or evicting a
session resets its aggregator so no pending commit timer outlives it.
"""
from __future__ import annotations

import logging
import uuid
from typing import Callable

from caption_collector.config import get_settings
from caption_collector.transcript import Aggregator, Scheduler

logger = logging.getLogger(__name__)

# session_id -> aggregator, oldest first
_session_store: dict[str, Aggregator] = {}
# session_id -> number of connected caption streams; such sessions are never evicted
_active_streams: dict[str, int] = {}


def generate_session_id() -> str:
    """Generate a new session_id (UUID hex, 12 chars). Backend only."""
    return uuid.uuid4().hex[:12]


def get_session(session_id: str) -> Aggregator | None:
    """Return the session's aggregator or None if not found."""
    return _session_store.get(session_id)


def create_session(
    session_id: str | None = None,
    scheduler_factory: Callable[[], Scheduler] | None = None,
) -> tuple[str, Aggregator]:
    """Create (or replace) a session. Evicts the oldest sessions past MAX_SESSIONS."""
    session_id = session_id or generate_session_id()
    previous = _session_store.pop(session_id, None)
    if previous is not None:
        previous.reset_transcript()
    scheduler = scheduler_factory() if scheduler_factory else None
    aggregator = Aggregator(scheduler=scheduler)
    _session_store[session_id] = aggregator
    _evict_overflow(keep=session_id)
    logger.info("Session created: %s", session_id)
    return session_id, aggregator


def ensure_session(
    session_id: str,
    scheduler_factory: Callable[[], Scheduler] | None = None,
) -> Aggregator:
    """Return existing session or create it under the given id."""
    aggregator = _session_store.get(session_id)
    if aggregator is not None:
        return aggregator
    _, aggregator = create_session(session_id, scheduler_factory)
    return aggregator


def delete_session(session_id: str) -> bool:
    """Remove session from store (pending timers cancelled). Return True if it existed."""
    aggregator = _session_store.pop(session_id, None)
    if aggregator is None:
        return False
    aggregator.reset_transcript()
    logger.info("Session deleted: %s", session_id)
    return True


def clear_sessions() -> None:
    for session_id in list(_session_store):
        delete_session(session_id)
    _active_streams.clear()


def attach_stream(session_id: str) -> None:
    """Mark a caption stream as connected to the session."""
    _active_streams[session_id] = _active_streams.get(session_id, 0) + 1


def detach_stream(session_id: str) -> None:
    count = _active_streams.get(session_id, 0) - 1
    if count > 0:
        _active_streams[session_id] = count
    else:
        _active_streams.pop(session_id, None)


def has_active_stream(session_id: str) -> bool:
    return _active_streams.get(session_id, 0) > 0


def session_store() -> dict[str, Aggregator]:
    """Return the underlying store (read-only view for debugging)."""
    return _session_store


def _evict_overflow(keep: str) -> None:
    """Evict oldest sessions past MAX_SESSIONS, skipping keep and any with a connected stream."""
    max_sessions = max(1, get_settings().MAX_SESSIONS)
    idle = [sid for sid in _session_store if sid != keep and not has_active_stream(sid)]
    while len(_session_store) > max_sessions and idle:
        oldest = idle.pop(0)
        aggregator = _session_store.pop(oldest)
        aggregator.reset_transcript()
        logger.warning("Session evicted (MAX_SESSIONS=%d): %s", max_sessions, oldest)
    if len(_session_store) > max_sessions:
        logger.warning(
            "Holding %d sessions over MAX_SESSIONS=%d: all have connected streams",
            len(_session_store),
            max_sessions,
        )
