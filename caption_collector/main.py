"""
FastAPI app: WebSocket endpoint for live caption ingestion; HTTP API for transcript retrieval/reset.

Page adapter connects to /ws/captions and streams caption redraws as JSON. The same session can be
read or reset over HTTP:
{ "session_id": "...", "transcript": "[start] [end] speaker : text\\n...", "lines": [...] }
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from caption_collector.logging_config import configure_logging
from caption_collector.schemas.captions import (
    CaptionAccepted,
    CaptionEvent,
    ResetResponse,
    SessionResponse,
    TranscriptResponse,
)
from caption_collector.session_store import (
    attach_stream,
    clear_sessions,
    create_session,
    delete_session,
    detach_stream,
    ensure_session,
    get_session,
    has_active_stream,
)
from caption_collector.transcript import Aggregator, Scheduler
from caption_collector.websocket_manager import CaptionStreamManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Tests may inject a VirtualScheduler factory; default is loop timers
    if not hasattr(app.state, "scheduler_factory"):
        app.state.scheduler_factory = None
    logger.info("Caption collector ready")
    yield
    clear_sessions()


app = FastAPI(
    title="Live Caption Collector",
    description="Aggregates live caption redraws into a timestamped per-utterance transcript",
    lifespan=lifespan,
)


def _scheduler_factory() -> Callable[[], Scheduler] | None:
    return getattr(app.state, "scheduler_factory", None)


def _require_session(session_id: str) -> Aggregator:
    aggregator = get_session(session_id)
    if aggregator is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return aggregator


@app.websocket("/ws/captions")
async def websocket_captions(websocket: WebSocket, session_id: str | None = None) -> None:
    """
    WebSocket: client sends caption events and transcript requests as JSON text.
    Reconnecting with ?session_id=... continues that session; otherwise a new one is created.
    """
    await websocket.accept()
    if session_id:
        aggregator = ensure_session(session_id, _scheduler_factory())
    else:
        session_id, aggregator = create_session(scheduler_factory=_scheduler_factory())
    attach_stream(session_id)
    manager = CaptionStreamManager(websocket, session_id, aggregator)
    try:
        await manager.run()
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Caption stream failed for session %s", session_id)
        try:
            await websocket.close()
        except Exception:
            pass
    finally:
        detach_stream(session_id)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.post("/api/sessions", response_model=SessionResponse)
async def new_session() -> SessionResponse:
    session_id, _ = create_session(scheduler_factory=_scheduler_factory())
    return SessionResponse(session_id=session_id)


@app.post("/api/sessions/{session_id}/captions", response_model=CaptionAccepted)
async def post_caption(session_id: str, event: CaptionEvent) -> CaptionAccepted:
    """Feed one caption redraw. Duplicates and empty text are accepted=false, never an error."""
    aggregator = _require_session(session_id)
    accepted = aggregator.on_caption_update(event.participant_id, event.speaker_name, event.text)
    return CaptionAccepted(accepted=accepted)


@app.get("/api/sessions/{session_id}/transcript", response_model=TranscriptResponse)
async def get_transcript(session_id: str) -> TranscriptResponse:
    """Commit every open chunk, then return the full transcript."""
    aggregator = _require_session(session_id)
    lines = aggregator.get_transcript_lines()
    return TranscriptResponse(session_id=session_id, transcript="\n".join(lines), lines=lines)


@app.post("/api/sessions/{session_id}/reset", response_model=ResetResponse)
async def reset_transcript(session_id: str) -> ResetResponse:
    aggregator = _require_session(session_id)
    aggregator.reset_transcript()
    return ResetResponse(ok=True)


@app.delete("/api/sessions/{session_id}", response_model=ResetResponse)
async def remove_session(session_id: str) -> ResetResponse:
    """Drop a session. Refused while a caption stream is still connected to it."""
    if has_active_stream(session_id):
        raise HTTPException(status_code=409, detail="Session has a connected caption stream")
    return ResetResponse(ok=delete_session(session_id))


def run_api() -> None:
    """Entry point for the caption-collector console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
