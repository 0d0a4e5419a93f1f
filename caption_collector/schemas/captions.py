"""
Schemas for caption ingestion and transcript retrieval.

A caption event is one redraw of one speaker's caption node, as scraped by the page adapter:
participant_id is the stable key when the page exposes one; otherwise the display name is the key.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CaptionEvent(BaseModel):
    """Body of POST /api/sessions/{id}/captions and payload of WebSocket {type: "caption"} messages."""

    participant_id: str | None = Field(None, description="Stable speaker id; falls back to speaker_name")
    speaker_name: str | None = Field(None, description="Display name; blank placeholder when missing")
    text: str = Field("", description="Raw caption text as currently rendered (may repeat or be empty)")


class CaptionMessage(CaptionEvent):
    type: Literal["caption"] = "caption"


class CaptionAccepted(BaseModel):
    accepted: bool = Field(..., description="False when the update was empty or a duplicate")


class SessionResponse(BaseModel):
    session_id: str


class TranscriptResponse(BaseModel):
    """Transcript snapshot; every open chunk was committed before this was built."""

    session_id: str
    transcript: str = Field("", description="Newline-joined '[start] [end] speaker : text' lines")
    lines: list[str] = Field(default_factory=list)


class ResetResponse(BaseModel):
    ok: bool = True
