"""Pydantic schemas for API request/response."""
from caption_collector.schemas.captions import (
    CaptionAccepted,
    CaptionEvent,
    CaptionMessage,
    ResetResponse,
    SessionResponse,
    TranscriptResponse,
)

__all__ = [
    "CaptionAccepted",
    "CaptionEvent",
    "CaptionMessage",
    "ResetResponse",
    "SessionResponse",
    "TranscriptResponse",
]
