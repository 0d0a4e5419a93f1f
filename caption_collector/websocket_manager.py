"""
CaptionStreamManager: one WebSocket connection feeding one caption session.

The page adapter sends JSON text messages:
- {"type": "caption", "participant_id"?, "speaker_name"?, "text"}  -> on_caption_update, no reply
- {"type": "GET_TRANSCRIPT"}    -> {"type": "transcript", "transcript": "..."}  (open chunks flushed first)
- {"type": "RESET_TRANSCRIPT"}  -> {"type": "reset", "ok": true}
Anything else gets {"type": "error", "detail": "..."} and is otherwise ignored.

Messages are handled one at a time on the event loop, interleaved with grace-timer commits.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError

from caption_collector.schemas.captions import CaptionMessage
from caption_collector.transcript import Aggregator

logger = logging.getLogger(__name__)


class CaptionStreamManager:
    def __init__(self, websocket: WebSocket, session_id: str, aggregator: Aggregator) -> None:
        self._ws = websocket
        self._session_id = session_id
        self._aggregator = aggregator
        self._closed = False

    @property
    def session_id(self) -> str:
        return self._session_id

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._ws.send_text(json.dumps(payload))
        except Exception:
            self._closed = True

    async def _send_error(self, detail: str) -> None:
        logger.warning("Session %s: bad message: %s", self._session_id, detail)
        await self._send({"type": "error", "detail": detail})

    async def handle_text(self, raw: str) -> None:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            await self._send_error(f"invalid JSON: {e.msg}")
            return
        if not isinstance(payload, dict):
            await self._send_error("message must be a JSON object")
            return

        msg_type = payload.get("type")
        if msg_type == "caption":
            try:
                event = CaptionMessage.model_validate(payload)
            except ValidationError as e:
                await self._send_error(f"invalid caption: {e.errors()[0].get('msg', 'invalid')}")
                return
            self._aggregator.on_caption_update(event.participant_id, event.speaker_name, event.text)
        elif msg_type == "GET_TRANSCRIPT":
            await self._send({"type": "transcript", "transcript": self._aggregator.get_transcript()})
        elif msg_type == "RESET_TRANSCRIPT":
            self._aggregator.reset_transcript()
            await self._send({"type": "reset", "ok": True})
        else:
            await self._send_error(f"unknown message type: {msg_type!r}")

    async def run(self) -> None:
        """Main loop: announce session, then dispatch text messages until disconnect."""
        await self._send({"type": "session", "session_id": self._session_id})
        try:
            while not self._closed:
                try:
                    msg = await self._ws.receive()
                except Exception:
                    break
                if msg.get("type") == "websocket.disconnect":
                    break
                text = msg.get("text")
                if text is None:
                    await self._send_error("binary frames are not supported")
                    continue
                await self.handle_text(text)
        finally:
            self._closed = True
            logger.info("Caption stream closed for session %s", self._session_id)
