"""Turn history for one conversation, and its JSON transcript on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .ai_service import AIService

logger = logging.getLogger(__name__)

TRANSCRIPT_VERSION = 1
_ROLES = frozenset({"user", "assistant"})


class TranscriptError(Exception):
    """A transcript file could not be read or has the wrong shape."""


class Conversation:
    """Accumulates turns and forwards each user turn to the model.

    Usage::

        convo = Conversation(ai_service)
        convo.load(path)                 # optional, resumes a saved history
        reply = await convo.prompt("hi")
        convo.save(path)
    """

    def __init__(self, ai_service: AIService) -> None:
        self.ai_service = ai_service
        self.history: list[dict[str, Any]] = []

    async def prompt(self, text: str) -> str:
        self.history.append({"role": "user", "content": text})
        try:
            reply = await self.ai_service.complete(self.history)
        except Exception:
            # Keep history alternating so the next prompt is well-formed
            self.history.pop()
            raise
        self.history.append({"role": "assistant", "content": reply})
        return reply

    def load(self, path: Path) -> None:
        try:
            text = path.read_text(encoding="utf-8")
            # A blank file is a conversation that was saved before any turn
            raw = json.loads(text) if text.strip() else {"messages": []}
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TranscriptError(f"Cannot read transcript {path}: {e}") from e

        if not isinstance(raw, dict) or not isinstance(raw.get("messages"), list):
            raise TranscriptError(f"Transcript {path} has no message list")

        messages: list[dict[str, Any]] = []
        for msg in raw["messages"]:
            if not isinstance(msg, dict):
                continue
            role = msg.get("role")
            content = msg.get("content")
            if role not in _ROLES or not isinstance(content, str):
                logger.debug("Skipping transcript entry with role=%r", role)
                continue
            messages.append({"role": role, "content": content})

        self.history = messages
        logger.info("Loaded %d messages from %s", len(messages), path)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": TRANSCRIPT_VERSION, "messages": self.history}
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.info("Saved %d messages to %s", len(self.history), path)
