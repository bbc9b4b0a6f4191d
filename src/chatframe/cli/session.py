"""Interactive session: choose new or resumed conversation, then chat until exit."""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from rich.console import Console
from rich.prompt import Confirm
from rich.text import Text

from .. import identifiers
from ..services.ai_service import AIServiceError
from ..services.conversation import Conversation, TranscriptError
from ..services.store import ConversationStore
from . import renderer

logger = logging.getLogger(__name__)

_PROMPT = "[bold #38B6F6]❯[/] "
_EXIT_COMMAND = "exit"


class SessionState(Enum):
    START = "start"
    NEW_SESSION = "new_session"
    RESUME_SESSION = "resume_session"
    CHATTING = "chatting"
    CLOSED = "closed"


def _read_line(prompt: str | Text) -> str:
    """Blocking line read from the terminal. Raises EOFError on Ctrl+D."""
    return renderer.console.input(prompt)


class _YesNoConfirm(Confirm):
    """Y/n question answered through the session's line reader."""

    validate_error_message = "Invalid input. Please enter 'Y' or 'N'."

    def __init__(self, prompt: str, read_line: Callable[[Any], str], **kwargs: Any) -> None:
        super().__init__(prompt, **kwargs)
        self.read_line = read_line

    def get_input(self, console: Console, prompt: Text, password: bool, stream: Any = None) -> str:
        return self.read_line(prompt)


class SessionController:
    def __init__(
        self,
        store: ConversationStore,
        conversation: Conversation,
        read_line: Callable[[str], str] = _read_line,
        assistant_name: str = "Gemini",
    ) -> None:
        self.store = store
        self.conversation = conversation
        self.read_line = read_line
        self.assistant_name = assistant_name
        self.state = SessionState.START
        # Set by resumption or minted on first need
        self.identifier: uuid.UUID | None = None

    def ask_new_conversation(self) -> bool:
        question = _YesNoConfirm(
            "Would you like to create a new conversation?",
            read_line=self.read_line,
            console=renderer.console,
        )
        return question(default=True)

    def resume(self) -> None:
        """Pick a saved conversation and load it; fall back to a new one if there are none."""
        listing = self.store.list_conversations()
        if listing is None:
            renderer.render_info(f"No old convos found in {self.store.directory}")
            renderer.render_info("Creating new conversation...")
            return

        path, identifier = self.store.select_interactively(listing, self.read_line)
        try:
            self.conversation.load(path)
        except TranscriptError as e:
            # Leave the unreadable file alone; this session saves under a new identifier
            logger.warning("Could not resume %s: %s", path, e)
            renderer.render_error(f"{e}. Starting a new conversation instead.")
            return
        self.identifier = identifier
        renderer.render_conversation_recap(self.conversation.history)

    async def chat(self) -> None:
        renderer.display_ai_message(
            f"Hi👋 I'm {self.assistant_name}. How can I help you today? (type '{_EXIT_COMMAND}' to leave)"
        )
        while True:
            try:
                user_input = self.read_line(_PROMPT).strip()
            except EOFError:
                break
            if user_input.lower() == _EXIT_COMMAND:
                break
            if not user_input:
                renderer.render_info("Empty message ignored.")
                continue

            renderer.display_user_message(user_input)
            try:
                with renderer.thinking():
                    reply = await self.conversation.prompt(user_input)
            except AIServiceError as e:
                renderer.render_error(str(e))
                if e.retryable:
                    renderer.render_info("This looks temporary. Send your message again to retry.")
                continue
            renderer.display_ai_message(reply)

    def close(self) -> Path:
        if self.identifier is None:
            self.identifier = identifiers.new_identifier()
        path = self.store.resolve_save_path(self.identifier)
        self.conversation.save(path)
        renderer.render_saved(path)
        return path

    async def run(self) -> Path:
        """Drive the session through to CLOSED and return the transcript path.

        EOFError or KeyboardInterrupt before chatting starts propagate and
        nothing is saved. identifiers.FormatError (corrupted store) is fatal.
        """
        self.state = SessionState.START
        if self.ask_new_conversation():
            self.state = SessionState.NEW_SESSION
            renderer.render_info("Starting a new conversation...")
            self.identifier = identifiers.new_identifier()
        else:
            self.state = SessionState.RESUME_SESSION
            renderer.render_info("Continuing with existing conversations...")
            self.resume()

        self.state = SessionState.CHATTING
        await self.chat()

        self.state = SessionState.CLOSED
        return self.close()
