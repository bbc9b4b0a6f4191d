"""Directory of saved conversations, one ``convo-<uuid>.txt`` file each."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Callable

from .. import identifiers
from ..cli import renderer

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]


class ConversationStore:
    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def list_conversations(self) -> list[Path] | None:
        """Snapshot the regular files in the store, in directory enumeration order.

        Returns None when the directory cannot be read or holds no files.
        """
        try:
            with os.scandir(self.directory) as entries:
                found = [Path(entry.path) for entry in entries if entry.is_file()]
        except OSError as e:
            logger.warning("Failed to read conversation directory %s: %s", self.directory, e)
            renderer.render_error(f"Failed to read directory: {e}")
            return None
        return found or None

    def select_interactively(self, listing: list[Path], read_line: ReadLine) -> tuple[Path, uuid.UUID]:
        """Ask for an index into ``listing`` until a valid one is given.

        A chosen file whose name breaks the naming convention raises
        identifiers.FormatError. EOFError from ``read_line`` propagates.
        """
        renderer.render_conversation_list(listing)
        while True:
            pick = read_line("> ").strip()
            try:
                index = int(pick)
            except ValueError:
                renderer.render_info("Invalid input. Please enter a number.")
                continue
            if not 0 <= index < len(listing):
                renderer.render_info("Invalid index. Try again!")
                continue

            chosen = listing[index]
            renderer.render_info(f"You selected: {chosen}")
            return chosen, identifiers.decode(chosen.name)

    def resolve_save_path(self, identifier: uuid.UUID) -> Path:
        return self.directory / identifiers.encode(identifier)
