"""Rich-based terminal output for the chat session."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.cells import cell_len
from rich.console import Console
from rich.markup import escape
from rich.status import Status
from rich.text import Text

from ..config import CliConfig

console = Console()

# ---------------------------------------------------------------------------
# Color palette
# ---------------------------------------------------------------------------

GOLD = "#C5A059"  # logo, accents
SLATE = "#94A3B8"  # informational prompts
MUTED = "#8b8b8b"  # secondary text (paths, hints)
USER_BLUE = "#0078FF"
AI_AMBER = "#FFBB00"

_FALLBACK_SIZE = (80, 24)
_MIN_WIDTH = 5  # one border and one padding space on each side, plus a column of text


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FrameStyle:
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str
    padding: int = 1


ROUNDED = FrameStyle("╭", "╮", "╰", "╯", "─", "│")
SQUARE = FrameStyle("┌", "┐", "└", "┘", "─", "│")
ASCII = FrameStyle("+", "+", "+", "+", "-", "|")

FRAME_STYLES: dict[str, FrameStyle] = {"rounded": ROUNDED, "square": SQUARE, "ascii": ASCII}

_WIDTH_CAP = 100

# Overridden at startup by configure()
_max_width: int = _WIDTH_CAP
_frame_style: FrameStyle = ROUNDED
_user_color: str = USER_BLUE
_assistant_color: str = AI_AMBER


def configure(cli: CliConfig) -> None:
    """Apply the [cli] section of the config to module-level display settings."""
    global _max_width, _frame_style, _user_color, _assistant_color
    _max_width = min(cli.max_width, _WIDTH_CAP)
    _frame_style = FRAME_STYLES[cli.frame_style]
    _user_color = cli.user_color
    _assistant_color = cli.assistant_color


def terminal_width() -> int:
    """Current terminal width, capped at the configured maximum.

    Read on every call so a resize between turns takes effect on the next frame.
    """
    columns = shutil.get_terminal_size(_FALLBACK_SIZE).columns
    return max(_MIN_WIDTH, min(columns, _max_width))


def _wrap(message: str, width: int) -> list[str]:
    """Word-wrap to at most ``width`` terminal cells per line.

    Breaks at whitespace; a word wider than the line is folded.
    """
    lines = Text(message).wrap(console, width, overflow="fold")
    return [line.plain.rstrip() for line in lines]


def render_frame(message: str, width: int | None = None, style: FrameStyle | None = None) -> str:
    """Render ``message`` as a bordered, padded, word-wrapped block ``width`` cells wide."""
    style = style or _frame_style
    if width is None:
        width = terminal_width()
    pad = max(0, style.padding)
    inner = width - 2 - 2 * pad
    if inner < 1:
        raise ValueError(f"Frame width {width} leaves no room for text")

    rule = style.horizontal * (width - 2)
    margin = " " * pad
    out = [f"{style.top_left}{rule}{style.top_right}"]
    for line in _wrap(message, inner):
        fill = " " * max(0, inner - cell_len(line))
        out.append(f"{style.vertical}{margin}{line}{fill}{margin}{style.vertical}")
    out.append(f"{style.bottom_left}{rule}{style.bottom_right}")
    return "\n".join(out)


def _print_frame(message: str, color: str) -> None:
    console.print()
    # soft_wrap keeps rich from re-wrapping a frame that is already sized
    console.print(Text(render_frame(message), style=color), soft_wrap=True)


def display_user_message(message: str) -> None:
    _print_frame(message, _user_color)


def display_ai_message(message: str) -> None:
    _print_frame(message, _assistant_color)


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def render_info(message: str) -> None:
    console.print(f"[{SLATE}]{escape(message)}[/{SLATE}]")


def render_error(message: str) -> None:
    console.print(f"\n[red bold]Error:[/red bold] {escape(message)}")


def thinking(message: str = "Thinking...") -> Status:
    """Spinner shown while a reply is outstanding. Sync context manager."""
    return console.status(f"  [{MUTED}]{message}[/{MUTED}]", spinner="dots12", spinner_style=MUTED)


def render_conversation_list(listing: list[Path]) -> None:
    render_info("Enter valid index to choose convo: ")
    for index, path in enumerate(listing):
        console.print(f"  [{GOLD}][{index}][/{GOLD}] [{MUTED}]{escape(str(path))}[/{MUTED}]")


def render_saved(path: Path) -> None:
    console.print(f"\n[{SLATE}]Conversation saved in:[/{SLATE}] [{MUTED}]{escape(str(path))}[/{MUTED}]")


# ---------------------------------------------------------------------------
# Welcome / resume
# ---------------------------------------------------------------------------


_BOX_TOP = "╭" + "─" * 29 + "╮"
_BOX_BOT = "╰" + "─" * 29 + "╯"
_SEP = " · "


def render_logo(model: str, version: str = "") -> None:
    console.print()
    console.print(f"[{GOLD}]  {_BOX_TOP}[/]")
    console.print(f"[{GOLD}]  │      [bold]C H A T F R A M E[/bold]      │[/]")
    console.print(f"[{GOLD}]  │    [{SLATE}]conversations, framed[/]    │[/]")
    console.print(f"[{GOLD}]  {_BOX_BOT}[/]")
    console.print()
    parts = [escape(model)]
    if version:
        parts.insert(0, f"v{version}")
    console.print(f"  [{MUTED}]{_SEP.join(parts)}[/{MUTED}]")
    console.print()


def render_conversation_recap(messages: list[dict[str, Any]]) -> None:
    """Show the last user/assistant exchange for context on resume."""
    last_user = None
    last_assistant = None
    for msg in reversed(messages):
        role = msg.get("role", "")
        content = msg.get("content", "")
        if not content or not isinstance(content, str):
            continue
        if role == "assistant" and last_assistant is None:
            last_assistant = content
        elif role == "user" and last_user is None:
            last_user = content
        if last_user and last_assistant:
            break

    if not last_user and not last_assistant:
        return

    console.print(f"  [{MUTED}]Resumed {len(messages)} messages. Last exchange:[/{MUTED}]")
    if last_user:
        display_user_message(_truncate(last_user, 200))
    if last_assistant:
        display_ai_message(_truncate(last_assistant, 500))


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."
