"""Tests for render_conversation_recap and the other status renderers."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from chatframe.cli.renderer import (
    render_conversation_list,
    render_conversation_recap,
    render_error,
    render_logo,
    render_saved,
)


def _output(mock_console) -> str:
    parts = []
    for call in mock_console.print.call_args_list:
        for arg in call.args:
            parts.append(getattr(arg, "plain", str(arg)))
    return "\n".join(parts)


class TestRenderConversationRecap:
    def test_shows_last_exchange(self) -> None:
        messages = [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Hi there!"},
            {"role": "user", "content": "How are you?"},
            {"role": "assistant", "content": "I'm doing well."},
        ]
        with (
            patch("chatframe.cli.renderer.console") as mock_console,
            patch("chatframe.cli.renderer.terminal_width", return_value=40),
        ):
            render_conversation_recap(messages)
            output = _output(mock_console)
            assert "How are you?" in output
            assert "I'm doing well." in output
            assert "Hi there!" not in output
            assert "Resumed 4 messages" in output

    def test_no_messages(self) -> None:
        with patch("chatframe.cli.renderer.console") as mock_console:
            render_conversation_recap([])
            mock_console.print.assert_not_called()

    def test_only_user_message(self) -> None:
        with (
            patch("chatframe.cli.renderer.console") as mock_console,
            patch("chatframe.cli.renderer.terminal_width", return_value=40),
        ):
            render_conversation_recap([{"role": "user", "content": "Hello"}])
            assert "Hello" in _output(mock_console)

    def test_skips_empty_content(self) -> None:
        messages = [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Real response"},
            {"role": "assistant", "content": ""},
        ]
        with (
            patch("chatframe.cli.renderer.console") as mock_console,
            patch("chatframe.cli.renderer.terminal_width", return_value=40),
        ):
            render_conversation_recap(messages)
            assert "Real response" in _output(mock_console)

    def test_long_reply_truncated(self) -> None:
        messages = [{"role": "assistant", "content": "word " * 300}]
        with (
            patch("chatframe.cli.renderer.console") as mock_console,
            patch("chatframe.cli.renderer.terminal_width", return_value=60),
        ):
            render_conversation_recap(messages)
            output = _output(mock_console)
            assert "..." in output
            assert output.count("word") < 300


class TestStatusLines:
    def test_error_is_escaped(self) -> None:
        with patch("chatframe.cli.renderer.console") as mock_console:
            render_error("bad [bold]markup[/bold]")
            printed = mock_console.print.call_args.args[0]
            assert "Error:" in printed
            assert "\\[bold]" in printed

    def test_conversation_list_shows_indices(self) -> None:
        listing = [Path("/store/convo-a.txt"), Path("/store/convo-b.txt")]
        with patch("chatframe.cli.renderer.console") as mock_console:
            render_conversation_list(listing)
            output = _output(mock_console)
            assert "[0]" in output
            assert "[1]" in output
            assert "convo-b.txt" in output

    def test_saved_path(self) -> None:
        with patch("chatframe.cli.renderer.console") as mock_console:
            render_saved(Path("/store/convo-x.txt"))
            assert "Conversation saved in:" in _output(mock_console)
            assert "convo-x.txt" in _output(mock_console)

    def test_logo_shows_model_and_version(self) -> None:
        with patch("chatframe.cli.renderer.console") as mock_console:
            render_logo("gemini-1.5-flash", "0.1.0")
            output = _output(mock_console)
            assert "gemini-1.5-flash" in output
            assert "v0.1.0" in output
