"""CLI entry point for chatframe."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import __version__
from .config import AppConfig, load_config
from .identifiers import FormatError

logger = logging.getLogger(__name__)


def _setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Send log records to a rotating file; the terminal is reserved for the chat."""
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_dir / "chatframe.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )


def _load_config_or_exit() -> AppConfig:
    try:
        return load_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


async def _test_connection(config: AppConfig) -> None:
    from .services.ai_service import create_ai_service

    ai_service = create_ai_service(config.ai)

    print("Config:")
    print(f"  Endpoint: {config.ai.base_url}")
    print(f"  Model:    {config.ai.model}")
    print(f"  Data dir: {config.app.data_dir}")

    valid, message, models = await ai_service.validate_connection()
    if not valid:
        print(f"  FAILED - {message}")
        sys.exit(1)
    print(f"  OK - {len(models)} model(s) available")
    for m in models[:10]:
        print(f"     - {m}")


def _run_chat(config: AppConfig) -> None:
    from .cli import renderer
    from .cli.session import SessionController
    from .services.ai_service import create_ai_service
    from .services.conversation import Conversation
    from .services.store import ConversationStore

    renderer.configure(config.cli)
    store = ConversationStore(config.app.conversations_dir)
    store.ensure_directory()

    if config.cli.show_logo:
        renderer.render_logo(config.ai.model, __version__)

    controller = SessionController(
        store,
        Conversation(create_ai_service(config.ai)),
        assistant_name=config.ai.assistant_name,
    )
    try:
        asyncio.run(controller.run())
    except (KeyboardInterrupt, EOFError):
        logger.info("Session aborted in state %s; nothing saved", controller.state.value)
        print("\nAborted. Conversation not saved.", file=sys.stderr)
        sys.exit(130)
    except FormatError as e:
        logger.error("Conversation store is corrupted: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        print(f"  Store: {store.directory}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(prog="chatframe", description="Terminal chat with resumable conversations")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--test", action="store_true", help="Test connection settings and exit")
    parser.add_argument(
        "-m",
        "--model",
        dest="model",
        default=None,
        help="Override AI model (e.g., gemini-1.5-pro)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-level logging to the log file")

    args = parser.parse_args()

    config = _load_config_or_exit()
    if args.model:
        config.ai.model = args.model
    _setup_logging(config.app.log_dir, verbose=args.verbose)

    if args.test:
        asyncio.run(_test_connection(config))
        return

    _run_chat(config)


if __name__ == "__main__":
    main()
