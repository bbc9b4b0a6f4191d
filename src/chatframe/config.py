"""Configuration loader: YAML file with environment variable fallbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from platformdirs import user_config_dir, user_data_dir

APP_NAME = "chatframe"

_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
_DEFAULT_MODEL = "gemini-1.5-flash"

_DEFAULT_SYSTEM_PROMPT = """\
You are a helpful assistant chatting with a user in a terminal. \
Answer in plain text: your replies are word-wrapped into a fixed-width box, \
so avoid wide tables and long unbroken lines."""

_FRAME_STYLES = ("rounded", "square", "ascii")


@dataclass
class AIConfig:
    api_key: str
    base_url: str = _DEFAULT_BASE_URL
    model: str = _DEFAULT_MODEL
    system_prompt: str = _DEFAULT_SYSTEM_PROMPT
    assistant_name: str = "Gemini"
    verify_ssl: bool = True
    request_timeout: int = 120  # seconds; read timeout for one completion
    connect_timeout: int = 5


@dataclass
class AppSettings:
    data_dir: Path = field(default_factory=lambda: Path(user_data_dir(APP_NAME)))

    @property
    def conversations_dir(self) -> Path:
        return self.data_dir / "convos"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


@dataclass
class CliConfig:
    max_width: int = 100
    user_color: str = "#0078FF"
    assistant_color: str = "#FFBB00"
    frame_style: str = "rounded"
    show_logo: bool = True


@dataclass
class AppConfig:
    ai: AIConfig
    app: AppSettings = field(default_factory=AppSettings)
    cli: CliConfig = field(default_factory=CliConfig)


def _get_config_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "config.yaml"


def _as_bool(value: Any) -> bool:
    return str(value).lower() not in ("false", "0", "no", "off")


def _clamped_int(value: Any, default: int, lo: int, hi: int) -> int:
    try:
        return max(lo, min(hi, int(value)))
    except (ValueError, TypeError):
        return default


def load_config(config_path: Path | None = None, env_file: Path | None = None) -> AppConfig:
    # .env never overrides variables already set in the environment
    load_dotenv(env_file or find_dotenv(usecwd=True))

    raw: dict[str, Any] = {}
    path = config_path or _get_config_path()

    if path.exists():
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a YAML mapping")

    ai_raw = raw.get("ai", {}) or {}
    api_key = ai_raw.get("api_key") or os.environ.get("AI_CHAT_API_KEY") or os.environ.get("GEMINIAI_API", "")
    base_url = ai_raw.get("base_url") or os.environ.get("AI_CHAT_BASE_URL", _DEFAULT_BASE_URL)
    model = ai_raw.get("model") or os.environ.get("AI_CHAT_MODEL", _DEFAULT_MODEL)
    system_prompt = ai_raw.get("system_prompt") or os.environ.get("AI_CHAT_SYSTEM_PROMPT", _DEFAULT_SYSTEM_PROMPT)
    assistant_name = ai_raw.get("assistant_name") or "Gemini"

    if not api_key:
        raise ValueError(
            f"AI api_key is required. Set 'ai.api_key' in config.yaml ({path}) "
            "or the AI_CHAT_API_KEY (or GEMINIAI_API) environment variable."
        )

    verify_ssl = _as_bool(ai_raw.get("verify_ssl", os.environ.get("AI_CHAT_VERIFY_SSL", "true")))
    request_timeout = _clamped_int(
        ai_raw.get("request_timeout", os.environ.get("AI_CHAT_REQUEST_TIMEOUT", 120)), 120, 10, 600
    )
    connect_timeout = _clamped_int(ai_raw.get("connect_timeout", 5), 5, 1, 60)

    ai = AIConfig(
        api_key=api_key,
        base_url=base_url,
        model=model,
        system_prompt=system_prompt,
        assistant_name=assistant_name,
        verify_ssl=verify_ssl,
        request_timeout=request_timeout,
        connect_timeout=connect_timeout,
    )

    app_raw = raw.get("app", {}) or {}
    data_dir_raw = app_raw.get("data_dir") or os.environ.get("AI_CHAT_DATA_DIR")
    app_settings = AppSettings(data_dir=Path(os.path.expanduser(data_dir_raw))) if data_dir_raw else AppSettings()

    cli_raw = raw.get("cli", {}) or {}
    frame_style = str(cli_raw.get("frame_style", "rounded")).lower()
    if frame_style not in _FRAME_STYLES:
        raise ValueError(f"cli.frame_style must be one of {', '.join(_FRAME_STYLES)}, got {frame_style!r}")

    cli_config = CliConfig(
        max_width=_clamped_int(cli_raw.get("max_width", 100), 100, 20, 100),
        user_color=str(cli_raw.get("user_color", "#0078FF")),
        assistant_color=str(cli_raw.get("assistant_color", "#FFBB00")),
        frame_style=frame_style,
        show_logo=_as_bool(cli_raw.get("show_logo", True)),
    )

    return AppConfig(ai=ai, app=app_settings, cli=cli_config)
