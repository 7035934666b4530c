"""
Console configuration.

Settings live in a JSON file (``~/.config/terminus/config.json`` by
default)::

    {
        "title_style": {"fg": "white", "bg": "blue"},
        "bar_style": {"fg": "white", "bg": "blue"},
        "history_size": 100,
        "roster_width": 24,
        "flush_retries": 16,
        "input_timeout": 0.05,
        "log_file": "~/.cache/terminus.log",
        "log_level": "INFO"
    }

``TERMINUS_LOG_LEVEL`` and ``TERMINUS_LOG_FILE`` override the logging
settings from the file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from terminus.core.style import Style
from terminus.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/terminus/config.json")

ENV_LOG_LEVEL = "TERMINUS_LOG_LEVEL"
ENV_LOG_FILE = "TERMINUS_LOG_FILE"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_bar_colors() -> dict[str, str]:
    return {"fg": "white", "bg": "blue"}


@dataclass
class ConsoleConfig:
    """Settings for one console session."""

    title_style: dict[str, str] = field(default_factory=_default_bar_colors)  # Title bar colors
    bar_style: dict[str, str] = field(default_factory=_default_bar_colors)  # Window bar colors
    history_size: int = 100  # Input lines remembered
    roster_width: int = 24  # Columns of the contact and occupant panes
    flush_retries: int = 16  # Write attempts before giving up on the terminal
    input_timeout: float = 0.05  # Seconds to wait for a key per loop turn
    log_file: Optional[str] = None
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConsoleConfig:
        """Create config from a dictionary, validating every value."""
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        defaults = cls()
        try:
            config = cls(
                title_style=dict(data.get("title_style", defaults.title_style)),
                bar_style=dict(data.get("bar_style", defaults.bar_style)),
                history_size=int(data.get("history_size", defaults.history_size)),
                roster_width=int(data.get("roster_width", defaults.roster_width)),
                flush_retries=int(data.get("flush_retries", defaults.flush_retries)),
                input_timeout=float(data.get("input_timeout", defaults.input_timeout)),
                log_file=data.get("log_file", defaults.log_file),
                log_level=str(data.get("log_level", defaults.log_level)).upper(),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid configuration value: {e}") from e
        config.validate()
        return config

    def validate(self) -> None:
        if self.history_size < 0:
            raise ConfigError("history_size must not be negative")
        if self.roster_width < 0:
            raise ConfigError("roster_width must not be negative")
        if self.flush_retries < 1:
            raise ConfigError("flush_retries must be at least 1")
        if self.input_timeout < 0:
            raise ConfigError("input_timeout must not be negative")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"unknown log level: {self.log_level}")
        # Fail on bad color names now rather than on first paint
        self.title()
        self.bar()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title_style": dict(self.title_style),
            "bar_style": dict(self.bar_style),
            "history_size": self.history_size,
            "roster_width": self.roster_width,
            "flush_retries": self.flush_retries,
            "input_timeout": self.input_timeout,
            "log_file": self.log_file,
            "log_level": self.log_level,
        }

    @staticmethod
    def _style(colors: dict[str, str]) -> Style:
        try:
            return Style.from_names(fg=colors.get("fg"), bg=colors.get("bg"), bold=bool(colors.get("bold", False)))
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def title(self) -> Style:
        """Style of the title bar."""
        return self._style(self.title_style)

    def bar(self) -> Style:
        """Style of the window bar."""
        return self._style(self.bar_style)


def load_config(path: Optional[Union[str, Path]] = None) -> ConsoleConfig:
    """
    Read the configuration file and apply environment overrides.

    A missing file gives the defaults; a file that is not valid JSON, or
    holds invalid values, raises :class:`ConfigError`.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()
    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"cannot read {config_path}: {e}") from e

    if os.environ.get(ENV_LOG_LEVEL):
        data = {**data, "log_level": os.environ[ENV_LOG_LEVEL]}
    if os.environ.get(ENV_LOG_FILE):
        data = {**data, "log_file": os.environ[ENV_LOG_FILE]}

    return ConsoleConfig.from_dict(data)
