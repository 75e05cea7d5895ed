"""Display defaults and environment detection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .render import RenderOptions

DEFAULT_ASSET = "serial_terminal.txt"
DEFAULT_TIMEOUT = 30.0

_LOGGER = logging.getLogger(__name__)


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        _LOGGER.warning("Ignoring %s=%r: not a number, using %s", name, value, default)
        return default
    if not 0 < number < float("inf"):
        _LOGGER.warning("Ignoring %s=%r: must be positive, using %s", name, value, default)
        return default
    return number


def _default_colors() -> bool:
    # https://no-color.org
    if os.environ.get("NO_COLOR"):
        return False
    return _env_flag("OPENQA_SERIAL_COLORS", True)


ENV_FILE_TEMPLATE = """\
# openqa-serial display defaults
# Values set in the environment take precedence over this file.

# OPENQA_SERIAL_NUMBERS=1
# OPENQA_SERIAL_COLORS=1
# OPENQA_SERIAL_TIMEOUT=30
# OPENQA_SERIAL_ASSET=serial_terminal.txt
"""


@dataclass
class Config:
    """Runtime configuration, resolved from env vars and defaults."""

    # Display
    numbers: bool = field(default_factory=lambda: _env_flag("OPENQA_SERIAL_NUMBERS", True))
    colors: bool = field(default_factory=_default_colors)

    # Fetching from openQA
    timeout: float = field(default_factory=lambda: _env_float("OPENQA_SERIAL_TIMEOUT", DEFAULT_TIMEOUT))
    asset: str = field(default_factory=lambda: os.environ.get("OPENQA_SERIAL_ASSET", DEFAULT_ASSET))

    env_file: Path = field(default_factory=lambda: _xdg_config_home() / "openqa-serial" / "env")

    def load_env_file(self) -> None:
        """Load defaults from the env file into os.environ (if not already set)."""
        if not self.env_file.exists():
            return
        for line in self.env_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            # Don't overwrite keys already in the environment
            if key and key not in os.environ:
                os.environ[key] = value

    def ensure_env_file(self) -> bool:
        """Create the env file from template if it doesn't exist. Returns True if created."""
        if self.env_file.exists():
            return False
        self.env_file.parent.mkdir(parents=True, exist_ok=True)
        self.env_file.write_text(ENV_FILE_TEMPLATE)
        return True

    def render_options(self) -> RenderOptions:
        return RenderOptions(numbers=self.numbers, colors=self.colors)
