"""Configuration for swaybar status blocks.

Two layers:
- ``Config``: the shared, immutable theme/icon context every block receives.
- ``BlockConfig``: pydantic model for one ``[[block]]`` fragment, validated
  strictly (unknown keys are an error).
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError, ErrorCode
from .models import State

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "swaybar-blocks" / "config.toml"
DEFAULT_INTERVAL = timedelta(seconds=5)


@dataclass(frozen=True)
class ColorTheme:
    """Colors per severity state.

    Default theme: Catppuccin Mocha
    """
    name: str = "catppuccin-mocha"
    idle: str = "#cdd6f4"       # Text
    info: str = "#89b4fa"       # Blue
    good: str = "#a6e3a1"       # Green
    warning: str = "#f9e2af"    # Yellow
    critical: str = "#f38ba8"   # Red

    def color_for(self, state: State) -> str:
        """Get color for a severity state."""
        return getattr(self, state.value)


DEFAULT_ICONS = {
    "firewall": "󰒃",    # nf-md-shield_check
    "killswitch": "󰌾",  # nf-md-lock
}


@dataclass(frozen=True)
class Config:
    """Shared context passed to every block at construction.

    Read-only for the lifetime of the process.
    """

    icon_font: str = "NerdFont"
    theme: ColorTheme = field(default_factory=ColorTheme)
    icons: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(DEFAULT_ICONS)))

    def icon(self, key: Optional[str]) -> str:
        """Resolve an icon key to its glyph (empty string if unknown)."""
        if not key:
            return ""
        return self.icons.get(key, "")


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}


def _parse_duration_literal(value: str) -> timedelta:
    text = value.strip().replace(" ", "")
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"Invalid duration literal: {value!r}")
    return sum((float(n) * _DURATION_UNITS[u] for n, u in parts), timedelta())


def parse_duration(value: Union[int, float, str, timedelta]) -> timedelta:
    """Parse an interval from configuration.

    Accepts plain seconds (``5``, ``2.5``, ``"5"``) or duration literals
    (``"500ms"``, ``"30s"``, ``"2m"``, ``"1h"``, ``"1m30s"``).

    Raises:
        ValueError: If the value is unparseable or not strictly positive
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    try:
        if isinstance(value, timedelta):
            duration = value
        elif isinstance(value, (int, float)):
            duration = timedelta(seconds=value)
        elif isinstance(value, str):
            duration = _parse_duration_literal(value)
        else:
            raise ValueError(f"Invalid duration type: {type(value).__name__}")
    except OverflowError:
        raise ValueError(f"Duration out of range: {value!r}")

    if duration <= timedelta(0):
        raise ValueError(f"Interval must be positive: {value!r}")
    return duration


class BlockConfig(BaseModel):
    """Configuration fragment shared by all interval-polled blocks."""

    interval: timedelta = Field(DEFAULT_INTERVAL, description="Update interval (seconds or duration literal)")

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("interval", mode="before")
    @classmethod
    def validate_interval(cls, v: Any) -> timedelta:
        """Parse seconds or duration literals; reject non-positive intervals."""
        return parse_duration(v)


@dataclass(frozen=True)
class BarConfig:
    """Result of loading a configuration file."""

    config: Config
    blocks: List[Tuple[str, Dict[str, Any]]]


def default_bar_config() -> BarConfig:
    """Configuration used when no file exists: one firewall and one killswitch block."""
    return BarConfig(config=Config(), blocks=[("firewall", {}), ("killswitch", {})])


def _build_shared(raw: Dict[str, Any]) -> Config:
    config = Config()

    theme_raw = raw.get("theme", {})
    if not isinstance(theme_raw, dict):
        raise ConfigError(ErrorCode.CONFIG_PARSE_FAILED, "[theme] must be a table")
    known = {f.name for f in fields(ColorTheme)}
    unknown = sorted(set(theme_raw) - known)
    if unknown:
        raise ConfigError(
            code=ErrorCode.CONFIG_PARSE_FAILED,
            message=f"Unknown theme keys: {', '.join(unknown)}",
            suggestion=f"Valid keys: {', '.join(sorted(known))}",
            context={"unknown": unknown}
        )
    theme = replace(config.theme, **{k: str(v) for k, v in theme_raw.items()})

    icons_raw = raw.get("icons", {})
    if not isinstance(icons_raw, dict):
        raise ConfigError(ErrorCode.CONFIG_PARSE_FAILED, "[icons] must be a table")
    icons = dict(DEFAULT_ICONS)
    icons.update({str(k): str(v) for k, v in icons_raw.items()})

    return Config(
        icon_font=str(raw.get("icon_font", config.icon_font)),
        theme=theme,
        icons=MappingProxyType(icons),
    )


def load_config(path: Union[str, Path]) -> BarConfig:
    """
    Load bar configuration from a TOML file.

    Args:
        path: Path to config.toml

    Returns:
        BarConfig with the shared context and ordered block fragments

    Raises:
        ConfigError: If the file is missing, unparsable or malformed
    """
    path = Path(path).expanduser()
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(
            code=ErrorCode.CONFIG_NOT_FOUND,
            message=f"Configuration file not found: {path}",
            context={"file_path": str(path)}
        )
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(
            code=ErrorCode.CONFIG_PARSE_FAILED,
            message=f"Failed to parse {path}: {e}",
            suggestion="Check TOML syntax",
            context={"file_path": str(path)}
        )

    entries = raw.get("block", [])
    if not isinstance(entries, list):
        raise ConfigError(
            code=ErrorCode.CONFIG_PARSE_FAILED,
            message=f"'block' in {path} must be an array of tables",
            suggestion="Declare each block under its own [[block]] header",
            context={"file_path": str(path)}
        )

    blocks: List[Tuple[str, Dict[str, Any]]] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or "block" not in entry:
            raise ConfigError(
                code=ErrorCode.INVALID_BLOCK_CONFIG,
                message=f"[[block]] entry {index} has no 'block' key",
                suggestion='Add block = "<name>" to the entry',
                context={"file_path": str(path), "index": index}
            )
        fragment = dict(entry)
        name = str(fragment.pop("block"))
        blocks.append((name, fragment))

    logger.info(f"Loaded {len(blocks)} block(s) from {path}")
    return BarConfig(config=_build_shared(raw), blocks=blocks)
