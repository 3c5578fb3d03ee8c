"""Configuration loading for calcline.

This module only reads `calcline.toml` and performs light validation. When no
file is found every setting falls back to its default.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from calcline.errors import CalcConfigError

CONFIG_FILENAME = "calcline.toml"

COLOR_CHOICES = ("auto", "always", "never")

logger = logging.getLogger("calcline.config")


@dataclass(frozen=True)
class ReplConfig:
    prompt: str = ">>> "
    continuation_prompt: str = "... "
    history: bool = True


@dataclass(frozen=True)
class DisplayConfig:
    color: str = "auto"
    error_indent: int = 2
    prompt_style: str = "yellow"
    error_style: str = "red"


@dataclass(frozen=True)
class CalcConfig:
    version: int = 1
    repl: ReplConfig = field(default_factory=ReplConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    source: Path | None = None


def find_config(start: Path) -> Path | None:
    """Walk upward from `start` (file or directory) looking for `calcline.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CalcConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise CalcConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CalcConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise CalcConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, config_path: Path | None = None, start: Path | None = None) -> CalcConfig:
    """Load and validate `calcline.toml`.

    An explicit `config_path` must exist. Otherwise the file is discovered by
    walking upward from `start` (default: the current working directory), and
    defaults are returned when none is found.
    """

    if config_path is None:
        config_path = find_config(start if start is not None else Path.cwd())
        if config_path is None:
            logger.debug("No %s found; using defaults", CONFIG_FILENAME)
            return CalcConfig()

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise CalcConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise CalcConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CalcConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise CalcConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise CalcConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise CalcConfigError(f"Unsupported config version: {version_i} (expected 1).")

    repl_tbl = _as_table(data.get("repl"), name="repl")
    display_tbl = _as_table(data.get("display"), name="display")
    defaults_repl = ReplConfig()
    defaults_display = DisplayConfig()

    if "prompt" in repl_tbl:
        prompt = _as_str(repl_tbl["prompt"], name="repl.prompt")
    else:
        prompt = defaults_repl.prompt

    if "continuation_prompt" in repl_tbl:
        continuation_prompt = _as_str(
            repl_tbl["continuation_prompt"], name="repl.continuation_prompt"
        )
    else:
        continuation_prompt = defaults_repl.continuation_prompt

    if "history" in repl_tbl:
        history = _as_bool(repl_tbl["history"], name="repl.history")
    else:
        history = defaults_repl.history

    if "color" in display_tbl:
        color = _as_str(display_tbl["color"], name="display.color")
    else:
        color = defaults_display.color

    if "error_indent" in display_tbl:
        error_indent = _as_int(display_tbl["error_indent"], name="display.error_indent")
    else:
        error_indent = defaults_display.error_indent

    if "prompt_style" in display_tbl:
        prompt_style = _as_str(display_tbl["prompt_style"], name="display.prompt_style")
    else:
        prompt_style = defaults_display.prompt_style

    if "error_style" in display_tbl:
        error_style = _as_str(display_tbl["error_style"], name="display.error_style")
    else:
        error_style = defaults_display.error_style

    # Validation
    if color not in COLOR_CHOICES:
        raise CalcConfigError(
            f"Invalid config: display.color must be one of {', '.join(COLOR_CHOICES)} "
            f"(got {color!r})."
        )

    if error_indent < 0:
        raise CalcConfigError("Invalid config: display.error_indent must be >= 0.")

    logger.debug("Loaded config from %s", config_path)
    return CalcConfig(
        version=version_i,
        repl=ReplConfig(
            prompt=prompt,
            continuation_prompt=continuation_prompt,
            history=history,
        ),
        display=DisplayConfig(
            color=color,
            error_indent=error_indent,
            prompt_style=prompt_style,
            error_style=error_style,
        ),
        source=config_path,
    )
