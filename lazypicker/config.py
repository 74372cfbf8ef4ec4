"""Persistent JSON config helpers.

Stores default finder options and the match highlight color.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .options import FinderOptions

logger = logging.getLogger(__name__)

APP_NAME = "lazypicker"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_MATCH_COLOR = "brightcyan"

_BOOL_OPTIONS = ("case_sensitive", "smart_case", "reverse_order")
_POSITIVE_INT_OPTIONS = ("chunk_size", "max_workers")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored; failing to remember
    a preference must not abort the picker.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _coerce_positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return None
    return value


def load_options() -> FinderOptions:
    """Build ``FinderOptions`` from config, keeping defaults for invalid keys."""
    value = load_config().get("options")
    if not isinstance(value, dict):
        return FinderOptions()

    overrides: dict[str, object] = {}
    for key in _BOOL_OPTIONS:
        raw = value.get(key)
        if isinstance(raw, bool):
            overrides[key] = raw
    for key in _POSITIVE_INT_OPTIONS:
        coerced = _coerce_positive_int(value.get(key))
        if coerced is not None:
            overrides[key] = coerced
    return FinderOptions().merged(**overrides)


def save_options(options: FinderOptions) -> None:
    serialized: dict[str, object] = {key: getattr(options, key) for key in _BOOL_OPTIONS}
    serialized["chunk_size"] = options.chunk_size
    if options.max_workers is not None:
        serialized["max_workers"] = options.max_workers
    config = load_config()
    config["options"] = serialized
    save_config(config)


def load_match_color() -> str:
    """Load persisted match color name, falling back to the default."""
    value = load_config().get("match_color")
    if not isinstance(value, str):
        return DEFAULT_MATCH_COLOR
    stripped = value.strip()
    return stripped if stripped else DEFAULT_MATCH_COLOR


def save_match_color(color: str) -> None:
    stripped = str(color).strip()
    if not stripped:
        return
    config = load_config()
    config["match_color"] = stripped
    save_config(config)
