"""Settings file I/O for hackerreader.

Manages a JSON settings file at XDG_CONFIG_HOME/hackerreader/settings.json.
Known keys and their defaults live in SCHEMA; anything else in the file is
preserved on write but ignored on read.

Import as: import hackerreader.io.settings
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path

from hackerreader.io.hn_api import COLLECTIONS, DEFAULT_API_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# [LAW:one-source-of-truth] All known settings and defaults.
SCHEMA: dict[str, object] = {
    "api_url": DEFAULT_API_URL,
    "item_url": "https://news.ycombinator.com/item?id=",
    "collection": "topstories",
    "tick_interval": 1.0,
    "request_timeout": DEFAULT_TIMEOUT,
    "prefetch_count": 2,
    "max_width": 135,
    "page_size": 10,
    "theme": "dracula",
}


@dataclass(frozen=True)
class ReaderSettings:
    """Resolved runtime settings (defaults ← disk ← overrides)."""

    api_url: str = DEFAULT_API_URL
    item_url: str = "https://news.ycombinator.com/item?id="
    collection: str = "topstories"
    tick_interval: float = 1.0
    request_timeout: float = DEFAULT_TIMEOUT
    prefetch_count: int = 2
    max_width: int = 135
    page_size: int = 10
    theme: str = "dracula"


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / hackerreader / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "hackerreader" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def save_known_settings(values: dict) -> dict:
    """Merge the known, non-None entries of values into the settings file.

    Other keys already in the file are kept. Returns what was written.
    """
    updates = {k: v for k, v in values.items() if k in SCHEMA and v is not None}
    if not updates:
        return {}
    data = load_settings()
    data.update(updates)
    save_settings(data)
    logger.info("saved %s to %s", ", ".join(sorted(updates)), get_config_path())
    return updates


def _coerce(key: str, value, default):
    """Coerce value to the type of default; raise ValueError when impossible."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        raise ValueError(f"{key} must be a boolean")
    if isinstance(default, int):
        if isinstance(value, bool):
            raise ValueError(f"{key} must be an integer")
        number = int(value)
        if number <= 0:
            raise ValueError(f"{key} must be positive")
        return number
    if isinstance(default, float):
        if isinstance(value, bool):
            raise ValueError(f"{key} must be a number")
        number = float(value)
        if number <= 0:
            raise ValueError(f"{key} must be positive")
        return number
    text = str(value).strip()
    if not text:
        raise ValueError(f"{key} must not be empty")
    if key == "collection" and text not in COLLECTIONS:
        raise ValueError(f"unknown collection {text!r}")
    return text


def load_reader_settings(overrides: dict | None = None) -> ReaderSettings:
    """Merge schema defaults, the settings file, and explicit overrides.

    Unknown keys are ignored. A value that cannot be coerced falls back to
    the previous layer with a warning; config problems are never fatal.
    """
    disk_data = load_settings()
    merged: dict[str, object] = dict(SCHEMA)
    for layer_name, layer in (("settings file", disk_data), ("overrides", overrides or {})):
        for key, value in layer.items():
            if key not in SCHEMA or value is None:
                continue
            try:
                merged[key] = _coerce(key, value, SCHEMA[key])
            except (TypeError, ValueError) as e:
                logger.warning("ignoring %s value for %s: %s", layer_name, key, e)
    known = {f.name for f in fields(ReaderSettings)}
    return ReaderSettings(**{k: v for k, v in merged.items() if k in known})
