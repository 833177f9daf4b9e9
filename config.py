import json
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# User config: loaded from ~/.maidr/config.json (primary)
# or project-root config.json (fallback).
CONFIG_PATH = Path.home() / ".maidr" / "config.json"
_LOCAL_CONFIG_PATH = Path(__file__).resolve().parent / "config.json"
_user_config: dict = {}


def _load_config() -> dict:
    # Project-local config.json as base, user home config overlaid on top
    merged: dict = {}
    for path in (_LOCAL_CONFIG_PATH, CONFIG_PATH):
        if path is not None and path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    merged.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                pass
    return merged


def get(key: str, default=None):
    """Get a config value by dot-separated key. E.g. get('fallback.format', 'png')"""
    keys = key.split(".")
    val = _user_config
    for k in keys:
        if isinstance(val, dict):
            val = val.get(k)
        else:
            return default
    return val if val is not None else default


_user_config = _load_config()


# ---- Data directory -----------------------------------------------------------
# Base directory for log files.
# Priority: MAIDR_DIR env var > "data_dir" config key > ~/.maidr

_data_dir: Optional[Path] = None


def get_data_dir() -> Path:
    """Return the resolved base data directory.

    Resolution order:
    1. ``MAIDR_DIR`` environment variable (highest, for CI/Docker)
    2. ``"data_dir"`` key in config.json
    3. ``~/.maidr`` (default)
    """
    global _data_dir
    if _data_dir is not None:
        return _data_dir
    env_val = os.environ.get("MAIDR_DIR")
    if env_val:
        _data_dir = Path(env_val).expanduser().resolve()
    else:
        configured = get("data_dir")
        if configured:
            _data_dir = Path(configured).expanduser().resolve()
        else:
            _data_dir = Path.home() / ".maidr"
    return _data_dir


def _reset_data_dir() -> None:
    """Reset the cached data directory (for testing only)."""
    global _data_dir
    _data_dir = None


# ---- maidr client assets --------------------------------------------------------
MAIDR_VERSION = get("maidr.version", "3.39.0")
MAIDR_CDN_URL = get("maidr.cdn_url", "https://cdn.jsdelivr.net/npm/maidr@{version}/dist")


def get_cdn_url(version: str | None = None) -> str:
    """Return the CDN base URL serving maidr.js / maidr.css for *version*."""
    return MAIDR_CDN_URL.format(version=version or MAIDR_VERSION)


# ---- Fallback image rendering ---------------------------------------------------
# Used when no layer of a plot could be made accessible.
FALLBACK_FORMATS = ("png", "svg", "jpeg")

_fallback: dict = {
    "enabled": get("fallback.enabled", True),
    "format": get("fallback.format", "png"),
    "warning": get("fallback.warning", True),
}


def get_fallback() -> dict:
    """Return the current fallback settings as ``{enabled, format, warning}``."""
    return dict(_fallback)


def set_fallback(enabled: bool = True, format: str = "png", warning: bool = True) -> dict:
    """Update the fallback settings and return the previous ones.

    Raises:
        ValueError: If *enabled*/*warning* are not booleans or *format* is
            not one of ``FALLBACK_FORMATS``.
    """
    if not isinstance(enabled, bool):
        raise ValueError("'enabled' must be a single boolean value")
    if format not in FALLBACK_FORMATS:
        raise ValueError(f"'format' must be one of: {', '.join(FALLBACK_FORMATS)}")
    if not isinstance(warning, bool):
        raise ValueError("'warning' must be a single boolean value")
    previous = get_fallback()
    _fallback.update(enabled=enabled, format=format, warning=warning)
    return previous


# Flat aliases
LOG_FILE = get("log_file", False)                 # write a per-session log file
CONSOLE_FORMAT = get("console_format", "simple")  # "simple", "full", "clean"
