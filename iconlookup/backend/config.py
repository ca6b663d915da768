"""Persistent lookup configuration.

Stored as a JSON file in the user's XDG data directory:

    ~/.local/share/iconlookup/config.json

Schema::

    {
      "extensions": ["png", "svg", "xpm"],   // probe priority order
      "extra_search_dirs": ["/opt/icons"],   // appended to the XDG roots
      "fallback_theme": "hicolor",
      "probe_backend": "local",              // "local" or "gio"
      "cache_results": false
    }

Every key is optional.  Missing, unreadable or invalid values fall back to
the defaults below.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

_CONFIG_FILE = "config.json"

DEFAULT_EXTENSIONS: tuple[str, ...] = ("png", "svg", "xpm")
DEFAULT_FALLBACK_THEME = "hicolor"
DEFAULT_PROBE_BACKEND = "local"
PROBE_BACKENDS: tuple[str, ...] = ("local", "gio")


def data_dir() -> Path:
    """Return (and create if needed) the iconlookup data directory."""
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    d = base / "iconlookup"
    d.mkdir(parents=True, exist_ok=True)
    return d


def _config_path() -> Path:
    return data_dir() / _CONFIG_FILE


# ---------------------------------------------------------------------------
# Low-level read/write
# ---------------------------------------------------------------------------

def _load() -> dict:
    path = _config_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Could not read config: %s", exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config with unexpected top-level type in %s", path)
        return {}
    return data


def _save(data: dict) -> None:
    _config_path().write_text(
        json.dumps(data, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def _update(key: str, value: object) -> None:
    cfg = _load()
    if value is None:
        cfg.pop(key, None)
    else:
        cfg[key] = value
    _save(cfg)


# ---------------------------------------------------------------------------
# Extension priority
# ---------------------------------------------------------------------------

def load_extensions() -> tuple[str, ...]:
    """Return the probe extension order, defaulting to png, svg, xpm.

    Entries are lowercased and stripped of a leading dot; unknown types and
    duplicates are dropped.  An empty result falls back to the default.
    """
    raw = _load().get("extensions")
    if not isinstance(raw, list):
        return DEFAULT_EXTENSIONS
    cleaned: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        ext = item.strip().lower().lstrip(".")
        if ext in DEFAULT_EXTENSIONS and ext not in cleaned:
            cleaned.append(ext)
    return tuple(cleaned) or DEFAULT_EXTENSIONS


def save_extensions(extensions: list[str] | tuple[str, ...] | None) -> None:
    """Persist the extension order.  Pass ``None`` to restore the default."""
    _update("extensions", list(extensions) if extensions is not None else None)


# ---------------------------------------------------------------------------
# Extra search directories
# ---------------------------------------------------------------------------

def load_extra_search_dirs() -> list[Path]:
    """Return user-added base directories, in the order they were saved."""
    raw = _load().get("extra_search_dirs", [])
    if not isinstance(raw, list):
        return []
    return [Path(p).expanduser() for p in raw if isinstance(p, str) and p.strip()]


def save_extra_search_dirs(dirs: list[Path | str]) -> None:
    _update("extra_search_dirs", [str(d) for d in dirs])


# ---------------------------------------------------------------------------
# Fallback theme
# ---------------------------------------------------------------------------

def load_fallback_theme() -> str:
    raw = _load().get("fallback_theme", DEFAULT_FALLBACK_THEME)
    if not isinstance(raw, str) or not raw.strip():
        return DEFAULT_FALLBACK_THEME
    return raw.strip()


def save_fallback_theme(name: str | None) -> None:
    """Persist the fallback theme.  Pass ``None`` to restore ``hicolor``."""
    _update("fallback_theme", name)


# ---------------------------------------------------------------------------
# Probe backend and result cache
# ---------------------------------------------------------------------------

def load_probe_backend() -> str:
    raw = _load().get("probe_backend", DEFAULT_PROBE_BACKEND)
    return raw if raw in PROBE_BACKENDS else DEFAULT_PROBE_BACKEND


def save_probe_backend(backend: str) -> None:
    if backend not in PROBE_BACKENDS:
        raise ValueError(f"Unknown probe backend: {backend!r}")
    _update("probe_backend", backend)


def load_cache_results() -> bool:
    return _load().get("cache_results", False) is True


def save_cache_results(enabled: bool) -> None:
    _update("cache_results", bool(enabled))
