"""Base directories searched for icon themes and unthemed icons.

Search order
------------
1. ``~/.icons``                         (legacy per-user location)
2. ``$XDG_DATA_HOME/icons``             (default ``~/.local/share/icons``)
3. ``$XDG_DATA_DIRS/icons``, each entry  (default ``/usr/local/share:/usr/share``)
4. Extra directories supplied by the caller or ``config.json``

Themes live in ``<base>/<theme>/``.  Unthemed icons are looked up directly
in the same base directories, followed by ``/usr/share/pixmaps``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

_DEFAULT_DATA_DIRS = "/usr/local/share:/usr/share"
_PIXMAPS = Path("/usr/share/pixmaps")


@dataclass(frozen=True, slots=True)
class SearchPaths:
    """Ordered roots for theme lookup and the unthemed fallback pass."""

    theme_dirs: tuple[Path, ...]
    unthemed_dirs: tuple[Path, ...] = ()

    @classmethod
    def from_dirs(
        cls,
        theme_dirs: Iterable[Path | str],
        unthemed_dirs: Iterable[Path | str] | None = None,
    ) -> "SearchPaths":
        """Build from plain paths.  Unthemed dirs default to the theme dirs."""
        themes = _dedupe(Path(d) for d in theme_dirs)
        if unthemed_dirs is None:
            unthemed = themes
        else:
            unthemed = _dedupe(Path(d) for d in unthemed_dirs)
        return cls(theme_dirs=themes, unthemed_dirs=unthemed)


def xdg_icon_dirs() -> list[Path]:
    """Return the standard XDG icon base directories, most specific first."""
    home = Path.home()
    dirs = [home / ".icons"]

    data_home = os.environ.get("XDG_DATA_HOME")
    dirs.append((Path(data_home) if data_home else home / ".local" / "share") / "icons")

    data_dirs = os.environ.get("XDG_DATA_DIRS") or _DEFAULT_DATA_DIRS
    for entry in data_dirs.split(":"):
        if entry:
            dirs.append(Path(entry) / "icons")
    return dirs


def default_search_paths(extra_dirs: Iterable[Path | str] = ()) -> SearchPaths:
    """Return the standard search paths with *extra_dirs* appended."""
    theme_dirs = _dedupe([*xdg_icon_dirs(), *(Path(d) for d in extra_dirs)])
    return SearchPaths(
        theme_dirs=theme_dirs,
        unthemed_dirs=_dedupe([*theme_dirs, _PIXMAPS]),
    )


def _dedupe(paths: Iterable[Path]) -> tuple[Path, ...]:
    seen: set[Path] = set()
    result: list[Path] = []
    for p in paths:
        if p not in seen:
            seen.add(p)
            result.append(p)
    return tuple(result)
