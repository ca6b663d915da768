"""Icon theme discovery, caching and inheritance expansion.

Theme location
--------------
A theme named ``Adwaita`` is installed under every base directory that
holds an ``Adwaita/`` subdirectory.  The first ``index.theme`` found, in
base-directory priority order, defines the theme.  ``index.theme`` files
found under later base directories only contribute directory sections
whose path is not already known; each directory path is one slot in the
theme's directory order however many base directories carry it.

Inheritance
-----------
:meth:`ThemeRegistry.resolve_chain` expands ``Inherits`` with a work
queue and a visited set, breadth first.  A name that has already been
visited is never expanded again, so cyclic ``Inherits`` declarations
terminate.  Themes that are not installed are skipped.  The fallback
theme (``hicolor``) closes every chain exactly once, even when an
``Inherits`` line names it earlier.

Threading
---------
Themes are loaded lazily on first use and cached for the lifetime of the
registry.  A per-name build lock guarantees that concurrent callers asking
for the same theme parse it once; the lock is held only while building.
Cached :class:`Theme` objects are immutable and may be shared freely.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections import deque
from pathlib import Path
from typing import Callable

from iconlookup.backend.config import DEFAULT_FALLBACK_THEME
from iconlookup.backend.index_parser import INDEX_FILE, IndexParseError, load_index
from iconlookup.backend.search_paths import SearchPaths
from iconlookup.models.theme import Theme, ThemeIndex

log = logging.getLogger(__name__)

IndexLoader = Callable[..., ThemeIndex]


class ThemeRegistry:
    """Loads themes by name from a set of base directories and caches them."""

    def __init__(
        self,
        search_paths: SearchPaths,
        *,
        fallback_theme: str = DEFAULT_FALLBACK_THEME,
        loader: IndexLoader = load_index,
        logger: logging.Logger | None = None,
    ) -> None:
        self._paths = search_paths
        self._fallback = fallback_theme
        self._loader = loader
        self._log = logger or log
        self._lock = threading.Lock()
        self._themes: dict[str, Theme | None] = {}
        self._build_locks: dict[str, threading.Lock] = {}
        self._chains: dict[str, tuple[Theme, ...]] = {}

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def search_paths(self) -> SearchPaths:
        return self._paths

    @property
    def fallback_theme(self) -> str:
        return self._fallback

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def theme(self, name: str) -> Theme | None:
        """Return the installed theme *name*, or ``None`` if it is not installed."""
        with self._lock:
            if name in self._themes:
                return self._themes[name]
            build_lock = self._build_locks.setdefault(name, threading.Lock())

        with build_lock:
            # Another thread may have finished the build while we waited.
            with self._lock:
                if name in self._themes:
                    return self._themes[name]
            theme = self._build(name)
            with self._lock:
                self._themes[name] = theme
                self._build_locks.pop(name, None)
        return theme

    def resolve_chain(self, theme_name: str) -> tuple[Theme, ...]:
        """Return *theme_name* followed by every theme it inherits from.

        The result is de-duplicated and ends with the fallback theme when
        that is installed, wherever the inheritance graph mentions it.
        Missing themes are left out, so the chain may be empty if nothing at
        all is installed.
        """
        with self._lock:
            cached = self._chains.get(theme_name)
        if cached is not None:
            return cached
        chain = self._expand(theme_name)
        with self._lock:
            return self._chains.setdefault(theme_name, chain)

    def list_available_themes(self) -> list[str]:
        """Return the internal names of all installed themes.

        Ordered by base-directory priority, then by name; each name appears
        once even when installed under several base directories.
        """
        seen: set[str] = set()
        names: list[str] = []
        for base in self._paths.theme_dirs:
            try:
                children = sorted(base.iterdir())
            except OSError:
                continue
            for child in children:
                if child.name in seen or not _is_dir(child):
                    continue
                if not _is_file(child / INDEX_FILE):
                    continue
                seen.add(child.name)
                names.append(child.name)
        return names

    def reload(self) -> None:
        """Forget every cached theme and chain."""
        with self._lock:
            self._themes.clear()
            self._chains.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _expand(self, theme_name: str) -> tuple[Theme, ...]:
        chain: list[Theme] = []
        visited: set[str] = {theme_name}
        queue: deque[str] = deque([theme_name])

        while queue:
            name = queue.popleft()
            theme = self.theme(name)
            if theme is None:
                self._log.debug("Skipping theme %r: not installed", name)
                continue
            # The fallback theme always goes last, wherever it is inherited.
            if name != self._fallback:
                chain.append(theme)
            for parent in theme.inherits:
                if parent in visited:
                    self._log.debug(
                        "Theme %r inherits %r, which is already in the chain", name, parent
                    )
                    continue
                visited.add(parent)
                queue.append(parent)

        fallback = self.theme(self._fallback)
        if fallback is not None:
            chain.append(fallback)
        else:
            self._log.debug("Fallback theme %r is not installed", self._fallback)
        return tuple(chain)

    def _build(self, name: str) -> Theme | None:
        if not _is_valid_theme_name(name):
            self._log.debug("Ignoring invalid theme name %r", name)
            return None

        roots = tuple(base for base in self._paths.theme_dirs if _is_dir(base / name))
        if not roots:
            return None

        index: ThemeIndex | None = None
        index_path: Path | None = None
        extra: list[ThemeIndex] = []
        for root in roots:
            path = root / name / INDEX_FILE
            if not _is_file(path):
                continue
            try:
                parsed = self._loader(name, path, logger=self._log)
            except IndexParseError as exc:
                self._log.warning("Skipping index %s: %s", path, exc)
                continue
            if index is None:
                index, index_path = parsed, path
            else:
                extra.append(parsed)

        if index is None or index_path is None:
            self._log.debug("Theme %r has no usable %s", name, INDEX_FILE)
            return None

        if extra:
            index = _merge_directories(index, extra)

        self._log.debug(
            "Loaded theme %r from %s (%d directories, %d roots)",
            name, index_path, len(index.directories), len(roots),
        )
        return Theme(index=index, roots=roots, index_path=index_path)


def _merge_directories(index: ThemeIndex, others: list[ThemeIndex]) -> ThemeIndex:
    """Append directories from *others* whose path *index* does not declare."""
    known = {spec.path for spec in index.directories}
    directories = list(index.directories)
    for other in others:
        for spec in other.directories:
            if spec.path not in known:
                known.add(spec.path)
                directories.append(spec)
    return dataclasses.replace(index, directories=tuple(directories))


def _is_valid_theme_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\x00" not in name


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
