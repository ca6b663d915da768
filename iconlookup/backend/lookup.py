"""Public entry point for icon lookups.

Typical use::

    from iconlookup.backend.lookup import IconLookup

    icons = IconLookup()                       # standard XDG locations
    path = icons.find_icon("firefox", 48, 1, "Adwaita")

:class:`IconLookup` wires a :class:`ThemeRegistry`, a :class:`Resolver`
and a :class:`FileProbe` together.  ``IconLookup.from_config()`` builds
one from ``config.json`` (see :mod:`iconlookup.backend.config`).

Lookups are read-only and may be issued from several threads at once.
With ``cache_results=True`` answers, found or not, are remembered until
:meth:`IconLookup.clear_cache` is called.  At most ``MAX_CACHED_RESULTS``
answers are kept; the oldest is dropped first.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Callable, Iterator

from iconlookup.backend import config
from iconlookup.backend.config import DEFAULT_EXTENSIONS, DEFAULT_FALLBACK_THEME
from iconlookup.backend.probe import FileProbe, make_probe
from iconlookup.backend.registry import ThemeRegistry
from iconlookup.backend.resolver import IconNotFound, Resolver
from iconlookup.backend.search_paths import SearchPaths, default_search_paths
from iconlookup.models.icon import IconFile, IconRequest
from iconlookup.models.subdir import SubdirSpec
from iconlookup.models.theme import Theme

log = logging.getLogger(__name__)

# Stay silent unless the host application configures logging.
logging.getLogger("iconlookup").addHandler(logging.NullHandler())

MAX_CACHED_RESULTS = 4096


class IconLookup:
    """Finds icon files by name, size and scale across installed themes."""

    def __init__(
        self,
        search_paths: SearchPaths | None = None,
        *,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        fallback_theme: str = DEFAULT_FALLBACK_THEME,
        probe: FileProbe | None = None,
        cache_results: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._paths = search_paths or default_search_paths()
        self._log = logger or log
        self._registry = ThemeRegistry(
            self._paths, fallback_theme=fallback_theme, logger=self._log
        )
        self._resolver = Resolver(
            self._registry, probe=probe, extensions=extensions, logger=self._log
        )
        self._cache_results = cache_results
        self._cache_lock = threading.Lock()
        self._results: OrderedDict[IconRequest, IconFile | IconNotFound] = OrderedDict()

    @classmethod
    def from_config(cls, *, logger: logging.Logger | None = None) -> "IconLookup":
        """Build a lookup from the persisted configuration."""
        return cls(
            default_search_paths(config.load_extra_search_dirs()),
            extensions=config.load_extensions(),
            fallback_theme=config.load_fallback_theme(),
            probe=make_probe(config.load_probe_backend()),
            cache_results=config.load_cache_results(),
            logger=logger,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def search_paths(self) -> SearchPaths:
        return self._paths

    @property
    def registry(self) -> ThemeRegistry:
        return self._registry

    @property
    def fallback_theme(self) -> str:
        return self._registry.fallback_theme

    # ------------------------------------------------------------------
    # Public API: lookups
    # ------------------------------------------------------------------

    def find_icon(self, name: str, size: int, scale: int = 1, theme: str | None = None) -> Path:
        """Return the path of the best icon for *name* at *size* and *scale* in *theme*.

        *theme* defaults to the fallback theme.  Raises :exc:`IconNotFound`
        when neither the theme chain nor the unthemed directories have it.
        """
        return self.lookup(name, size, scale, theme).path

    def find_default_icon(self, name: str, size: int, scale: int = 1) -> Path:
        """Like :meth:`find_icon`, searching from the fallback theme."""
        return self.lookup(name, size, scale, self.fallback_theme).path

    def lookup(self, name: str, size: int, scale: int = 1, theme: str | None = None) -> IconFile:
        """Like :meth:`find_icon` but return the full :class:`IconFile`.

        The result also records which theme and directory the file came from.
        """
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if scale < 1:
            raise ValueError(f"scale must be at least 1, got {scale}")
        request = IconRequest(name=name, size=size, scale=scale, theme=theme or self.fallback_theme)
        if not self._cache_results:
            return self._resolver.find(request)

        with self._cache_lock:
            cached = self._results.get(request)
        if cached is None:
            try:
                cached = self._resolver.find(request)
            except IconNotFound as exc:
                cached = exc
            with self._cache_lock:
                cached = self._results.setdefault(request, cached)
                while len(self._results) > MAX_CACHED_RESULTS:
                    self._results.popitem(last=False)
        if isinstance(cached, IconNotFound):
            raise IconNotFound(cached.name, cached.size, cached.scale, cached.themes_tried)
        return cached

    def find_standalone_icon(self, name: str) -> IconFile | None:
        """Look *name* up in the unthemed directories only."""
        return self._resolver.find_unthemed(name)

    def clear_cache(self) -> None:
        """Drop remembered results and reload themes on next use."""
        with self._cache_lock:
            self._results.clear()
        self._registry.reload()

    # ------------------------------------------------------------------
    # Public API: themes
    # ------------------------------------------------------------------

    def list_available_themes(self) -> list[str]:
        return self._registry.list_available_themes()

    def theme(self, name: str) -> Theme | None:
        return self._registry.theme(name)

    def iter_theme_icons(
        self,
        theme_name: str,
        *,
        directory_filter: Callable[[SubdirSpec], bool] | None = None,
    ) -> Iterator[IconFile]:
        """Yield every icon file in every directory of *theme_name*.

        Inherited themes are not included.  Directories are visited in index
        order and, within a directory, base directories in priority order;
        files are yielded sorted by name.  Unreadable directories are skipped.
        """
        theme = self._registry.theme(theme_name)
        if theme is None:
            return
        for spec in theme.directories:
            if directory_filter is not None and not directory_filter(spec):
                continue
            for root in theme.roots:
                directory = root / theme.name / spec.path
                try:
                    entries = sorted(directory.iterdir())
                except OSError:
                    continue
                for entry in entries:
                    icon = IconFile.from_path(entry, theme=theme.name, directory=spec.path)
                    if icon is not None and _is_file(entry):
                        yield icon


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
