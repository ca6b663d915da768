"""Icon lookup over a resolved theme chain.

Lookup order
------------
1. **Exact pass.** For each theme in the chain and each directory in index
   order: a directory whose size rules accept the requested size at the
   requested scale is probed across all of the theme's base directories.
   The first existing file wins.
2. **Closest pass.** Only when the exact pass found nothing.  Every
   directory of every theme, any scale, is ranked by its size distance
   from the request; the closest existing file wins.  Equal distances go
   to the earlier theme, then the earlier directory.
3. **Unthemed pass.** The unthemed directories (e.g. ``/usr/share/pixmaps``)
   are probed directly for ``<name>.<ext>``.

If all three passes come up empty, :exc:`IconNotFound` is raised.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from iconlookup.backend.config import DEFAULT_EXTENSIONS
from iconlookup.backend.probe import FileProbe
from iconlookup.backend.registry import ThemeRegistry
from iconlookup.models.icon import IconFile, IconRequest
from iconlookup.models.subdir import SubdirSpec
from iconlookup.models.theme import Theme

log = logging.getLogger(__name__)


class IconNotFound(LookupError):
    """Raised when no theme in the chain nor any unthemed directory has the icon."""

    def __init__(
        self,
        name: str,
        size: int,
        scale: int,
        themes_tried: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.size = size
        self.scale = scale
        self.themes_tried = tuple(themes_tried)
        tried = ", ".join(self.themes_tried) or "none"
        super().__init__(
            f"Icon {name!r} not found at size {size} scale {scale} (themes tried: {tried})"
        )


class Resolver:
    """Finds the best file for an :class:`IconRequest`."""

    def __init__(
        self,
        registry: ThemeRegistry,
        *,
        probe: FileProbe | None = None,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        unthemed_dirs: Iterable[Path] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._probe = probe or FileProbe()
        self._extensions = tuple(extensions)
        if unthemed_dirs is None:
            unthemed_dirs = registry.search_paths.unthemed_dirs
        self._unthemed_dirs = tuple(unthemed_dirs)
        self._log = logger or log

    def find(self, request: IconRequest) -> IconFile:
        """Return the icon file for *request*.

        Raises :exc:`IconNotFound` carrying the names of the themes searched.
        """
        if not request.name:
            raise IconNotFound(request.name, request.size, request.scale)

        chain = self._registry.resolve_chain(request.theme)

        icon = self._find_exact(chain, request)
        if icon is None:
            icon = self._find_closest(chain, request)
        if icon is None:
            icon = self.find_unthemed(request.name)
        if icon is None:
            raise IconNotFound(
                request.name,
                request.size,
                request.scale,
                themes_tried=[theme.name for theme in chain],
            )
        self._log.debug(
            "Resolved %r (%d@%d, theme %r) to %s",
            request.name, request.size, request.scale, request.theme, icon.path,
        )
        return icon

    def find_unthemed(self, name: str) -> IconFile | None:
        """Probe the unthemed directories for *name*; first hit wins."""
        if not name:
            return None
        for directory in self._unthemed_dirs:
            icon = self._probe.probe(directory, None, None, name, self._extensions)
            if icon is not None:
                return icon
        return None

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _find_exact(self, chain: tuple[Theme, ...], request: IconRequest) -> IconFile | None:
        for theme in chain:
            for spec in theme.directories:
                if not spec.matches(request.size, request.scale):
                    continue
                icon = self._probe_directory(theme, spec, request.name)
                if icon is not None:
                    return icon
        return None

    def _find_closest(self, chain: tuple[Theme, ...], request: IconRequest) -> IconFile | None:
        best: IconFile | None = None
        best_distance: int | None = None
        for theme in chain:
            for spec in theme.directories:
                distance = spec.distance(request.size, request.scale)
                # Only a strictly closer directory can replace the current best.
                if best_distance is not None and distance >= best_distance:
                    continue
                icon = self._probe_directory(theme, spec, request.name)
                if icon is None:
                    continue
                best, best_distance = icon, distance
                if distance == 0:
                    return best
        return best

    def _probe_directory(self, theme: Theme, spec: SubdirSpec, name: str) -> IconFile | None:
        for root in theme.roots:
            icon = self._probe.probe(root, theme.name, spec.path, name, self._extensions)
            if icon is not None:
                return icon
        return None
