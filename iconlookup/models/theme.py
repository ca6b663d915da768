"""Parsed icon theme indexes and their on-disk locations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from iconlookup.models.subdir import SubdirSpec


@dataclass(frozen=True, slots=True)
class ThemeIndex:
    """The contents of one theme's ``index.theme``.

    *name* is the theme's internal name, i.e. the name of its directory
    under a base directory.  *display_name* is the human readable ``Name``
    key, which may differ.  *directories* keeps the declaration order of
    the index; lookups rely on that order to break ties.
    """

    name: str
    directories: tuple[SubdirSpec, ...] = ()
    inherits: tuple[str, ...] = ()
    display_name: str = ""
    comment: str = ""
    hidden: bool = False
    example: str | None = None


@dataclass(frozen=True, slots=True)
class Theme:
    """A theme index plus every base directory the theme is installed under.

    A theme may be split across several base directories (for example a
    system copy in ``/usr/share/icons`` and user additions in
    ``~/.local/share/icons``).  *roots* lists the base directories holding
    a ``<root>/<name>`` directory, highest priority first; *index_path* is
    the ``index.theme`` that defined the theme.
    """

    index: ThemeIndex
    roots: tuple[Path, ...]
    index_path: Path

    @property
    def name(self) -> str:
        return self.index.name

    @property
    def directories(self) -> tuple[SubdirSpec, ...]:
        return self.index.directories

    @property
    def inherits(self) -> tuple[str, ...]:
        return self.index.inherits
