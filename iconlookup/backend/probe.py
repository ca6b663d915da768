"""Candidate file probing.

Given a base directory, theme, theme subdirectory and icon name, the
probe builds ``<base>/<theme>/<subdir>/<name>.<ext>`` for each extension
in priority order and returns the first file that exists.

Existence backends
------------------
- ``local`` (default) → ``os.stat`` on the path
- ``gio``             → ``Gio.File.query_info`` via PyGObject; useful when the
  base directories sit on GVFS-backed mounts.  PyGObject is imported only
  when this backend is constructed.

A failure while checking one candidate (permission denied, a file removed
mid-scan, an over-long name) counts as "does not exist" for that candidate
and never aborts the search.  Nothing is retried.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Protocol, runtime_checkable

from iconlookup.backend.config import DEFAULT_EXTENSIONS
from iconlookup.models.icon import IconFile


class ProbeError(Exception):
    """Raised when a probe backend is unknown or cannot be used."""


# ---------------------------------------------------------------------------
# Existence backends
# ---------------------------------------------------------------------------

@runtime_checkable
class _Exists(Protocol):
    """Answers whether a path names an existing regular file."""

    def is_file(self, path: Path) -> bool: ...


class _LocalExists:
    """Checks the local filesystem with ``os.stat``."""

    def is_file(self, path: Path) -> bool:
        try:
            st = os.stat(path)
        except (OSError, ValueError):
            return False
        return stat.S_ISREG(st.st_mode)


class _GioExists:
    """Checks paths through GIO (PyGObject)."""

    def __init__(self) -> None:
        try:
            from iconlookup.utils import gio_io
        except (ImportError, ValueError) as exc:
            raise ProbeError("GIO is unavailable; cannot use the 'gio' probe backend") from exc
        self._gio_io = gio_io

    def is_file(self, path: Path) -> bool:
        try:
            uri = path.absolute().as_uri()
        except ValueError:
            return False
        return self._gio_io.gio_file_exists(uri)


# ---------------------------------------------------------------------------
# FileProbe
# ---------------------------------------------------------------------------

class FileProbe:
    """Materialises candidate icon paths and checks them in extension order."""

    def __init__(self, exists: _Exists | None = None) -> None:
        self._exists: _Exists = exists or _LocalExists()

    def probe(
        self,
        base_dir: Path,
        theme_name: str | None,
        subdir_path: str | None,
        icon_name: str,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    ) -> IconFile | None:
        """Return the first existing ``icon_name.<ext>`` under the candidate directory.

        *theme_name* and *subdir_path* are ``None`` when probing an unthemed
        directory, in which case the icon is looked up directly in *base_dir*.
        An *icon_name* that is empty or contains a path separator never
        matches.
        """
        if not _is_valid_icon_name(icon_name):
            return None
        directory = base_dir
        if theme_name:
            directory = directory / theme_name
        if subdir_path:
            directory = directory / subdir_path
        for ext in extensions:
            candidate = directory / f"{icon_name}.{ext}"
            if not self._exists.is_file(candidate):
                continue
            icon = IconFile.from_path(candidate, theme=theme_name, directory=subdir_path)
            if icon is not None:
                return icon
        return None


def _is_valid_icon_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\x00" not in name


_SUPPORTED_BACKENDS = "local, gio"


def make_probe(backend: str = "local") -> FileProbe:
    """Return a :class:`FileProbe` using the named existence *backend*."""
    if backend == "local":
        return FileProbe(_LocalExists())
    if backend == "gio":
        return FileProbe(_GioExists())
    raise ProbeError(
        f"Unsupported probe backend {backend!r}. Supported: {_SUPPORTED_BACKENDS}"
    )
