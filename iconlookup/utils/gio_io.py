"""GIO-based file helpers."""

from __future__ import annotations

import logging

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib  # noqa: E402

log = logging.getLogger(__name__)


def gio_file_exists(uri: str) -> bool:
    """Return ``True`` if *uri* names a regular file reachable via GIO.

    Symlinks are followed.  Directories and special files report ``False``,
    as does any ``GLib.Error`` (missing file, permission denied, unmounted
    volume).
    """
    gfile = Gio.File.new_for_uri(uri)
    try:
        info = gfile.query_info("standard::type", Gio.FileQueryInfoFlags.NONE, None)
    except GLib.Error as exc:
        log.debug("GIO query failed for %s: %s", uri, exc.message)
        return False
    return info.get_file_type() == Gio.FileType.REGULAR
