"""Icon requests and the files they resolve to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileType(Enum):
    PNG = "png"
    SVG = "svg"
    XPM = "xpm"

    @classmethod
    def from_path(cls, path: Path | str) -> "FileType | None":
        """Return the icon type for *path*'s extension, or None if it is not an icon."""
        suffix = Path(path).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class IconRequest:
    """A caller's query: icon *name* at *size* pixels and *scale* in *theme*."""

    name: str
    size: int
    scale: int = 1
    theme: str = "hicolor"


@dataclass(frozen=True, slots=True)
class IconFile:
    """A resolved icon on disk.

    *theme* and *directory* record where the file was found; both are
    ``None`` for icons that live outside any theme (e.g. ``/usr/share/pixmaps``).
    """

    path: Path
    file_type: FileType
    theme: str | None = None
    directory: str | None = None

    @classmethod
    def from_path(
        cls,
        path: Path,
        theme: str | None = None,
        directory: str | None = None,
    ) -> "IconFile | None":
        """Build an ``IconFile`` for *path*, or None if its extension is not an icon type."""
        if not path.stem:
            return None
        file_type = FileType.from_path(path)
        if file_type is None:
            return None
        return cls(path=path, file_type=file_type, theme=theme, directory=directory)

    @property
    def icon_name(self) -> str:
        return self.path.stem
