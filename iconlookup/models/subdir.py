"""Theme subdirectory descriptions, as declared in an ``index.theme``.

Each directory section of an icon theme index declares a nominal size,
a scale and a *type* that decides how strictly that size is honoured::

    [48x48/apps]
    Size=48
    Context=Applications
    Type=Fixed

Matching and distance are plain functions dispatched on
:class:`DirectoryType`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DirectoryType(Enum):
    FIXED = "Fixed"
    SCALABLE = "Scalable"
    THRESHOLD = "Threshold"

    @classmethod
    def parse(cls, value: str | None) -> "DirectoryType":
        """Return the type named by *value*; unknown or missing means Threshold."""
        if value is None:
            return cls.THRESHOLD
        try:
            return cls(value.strip())
        except ValueError:
            return cls.THRESHOLD


@dataclass(frozen=True, slots=True)
class SubdirSpec:
    """One advertised directory of a theme at a nominal size and type."""

    path: str
    size: int
    scale: int = 1
    min_size: int | None = None
    max_size: int | None = None
    threshold: int = 2
    kind: DirectoryType = DirectoryType.THRESHOLD
    context: str | None = None
    is_scaled_dir: bool = False

    def __post_init__(self) -> None:
        # MinSize/MaxSize default to Size when the index leaves them out.
        if self.min_size is None:
            object.__setattr__(self, "min_size", self.size)
        if self.max_size is None:
            object.__setattr__(self, "max_size", self.size)

    def matches(self, size: int, scale: int) -> bool:
        return directory_matches(self, size, scale)

    def distance(self, size: int, scale: int) -> int:
        return directory_distance(self, size, scale)


def directory_matches(spec: SubdirSpec, size: int, scale: int) -> bool:
    """Return True if *spec* can serve an icon of *size* at *scale* as-is."""
    if spec.scale != scale:
        return False
    if spec.kind is DirectoryType.FIXED:
        return spec.size == size
    if spec.kind is DirectoryType.SCALABLE:
        return spec.min_size <= size <= spec.max_size
    return abs(size - spec.size) <= spec.threshold


def directory_distance(spec: SubdirSpec, size: int, scale: int) -> int:
    """Return how far *spec* is from the requested size, in scaled pixels.

    Zero means the directory covers the request.  Scale differences are
    folded in by comparing ``size * scale`` on both sides.
    """
    wanted = size * scale
    if spec.kind is DirectoryType.FIXED:
        return abs(spec.size * spec.scale - wanted)
    if spec.kind is DirectoryType.SCALABLE:
        lower = spec.min_size * spec.scale
        upper = spec.max_size * spec.scale
    else:
        lower = (spec.size - spec.threshold) * spec.scale
        upper = (spec.size + spec.threshold) * spec.scale
    if wanted < lower:
        return lower - wanted
    if wanted > upper:
        return wanted - upper
    return 0
