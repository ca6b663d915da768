"""``index.theme`` parsing.

An icon theme index is an ini-style file with one metadata section and
one section per icon directory::

    [Icon Theme]
    Name=Birch
    Comment=Icon theme with a wooden look
    Inherits=wood,default
    Directories=48x48/apps,scalable/apps

    [48x48/apps]
    Size=48
    Type=Fixed

    [scalable/apps]
    Size=48
    Type=Scalable
    MinSize=1
    MaxSize=256

Parsing happens in two steps.  :func:`read_sections` turns the file into
a ``{section: {key: value}}`` mapping and knows nothing about themes;
:func:`parse_index` turns that mapping into a :class:`ThemeIndex`.  A bad
directory section only drops that directory, never the whole theme.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Mapping

from iconlookup.models.subdir import DirectoryType, SubdirSpec
from iconlookup.models.theme import ThemeIndex

log = logging.getLogger(__name__)

INDEX_FILE = "index.theme"
ICON_THEME_SECTION = "Icon Theme"

# configparser merges a "DEFAULT" section into every other section; no
# real index should ever contain this name.
_NO_DEFAULT_SECTION = "\x00iconlookup-no-default\x00"

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


class IndexParseError(Exception):
    """Raised when an index file or one of its directory sections is malformed."""


# ---------------------------------------------------------------------------
# Key/value sections
# ---------------------------------------------------------------------------

def read_sections(path: Path) -> dict[str, dict[str, str | None]]:
    """Read *path* into an ordered ``{section: {key: value}}`` mapping.

    Keys keep their case.  Repeated sections or keys are tolerated, the
    later value wins.  A line without ``=`` becomes a key with value
    ``None``.  Raises :exc:`IndexParseError` if the file cannot be read or
    is not ini-shaped.
    """
    try:
        text = path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise IndexParseError(f"Could not read {path}: {exc}") from exc

    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#",),
        allow_no_value=True,
        default_section=_NO_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment]
    try:
        parser.read_string(text, source=str(path))
    except configparser.Error as exc:
        raise IndexParseError(f"Invalid index file {path}: {exc}") from exc

    return {name: dict(parser[name]) for name in parser.sections()}


# ---------------------------------------------------------------------------
# ThemeIndex construction
# ---------------------------------------------------------------------------

def parse_index(
    name: str,
    sections: Mapping[str, Mapping[str, str | None]],
    *,
    logger: logging.Logger | None = None,
) -> ThemeIndex:
    """Build the :class:`ThemeIndex` for theme *name* from parsed *sections*.

    When the ``Icon Theme`` section lists ``Directories`` or
    ``ScaledDirectories``, only the listed sections are used; otherwise
    every section other than ``Icon Theme`` describes a directory.
    Directory order follows section order in the file.
    """
    logger = logger or log
    meta = sections.get(ICON_THEME_SECTION, {})

    listed = _split_list(meta.get("Directories"))
    scaled = _split_list(meta.get("ScaledDirectories"))
    restrict = "Directories" in meta or "ScaledDirectories" in meta

    directories: list[SubdirSpec] = []
    for title, keys in sections.items():
        if title == ICON_THEME_SECTION:
            continue
        if restrict and title not in listed and title not in scaled:
            logger.debug("Ignoring unlisted section %r in theme %r", title, name)
            continue
        try:
            directories.append(
                parse_directory(title, keys, is_scaled_dir=title in scaled)
            )
        except IndexParseError as exc:
            logger.warning("Skipping directory %r in theme %r: %s", title, name, exc)

    hidden = False
    try:
        hidden = _parse_bool(meta.get("Hidden"), default=False)
    except IndexParseError as exc:
        logger.warning("Theme %r: %s", name, exc)

    example = (meta.get("Example") or "").strip() or None
    return ThemeIndex(
        name=name,
        directories=tuple(directories),
        inherits=_split_list(meta.get("Inherits")),
        display_name=(meta.get("Name") or "").strip() or name,
        comment=(meta.get("Comment") or "").strip(),
        hidden=hidden,
        example=example,
    )


def parse_directory(
    path: str,
    keys: Mapping[str, str | None],
    *,
    is_scaled_dir: bool = False,
) -> SubdirSpec:
    """Build a :class:`SubdirSpec` from one directory section.

    ``Size`` is required.  Raises :exc:`IndexParseError` when it is missing
    or when any numeric key is not a non-negative integer.
    """
    if keys.get("Size") is None:
        raise IndexParseError("missing required key 'Size'")
    size = _parse_uint(keys, "Size")
    context = (keys.get("Context") or "").strip() or None
    return SubdirSpec(
        path=path,
        size=size,
        scale=_parse_uint(keys, "Scale", default=1),
        min_size=_parse_uint(keys, "MinSize", default=size),
        max_size=_parse_uint(keys, "MaxSize", default=size),
        threshold=_parse_uint(keys, "Threshold", default=2),
        kind=DirectoryType.parse(keys.get("Type")),
        context=context,
        is_scaled_dir=is_scaled_dir,
    )


def load_index(
    name: str,
    path: Path,
    *,
    logger: logging.Logger | None = None,
) -> ThemeIndex:
    """Read and parse the index file at *path* for theme *name*."""
    return parse_index(name, read_sections(path), logger=logger)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def _split_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated list, trimming items and dropping empties and repeats."""
    if not raw:
        return ()
    seen: set[str] = set()
    items: list[str] = []
    for item in raw.split(","):
        item = item.strip()
        if item and item not in seen:
            seen.add(item)
            items.append(item)
    return tuple(items)


def _parse_uint(keys: Mapping[str, str | None], key: str, default: int = 0) -> int:
    raw = keys.get(key)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise IndexParseError(f"{key} must be an integer, got {raw!r}") from None
    if value < 0:
        raise IndexParseError(f"{key} must not be negative, got {value}")
    return value


def _parse_bool(raw: str | None, *, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise IndexParseError(f"expected a boolean, got {raw!r}")
