"""Tests for iconlookup/backend/index_parser.py."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from iconlookup.backend.index_parser import (
    IndexParseError,
    load_index,
    parse_directory,
    parse_index,
    read_sections,
)
from iconlookup.models.subdir import DirectoryType

BIRCH = """\
[Icon Theme]
Name=Birch
Name[sv]=Björk
Comment=Icon theme with a wooden look
Comment[sv]=Ikontema med trälook
Inherits=wood,default
Directories=scalable/apps,48x48/apps,48x48/mimetypes,32x32/apps,scalable/actions
ScaledDirectories=32x32@2/apps
Example=folder

# this is a comment
[scalable/apps]
Size=48
Type=Scalable
MinSize=1
MaxSize=256
Context=Applications

[48x48/apps]
Size=48
Type=Fixed
Context=Applications

[48x48/mimetypes]
Size=48
Type=Fixed
Context=MimeTypes

[32x32/apps]
Size=32
Type=Fixed
Context=Applications

[32x32@2/apps]
Size=32
Scale=2
Type=Fixed
Context=Applications

[scalable/actions]
Size=48
Type=Scalable
MinSize=1
MaxSize=256
Context=Actions
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# read_sections
# ---------------------------------------------------------------------------

def test_read_sections_preserves_order_and_case(tmp_path):
    sections = read_sections(_write(tmp_path / "index.theme", BIRCH))
    assert list(sections)[:3] == ["Icon Theme", "scalable/apps", "48x48/apps"]
    assert sections["Icon Theme"]["Name"] == "Birch"
    assert sections["Icon Theme"]["Name[sv]"] == "Björk"
    assert sections["scalable/apps"]["MaxSize"] == "256"


def test_read_sections_tolerates_duplicate_keys(tmp_path):
    text = "[Icon Theme]\nName=A\nName=B\n"
    sections = read_sections(_write(tmp_path / "index.theme", text))
    assert sections["Icon Theme"]["Name"] == "B"


def test_read_sections_keeps_colons_in_values(tmp_path):
    text = "[Icon Theme]\nComment=Icons: the good kind\n"
    sections = read_sections(_write(tmp_path / "index.theme", text))
    assert sections["Icon Theme"]["Comment"] == "Icons: the good kind"


def test_read_sections_missing_file_raises(tmp_path):
    with pytest.raises(IndexParseError, match="Could not read"):
        read_sections(tmp_path / "nope" / "index.theme")


def test_read_sections_without_header_raises(tmp_path):
    path = _write(tmp_path / "index.theme", "Name=Orphan\n")
    with pytest.raises(IndexParseError, match="Invalid index file"):
        read_sections(path)


# ---------------------------------------------------------------------------
# parse_index: theme metadata
# ---------------------------------------------------------------------------

def test_parse_example_theme(tmp_path):
    index = load_index("birch", _write(tmp_path / "index.theme", BIRCH))

    assert index.name == "birch"
    assert index.display_name == "Birch"
    assert index.comment == "Icon theme with a wooden look"
    assert index.inherits == ("wood", "default")
    assert index.hidden is False
    assert index.example == "folder"
    assert len(index.directories) == 6

    first = index.directories[0]
    assert first.path == "scalable/apps"
    assert first.is_scaled_dir is False
    assert first.size == 48
    assert first.scale == 1
    assert first.context == "Applications"
    assert first.kind is DirectoryType.SCALABLE
    assert first.min_size == 1
    assert first.max_size == 256
    assert first.threshold == 2


def test_scaled_directories_are_flagged():
    sections = {
        "Icon Theme": {"Directories": "16x16/apps", "ScaledDirectories": "16x16@2/apps"},
        "16x16/apps": {"Size": "16"},
        "16x16@2/apps": {"Size": "16", "Scale": "2"},
    }
    index = parse_index("t", sections)
    assert [d.is_scaled_dir for d in index.directories] == [False, True]
    assert index.directories[1].scale == 2


def test_inherits_trimmed_deduplicated_in_order():
    sections = {"Icon Theme": {"Inherits": " gnome , hicolor,,gnome, breeze "}}
    assert parse_index("t", sections).inherits == ("gnome", "hicolor", "breeze")


def test_missing_inherits_is_empty():
    assert parse_index("U", {"Icon Theme": {"Name": "U"}}).inherits == ()


def test_missing_icon_theme_section_gives_empty_metadata():
    index = parse_index("bare", {"48x48/apps": {"Size": "48"}})
    assert index.display_name == "bare"
    assert index.inherits == ()
    assert [d.path for d in index.directories] == ["48x48/apps"]


def test_hidden_flag():
    assert parse_index("t", {"Icon Theme": {"Hidden": "true"}}).hidden is True
    assert parse_index("t", {"Icon Theme": {"Hidden": "false"}}).hidden is False


def test_invalid_hidden_flag_is_logged_and_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="iconlookup"):
        index = parse_index("t", {"Icon Theme": {"Hidden": "maybe"}})
    assert index.hidden is False
    assert "expected a boolean" in caplog.text


# ---------------------------------------------------------------------------
# parse_index: directory selection
# ---------------------------------------------------------------------------

def test_unlisted_sections_are_ignored_when_listing_present():
    sections = {
        "Icon Theme": {"Directories": "48x48/apps"},
        "48x48/apps": {"Size": "48"},
        "Extra Group": {"Size": "16"},
    }
    assert [d.path for d in parse_index("t", sections).directories] == ["48x48/apps"]


def test_directory_order_follows_section_order():
    sections = {
        "Icon Theme": {"Directories": "b,a"},
        "a": {"Size": "16"},
        "b": {"Size": "32"},
    }
    assert [d.path for d in parse_index("t", sections).directories] == ["a", "b"]


def test_directory_without_size_is_dropped(caplog):
    sections = {
        "Icon Theme": {"Directories": "good,nosize"},
        "good": {"Size": "48"},
        "nosize": {"Type": "Fixed"},
    }
    with caplog.at_level(logging.WARNING, logger="iconlookup"):
        index = parse_index("t", sections)
    assert [d.path for d in index.directories] == ["good"]
    assert "nosize" in caplog.text


def test_zero_valid_directories_is_a_valid_index():
    sections = {"Icon Theme": {"Directories": "x"}, "x": {"Size": "big"}}
    index = parse_index("t", sections)
    assert index.directories == ()


def test_injected_logger_receives_warnings():
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("test.injected")
    logger.addHandler(_Collect())
    logger.propagate = False
    parse_index("t", {"x": {"Type": "Fixed"}}, logger=logger)
    assert any("missing required key" in r.getMessage() for r in records)


# ---------------------------------------------------------------------------
# parse_directory
# ---------------------------------------------------------------------------

def test_parse_directory_defaults():
    spec = parse_directory("22x22/apps", {"Size": "22"})
    assert spec.scale == 1
    assert spec.min_size == 22
    assert spec.max_size == 22
    assert spec.threshold == 2
    assert spec.kind is DirectoryType.THRESHOLD
    assert spec.context is None


def test_parse_directory_unknown_type_is_threshold():
    spec = parse_directory("d", {"Size": "22", "Type": "Stretchy"})
    assert spec.kind is DirectoryType.THRESHOLD


@pytest.mark.parametrize(
    "keys",
    [
        {},
        {"Size": None},
        {"Size": "abc"},
        {"Size": "-4"},
        {"Size": "16", "Scale": "x"},
        {"Size": "16", "Threshold": "1.5"},
    ],
)
def test_parse_directory_rejects_bad_numbers(keys):
    with pytest.raises(IndexParseError):
        parse_directory("d", keys)
