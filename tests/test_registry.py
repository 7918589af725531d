"""
Tests for manifest parsing.
"""
import pytest

from filetag.errors import ManifestError
from filetag.registry import load_locations, load_options, parse_line, parse_manifest


def test_parse_locations(tmp_path):
    path = tmp_path / "sync"
    path.write_text("# where copies go\n\nbackup,/mnt/backup\narchive , /mnt/archive\n")

    manifest = load_locations(path)

    assert manifest.entries == {"backup": "/mnt/backup", "archive": "/mnt/archive"}
    assert not manifest.malformed


def test_malformed_line_keeps_good_lines(tmp_path):
    path = tmp_path / "sync"
    path.write_text("a,/mnt/a\nthis line is wrong\nb,/mnt/b\nc,/mnt/c\n")

    manifest = load_locations(path)

    assert manifest.malformed
    assert manifest.bad_lines == (2,)
    assert manifest.entries == {"a": "/mnt/a", "b": "/mnt/b", "c": "/mnt/c"}


@pytest.mark.parametrize(
    "line",
    ["a,b,c", "no-delimiter", ",/mnt/x", "name,"],
)
def test_parse_line_rejects(line):
    assert parse_line(line, ",") is None


def test_parse_line_removes_all_whitespace():
    assert parse_line(" my name , /mnt/my dir \t", ",") == ("myname", "/mnt/mydir")


def test_duplicate_key_last_wins(tmp_path):
    path = tmp_path / "sync"
    path.write_text("backup,/mnt/old\nbackup,/mnt/new\n")

    assert load_locations(path).entries == {"backup": "/mnt/new"}


def test_indented_comment_skipped(tmp_path):
    path = tmp_path / "config"
    path.write_text("   # sync=disabled\nsync=enabled\n")

    manifest = load_options(path)

    assert manifest.entries == {"sync": "enabled"}
    assert not manifest.malformed


def test_options_keep_unknown_keys(tmp_path):
    path = tmp_path / "config"
    path.write_text("sync=disabled\ncolour=blue\n")

    assert load_options(path).entries == {"sync": "disabled", "colour": "blue"}


def test_missing_manifest(tmp_path):
    with pytest.raises(ManifestError):
        parse_manifest(tmp_path / "missing", ",")


def test_undecodable_line_is_malformed(tmp_path):
    """A line that is not utf-8 is a bad line, not an unreadable manifest."""
    path = tmp_path / "sync"
    path.write_bytes(b"backup,/mnt/backup\n\xff\xfe,/x\narchive,/mnt/archive\n")

    manifest = load_locations(path)

    assert manifest.malformed
    assert manifest.bad_lines == (2,)
    assert manifest.entries == {"backup": "/mnt/backup", "archive": "/mnt/archive"}
