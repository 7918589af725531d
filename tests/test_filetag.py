"""
Tests for the Tagger facade.
"""
import zipfile

import pytest

from filetag.copy_strategies import TagStrategy
from filetag.digest import compute_digest
from filetag.errors import ArchiveError, UnsupportedOperationError
from filetag.filetag import Tagger
from filetag.settings import Settings

HELLO_DIGEST = "2cf24dba5fb0"

pytestmark = pytest.mark.anyio


async def test_tag_then_verify(report_file, home, reporter):
    tagger = Tagger(Settings.load(home=home, nosync=True), reporter)

    artifact = await tagger.tag(report_file)

    assert artifact.name == f"{HELLO_DIGEST}_report.txt"
    assert await tagger.verify(artifact.path)

    artifact.path.write_bytes(b"hellx")
    assert not await tagger.verify(artifact.path)


async def test_tag_syncs_to_every_location(report_file, settings, locations, reporter):
    tagger = Tagger(settings, reporter)
    assert tagger.sync_enabled

    artifact = await tagger.tag(report_file, TagStrategy.IN_PLACE)

    for location in locations.values():
        copy = location / artifact.name
        assert copy.name == f"{HELLO_DIGEST}_report.txt"
        assert await tagger.verify(copy)


async def test_tag_without_sync_leaves_locations_alone(
    report_file, home, locations, write_manifest, reporter
):
    write_manifest(locations)
    tagger = Tagger(Settings.load(home=home, nosync=True), reporter)

    await tagger.tag(report_file)

    for location in locations.values():
        assert not list(location.iterdir())


async def test_tag_name_with_underscores(tmp_path, home, reporter):
    path = tmp_path / "quarterly_sales_report.csv"
    path.write_bytes(b"a,b\n1,2\n")
    tagger = Tagger(Settings.load(home=home, nosync=True), reporter)

    artifact = await tagger.tag(path)

    assert artifact.original_name == "quarterly_sales_report.csv"
    assert await tagger.verify(artifact.path)


async def test_tag_folder(tmp_path, home, reporter):
    folder = tmp_path / "photos"
    (folder / "2024").mkdir(parents=True)
    (folder / "a.jpg").write_bytes(b"a")
    (folder / "2024" / "b.jpg").write_bytes(b"b")
    tagger = Tagger(Settings.load(home=home, nosync=True), reporter)

    artifact = await tagger.tag_folder(folder)

    assert artifact.original_name == "photos.zip"
    assert artifact.digest == await compute_digest(artifact.path)
    assert not (tmp_path / "photos.zip").exists()
    with zipfile.ZipFile(artifact.path) as archive:
        assert sorted(archive.namelist()) == ["photos/2024/b.jpg", "photos/a.jpg"]


async def test_tag_folder_not_a_folder(report_file, home, reporter):
    tagger = Tagger(Settings.load(home=home, nosync=True), reporter)

    with pytest.raises(ArchiveError):
        await tagger.tag_folder(report_file)


async def test_balance_is_unsupported(home, reporter):
    tagger = Tagger(Settings.load(home=home), reporter)

    with pytest.raises(UnsupportedOperationError):
        await tagger.balance()
