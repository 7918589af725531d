"""
Pytest configuration and shared fixtures.
"""
import pytest

from filetag.reporting import Reporter
from filetag.settings import Settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def home(tmp_path):
    """A home directory with an empty ~/.tag folder."""
    home_dir = tmp_path / "home"
    (home_dir / ".tag").mkdir(parents=True)
    return home_dir


@pytest.fixture
def locations(tmp_path):
    """Two existing sync location folders."""
    backup = tmp_path / "mnt" / "backup"
    archive = tmp_path / "mnt" / "archive"
    backup.mkdir(parents=True)
    archive.mkdir(parents=True)
    return {"backup": backup, "archive": archive}


@pytest.fixture
def write_manifest(home):
    """Write ~/.tag/sync from a mapping or raw text."""

    def _write(entries):
        if isinstance(entries, str):
            text = entries
        else:
            text = "".join(f"{name},{path}\n" for name, path in entries.items())
        path = home / ".tag" / "sync"
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def settings(home, locations, write_manifest):
    """Sync enabled settings with the two locations registered."""
    write_manifest(locations)
    return Settings.load(home=home, platform="linux")


@pytest.fixture
def reporter():
    return Reporter()


@pytest.fixture
def report_file(tmp_path):
    """Untagged file `report.txt` containing `hello`."""
    work = tmp_path / "work"
    work.mkdir()
    path = work / "report.txt"
    path.write_bytes(b"hello")
    return path
