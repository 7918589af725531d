from __future__ import annotations

import logging
import os
import pathlib
import zipfile

import anyio

from .errors import ArchiveError

logger = logging.getLogger(__name__)


def _pack(source_dir: pathlib.Path, archive_path: pathlib.Path) -> int:
    count = 0
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for root, dirs, files in os.walk(source_dir, onerror=_raise):
            dirs.sort()
            for name in sorted(files):
                file_path = pathlib.Path(root) / name
                archive.write(file_path, str(file_path.relative_to(source_dir.parent)))
                count += 1
    return count


def _raise(error: OSError) -> None:
    raise error


async def archive_folder(source_dir: str | os.PathLike[str]) -> pathlib.Path:
    """Pack every file under `source_dir` into `<source_dir>.zip`.

    Entries are stored relative to the folder's parent, so the folder itself
    is the root of the archive. A partial archive is removed on failure.

    Raises:
        ArchiveError: If the folder or one of its files can't be read, or the
            archive can't be written.
    """
    source_dir = pathlib.Path(source_dir)
    if not source_dir.is_dir():
        raise ArchiveError(source_dir, "not a folder")

    source_dir = source_dir.resolve()
    archive_path = source_dir.with_name(f"{source_dir.name}.zip")

    try:
        count = await anyio.to_thread.run_sync(_pack, source_dir, archive_path)
    except (OSError, zipfile.BadZipFile) as exc:
        archive_path.unlink(missing_ok=True)
        raise ArchiveError(source_dir, str(exc)) from exc

    logger.info("packed %d file(s) from %s into %s", count, source_dir, archive_path)
    return archive_path
