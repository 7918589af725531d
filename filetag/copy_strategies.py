from __future__ import annotations

import logging
import os
from enum import Enum

import anyio
from anyio import AsyncFile

from .digest import PathLikeArg, compute_digest
from .errors import (
    CopyCreateError,
    CopyOpenError,
    CopyWriteError,
    DigestError,
    DigestMismatchError,
    IntegrityError,
    RenameError,
)
from .named_artifact import NamedArtifact
from .reporting import NullReporter, Reporter
from ._utils import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


async def _transfer(source_file: AsyncFile[bytes], dest_file: AsyncFile[bytes]) -> None:
    while True:
        data = await source_file.read(DEFAULT_CHUNK_SIZE)
        if not data:
            break
        await dest_file.write(data)


async def _remove(path: anyio.Path) -> bool:
    try:
        await path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove %s: %s", path, exc)
        return False
    return True


async def _same_file(source: anyio.Path, dest: anyio.Path) -> bool:
    try:
        return await anyio.to_thread.run_sync(os.path.samefile, source, dest)
    except OSError:
        return False


async def copy_and_verify(
    source: PathLikeArg,
    dest: PathLikeArg,
    expected_digest: str | None = None,
    reporter: Reporter | None = None,
) -> anyio.Path:
    """Copy `source` to `dest` and make sure the copy is intact.

    The destination is flushed to disk before it is hashed. Its digest must
    equal `expected_digest`, or, if none is given, the digest of `source`
    computed separately. A destination that fails the check is deleted.

    Parameters:
        source: File to copy.
        dest: Path of the copy. Overwritten if it exists.
        expected_digest: Digest the copy must have.
        reporter: Receives the `> digest` line on success.

    Returns:
        The destination path.

    Raises:
        CopyOpenError: `source` can't be opened.
        CopyCreateError: `dest` can't be created.
        CopyWriteError: The transfer failed part way.
        DigestMismatchError: The copy's digest is wrong.
        IntegrityError: `source` and `dest` are the same file and its
            digest is wrong. The file is left alone.
    """
    reporter = reporter or NullReporter()
    source_path = anyio.Path(source)
    dest_path = anyio.Path(dest)

    same_file = await _same_file(source_path, dest_path)
    if same_file:
        # copying a file onto itself would truncate it
        logger.info("%s is already in place", dest_path)
    else:
        try:
            source_file = await anyio.open_file(source_path, "rb")
        except OSError as exc:
            raise CopyOpenError(source_path, dest_path) from exc

        async with source_file:
            try:
                dest_file = await anyio.open_file(dest_path, "wb")
            except OSError as exc:
                raise CopyCreateError(source_path, dest_path) from exc

            try:
                async with dest_file:
                    await _transfer(source_file, dest_file)
                    await dest_file.flush()
                    await anyio.to_thread.run_sync(os.fsync, dest_file.wrapped.fileno())
            except OSError as exc:
                await _remove(dest_path)
                raise CopyWriteError(source_path, dest_path) from exc

        logger.debug("copied %s -> %s", source_path, dest_path)

    if expected_digest is None:
        expected_digest = await compute_digest(source_path)

    actual_digest = await compute_digest(dest_path)

    if actual_digest != expected_digest:
        if same_file:
            # nothing was copied, the file is the only one there is
            raise IntegrityError(dest_path)
        removed = await _remove(dest_path)
        raise DigestMismatchError(
            source_path, dest_path, expected_digest, actual_digest, removed
        )

    reporter.digest(actual_digest)
    return dest_path


class TagStrategy(str, Enum):
    """Ways of giving a file its tagged name.

    The members' names match the methods of
    [`TagStrategiesRunner`][filetag.copy_strategies.TagStrategiesRunner].
    """

    COPY = "COPY"
    IN_PLACE = "IN_PLACE"


class TagStrategiesRunner:
    """Defines and runs the available `TagStrategies`.

    Both strategies leave a file named `{digest}_{name}` next to the source.
    `COPY` keeps the source untouched and verifies the new file, `IN_PLACE`
    renames the source, which is atomic and needs no verification.

    Args:
        reporter: Receives the `> digest` line once the file is tagged.
    """

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter

    async def run(self, tag_strategy: TagStrategy, source: PathLikeArg) -> NamedArtifact:
        source_path = anyio.Path(source)

        if not await source_path.is_file():
            raise DigestError(source_path, "not a file")

        match tag_strategy:  # noqa: E999
            case TagStrategy.COPY:
                return await self.copy(source_path)
            case TagStrategy.IN_PLACE:
                return await self.in_place(source_path)

        raise ValueError(f"Unknown tag strategy {tag_strategy}")

    async def copy(self, source_path: anyio.Path) -> NamedArtifact:
        """Copy the source to its tagged name, then verify the copy."""
        digest = await compute_digest(source_path)
        artifact = NamedArtifact.for_file(source_path, digest)

        await copy_and_verify(source_path, artifact.path, digest, self._reporter)

        return artifact

    async def in_place(self, source_path: anyio.Path) -> NamedArtifact:
        """Rename the source to its tagged name."""
        digest = await compute_digest(source_path)
        artifact = NamedArtifact.for_file(source_path, digest)

        try:
            await source_path.rename(artifact.path)
        except OSError as exc:
            raise RenameError(source_path, artifact.path) from exc

        logger.debug("renamed %s -> %s", source_path, artifact.path)
        self._reporter.digest(digest)

        return artifact
