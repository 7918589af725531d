"""Content digests.

The digest algorithm is fixed to SHA-256 so that a digest prefix read back
from a file name can only ever mean one thing. Only the first
`DIGEST_LENGTH` lowercase hex characters are used.
"""

from __future__ import annotations

import hashlib
import logging
import os

import anyio

from .errors import DigestError
from ._utils import AsyncFileReader, ProgressAsyncFileReader, ProgressCallback

logger = logging.getLogger(__name__)

DIGEST_LENGTH = 12

PathLikeArg = str | os.PathLike[str]


def truncate(hexdigest: str) -> str:
    return hexdigest.lower()[:DIGEST_LENGTH]


def digest_bytes(data: bytes) -> str:
    """Digest of in-memory content."""
    return truncate(hashlib.sha256(data).hexdigest())


async def compute_digest(
    file: AsyncFileReader | PathLikeArg | anyio.Path,
    progress_callback: ProgressCallback | None = None,
) -> str:
    """Compute the truncated digest of a file.

    The file is streamed in block-sized chunks, so memory use does not
    depend on the file size.

    Parameters:
        file: File to digest, or a reader wrapping it.
        progress_callback: optional callback to receive hashing progress.

    Raises:
        DigestError: If the file can't be opened or read to the end.
    """
    if not isinstance(file, AsyncFileReader):
        file = AsyncFileReader(anyio.Path(file))

    if progress_callback is not None:
        file = ProgressAsyncFileReader(file, progress_callback)

    chunk_size = 64 * 1024
    try:
        blksize = (await file.source_path.stat()).st_blksize
        if blksize:
            chunk_size = max(blksize, (chunk_size // blksize) * blksize)
    except OSError:
        # opening will fail below with a proper error if the file is gone
        pass

    hasher = hashlib.sha256()
    try:
        async for data in file.read(chunk_size):
            hasher.update(data)
    except OSError as exc:
        raise DigestError(file.source_path, exc.strerror or str(exc)) from exc

    digest = truncate(hasher.hexdigest())
    logger.debug("digest %s %s", digest, file.source_path)
    return digest
