from __future__ import annotations

from typing import Any, AsyncGenerator, Callable

import anyio

DEFAULT_CHUNK_SIZE = 64 * 1024


async def list_entries(path: anyio.Path) -> list[anyio.Path]:
    """Return the regular files directly inside `path`, sorted by name."""
    entries = []
    async for sub_path in path.iterdir():
        if await sub_path.is_file():
            entries.append(sub_path)
    return sorted(entries, key=lambda p: p.name)


class AsyncFileReader:
    def __init__(self, source: anyio.Path | AsyncFileReader) -> None:
        self._source = source

    @property
    def source_path(self) -> anyio.Path:
        if isinstance(self._source, anyio.Path):
            return self._source
        return self._source.source_path

    async def read(self, size: int = DEFAULT_CHUNK_SIZE) -> AsyncGenerator[bytes, None]:
        if isinstance(self._source, anyio.Path):
            async with await self.source_path.open("rb") as file:
                while True:
                    data = await file.read(size)
                    if not data:
                        break
                    yield data
        else:
            async for data in self._source.read(size):
                yield data


ProgressCallback = Callable[[str, tuple[int, int | None]], Any]


class ProgressAsyncFileReader(AsyncFileReader):
    def __init__(
        self,
        source: anyio.Path | AsyncFileReader,
        progress_callback: ProgressCallback | None,
    ):
        super().__init__(source)
        self._progress_callback = progress_callback

    async def read(self, size: int = DEFAULT_CHUNK_SIZE) -> AsyncGenerator[bytes, None]:
        total_bytes = None

        if self._progress_callback is not None:
            try:
                stat = await self.source_path.stat()
                total_bytes = stat.st_size
            except OSError:
                # progress without a total is still progress
                pass

        done_bytes = 0
        async for data in super().read(size):
            if self._progress_callback is not None:
                done_bytes += len(data)
                self._progress_callback(str(self.source_path), (done_bytes, total_bytes))
            yield data
