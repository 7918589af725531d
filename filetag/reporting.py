"""User facing output.

Every line goes to standard output, prefixed by its severity: `>` for a
digest that was written, `E:` for errors and `W:` for warnings.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)


class Reporter:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # resolved late so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def line(self, text: str) -> None:
        print(text, file=self.stream, flush=True)

    def digest(self, digest: str) -> None:
        self.line(f"> {digest}")

    def progress(self, index: int, total: int, label: str) -> None:
        self.line(f"({index} / {total}): {label}")

    def match(self, index: int, name: str) -> None:
        self.line(f"  [{index}] {name}")

    def warning(self, message: str) -> None:
        logger.debug("warning reported: %s", message)
        self.line(f"W: {message}")

    def error(self, message: str) -> None:
        logger.debug("error reported: %s", message)
        self.line(f"E: {message}")


class NullReporter(Reporter):
    """Reporter that drops everything."""

    def line(self, text: str) -> None:
        pass
