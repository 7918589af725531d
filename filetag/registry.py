"""Delimited manifest files.

Both `~/.tag/sync` (`name,path`) and `~/.tag/config` (`key=value`) share one
format: one entry per line, blank lines and `#` comments ignored. All
whitespace is removed from an entry line before it is split.
"""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass, field

from .errors import ManifestError

logger = logging.getLogger(__name__)

COMMENT = "#"
LOCATION_DELIMITER = ","
OPTION_DELIMITER = "="


@dataclass(frozen=True)
class Manifest:
    """Parsed content of a manifest file.

    Attributes:
        path: File the manifest was read from.
        entries: Key to value mapping, in file order. A repeated key keeps
            its last value.
        bad_lines: Line numbers (1-based) that could not be parsed.
    """

    path: pathlib.Path
    entries: dict[str, str] = field(default_factory=dict)
    bad_lines: tuple[int, ...] = ()

    @property
    def malformed(self) -> bool:
        """`True` if any line was rejected. Callers must not trust such a
        manifest even though its good lines were loaded."""
        return bool(self.bad_lines)


def parse_line(line: str, delimiter: str) -> tuple[str, str] | None:
    """Split one entry line into `(key, value)`, or `None` if malformed."""
    compact = "".join(line.split())
    fields = compact.split(delimiter)
    if len(fields) != 2 or not all(fields):
        return None
    return fields[0], fields[1]


def parse_manifest(path: str | os.PathLike[str], delimiter: str) -> Manifest:
    """Read a manifest file.

    Malformed lines don't stop parsing, they are recorded in
    `Manifest.bad_lines`.

    Raises:
        ManifestError: If the file can't be opened or read.
    """
    path = pathlib.Path(path)
    entries: dict[str, str] = {}
    bad_lines: list[int] = []

    try:
        with open(path, "rb") as file:
            for number, raw_line in enumerate(file, start=1):
                try:
                    stripped = raw_line.decode("utf-8").strip()
                except UnicodeDecodeError:
                    logger.info("%s:%d: line is not utf-8", path, number)
                    bad_lines.append(number)
                    continue

                if not stripped or stripped.startswith(COMMENT):
                    continue

                parsed = parse_line(stripped, delimiter)
                if parsed is None:
                    logger.info("%s:%d: malformed line %r", path, number, stripped)
                    bad_lines.append(number)
                    continue

                key, value = parsed
                entries[key] = value
    except OSError as exc:
        raise ManifestError(path, str(exc)) from exc

    return Manifest(path, entries, tuple(bad_lines))


def load_locations(path: str | os.PathLike[str]) -> Manifest:
    """Parse a sync manifest of `name,path` lines."""
    return parse_manifest(path, LOCATION_DELIMITER)


def load_options(path: str | os.PathLike[str]) -> Manifest:
    """Parse a config file of `key=value` lines."""
    return parse_manifest(path, OPTION_DELIMITER)
