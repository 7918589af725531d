"""Exceptions raised by filetag.

Library code only raises; deciding whether an error ends the process is left
to the caller (see [`filetag.cli`][filetag.cli]).
"""

from __future__ import annotations

import pathlib


class TagError(Exception):
    """Base class of every filetag error."""

    #: Whether the error leaves the on-disk state in doubt.
    fatal: bool = True


class DigestError(TagError):
    """A file could not be opened or read to completion while hashing."""

    def __init__(self, path: str | pathlib.Path, reason: str = "") -> None:
        self.path = str(path)
        message = f"Hashing error: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnparseableNameError(TagError, ValueError):
    """A base name carries no `_` separated digest prefix."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No digest prefix in name: {name}")


class CopyError(TagError):
    """Base class for verified copy failures."""

    def __init__(self, source: str | pathlib.Path, dest: str | pathlib.Path, message: str):
        self.source = str(source)
        self.dest = str(dest)
        super().__init__(message)


class CopyOpenError(CopyError):
    def __init__(self, source, dest) -> None:
        super().__init__(source, dest, f"Could not open source: {source}")


class CopyCreateError(CopyError):
    def __init__(self, source, dest) -> None:
        super().__init__(source, dest, f"Could not create destination: {dest}")


class CopyWriteError(CopyError):
    def __init__(self, source, dest) -> None:
        super().__init__(source, dest, f"Copy error: {source} -> {dest}")


class DigestMismatchError(CopyError):
    """The copied file does not hash to the expected digest.

    Attributes:
        expected: Digest the destination should have had.
        actual: Digest the destination actually has.
        removed: Whether the corrupt destination was deleted.
    """

    def __init__(self, source, dest, expected: str, actual: str, removed: bool):
        self.expected = expected
        self.actual = actual
        self.removed = removed
        super().__init__(
            source,
            dest,
            f"Post copy checksum mismatch: {dest} (expected {expected}, got {actual})",
        )


class RenameError(TagError):
    def __init__(self, path: str | pathlib.Path, new_path: str | pathlib.Path) -> None:
        self.path = str(path)
        self.new_path = str(new_path)
        super().__init__(f"Could not rename: {path}")


class ArchiveError(TagError):
    def __init__(self, source_dir: str | pathlib.Path, reason: str = "") -> None:
        self.source_dir = str(source_dir)
        message = f"Could not archive {self.source_dir}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ManifestError(TagError):
    """A manifest or config file could not be opened."""

    def __init__(self, path: str | pathlib.Path, reason: str = "") -> None:
        self.path = str(path)
        message = f"Could not read {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedManifestError(TagError):
    fatal = False

    def __init__(self, path: str | pathlib.Path, bad_lines: list[int]) -> None:
        self.path = str(path)
        self.bad_lines = list(bad_lines)
        lines = ", ".join(str(n) for n in self.bad_lines)
        super().__init__(f"Malformed manifest {self.path} (line {lines})")


class NoLocationsError(TagError):
    fatal = False

    def __init__(self, reason: str) -> None:
        super().__init__(f"No sync locations available: {reason}")


class LocationAccessError(TagError):
    fatal = False

    def __init__(self, location_id: str, location: str, reason: str = "") -> None:
        self.location_id = location_id
        self.location = location
        message = f"Could not access {location_id}: {location}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnknownLocationError(TagError):
    fatal = False

    def __init__(self, location_id: str) -> None:
        self.location_id = location_id
        super().__init__(f"Unknown location: {location_id}")


class IntegrityError(TagError):
    """A stored artifact's name does not match its content."""

    fatal = False

    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = str(path)
        super().__init__(f"Digest does not match name: {self.path}")


class UnsupportedOperationError(TagError):
    fatal = False

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Operation not supported yet: {operation}")
