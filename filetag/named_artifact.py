from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from .errors import UnparseableNameError

SEPARATOR = "_"


def build_name(
    directory: str | os.PathLike[str], digest: str, original_basename: str
) -> pathlib.Path:
    """Return `directory/{digest}_{original_basename}`."""
    return pathlib.Path(directory) / f"{digest}{SEPARATOR}{original_basename}"


def split_name(basename: str) -> tuple[str, str]:
    # Only the first separator counts: `abc_my_file.txt` -> (`abc`, `my_file.txt`).
    digest, separator, original = basename.partition(SEPARATOR)
    if not separator or not digest:
        raise UnparseableNameError(basename)
    return digest, original


def extract_embedded_digest(basename: str) -> str:
    """Return the digest prefix of `basename`.

    The result is not checked to be a well formed digest; compare it with a
    freshly computed one to find out whether the name tells the truth.

    Raises:
        UnparseableNameError: If `basename` has no digest prefix.
    """
    return split_name(basename)[0]


@dataclass(frozen=True)
class NamedArtifact:
    """A file whose base name is prefixed with its own digest.

    Attributes:
        digest: Digest claimed by the name.
        path: Path of the file on disk.
    """

    digest: str
    path: pathlib.Path

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> NamedArtifact:
        path = pathlib.Path(path)
        return cls(extract_embedded_digest(path.name), path)

    @classmethod
    def for_file(cls, path: str | os.PathLike[str], digest: str) -> NamedArtifact:
        """The artifact an untagged `path` becomes once tagged with `digest`."""
        path = pathlib.Path(path)
        return cls(digest, build_name(path.parent, digest, path.name))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def original_name(self) -> str:
        return split_name(self.path.name)[1]
