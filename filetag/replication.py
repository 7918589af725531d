from __future__ import annotations

import logging
import os

import anyio

from .copy_strategies import copy_and_verify
from .digest import PathLikeArg, compute_digest
from .errors import (
    IntegrityError,
    LocationAccessError,
    MalformedManifestError,
    NoLocationsError,
    UnknownLocationError,
    UnparseableNameError,
)
from .named_artifact import NamedArtifact, extract_embedded_digest
from .registry import Manifest, load_locations
from .reporting import Reporter
from .settings import Settings
from ._utils import list_entries

logger = logging.getLogger(__name__)


async def verify(path: PathLikeArg) -> bool:
    """Check that the digest in the name of `path` matches its content.

    Never modifies anything. A name without a digest prefix fails the check.

    Raises:
        DigestError: If the file can't be read.
    """
    path = anyio.Path(path)
    try:
        embedded = extract_embedded_digest(path.name)
    except UnparseableNameError:
        logger.info("no digest in name of %s", path)
        return False

    return await compute_digest(path) == embedded


class Replicator:
    """Copies tagged files to and from the sync locations.

    The sync manifest is read again by every operation, so edits to it are
    picked up by the next call.

    Parameters:
        settings: Run configuration, giving the manifest path.
        reporter: Receives progress, matches and warnings.
    """

    def __init__(self, settings: Settings, reporter: Reporter) -> None:
        self._settings = settings
        self._reporter = reporter

    def locations(self) -> Manifest:
        """Load the sync manifest.

        Raises:
            NoLocationsError: If there is no home directory to read it from.
            ManifestError: If the manifest can't be opened.
        """
        if self._settings.manifest_path is None:
            raise NoLocationsError(self._settings.sync_disabled_reason or "no manifest")
        return load_locations(self._settings.manifest_path)

    def _trusted_locations(self) -> dict[str, str]:
        manifest = self.locations()
        if manifest.malformed:
            raise MalformedManifestError(manifest.path, list(manifest.bad_lines))
        return manifest.entries

    async def sync(self, artifact: NamedArtifact) -> list[anyio.Path]:
        """Copy `artifact` to every sync location, verifying each copy.

        Does nothing and warns if the manifest is malformed. Any copy failure
        propagates and stops the remaining locations.

        Returns:
            Paths of the copies made.
        """
        manifest = self.locations()
        if manifest.malformed:
            self._reporter.warning(
                f"Malformed sync manifest {manifest.path}, sync disabled"
            )
            return []

        copies = []
        total = len(manifest.entries)
        for index, (location_id, location) in enumerate(manifest.entries.items(), 1):
            self._reporter.progress(index, total, location_id)
            dest = anyio.Path(location) / artifact.name
            copies.append(
                await copy_and_verify(artifact.path, dest, artifact.digest, self._reporter)
            )

        logger.info("synced %s to %d location(s)", artifact.name, len(copies))
        return copies

    async def seek(self, pattern: str) -> dict[str, list[str]]:
        """Report the files of every location whose name contains `pattern`.

        Unreadable locations are reported and skipped.

        Returns:
            Matching names per location id.
        """
        found: dict[str, list[str]] = {}
        for location_id, location in self._trusted_locations().items():
            self._reporter.line(f"{location_id}: {location}")
            try:
                entries = await list_entries(anyio.Path(location))
            except OSError as exc:
                self._reporter.warning(f"Could not access {location_id}: {location}")
                logger.debug("listing %s failed: %s", location, exc)
                continue

            names = [entry.name for entry in entries if pattern in entry.name]
            for index, name in enumerate(names, 1):
                self._reporter.match(index, name)
            found[location_id] = names

        return found

    async def fetch(
        self,
        pattern: str,
        location_id: str,
        dest_dir: PathLikeArg | None = None,
    ) -> list[anyio.Path]:
        """Copy the files of a location whose name contains `pattern` into
        `dest_dir` (the working directory by default).

        Each file's name is checked against its content before it is copied;
        the first file that fails the check aborts the fetch.

        Raises:
            UnknownLocationError: `location_id` is not in the manifest.
            LocationAccessError: The location can't be listed.
            IntegrityError: A matching file's name doesn't match its content.
        """
        locations = self._trusted_locations()
        if location_id not in locations:
            raise UnknownLocationError(location_id)

        dest_dir = anyio.Path(dest_dir if dest_dir is not None else os.getcwd())
        location = locations[location_id]
        try:
            entries = await list_entries(anyio.Path(location))
        except OSError as exc:
            raise LocationAccessError(location_id, location, exc.strerror or str(exc)) from exc

        fetched = []
        matches = [entry for entry in entries if pattern in entry.name]
        for index, entry in enumerate(matches, 1):
            self._reporter.match(index, entry.name)
            if not await verify(entry):
                raise IntegrityError(entry)

            fetched.append(
                await copy_and_verify(
                    entry,
                    dest_dir / entry.name,
                    extract_embedded_digest(entry.name),
                    self._reporter,
                )
            )

        return fetched
