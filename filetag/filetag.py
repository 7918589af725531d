from __future__ import annotations

import logging

import anyio

from .archive import archive_folder
from .copy_strategies import TagStrategiesRunner, TagStrategy
from .digest import PathLikeArg
from .errors import UnsupportedOperationError
from .named_artifact import NamedArtifact
from .replication import Replicator, verify
from .reporting import Reporter
from .settings import Settings

logger = logging.getLogger(__name__)


class Tagger:
    """Tags files with their content digest and distributes them.

    A tagged file is named `{digest}_{original name}`, where `digest` is the
    first 12 hex characters of the SHA-256 of its content. When sync is
    enabled in `settings`, every tagged file is then copied to each location
    listed in the sync manifest, and each copy is verified.

    Unless otherwise indicated, `Tagger` APIs ***DON'T*** handle exceptions
    that may be raised as part of normal operation; they all derive from
    [`TagError`][filetag.errors.TagError].

    Parameters:
        settings: Run configuration.
        reporter: Receives the user facing output.
    """

    def __init__(self, settings: Settings, reporter: Reporter | None = None) -> None:
        self._settings = settings
        self._reporter = reporter or Reporter()
        self._tag_strategy_runner = TagStrategiesRunner(self._reporter)
        self._replicator = Replicator(settings, self._reporter)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def sync_enabled(self) -> bool:
        """`True` if tagged files are copied to the sync locations"""
        return self._settings.sync_enabled

    async def tag(
        self,
        pathlike: PathLikeArg,
        tag_strategy: TagStrategy = TagStrategy.COPY,
    ) -> NamedArtifact:
        """Give the file at `pathlike` its tagged name, then sync it.

        Parameters:
            pathlike: File to tag.
            tag_strategy: `COPY` leaves the original file in place next to the
                tagged copy, `IN_PLACE` renames it.

        Returns:
            NamedArtifact: The tagged file.
        """
        artifact = await self._tag_strategy_runner.run(tag_strategy, pathlike)
        await self._sync_if_enabled(artifact)
        return artifact

    async def tag_folder(self, pathlike: PathLikeArg) -> NamedArtifact:
        """Zip the folder at `pathlike`, tag the archive in place, then sync it."""
        archive_path = await archive_folder(pathlike)
        return await self.tag(archive_path, TagStrategy.IN_PLACE)

    async def verify(self, pathlike: PathLikeArg) -> bool:
        """Check the digest in the file's name against its content."""
        return await verify(pathlike)

    async def sync(self, artifact: NamedArtifact) -> list[anyio.Path]:
        """Copy a tagged file to every sync location, regardless of settings."""
        return await self._replicator.sync(artifact)

    async def seek(self, pattern: str) -> dict[str, list[str]]:
        """List the files in every location whose name contains `pattern`."""
        return await self._replicator.seek(pattern)

    async def fetch(
        self,
        pattern: str,
        location_id: str,
        dest_dir: PathLikeArg | None = None,
    ) -> list[anyio.Path]:
        """Copy the matching files of one location into `dest_dir`."""
        return await self._replicator.fetch(pattern, location_id, dest_dir)

    async def balance(self) -> None:
        """Reconcile the sync locations with each other. Not implemented."""
        raise UnsupportedOperationError("balance")

    async def _sync_if_enabled(self, artifact: NamedArtifact) -> None:
        if not self.sync_enabled:
            logger.debug("not syncing %s: %s", artifact.name, self._settings.sync_disabled_reason)
            return
        await self.sync(artifact)
