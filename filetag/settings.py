from __future__ import annotations

import logging
import os
import pathlib
import sys
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from .registry import load_options

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".tag"
CONFIG_FILE_NAME = "config"
MANIFEST_FILE_NAME = "sync"

SUPPORTED_PLATFORMS = ("linux", "darwin", "freebsd", "win32", "cygwin")

SYNC_OPTION = "sync"
SYNC_DISABLED = "disabled"


def platform_supported(platform: str) -> bool:
    return platform.startswith(SUPPORTED_PLATFORMS)


def _find_home() -> pathlib.Path | None:
    try:
        return pathlib.Path.home()
    except (RuntimeError, KeyError):
        return None


@dataclass(frozen=True)
class Settings:
    """Configuration of a single run, built once at startup.

    Attributes:
        home: User home directory, `None` if it can't be found.
        config_dir: `~/.tag`.
        config_path: `~/.tag/config`, `key=value` options.
        manifest_path: `~/.tag/sync`, `name,path` sync locations.
        sync_enabled: Whether tagged files get replicated.
        sync_disabled_reason: Why sync is off, if it is.
        options: Every option read from `config_path`.
    """

    home: pathlib.Path | None
    config_dir: pathlib.Path | None
    config_path: pathlib.Path | None
    manifest_path: pathlib.Path | None
    sync_enabled: bool
    sync_disabled_reason: str | None = None
    options: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def load(
        cls,
        home: str | os.PathLike[str] | None = None,
        nosync: bool = False,
        platform: str = sys.platform,
    ) -> Settings:
        """Read `~/.tag/config` and decide whether sync is enabled.

        Sync is enabled unless the home or `~/.tag` directory is missing,
        the platform is not supported, the config sets `sync=disabled` or
        is malformed, or `nosync` is given.

        Raises:
            ManifestError: If the config file exists but can't be read.
        """
        home_path = pathlib.Path(home) if home is not None else _find_home()
        if home_path is None:
            return cls(None, None, None, None, False, "home directory not found")

        config_dir = home_path / CONFIG_DIR_NAME
        settings = cls(
            home=home_path,
            config_dir=config_dir,
            config_path=config_dir / CONFIG_FILE_NAME,
            manifest_path=config_dir / MANIFEST_FILE_NAME,
            sync_enabled=True,
        )

        if not config_dir.is_dir():
            return settings.without_sync(f"{config_dir} not found")

        if settings.config_path.is_file():
            options = load_options(settings.config_path)
            settings = replace(settings, options=MappingProxyType(dict(options.entries)))
            if options.malformed:
                return settings.without_sync(f"malformed config {settings.config_path}")

        if not platform_supported(platform):
            return settings.without_sync(f"platform {platform} not supported")

        if settings.options.get(SYNC_OPTION) == SYNC_DISABLED:
            return settings.without_sync("disabled in config")

        if nosync:
            return settings.without_sync("disabled for this run")

        return settings

    def without_sync(self, reason: str) -> Settings:
        logger.debug("sync disabled: %s", reason)
        return replace(self, sync_enabled=False, sync_disabled_reason=reason)

    @property
    def log_level(self) -> str:
        return self.options.get("log_level", "WARNING").upper()
