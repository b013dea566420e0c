# vendorsync Sync Engine
# Runs the directory sync for every configured directory

from pathlib import Path
from typing import Optional

from vendorsync.config.schema import DirectoryConfig, VendorSyncConfig
from vendorsync.errors import ConfigError
from vendorsync.sources.base import SyncOpts
from vendorsync.sync.directory import DirectorySync, ProgressSink
from vendorsync.sync.dispatch import SourceDispatcher
from vendorsync.sync.lock import LockConfig, pin_directory
from vendorsync.utils.paths import expand_path


class SyncEngine:
    """
    Main synchronization engine.

    Directories are synced one after another in configuration order. The
    first failure aborts the run; directories synced before it stay synced.
    """

    def __init__(
        self,
        config: VendorSyncConfig,
        *,
        progress: Optional[ProgressSink] = None,
        dispatcher: Optional[SourceDispatcher] = None,
        staging_base: Optional[Path] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: vendorsync configuration.
            progress: Optional progress sink passed to every directory sync.
            dispatcher: Optional dispatcher (default: built-in syncers).
            staging_base: Directory holding staging roots. Falls back to
                          options.staging_dir, then the current directory.
        """
        self.config = config
        self.progress = progress
        self.dispatcher = dispatcher or SourceDispatcher()
        if staging_base is None and config.options.staging_dir:
            staging_base = expand_path(config.options.staging_dir)
        self.staging_base = staging_base

    def select(self, directories: Optional[list[str]] = None) -> list[DirectoryConfig]:
        """
        Get the directories to sync, in configuration order.

        Args:
            directories: Optional directory paths to restrict the run to.

        Raises:
            ConfigError: If a requested directory isn't configured.
        """
        if not directories:
            return list(self.config.directories)

        unknown = [path for path in directories if self.config.get_directory(path) is None]
        if unknown:
            raise ConfigError(f"Directory not configured: {', '.join(unknown)}")

        wanted = set(directories)
        return [directory for directory in self.config.directories if directory.path in wanted]

    def sync(
        self,
        directories: Optional[list[str]] = None,
        lock: Optional[LockConfig] = None,
        opts: Optional[SyncOpts] = None,
    ) -> LockConfig:
        """
        Sync directories.

        Args:
            directories: Optional subset of directory paths.
            lock: Previous lock records. When given, every content entry is
                  pinned to its locked identity and records of directories
                  outside the subset are carried over.
            opts: Runtime options for syncers.

        Returns:
            LockConfig with one record per synced directory.

        Raises:
            ConfigError: On unknown directories, missing lock records or invalid contents.
            SourceError: If a syncer fails.
            DirectoryIOError: If a filesystem operation fails.
        """
        selected = self.select(directories)

        if lock is not None:
            pinned = []
            for directory in selected:
                record = lock.get_directory(directory.path)
                if record is None:
                    raise ConfigError(f"No lock record for directory '{directory.path}'")
                pinned.append(pin_directory(directory, record))
            selected = pinned

        carried = lock.directories if lock is not None and directories else []
        result = LockConfig(directories=list(carried))

        for directory in selected:
            directory_sync = DirectorySync(
                directory,
                progress=self.progress,
                dispatcher=self.dispatcher,
                staging_base=self.staging_base,
            )
            result.merge(directory_sync.sync(opts))

        return result
