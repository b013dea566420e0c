# vendorsync Directory Sync
# Assembles one destination directory from its ordered contents

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from vendorsync.config.schema import ContentConfig, DirectoryConfig, SourceConfig, SourceKind
from vendorsync.errors import ConfigError, SourceError, VendorSyncError
from vendorsync.sources.base import SyncContext, Syncer, SyncOpts
from vendorsync.sync.dispatch import SourceDispatcher
from vendorsync.sync.filters import FileFilter
from vendorsync.sync.lock import LockBuilder, LockDirectory
from vendorsync.sync.staging import StagingArea, staging_root_for
from vendorsync.utils.paths import is_contained


class ProgressSink(Protocol):
    """Receives one notification per content entry before it is fetched."""

    def content_started(self, directory_path: str, content_path: str, kind: SourceKind, description: str) -> None:
        ...


class NullProgress:
    """Progress sink that discards everything."""

    def content_started(self, directory_path: str, content_path: str, kind: SourceKind, description: str) -> None:
        pass


@dataclass
class _PlannedContent:
    """A content entry whose configuration passed validation."""

    content: ContentConfig
    relative_path: str
    kind: SourceKind
    source: SourceConfig
    file_filter: FileFilter


class DirectorySync:
    """
    Syncs one directory.

    Every content entry is fetched into a staging tree, filtered and recorded
    in order; the destination is replaced only once all entries succeeded.
    """

    def __init__(
        self,
        config: DirectoryConfig,
        *,
        progress: Optional[ProgressSink] = None,
        dispatcher: Optional[SourceDispatcher] = None,
        staging_root: Optional[Path] = None,
        staging_base: Optional[Path] = None,
    ):
        """
        Initialize directory sync.

        Args:
            config: Directory configuration.
            progress: Optional progress sink.
            dispatcher: Optional dispatcher (default: built-in syncers).
            staging_root: Explicit staging root. Derived from the destination if omitted.
            staging_base: Directory holding derived staging roots (default: cwd).
        """
        self.config = config
        self.progress = progress or NullProgress()
        self.dispatcher = dispatcher or SourceDispatcher()
        self.staging_root = staging_root or staging_root_for(config.path, staging_base)

    @property
    def destination(self) -> Path:
        """Destination directory path."""
        return Path(self.config.path)

    def validate(self) -> list[_PlannedContent]:
        """
        Check the whole directory configuration without touching the filesystem.

        Returns:
            Planned content entries in configuration order.

        Raises:
            ConfigError: On bad paths, unknown or ambiguous source kinds, or malformed filters.
        """
        path = self.config.path.strip()
        if not path or Path(path) in (Path("."), Path("/")):
            raise ConfigError(f"Directory path '{self.config.path}' must name a subdirectory")

        planned: list[_PlannedContent] = []
        seen: list[str] = []

        for content in self.config.contents:
            if not is_contained(content.path):
                raise ConfigError(
                    f"Contents path '{content.path}' of directory '{self.config.path}' must be relative and inside it"
                )

            normalized = Path(os.path.normpath(content.path)).as_posix()
            for other in seen:
                if normalized == other or normalized.startswith(other + "/") or other.startswith(normalized + "/"):
                    raise ConfigError(
                        f"Contents paths '{other}' and '{normalized}' in directory '{self.config.path}' overlap"
                    )
            seen.append(normalized)

            kind, source = self.dispatcher.resolve(content)
            planned.append(_PlannedContent(content, normalized, kind, source, FileFilter.from_content(content)))

        return planned

    def sync(self, opts: Optional[SyncOpts] = None) -> LockDirectory:
        """
        Sync the directory.

        Args:
            opts: Runtime options for syncers.

        Returns:
            LockDirectory with one entry per content, in configuration order.

        Raises:
            ConfigError: If the configuration is invalid (nothing is touched).
            SourceError: If a syncer fails.
            DirectoryIOError: If staging, filtering or committing fails.
        """
        opts = opts or SyncOpts()
        planned = self.validate()
        lock = LockBuilder(self.config.path)

        with StagingArea(self.staging_root) as staging:
            for index, item in enumerate(planned):
                content = item.content
                stage_path = staging.stage_path_for(item.relative_path)
                context = SyncContext(
                    directory_path=self.destination,
                    content_path=item.relative_path,
                    incoming_path=staging.incoming_path_for(str(index)),
                    opts=opts,
                    staging=staging,
                )
                syncer = self.dispatcher.syncer_for(item.kind, item.source, context)

                self.progress.content_started(self.config.path, content.path, item.kind, syncer.describe())

                resolved = self._run_syncer(syncer, content, item.kind, stage_path)
                # Manual contents are the live destination files until commit
                if item.kind is not SourceKind.MANUAL:
                    item.file_filter.apply(stage_path)
                lock.append(content.path, item.kind, resolved)

            staging.commit(self.destination)

        return lock.build()

    @staticmethod
    def _run_syncer(syncer: Syncer, content: ContentConfig, kind: SourceKind, stage_path: Path) -> dict:
        try:
            return syncer.sync(stage_path)
        except VendorSyncError:
            raise
        except Exception as e:
            raise SourceError(content.path, kind.value, e) from e
