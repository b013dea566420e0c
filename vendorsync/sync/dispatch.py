# vendorsync Source Dispatcher
# Maps a content entry's populated source kind to its syncer

from collections.abc import Callable, Mapping
from typing import Any, Optional

from vendorsync.config.schema import ContentConfig, SourceConfig, SourceKind
from vendorsync.errors import ConfigError
from vendorsync.sources.base import SyncContext, Syncer
from vendorsync.sources.directory import LocalDirectorySync
from vendorsync.sources.git import GitSync
from vendorsync.sources.github_release import GithubReleaseSync
from vendorsync.sources.helm_chart import HelmChartSync
from vendorsync.sources.http import HTTPSync
from vendorsync.sources.image import ImageSync
from vendorsync.sources.manual import ManualSync

SyncerFactory = Callable[[Any, SyncContext], Syncer]

SYNCERS: dict[SourceKind, SyncerFactory] = {
    SourceKind.GIT: GitSync,
    SourceKind.HTTP: HTTPSync,
    SourceKind.IMAGE: ImageSync,
    SourceKind.GITHUB_RELEASE: GithubReleaseSync,
    SourceKind.HELM_CHART: HelmChartSync,
    SourceKind.MANUAL: ManualSync,
    SourceKind.DIRECTORY: LocalDirectorySync,
}

KNOWN_KINDS = ", ".join(kind.value for kind in SourceKind)


class SourceDispatcher:
    """
    Selects the syncer for a content entry.

    Every SourceKind must have a factory; a partial registry is rejected.
    """

    def __init__(self, registry: Optional[Mapping[SourceKind, SyncerFactory]] = None):
        """
        Initialize dispatcher.

        Args:
            registry: Syncer factories by kind. Defaults to the built-in syncers;
                      entries given here replace the defaults for their kind.
        """
        self.registry: dict[SourceKind, SyncerFactory] = {**SYNCERS, **(registry or {})}
        missing = [kind.value for kind in SourceKind if kind not in self.registry]
        if missing:
            raise ConfigError(f"No syncer registered for: {', '.join(missing)}")

    def resolve(self, content: ContentConfig) -> tuple[SourceKind, SourceConfig]:
        """
        Find the single populated source of a content entry.

        Raises:
            ConfigError: If no source or more than one source is populated.
        """
        sources = content.populated_sources()
        if not sources:
            raise ConfigError(f"Unknown contents type for directory '{content.path}' (known: {KNOWN_KINDS})")
        if len(sources) > 1:
            kinds = ", ".join(source.kind.value for source in sources)
            raise ConfigError(f"Expected exactly one contents type for directory '{content.path}', got: {kinds}")

        source = sources[0]
        return source.kind, source

    def syncer_for(self, kind: SourceKind, source: SourceConfig, context: SyncContext) -> Syncer:
        """Build the syncer for a resolved source."""
        return self.registry[kind](source, context)
