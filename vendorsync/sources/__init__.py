# vendorsync Sources Module
# One syncer per source kind

from vendorsync.sources.base import (
    FetchError,
    SyncContext,
    Syncer,
    SyncOpts,
    ToolError,
    download_file,
    open_client,
    run_tool,
)
from vendorsync.sources.directory import LocalDirectorySync
from vendorsync.sources.git import GitSync
from vendorsync.sources.github_release import GithubReleaseSync
from vendorsync.sources.helm_chart import HelmChartSync
from vendorsync.sources.http import HTTPSync
from vendorsync.sources.image import ImageSync
from vendorsync.sources.manual import ManualSync

__all__ = [
    # Contract
    "Syncer",
    "SyncContext",
    "SyncOpts",
    "ToolError",
    "FetchError",
    "run_tool",
    "open_client",
    "download_file",
    # Variants
    "GitSync",
    "HTTPSync",
    "ImageSync",
    "GithubReleaseSync",
    "HelmChartSync",
    "ManualSync",
    "LocalDirectorySync",
]
