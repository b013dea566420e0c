# vendorsync Local Directory Source
# Copies another local directory tree

import shutil
from pathlib import Path
from typing import Any

from vendorsync.config.schema import LocalDirectorySource, SourceKind
from vendorsync.errors import DirectoryIOError
from vendorsync.sources.base import SyncContext
from vendorsync.utils.paths import expand_path


class LocalDirectorySync:
    """Syncs contents from a local directory."""

    kind = SourceKind.DIRECTORY

    def __init__(self, source: LocalDirectorySource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return f"directory from {self.source.path}"

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Copy the source directory into dst_path, keeping symlinks as links.

        Raises:
            DirectoryIOError: If the source is missing or the copy fails.
        """
        src_path = expand_path(self.source.path)
        if not src_path.is_dir():
            raise DirectoryIOError("Local directory not found", src_path)

        try:
            shutil.copytree(src_path, dst_path, symlinks=True)
        except OSError as e:
            raise DirectoryIOError("Copying local directory", src_path, e) from e
        return {}
