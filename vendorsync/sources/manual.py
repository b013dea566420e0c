# vendorsync Manual Source
# Keeps hand-maintained contents that already live in the destination

from pathlib import Path
from typing import Any

from vendorsync.config.schema import ManualSource, SourceKind
from vendorsync.sources.base import SyncContext


class ManualSync:
    """Carries existing destination contents over into the new tree."""

    kind = SourceKind.MANUAL

    def __init__(self, source: ManualSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return "manual"

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Move <directory>/<content path> into dst_path.

        Raises:
            DirectoryIOError: If the existing contents are missing or can't be moved.
        """
        src_path = self.context.directory_path / self.context.content_path
        self.context.staging.borrow(src_path, dst_path)
        return {}
