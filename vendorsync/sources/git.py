# vendorsync Git Source
# Checks out a repository ref and stages its working tree

from pathlib import Path
from typing import Any

from vendorsync.config.schema import GitSource, SourceKind
from vendorsync.git.operations import clone_ref
from vendorsync.sources.base import SyncContext, move_into
from vendorsync.utils.paths import safe_delete


class GitSync:
    """Syncs contents from a git repository."""

    kind = SourceKind.GIT

    def __init__(self, source: GitSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return f"git from {self.source.url}@{self.source.ref}"

    def sync(self, dst_path: Path) -> dict[str, Any]:
        checkout_path = self.context.incoming_path / "checkout"
        result = clone_ref(self.source.url, self.source.ref, checkout_path, depth=self.source.depth)

        safe_delete(checkout_path / ".git", missing_ok=True)
        move_into(checkout_path, dst_path)

        resolved: dict[str, Any] = {"sha": result.sha, "commit_title": result.commit_title}
        if result.tags:
            resolved["tags"] = result.tags
        return resolved
