# vendorsync Image Source
# Extracts the filesystem of an OCI image via crane

from pathlib import Path
from typing import Any

from vendorsync.config.schema import ImageSource, SourceKind
from vendorsync.sources.base import SyncContext, run_tool
from vendorsync.utils.archive import extract_archive


def image_repository(url: str) -> str:
    """Strip the tag or digest from an image reference."""
    if "@" in url:
        return url.split("@", 1)[0]
    name, _, last = url.rpartition("/")
    if ":" in last:
        last = last.split(":", 1)[0]
    return f"{name}/{last}" if name else last


class ImageSync:
    """Syncs contents from an OCI image filesystem."""

    kind = SourceKind.IMAGE

    def __init__(self, source: ImageSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return f"image from {self.source.url}"

    def sync(self, dst_path: Path) -> dict[str, Any]:
        binary = self.context.opts.image_binary

        digest = run_tool([binary, "digest", self.source.url]).strip()
        pinned_url = f"{image_repository(self.source.url)}@{digest}"

        tarball = self.context.incoming_path / "image.tar"
        run_tool([binary, "export", pinned_url, str(tarball)])

        # Image filesystems legitimately carry absolute symlinks
        extract_archive(tarball, dst_path, tar_filter="tar")

        return {"url": pinned_url}
