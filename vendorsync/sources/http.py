# vendorsync HTTP Source
# Downloads a file and unpacks it when it is an archive

from pathlib import Path
from typing import Any

from vendorsync.config.schema import HTTPSource, SourceKind
from vendorsync.sources.base import FetchError, SyncContext, download_file, filename_from_url, open_client
from vendorsync.utils.archive import extract_archive, is_archive
from vendorsync.utils.hashing import digest_matches, file_hash
from vendorsync.utils.paths import ensure_dir


class HTTPSync:
    """Syncs contents from an HTTP/S URL."""

    kind = SourceKind.HTTP

    def __init__(self, source: HTTPSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return f"http from {self.source.url}"

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Download the URL into dst_path.

        Archives are unpacked into dst_path unless disable_unpack is set;
        anything else is placed as dst_path/<file name>.

        Raises:
            FetchError: If the download doesn't match the configured sha256.
            httpx.HTTPError: On download failures.
        """
        filename = filename_from_url(self.source.url)
        download_path = self.context.incoming_path / filename

        with open_client(self.context.opts) as client:
            download_file(client, self.source.url, download_path)

        sha256 = file_hash(download_path)
        if self.source.sha256 and not digest_matches(sha256, self.source.sha256):
            raise FetchError(
                f"Checksum mismatch for {self.source.url}: expected {self.source.sha256}, got {sha256}"
            )

        if not self.source.disable_unpack and is_archive(download_path):
            extract_archive(download_path, dst_path)
        else:
            ensure_dir(dst_path)
            download_path.rename(dst_path / filename)

        return {"url": self.source.url, "sha256": sha256}
