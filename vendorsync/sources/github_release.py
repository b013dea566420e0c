# vendorsync GitHub Release Source
# Resolves a release through the GitHub REST API and downloads its assets

from pathlib import Path
from typing import Any, Optional

import httpx

from vendorsync.config.schema import GithubReleaseSource, SourceKind
from vendorsync.sources.base import FetchError, SyncContext, download_file, open_client
from vendorsync.utils.archive import extract_archive
from vendorsync.utils.hashing import digest_matches, file_hash
from vendorsync.utils.paths import ensure_dir, matches_any_pattern


class GithubReleaseSync:
    """Syncs assets of a GitHub release."""

    kind = SourceKind.GITHUB_RELEASE

    def __init__(self, source: GithubReleaseSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        return f"github release {self.source.slug}@{self.source.tag or 'latest'}"

    @property
    def release_url(self) -> str:
        """API URL of the configured release."""
        base = f"{self.source.api_url.rstrip('/')}/repos/{self.source.slug}/releases"
        if self.source.latest:
            return f"{base}/latest"
        return f"{base}/tags/{self.source.tag}"

    def _headers(self, accept: str) -> dict[str, str]:
        headers = {"Accept": accept}
        token: Optional[str] = self.context.opts.github_api_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def fetch_release(self, client: httpx.Client) -> dict[str, Any]:
        """
        Fetch the release description.

        Raises:
            httpx.HTTPStatusError: If the release can't be retrieved.
        """
        response = client.get(self.release_url, headers=self._headers("application/vnd.github+json"))
        response.raise_for_status()
        return response.json()

    def select_assets(self, release: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Pick the assets matching the configured name globs.

        Raises:
            FetchError: If globs are configured and nothing matches.
        """
        assets = release.get("assets") or []
        if not self.source.asset_names:
            return assets

        selected = [asset for asset in assets if matches_any_pattern(asset["name"], self.source.asset_names)]
        if not selected:
            raise FetchError(
                f"No assets of release {release.get('tag_name', '')} match {', '.join(self.source.asset_names)}"
            )
        return selected

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Download selected assets into dst_path.

        When unpack_archive is set, only that asset's unpacked contents end up
        in dst_path.

        Raises:
            FetchError: On checksum mismatch or a missing archive asset.
            httpx.HTTPError: On API or download failures.
        """
        download_dir = self.context.incoming_path / "assets"

        with open_client(self.context.opts) as client:
            release = self.fetch_release(client)
            assets = self.select_assets(release)

            for asset in assets:
                target = download_dir / asset["name"]
                download_file(client, asset["url"], target, headers=self._headers("application/octet-stream"))

                expected = self.source.checksums.get(asset["name"])
                if expected and not digest_matches(file_hash(target), expected):
                    raise FetchError(f"Checksum mismatch for release asset {asset['name']}")

        if self.source.unpack_archive:
            archive = download_dir / self.source.unpack_archive
            if not archive.is_file():
                raise FetchError(f"Archive asset {self.source.unpack_archive} was not downloaded")
            extract_archive(archive, dst_path)
        else:
            ensure_dir(dst_path)
            for asset in assets:
                (download_dir / asset["name"]).rename(dst_path / asset["name"])

        return {"url": release.get("url", self.release_url), "tag": release.get("tag_name", self.source.tag or "")}
