# Tests for vendorsync.sources
# Per-kind syncers with external tools and HTTP mocked

import hashlib
import io
import json
import subprocess
import tarfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from vendorsync.config.schema import (
    GithubReleaseSource,
    GitSource,
    HelmChartSource,
    HTTPSource,
    ImageSource,
    LocalDirectorySource,
    ManualSource,
)
from vendorsync.errors import DirectoryIOError
from vendorsync.git.operations import GitCheckout
from vendorsync.sources import (
    FetchError,
    GithubReleaseSync,
    GitSync,
    HelmChartSync,
    HTTPSync,
    ImageSync,
    LocalDirectorySync,
    ManualSync,
    SyncContext,
    SyncOpts,
    ToolError,
    run_tool,
)
from vendorsync.sources.base import filename_from_url
from vendorsync.sources.image import image_repository


def _tar_gz(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _write_tar(path: Path, files: dict[str, bytes]) -> None:
    path.write_bytes(_tar_gz(files))


@pytest.fixture
def stage(temp_dir: Path) -> Path:
    """Staging destination whose parent exists."""
    parent = temp_dir / "staging"
    parent.mkdir()
    return parent / "lib"


def _context(temp_dir: Path, *, handler=None, token=None, staging=None) -> SyncContext:
    incoming = temp_dir / "incoming"
    incoming.mkdir(exist_ok=True)
    client = httpx.Client(transport=httpx.MockTransport(handler)) if handler else None
    return SyncContext(
        directory_path=temp_dir / "vendor",
        content_path="lib",
        incoming_path=incoming,
        opts=SyncOpts(github_api_token=token, http_client=client),
        staging=staging or MagicMock(),
    )


class TestRunTool:
    """Tests for run_tool."""

    @patch("vendorsync.sources.base.subprocess.run")
    def test_returns_stdout(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=["crane"], returncode=0, stdout="out\n", stderr="")
        assert run_tool(["crane", "version"]) == "out\n"

    @patch("vendorsync.sources.base.subprocess.run")
    def test_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["helm"], returncode=1, stdout="", stderr="Error: chart not found"
        )
        with pytest.raises(ToolError, match="chart not found") as exc_info:
            run_tool(["helm", "pull", "nope"])
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "Error: chart not found"

    @patch("vendorsync.sources.base.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_binary(self, mock_run):
        with pytest.raises(ToolError, match="crane command not found") as exc_info:
            run_tool(["crane", "digest", "x"])
        assert exc_info.value.returncode == 127


class TestFilenameFromUrl:
    """Tests for filename_from_url."""

    def test_last_segment(self):
        assert filename_from_url("https://example.com/dl/tool-1.0.tar.gz?sig=abc#x") == "tool-1.0.tar.gz"

    def test_default(self):
        assert filename_from_url("https://example.com/") == "download"


class TestSyncOpts:
    """Tests for SyncOpts.from_settings."""

    def test_from_settings(self):
        from vendorsync.config.schema import SyncSettings

        opts = SyncOpts.from_settings(SyncSettings(helm_binary="helm3", http_timeout=5), github_api_token="t")
        assert opts.helm_binary == "helm3"
        assert opts.image_binary == "crane"
        assert opts.http_timeout == 5
        assert opts.github_api_token == "t"
        assert opts.http_client is None


class TestGitSync:
    """Tests for GitSync."""

    @patch("vendorsync.sources.git.clone_ref")
    def test_sync(self, mock_clone, temp_dir, stage):
        def fake_clone(url, ref, dest, *, depth=None):
            (dest / ".git").mkdir(parents=True)
            (dest / "main.go").write_text("package main\n")
            return GitCheckout(sha="abc123", commit_title="Add main", tags=["v1.0.0"])

        mock_clone.side_effect = fake_clone
        context = _context(temp_dir)
        syncer = GitSync(GitSource(url="https://example.com/r.git", ref="v1.0.0", depth=1), context)

        resolved = syncer.sync(stage)

        assert resolved == {"sha": "abc123", "commit_title": "Add main", "tags": ["v1.0.0"]}
        assert (stage / "main.go").exists()
        assert not (stage / ".git").exists()
        mock_clone.assert_called_once_with(
            "https://example.com/r.git", "v1.0.0", context.incoming_path / "checkout", depth=1
        )

    @patch("vendorsync.sources.git.clone_ref")
    def test_no_tags_omitted(self, mock_clone, temp_dir, stage):
        def fake_clone(url, ref, dest, *, depth=None):
            dest.mkdir(parents=True)
            return GitCheckout(sha="def456", commit_title="Wip")

        mock_clone.side_effect = fake_clone
        resolved = GitSync(GitSource(url="u", ref="origin/main"), _context(temp_dir)).sync(stage)
        assert resolved == {"sha": "def456", "commit_title": "Wip"}


class TestHTTPSync:
    """Tests for HTTPSync."""

    def test_plain_file(self, temp_dir, stage):
        body = b"#!/bin/sh\necho hi\n"

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/bin/tool.sh"
            return httpx.Response(200, content=body)

        source = HTTPSource(url="https://example.com/bin/tool.sh")
        resolved = HTTPSync(source, _context(temp_dir, handler=handler)).sync(stage)

        assert (stage / "tool.sh").read_bytes() == body
        assert resolved == {"url": source.url, "sha256": hashlib.sha256(body).hexdigest()}

    def test_archive_unpacked(self, temp_dir, stage):
        body = _tar_gz({"tool/README": b"readme", "tool/bin/tool": b"bin"})
        handler = lambda request: httpx.Response(200, content=body)

        HTTPSync(HTTPSource(url="https://example.com/tool.tgz"), _context(temp_dir, handler=handler)).sync(stage)

        assert (stage / "tool" / "bin" / "tool").read_bytes() == b"bin"
        assert not (stage / "tool.tgz").exists()

    def test_disable_unpack(self, temp_dir, stage):
        body = _tar_gz({"README": b"readme"})
        handler = lambda request: httpx.Response(200, content=body)
        source = HTTPSource(url="https://example.com/tool.tgz", disable_unpack=True)

        HTTPSync(source, _context(temp_dir, handler=handler)).sync(stage)

        assert (stage / "tool.tgz").read_bytes() == body

    def test_checksum_verified(self, temp_dir, stage):
        body = b"payload"
        handler = lambda request: httpx.Response(200, content=body)
        source = HTTPSource(url="https://example.com/f", sha256=f"sha256:{hashlib.sha256(body).hexdigest()}")

        HTTPSync(source, _context(temp_dir, handler=handler)).sync(stage)

        assert (stage / "f").read_bytes() == body

    def test_checksum_mismatch(self, temp_dir, stage):
        handler = lambda request: httpx.Response(200, content=b"tampered")
        source = HTTPSource(url="https://example.com/f", sha256="0" * 64)

        with pytest.raises(FetchError, match="Checksum mismatch"):
            HTTPSync(source, _context(temp_dir, handler=handler)).sync(stage)
        assert not stage.exists()

    def test_http_error(self, temp_dir, stage):
        handler = lambda request: httpx.Response(404)
        with pytest.raises(httpx.HTTPStatusError):
            HTTPSync(HTTPSource(url="https://example.com/missing"), _context(temp_dir, handler=handler)).sync(stage)


class TestImageSync:
    """Tests for ImageSync."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("ghcr.io/org/app:1.0", "ghcr.io/org/app"),
            ("localhost:5000/app:tag", "localhost:5000/app"),
            ("docker.io/library/ubuntu@sha256:abc", "docker.io/library/ubuntu"),
            ("ubuntu", "ubuntu"),
        ],
    )
    def test_image_repository(self, url, expected):
        assert image_repository(url) == expected

    @patch("vendorsync.sources.image.run_tool")
    def test_sync_pins_digest(self, mock_tool, temp_dir, stage):
        def fake_tool(args, **kwargs):
            if args[1] == "digest":
                return "sha256:feed\n"
            _write_tar(Path(args[3]), {"etc/os-release": b"ID=test\n"})
            return ""

        mock_tool.side_effect = fake_tool
        resolved = ImageSync(ImageSource(url="ghcr.io/org/app:1.0"), _context(temp_dir)).sync(stage)

        assert resolved == {"url": "ghcr.io/org/app@sha256:feed"}
        assert (stage / "etc" / "os-release").read_text() == "ID=test\n"
        export_args = mock_tool.call_args_list[1][0][0]
        assert export_args[:3] == ["crane", "export", "ghcr.io/org/app@sha256:feed"]


class TestGithubReleaseSync:
    """Tests for GithubReleaseSync."""

    API = "https://api.github.com/repos/org/tool/releases"

    def _handler(self, seen: list[httpx.Request], *, linux_body: bytes = b"linux-bin"):
        release = {
            "url": f"{self.API}/42",
            "tag_name": "v1.2.0",
            "assets": [
                {"name": "tool-linux.tar.gz", "url": f"{self.API}/assets/1"},
                {"name": "tool-darwin.tar.gz", "url": f"{self.API}/assets/2"},
            ],
        }

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            path = request.url.path
            if path.endswith("/releases/tags/v1.2.0") or path.endswith("/releases/latest"):
                return httpx.Response(200, content=json.dumps(release).encode())
            if path.endswith("/assets/1"):
                return httpx.Response(200, content=linux_body)
            if path.endswith("/assets/2"):
                return httpx.Response(200, content=b"darwin-bin")
            return httpx.Response(404)

        return handler

    def test_release_url(self, temp_dir):
        tagged = GithubReleaseSync(GithubReleaseSource(slug="org/tool", tag="v1"), _context(temp_dir))
        latest = GithubReleaseSync(GithubReleaseSource(slug="org/tool", latest=True), _context(temp_dir))
        assert tagged.release_url == f"{self.API}/tags/v1"
        assert latest.release_url == f"{self.API}/latest"

    def test_downloads_selected_assets(self, temp_dir, stage):
        seen: list[httpx.Request] = []
        source = GithubReleaseSource(slug="org/tool", tag="v1.2.0", asset_names=["*linux*"])
        context = _context(temp_dir, handler=self._handler(seen), token="secret")

        resolved = GithubReleaseSync(source, context).sync(stage)

        assert resolved == {"url": f"{self.API}/42", "tag": "v1.2.0"}
        assert sorted(p.name for p in stage.iterdir()) == ["tool-linux.tar.gz"]
        assert all(r.headers["Authorization"] == "Bearer secret" for r in seen)
        assert seen[1].headers["Accept"] == "application/octet-stream"

    def test_all_assets_without_globs(self, temp_dir, stage):
        source = GithubReleaseSource(slug="org/tool", latest=True)
        GithubReleaseSync(source, _context(temp_dir, handler=self._handler([]))).sync(stage)
        assert sorted(p.name for p in stage.iterdir()) == ["tool-darwin.tar.gz", "tool-linux.tar.gz"]

    def test_no_token_no_auth_header(self, temp_dir, stage):
        seen: list[httpx.Request] = []
        source = GithubReleaseSource(slug="org/tool", latest=True)
        GithubReleaseSync(source, _context(temp_dir, handler=self._handler(seen))).sync(stage)
        assert "Authorization" not in seen[0].headers

    def test_unpack_archive(self, temp_dir, stage):
        archive = _tar_gz({"tool": b"binary"})
        source = GithubReleaseSource(
            slug="org/tool", tag="v1.2.0", asset_names=["*linux*"], unpack_archive="tool-linux.tar.gz"
        )
        handler = self._handler([], linux_body=archive)

        GithubReleaseSync(source, _context(temp_dir, handler=handler)).sync(stage)

        assert (stage / "tool").read_bytes() == b"binary"
        assert not (stage / "tool-linux.tar.gz").exists()

    def test_no_matching_asset(self, temp_dir, stage):
        source = GithubReleaseSource(slug="org/tool", tag="v1.2.0", asset_names=["*windows*"])
        with pytest.raises(FetchError, match="No assets"):
            GithubReleaseSync(source, _context(temp_dir, handler=self._handler([]))).sync(stage)

    def test_checksum_mismatch(self, temp_dir, stage):
        source = GithubReleaseSource(
            slug="org/tool", tag="v1.2.0", asset_names=["*linux*"], checksums={"tool-linux.tar.gz": "0" * 64}
        )
        with pytest.raises(FetchError, match="Checksum mismatch"):
            GithubReleaseSync(source, _context(temp_dir, handler=self._handler([]))).sync(stage)


class TestHelmChartSync:
    """Tests for HelmChartSync."""

    def test_pull_args_repository(self, temp_dir):
        source = HelmChartSource(name="redis", version="18.0.0", repository_url="https://charts.example.com")
        args = HelmChartSync(source, _context(temp_dir)).pull_args(Path("/u"))
        assert args == [
            "helm", "pull", "redis", "--repo", "https://charts.example.com",
            "--version", "18.0.0", "--untar", "--untardir", "/u",
        ]

    def test_pull_args_oci(self, temp_dir):
        source = HelmChartSource(name="redis", repository_url="oci://registry.example.com/charts/")
        args = HelmChartSync(source, _context(temp_dir)).pull_args(Path("/u"))
        assert args[:3] == ["helm", "pull", "oci://registry.example.com/charts/redis"]
        assert "--version" not in args

    @patch("vendorsync.sources.helm_chart.run_tool")
    def test_sync(self, mock_tool, temp_dir, stage):
        def fake_pull(args, **kwargs):
            chart = Path(args[args.index("--untardir") + 1]) / "redis"
            (chart / "templates").mkdir(parents=True)
            (chart / "Chart.yaml").write_text("name: redis\nversion: 18.0.0\nappVersion: '7.2'\n")
            return ""

        mock_tool.side_effect = fake_pull
        source = HelmChartSource(name="redis", version="18.0.0")

        resolved = HelmChartSync(source, _context(temp_dir)).sync(stage)

        assert resolved == {"version": "18.0.0", "app_version": "7.2"}
        assert (stage / "Chart.yaml").exists()
        assert (stage / "templates").is_dir()

    @patch("vendorsync.sources.helm_chart.run_tool", return_value="")
    def test_nothing_pulled(self, mock_tool, temp_dir, stage):
        with pytest.raises(FetchError, match="found 0"):
            HelmChartSync(HelmChartSource(name="redis"), _context(temp_dir)).sync(stage)


class TestManualSync:
    """Tests for ManualSync."""

    def test_borrows_existing_contents(self, temp_dir, stage):
        staging = MagicMock()
        context = _context(temp_dir, staging=staging)

        assert ManualSync(ManualSource(), context).sync(stage) == {}
        staging.borrow.assert_called_once_with(temp_dir / "vendor" / "lib", stage)


class TestLocalDirectorySync:
    """Tests for LocalDirectorySync."""

    def test_copies_tree_with_symlinks(self, temp_dir, stage, source_tree):
        (source_tree / "link.txt").symlink_to("a.txt")

        resolved = LocalDirectorySync(LocalDirectorySource(path=str(source_tree)), _context(temp_dir)).sync(stage)

        assert resolved == {}
        assert (stage / "sub" / "c.txt").read_text() == "gamma\n"
        assert (stage / "link.txt").is_symlink()

    def test_missing_source(self, temp_dir, stage):
        with pytest.raises(DirectoryIOError, match="not found"):
            LocalDirectorySync(LocalDirectorySource(path=str(temp_dir / "nope")), _context(temp_dir)).sync(stage)
