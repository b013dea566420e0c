# vendorsync Source Base
# Syncer contract, runtime options and shared fetch helpers

import shutil
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol

import httpx

from vendorsync.config.schema import SourceKind, SyncSettings
from vendorsync.utils.paths import ensure_dir

if TYPE_CHECKING:
    from vendorsync.sync.staging import StagingArea


class ToolError(Exception):
    """Exception raised when an external binary fails."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class FetchError(Exception):
    """Fetched content doesn't match what was requested (checksum, missing asset)."""


@dataclass
class SyncOpts:
    """Runtime options shared by all syncers of a sync run."""

    github_api_token: Optional[str] = None
    helm_binary: str = "helm"
    image_binary: str = "crane"
    http_timeout: float = 60.0
    http_client: Optional[httpx.Client] = None

    @classmethod
    def from_settings(cls, settings: SyncSettings, *, github_api_token: Optional[str] = None) -> "SyncOpts":
        """Build options from the configuration's options section."""
        return cls(
            github_api_token=github_api_token,
            helm_binary=settings.helm_binary,
            image_binary=settings.image_binary,
            http_timeout=settings.http_timeout,
        )


@dataclass
class SyncContext:
    """Everything a syncer may touch besides its staging destination."""

    directory_path: Path
    content_path: str
    incoming_path: Path
    opts: SyncOpts
    staging: "StagingArea"


class Syncer(Protocol):
    """Fetches one source kind's content into a staging destination."""

    kind: SourceKind

    def describe(self) -> str:
        """Short description of what is fetched, for progress output."""
        ...

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Populate dst_path and return the resolved identity for the lock record.

        dst_path doesn't exist yet; its parent does.
        """
        ...


def run_tool(args: list[str], *, cwd: Optional[Path] = None) -> str:
    """
    Run an external binary and return its stdout.

    Args:
        args: Command and arguments.
        cwd: Working directory.

    Returns:
        Captured stdout.

    Raises:
        ToolError: If the binary is missing or exits non-zero.
    """
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise ToolError(f"{args[0]} command not found", returncode=127) from e

    if result.returncode != 0:
        raise ToolError(
            f"Command failed: {' '.join(args)}: {result.stderr.strip()}",
            returncode=result.returncode,
            stderr=result.stderr,
        )
    return result.stdout


@contextmanager
def open_client(opts: SyncOpts) -> Iterator[httpx.Client]:
    """Yield the injected HTTP client, or a short-lived one closed afterwards."""
    if opts.http_client is not None:
        yield opts.http_client
        return

    with httpx.Client(follow_redirects=True, timeout=opts.http_timeout) as client:
        yield client


def download_file(
    client: httpx.Client,
    url: str,
    dest: Path,
    *,
    headers: Optional[dict[str, str]] = None,
) -> Path:
    """
    Stream a URL to a local file.

    Args:
        client: HTTP client.
        url: URL to fetch.
        dest: Target file path (parents are created).
        headers: Optional extra request headers.

    Returns:
        The written file path.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx responses.
    """
    ensure_dir(dest.parent)
    with client.stream("GET", url, headers=headers, follow_redirects=True) as response:
        response.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in response.iter_bytes():
                f.write(chunk)
    return dest


def move_into(source: Path, dst_path: Path) -> Path:
    """Move a fetched tree from incoming scratch into its staging destination."""
    shutil.move(str(source), str(dst_path))
    return dst_path


def filename_from_url(url: str, default: str = "download") -> str:
    """Last path segment of a URL, without query or fragment."""
    path = httpx.URL(url).path
    name = path.rstrip("/").rsplit("/", 1)[-1]
    return name or default
