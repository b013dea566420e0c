# vendorsync Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from vendorsync.utils.paths import compile_glob


class SourceKind(str, Enum):
    """Kind of source a content entry is fetched from."""

    GIT = "git"
    HTTP = "http"
    IMAGE = "image"
    GITHUB_RELEASE = "github_release"
    HELM_CHART = "helm_chart"
    MANUAL = "manual"
    DIRECTORY = "directory"


class SourceConfig(BaseModel):
    """Base for per-kind source settings."""

    kind: ClassVar[SourceKind]


class GitSource(SourceConfig):
    """Fetch a git repository at a ref."""

    kind: ClassVar[SourceKind] = SourceKind.GIT

    url: str = Field(description="Repository URL")
    ref: str = Field(description="Branch (origin/main), tag or commit SHA to check out")
    depth: int | None = Field(default=None, ge=1, description="Shallow fetch depth")


class HTTPSource(SourceConfig):
    """Download a file or archive over HTTP/S."""

    kind: ClassVar[SourceKind] = SourceKind.HTTP

    url: str = Field(description="URL to download")
    sha256: str | None = Field(default=None, description="Expected SHA-256 of the downloaded file")
    disable_unpack: bool = Field(default=False, description="Keep archives packed")


class ImageSource(SourceConfig):
    """Extract the filesystem of an OCI image."""

    kind: ClassVar[SourceKind] = SourceKind.IMAGE

    url: str = Field(description="Image reference (tag or digest)")


class GithubReleaseSource(SourceConfig):
    """Download assets of a GitHub release."""

    kind: ClassVar[SourceKind] = SourceKind.GITHUB_RELEASE

    slug: str = Field(description="Repository as owner/name")
    tag: str | None = Field(default=None, description="Release tag")
    latest: bool = Field(default=False, description="Use the latest release instead of a tag")
    asset_names: list[str] = Field(default_factory=list, description="Asset name globs (empty = all assets)")
    checksums: dict[str, str] = Field(default_factory=dict, description="Expected SHA-256 per asset name")
    unpack_archive: str | None = Field(default=None, description="Asset to unpack in place of the downloads")
    api_url: str = Field(default="https://api.github.com", description="GitHub API base URL")

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        """Require owner/name form."""
        if v.count("/") != 1 or v.startswith("/") or v.endswith("/"):
            raise ValueError(f"slug must be in owner/name form, got '{v}'")
        return v

    @field_validator("asset_names")
    @classmethod
    def check_asset_names(cls, v: list[str]) -> list[str]:
        """Reject malformed asset globs early."""
        for pattern in v:
            compile_glob(pattern)
        return v

    @model_validator(mode="after")
    def check_tag_or_latest(self) -> "GithubReleaseSource":
        """Exactly one of tag and latest must be given."""
        if bool(self.tag) == self.latest:
            raise ValueError("exactly one of 'tag' or 'latest' must be specified")
        return self


class HelmChartSource(SourceConfig):
    """Pull a Helm chart with the helm binary."""

    kind: ClassVar[SourceKind] = SourceKind.HELM_CHART

    name: str = Field(description="Chart name (or full oci:// reference)")
    version: str | None = Field(default=None, description="Chart version (latest if omitted)")
    repository_url: str | None = Field(default=None, description="Chart repository URL (https:// or oci://)")


class ManualSource(SourceConfig):
    """Contents maintained by hand inside the destination directory."""

    kind: ClassVar[SourceKind] = SourceKind.MANUAL


class LocalDirectorySource(SourceConfig):
    """Copy another local directory."""

    kind: ClassVar[SourceKind] = SourceKind.DIRECTORY

    path: str = Field(description="Local directory to copy")


class ContentConfig(BaseModel):
    """A single content entry within a directory."""

    path: str = Field(description="Destination path relative to the directory")
    git: GitSource | None = None
    http: HTTPSource | None = None
    image: ImageSource | None = None
    github_release: GithubReleaseSource | None = None
    helm_chart: HelmChartSource | None = None
    manual: ManualSource | None = None
    directory: LocalDirectorySource | None = None
    include_paths: list[str] = Field(default_factory=list, description="Globs of files to keep")
    exclude_paths: list[str] = Field(default_factory=list, description="Globs of files to remove")
    legal_paths: list[str] | None = Field(
        default=None,
        description="Globs of legal files always kept when include_paths is set. None = defaults.",
    )

    def populated_sources(self) -> list[SourceConfig]:
        """Return every source-kind field that is set, in SourceKind order."""
        sources = []
        for kind in SourceKind:
            source = getattr(self, kind.value)
            if source is not None:
                sources.append(source)
        return sources


class DirectoryConfig(BaseModel):
    """A destination directory assembled from ordered contents."""

    path: str = Field(description="Destination directory path")
    contents: list[ContentConfig] = Field(default_factory=list, description="Ordered content entries")


class SyncSettings(BaseModel):
    """Options passed to source syncers."""

    helm_binary: str = Field(default="helm", description="Helm executable")
    image_binary: str = Field(default="crane", description="crane executable used for OCI images")
    github_token_env: str = Field(default="GITHUB_TOKEN", description="Env var holding a GitHub API token")
    http_timeout: float = Field(default=60.0, gt=0, description="HTTP timeout in seconds")
    staging_dir: str | None = Field(default=None, description="Where staging roots are created (default: cwd)")


class OutputConfig(BaseModel):
    """Output configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class VendorSyncConfig(BaseModel):
    """Root configuration model for vendorsync."""

    directories: list[DirectoryConfig] = Field(default_factory=list, description="Directories to sync")
    options: SyncSettings = Field(default_factory=SyncSettings, description="Syncer options")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    def get_directory(self, path: str) -> DirectoryConfig | None:
        """Get a directory by its configured path."""
        for directory in self.directories:
            if directory.path == path:
                return directory
        return None
