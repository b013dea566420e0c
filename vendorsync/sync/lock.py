# vendorsync Lock Records
# Resolved identity of synced contents, accumulated per directory

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from vendorsync.config.schema import ContentConfig, DirectoryConfig, SourceKind
from vendorsync.errors import ConfigError
from vendorsync.utils.paths import atomic_write

LOCK_API_VERSION = "vendorsync/v1"


@dataclass
class LockEntry:
    """Resolved identity of one content entry."""

    path: str
    kind: SourceKind
    resolved: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, keyed by source kind like the config."""
        return {"path": self.path, self.kind.value: dict(self.resolved)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LockEntry":
        """Create from dictionary."""
        kinds = [kind for kind in SourceKind if kind.value in data]
        if len(kinds) != 1:
            raise ConfigError(f"Lock entry for '{data.get('path', '')}' must name exactly one source kind")
        kind = kinds[0]
        return cls(path=data.get("path", ""), kind=kind, resolved=dict(data.get(kind.value) or {}))


@dataclass
class LockDirectory:
    """Lock record of one directory, aligned with its configured contents."""

    path: str
    contents: list[LockEntry] = field(default_factory=list)

    def get_entry(self, content_path: str) -> Optional[LockEntry]:
        """Get the entry for a content path."""
        for entry in self.contents:
            if entry.path == content_path:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"path": self.path, "contents": [entry.to_dict() for entry in self.contents]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LockDirectory":
        """Create from dictionary."""
        return cls(
            path=data.get("path", ""),
            contents=[LockEntry.from_dict(item) for item in data.get("contents") or []],
        )


@dataclass
class LockConfig:
    """Project-level lock file holding every directory's lock record."""

    api_version: str = LOCK_API_VERSION
    directories: list[LockDirectory] = field(default_factory=list)

    def get_directory(self, path: str) -> Optional[LockDirectory]:
        """Get the lock record for a directory path."""
        for directory in self.directories:
            if directory.path == path:
                return directory
        return None

    def merge(self, directory: LockDirectory) -> None:
        """Replace the record with the same path, or append a new one."""
        for index, existing in enumerate(self.directories):
            if existing.path == directory.path:
                self.directories[index] = directory
                return
        self.directories.append(directory)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "api_version": self.api_version,
            "directories": [directory.to_dict() for directory in self.directories],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LockConfig":
        """Create from dictionary."""
        return cls(
            api_version=data.get("api_version", LOCK_API_VERSION),
            directories=[LockDirectory.from_dict(item) for item in data.get("directories") or []],
        )


class LockBuilder:
    """
    Accumulates lock entries for one directory in processing order.

    Entries are appended only after a content entry was synced and filtered.
    """

    def __init__(self, directory_path: str):
        self.directory_path = directory_path
        self._entries: list[LockEntry] = []

    def append(self, content_path: str, kind: SourceKind, resolved: Optional[dict[str, Any]] = None) -> LockEntry:
        """Record the resolved identity of a content entry."""
        entry = LockEntry(path=content_path, kind=kind, resolved=dict(resolved or {}))
        self._entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def build(self) -> LockDirectory:
        """Return the lock record for the directory."""
        return LockDirectory(path=self.directory_path, contents=list(self._entries))


def pin_content(content: ContentConfig, entry: LockEntry) -> ContentConfig:
    """
    Pin a content entry to the identity recorded in its lock entry.

    Args:
        content: Configured content entry.
        entry: Lock entry for the same path.

    Returns:
        A copy of the content entry that fetches exactly the locked identity.

    Raises:
        ConfigError: If the lock entry is for a different path or source kind.
    """
    sources = content.populated_sources()
    if entry.path != content.path or len(sources) != 1 or sources[0].kind != entry.kind:
        raise ConfigError(f"Lock entry for '{entry.path}' does not match configured contents '{content.path}'")

    source = sources[0]
    resolved = entry.resolved
    update: dict[str, Any] = {}

    if entry.kind == SourceKind.GIT and resolved.get("sha"):
        update["ref"] = resolved["sha"]
    elif entry.kind == SourceKind.HTTP and resolved.get("sha256"):
        update["sha256"] = resolved["sha256"]
    elif entry.kind == SourceKind.IMAGE and resolved.get("url"):
        update["url"] = resolved["url"]
    elif entry.kind == SourceKind.GITHUB_RELEASE and resolved.get("tag"):
        update["tag"] = resolved["tag"]
        update["latest"] = False
    elif entry.kind == SourceKind.HELM_CHART and resolved.get("version"):
        update["version"] = resolved["version"]

    if not update:
        return content

    pinned_source = source.model_copy(update=update)
    return content.model_copy(update={entry.kind.value: pinned_source})


def pin_directory(directory: DirectoryConfig, lock: LockDirectory) -> DirectoryConfig:
    """
    Pin every content entry of a directory to its lock record.

    Raises:
        ConfigError: If a content entry has no lock entry.
    """
    contents = []
    for content in directory.contents:
        entry = lock.get_entry(content.path)
        if entry is None:
            raise ConfigError(f"No lock entry for contents '{content.path}' in directory '{directory.path}'")
        contents.append(pin_content(content, entry))
    return directory.model_copy(update={"contents": contents})


def load_lock_file(path: Path) -> LockConfig:
    """
    Load a lock file.

    Args:
        path: Lock file path.

    Returns:
        LockConfig: Parsed lock records.

    Raises:
        FileNotFoundError: If the lock file doesn't exist.
        ConfigError: If the lock file is not valid YAML or has bad entries.
    """
    if not path.exists():
        raise FileNotFoundError(f"Lock file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in lock file {path}: {e}") from e

    if data is None:
        return LockConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Lock file {path} must contain a mapping")
    return LockConfig.from_dict(data)


def save_lock_file(lock: LockConfig, path: Path) -> Path:
    """
    Write a lock file atomically.

    Args:
        lock: Lock records to save.
        path: Lock file path.

    Returns:
        Path: Path where the lock was saved.
    """
    content = yaml.dump(lock.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write(path, content)
    return path
