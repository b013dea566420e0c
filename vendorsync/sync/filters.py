# vendorsync File Filter
# Prunes a staged subtree according to include/exclude globs

import os
import re
from pathlib import Path
from typing import Optional

from vendorsync.config.schema import ContentConfig
from vendorsync.errors import ConfigError, DirectoryIOError
from vendorsync.utils.paths import compile_glob

DEFAULT_LEGAL_PATHS = [
    "{LICENSE,LICENCE,License,Licence}{,.md,.txt,.rst}",
    "{COPYRIGHT,Copyright}{,.md,.txt,.rst}",
    "{NOTICE,Notice}{,.md,.txt,.rst}",
]


def _compile_all(patterns: list[str], label: str) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(compile_glob(pattern))
        except ValueError as e:
            raise ConfigError(f"Invalid {label} pattern '{pattern}': {e}") from e
    return compiled


def _raise(error: OSError) -> None:
    raise error


class FileFilter:
    """
    Keeps or removes files of a staged subtree.

    A file is removed when include rules exist and none matches it, or when
    any exclude rule matches it. Exclude wins over include. Paths are matched
    relative to the subtree root with / separators. Symlinks are treated as
    files and never followed.
    """

    def __init__(
        self,
        include_paths: Optional[list[str]] = None,
        exclude_paths: Optional[list[str]] = None,
        legal_paths: Optional[list[str]] = None,
    ):
        """
        Compile filter rules.

        Args:
            include_paths: Globs of files to keep. Empty keeps everything.
            exclude_paths: Globs of files to remove.
            legal_paths: Globs kept alongside include rules (defaults to LICENSE-like files).

        Raises:
            ConfigError: If any pattern is malformed.
        """
        self.include_paths = list(include_paths or [])
        self.exclude_paths = list(exclude_paths or [])
        self.legal_paths = list(DEFAULT_LEGAL_PATHS if legal_paths is None else legal_paths)

        self._include = _compile_all(self.include_paths, "include")
        self._exclude = _compile_all(self.exclude_paths, "exclude")
        self._legal = _compile_all(self.legal_paths, "legal") if self._include else []

    @classmethod
    def from_content(cls, content: ContentConfig) -> "FileFilter":
        """Build the filter configured for a content entry."""
        return cls(
            include_paths=content.include_paths,
            exclude_paths=content.exclude_paths,
            legal_paths=content.legal_paths,
        )

    @property
    def is_noop(self) -> bool:
        """True when no rule can remove anything."""
        return not self._include and not self._exclude

    def keeps(self, rel_path: str) -> bool:
        """Decide whether a relative path survives filtering."""
        if any(p.match(rel_path) for p in self._exclude):
            return False
        if not self._include:
            return True
        return any(p.match(rel_path) for p in self._include) or any(p.match(rel_path) for p in self._legal)

    def apply(self, root: Path) -> list[str]:
        """
        Remove filtered-out files under root, then prune empty directories.

        Args:
            root: Staged subtree to filter.

        Returns:
            Sorted relative paths of removed files.

        Raises:
            DirectoryIOError: If the tree can't be walked or modified.
        """
        if self.is_noop:
            return []

        if not root.is_dir() or root.is_symlink():
            raise DirectoryIOError("Filtering paths in missing directory", root)

        removed: list[str] = []
        try:
            for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
                current = Path(dirpath)
                # Symlinked directories are listed but never descended into
                linked_dirs = [name for name in dirnames if (current / name).is_symlink()]
                dirnames[:] = [name for name in dirnames if name not in linked_dirs]

                for name in filenames + linked_dirs:
                    path = current / name
                    rel_path = path.relative_to(root).as_posix()
                    if not self.keeps(rel_path):
                        path.unlink()
                        removed.append(rel_path)

            self._prune_empty_dirs(root)
        except OSError as e:
            raise DirectoryIOError("Filtering paths in directory", root, e) from e

        return sorted(removed)

    @staticmethod
    def _prune_empty_dirs(root: Path) -> None:
        for dirpath, _dirnames, _filenames in os.walk(root, topdown=False, onerror=_raise):
            current = Path(dirpath)
            if current == root:
                continue
            if not any(current.iterdir()):
                current.rmdir()
