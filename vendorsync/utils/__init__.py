# vendorsync Utilities Module
# Helper functions for path handling, hashing and archives

from vendorsync.utils.archive import extract_archive, is_archive
from vendorsync.utils.hashing import digest_matches, directory_hash, file_hash
from vendorsync.utils.paths import (
    atomic_write,
    compile_glob,
    ensure_dir,
    expand_path,
    is_contained,
    matches_any_pattern,
    matches_pattern,
    safe_delete,
    translate_glob,
)

__all__ = [
    # Paths
    "expand_path",
    "atomic_write",
    "ensure_dir",
    "safe_delete",
    "is_contained",
    "translate_glob",
    "compile_glob",
    "matches_pattern",
    "matches_any_pattern",
    # Hashing
    "file_hash",
    "directory_hash",
    "digest_matches",
    # Archives
    "is_archive",
    "extract_archive",
]
