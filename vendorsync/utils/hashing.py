# vendorsync Hashing Utilities
# Content hashing for checksum verification and lock records

import hashlib
import os
from pathlib import Path


def file_hash(path: Path, *, algorithm: str = "sha256", chunk_size: int = 8192) -> str | None:
    """
    Calculate hash of file content.

    Args:
        path: Path to file.
        algorithm: Hash algorithm (default sha256).
        chunk_size: Chunk size for reading large files.

    Returns:
        Hex digest of hash, or None if file doesn't exist.
    """
    if not path.exists() or not path.is_file():
        return None

    hasher = hashlib.new(algorithm)

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return hasher.hexdigest()


def directory_hash(path: Path, *, algorithm: str = "sha256") -> str | None:
    """
    Calculate hash of a directory tree.

    Includes relative names, file contents and symlink targets, so two trees
    hash equal only when they are byte-identical.

    Args:
        path: Path to directory.
        algorithm: Hash algorithm (default sha256).

    Returns:
        Hex digest of hash, or None if directory doesn't exist.
    """
    if not path.exists() or not path.is_dir():
        return None

    hasher = hashlib.new(algorithm)

    entries: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(path):
        current = Path(dirpath)
        entries.extend(current / name for name in dirnames)
        entries.extend(current / name for name in filenames)
    entries.sort(key=lambda p: p.relative_to(path).as_posix())

    for entry in entries:
        rel_path = entry.relative_to(path).as_posix()
        hasher.update(rel_path.encode("utf-8"))
        hasher.update(b"\x00")

        if entry.is_symlink():
            hasher.update(b"L")
            hasher.update(str(entry.readlink()).encode("utf-8"))
        elif entry.is_dir():
            hasher.update(b"D")
        else:
            hasher.update(b"F")
            with open(entry, "rb") as f:
                while chunk := f.read(8192):
                    hasher.update(chunk)
        hasher.update(b"\x00")

    return hasher.hexdigest()


def digest_matches(actual: str | None, expected: str) -> bool:
    """Compare hex digests, tolerating an ``sha256:`` prefix and case."""
    if actual is None:
        return False
    expected = expected.strip().lower()
    if expected.startswith("sha256:"):
        expected = expected[len("sha256:") :]
    return actual.lower() == expected
