# vendorsync Path Utilities
# Directory helpers and glob pattern matching

import os
import re
import shutil
import tempfile
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded Path object.
    """
    path_str = str(path)
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str)


def ensure_dir(path: Path, *, mode: int = 0o777) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.
        mode: Permission bits for newly created directories.

    Returns:
        The path that was ensured.
    """
    path.mkdir(mode=mode, parents=True, exist_ok=True)
    return path


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete file, symlink or directory.

    Symlinks are removed themselves, never the tree they point to.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
    """
    if not path.exists() and not path.is_symlink():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    # Create temp file in same directory for atomic rename
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.rename(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def is_contained(path: str | Path) -> bool:
    """Check whether a relative path stays strictly inside its base once normalized."""
    normalized = os.path.normpath(str(path))
    if os.path.isabs(normalized):
        return False
    return normalized != ".." and not normalized.startswith(".." + os.sep) and normalized != "."


def translate_glob(pattern: str) -> str:
    """
    Translate a glob pattern into a regular expression body.

    Supports:
    - * for any characters within a path component
    - ** for any number of path components
    - ? for a single character
    - [abc], [a-z], [!abc] character classes
    - {a,b} alternatives (may nest)
    - \\ to escape the next character

    Args:
        pattern: Glob pattern.

    Returns:
        Regular expression source (unanchored).

    Raises:
        ValueError: If the pattern is malformed.
    """
    if not pattern:
        raise ValueError("empty pattern")

    out: list[str] = []
    depth = 0
    i = 0
    n = len(pattern)

    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            j = i + 1
            negate = j < n and pattern[j] in "!^"
            if negate:
                j += 1
            start = j
            # A leading ] is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError(f"unterminated character class at position {i}")
            body = pattern[start:j].replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
            out.append(f"[^/{body}]" if negate else f"[{body}]")
            i = j + 1
            continue
        elif c == "{":
            depth += 1
            out.append("(?:")
        elif c == "}":
            if depth == 0:
                raise ValueError(f"unmatched '}}' at position {i}")
            depth -= 1
            out.append(")")
        elif c == "," and depth > 0:
            out.append("|")
        elif c == "\\":
            if i + 1 >= n:
                raise ValueError("pattern ends with an escape character")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(c))
        i += 1

    if depth:
        raise ValueError("unterminated '{' alternative")

    return "".join(out)


def compile_glob(pattern: str) -> re.Pattern[str]:
    """
    Compile a glob pattern into an anchored regular expression.

    Raises:
        ValueError: If the pattern is malformed.
    """
    try:
        return re.compile(rf"\A(?:{translate_glob(pattern)})\Z", re.DOTALL)
    except re.error as e:
        raise ValueError(str(e)) from e


def matches_pattern(path: str | Path, pattern: str) -> bool:
    """
    Check if a /-separated relative path matches a glob pattern.

    Args:
        path: Path to check.
        pattern: Glob pattern.

    Returns:
        True if path matches pattern.
    """
    path_str = Path(path).as_posix() if isinstance(path, Path) else path
    return compile_glob(pattern).match(path_str) is not None


def matches_any_pattern(path: str | Path, patterns: list[str]) -> bool:
    """
    Check if path matches any of the given patterns.

    Args:
        path: Path to check.
        patterns: List of glob patterns.

    Returns:
        True if path matches any pattern.
    """
    return any(matches_pattern(path, p) for p in patterns)
