# vendorsync Git Operations
# Git command execution for fetching repositories at a ref

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class GitError(Exception):
    """Exception raised for git operation errors."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


@dataclass
class GitCheckout:
    """Resolved state of a checked out working tree."""

    sha: str
    commit_title: str = ""
    tags: list[str] = field(default_factory=list)


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command.

    Args:
        *args: Git command arguments.
        cwd: Working directory.
        check: Whether to raise on non-zero exit.
        capture_output: Whether to capture stdout/stderr.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=capture_output,
            text=True,
        )
        if check and result.returncode != 0:
            raise GitError(
                f"Git command failed: {' '.join(cmd)}",
                returncode=result.returncode,
                stderr=result.stderr or "",
            )
        return result
    except FileNotFoundError as e:
        raise GitError("git command not found", returncode=127) from e


def init_repo(path: Path) -> None:
    """
    Initialize an empty repository.

    Args:
        path: Directory to initialize (created if missing).

    Raises:
        GitError: If git fails.
    """
    path.mkdir(parents=True, exist_ok=True)
    _run_git("init", "--quiet", cwd=path)


def add_remote(path: Path, url: str, *, name: str = "origin") -> None:
    """Register a remote."""
    _run_git("remote", "add", name, url, cwd=path)


def fetch(
    path: Path,
    *,
    remote: str = "origin",
    depth: Optional[int] = None,
    ref: Optional[str] = None,
) -> None:
    """
    Fetch branches and tags from a remote.

    Args:
        path: Repository path.
        remote: Remote name.
        depth: Optional depth for shallow fetch.
        ref: Fetch only this ref or commit SHA instead of all branches and tags.
    """
    args = ["fetch", "--quiet"]
    if ref is None:
        args.append("--tags")
    args.append(remote)
    if ref is not None:
        args.append(ref)
    if depth:
        args.extend(["--depth", str(depth)])
    _run_git(*args, cwd=path)


def has_commit(path: Path, ref: str) -> bool:
    """Check whether a ref resolves to a commit in the local repository."""
    result = _run_git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", cwd=path, check=False)
    return result.returncode == 0


def checkout(path: Path, ref: str) -> None:
    """Check out a ref in detached mode."""
    _run_git("-c", "advice.detachedHead=false", "checkout", "--quiet", ref, cwd=path)


def rev_parse(path: Path, ref: str = "HEAD") -> str:
    """Resolve a ref to its commit SHA."""
    result = _run_git("rev-parse", ref, cwd=path)
    return result.stdout.strip()


def commit_title(path: Path, ref: str = "HEAD") -> str:
    """Get the first line of a commit message."""
    result = _run_git("log", "-1", "--format=%s", ref, cwd=path)
    return result.stdout.strip()


def tags_at(path: Path, ref: str = "HEAD") -> list[str]:
    """List tags pointing at a ref."""
    result = _run_git("tag", "--points-at", ref, cwd=path)
    return sorted(line.strip() for line in result.stdout.splitlines() if line.strip())


def clone_ref(url: str, ref: str, dest: Path, *, depth: Optional[int] = None) -> GitCheckout:
    """
    Fetch a repository into dest and check out a ref.

    Branches are addressed through the remote (origin/main), tags and
    commit SHAs directly.

    Args:
        url: Repository URL.
        ref: Ref to check out.
        dest: Working tree directory.
        depth: Optional depth for shallow fetch.

    Returns:
        GitCheckout describing the checked out commit.

    Raises:
        GitError: If any git command fails.
    """
    init_repo(dest)
    add_remote(dest, url)
    fetch(dest, depth=depth)
    if depth and not has_commit(dest, ref):
        # Shallow fetches only bring branch and tag tips
        fetch(dest, depth=depth, ref=ref)
    checkout(dest, ref)

    return GitCheckout(
        sha=rev_parse(dest),
        commit_title=commit_title(dest),
        tags=tags_at(dest),
    )
