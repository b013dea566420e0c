# vendorsync Git Module
# Git operations for fetching repositories

from vendorsync.git.operations import (
    GitCheckout,
    GitError,
    add_remote,
    checkout,
    clone_ref,
    commit_title,
    fetch,
    has_commit,
    init_repo,
    rev_parse,
    tags_at,
)

__all__ = [
    "GitError",
    "GitCheckout",
    "init_repo",
    "add_remote",
    "fetch",
    "has_commit",
    "checkout",
    "rev_parse",
    "commit_title",
    "tags_at",
    "clone_ref",
]
