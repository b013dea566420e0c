# vendorsync Errors
# Exception hierarchy shared by the sync engine and its collaborators

from pathlib import Path
from typing import Optional


class VendorSyncError(Exception):
    """Base class for all vendorsync errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(VendorSyncError):
    """Invalid configuration detected before touching the filesystem."""


class DirectoryIOError(VendorSyncError):
    """
    Filesystem failure while assembling or committing a directory.

    Always carries the path involved.
    """

    def __init__(self, message: str, path: str | Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        text = f"{message} '{path}'"
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text)


class SourceError(VendorSyncError):
    """Failure reported by a source syncer, wrapped with the content path."""

    def __init__(self, content_path: str, kind: str, cause: BaseException):
        self.content_path = content_path
        self.kind = kind
        self.cause = cause
        super().__init__(f"Syncing directory '{content_path}' with {kind} contents: {cause}")
