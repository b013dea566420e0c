"""vendorsync - declarative vendoring of third-party content.

Assembles destination directories from git repositories, HTTP downloads,
OCI images, GitHub releases, Helm charts and local directories, and records
what was fetched in a lock file.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "DirectorySync",
    "StagingArea",
    "FileFilter",
    "LockConfig",
    "VendorSyncConfig",
    "VendorSyncError",
    "ConfigError",
    "DirectoryIOError",
    "SourceError",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "DirectorySync", "StagingArea", "FileFilter", "LockConfig"):
        from vendorsync import sync

        return getattr(sync, name)
    if name == "VendorSyncConfig":
        from vendorsync.config.schema import VendorSyncConfig

        return VendorSyncConfig
    if name in ("VendorSyncError", "ConfigError", "DirectoryIOError", "SourceError"):
        from vendorsync import errors

        return getattr(errors, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
