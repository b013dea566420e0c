# vendorsync Sync Module
# Staging, filtering, lock records and the directory sync orchestrator

from vendorsync.sync.directory import DirectorySync, NullProgress, ProgressSink
from vendorsync.sync.dispatch import SYNCERS, SourceDispatcher
from vendorsync.sync.engine import SyncEngine
from vendorsync.sync.filters import DEFAULT_LEGAL_PATHS, FileFilter
from vendorsync.sync.lock import (
    LOCK_API_VERSION,
    LockBuilder,
    LockConfig,
    LockDirectory,
    LockEntry,
    load_lock_file,
    pin_content,
    pin_directory,
    save_lock_file,
)
from vendorsync.sync.staging import StagingArea, staging_root_for

__all__ = [
    # Staging
    "StagingArea",
    "staging_root_for",
    # Filters
    "FileFilter",
    "DEFAULT_LEGAL_PATHS",
    # Dispatch
    "SourceDispatcher",
    "SYNCERS",
    # Lock
    "LOCK_API_VERSION",
    "LockEntry",
    "LockDirectory",
    "LockConfig",
    "LockBuilder",
    "pin_content",
    "pin_directory",
    "load_lock_file",
    "save_lock_file",
    # Orchestration
    "DirectorySync",
    "ProgressSink",
    "NullProgress",
    "SyncEngine",
]
