# vendorsync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from vendorsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from vendorsync.config.loader import (
    CONFIG_FILE_NAME,
    LOCK_FILE_NAME,
    get_config_path,
    get_lock_path,
    init_config,
    load_config,
    save_config,
    validate_config_file,
)
from vendorsync.config.schema import (
    ContentConfig,
    DirectoryConfig,
    GithubReleaseSource,
    GitSource,
    HelmChartSource,
    HTTPSource,
    ImageSource,
    LocalDirectorySource,
    ManualSource,
    OutputConfig,
    SourceConfig,
    SourceKind,
    SyncSettings,
    VendorSyncConfig,
)

__all__ = [
    # Schema
    "VendorSyncConfig",
    "DirectoryConfig",
    "ContentConfig",
    "SourceKind",
    "SourceConfig",
    "GitSource",
    "HTTPSource",
    "ImageSource",
    "GithubReleaseSource",
    "HelmChartSource",
    "ManualSource",
    "LocalDirectorySource",
    "SyncSettings",
    "OutputConfig",
    # Loader
    "CONFIG_FILE_NAME",
    "LOCK_FILE_NAME",
    "load_config",
    "save_config",
    "init_config",
    "get_config_path",
    "get_lock_path",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
