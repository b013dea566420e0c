# vendorsync Configuration Loader
# Load, save, and validate YAML configuration files

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from vendorsync.config.defaults import generate_default_config
from vendorsync.config.schema import VendorSyncConfig
from vendorsync.errors import ConfigError
from vendorsync.utils.paths import atomic_write

CONFIG_FILE_NAME = "vendorsync.yml"
LOCK_FILE_NAME = "vendorsync.lock.yml"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("VENDORSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / CONFIG_FILE_NAME


def get_lock_path(config_path: Optional[Path] = None) -> Path:
    """Get the lock file path that belongs to a configuration file."""
    if config_path is None:
        config_path = get_config_path()
    return config_path.parent / LOCK_FILE_NAME


def _read_yaml(config_path: Path) -> dict:
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")
    return data


def load_config(config_path: Optional[Path] = None) -> VendorSyncConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        VendorSyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If the file isn't a YAML mapping.
        ValidationError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\nRun 'vendorsync config init' to create one."
        )

    try:
        data = _read_yaml(config_path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    return VendorSyncConfig.model_validate(data)


def save_config(config: VendorSyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    # Use mode='json' to serialize Enums as their string values
    data = config.model_dump(exclude_none=True, mode="json")
    atomic_write(config_path, yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    return config_path


def init_config(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Write the default configuration.

    Args:
        config_path: Optional path to config file.
        force: Overwrite an existing file.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    atomic_write(config_path, generate_default_config())
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without syncing anything.

    Checks the schema first, then every directory's contents (paths,
    source kinds and filter patterns).

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    from vendorsync.sync.directory import DirectorySync

    if config_path is None:
        config_path = get_config_path()

    errors: list[str] = []

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        data = _read_yaml(config_path)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]
    except ConfigError as e:
        return False, [str(e)]

    if not data:
        return False, ["Configuration file is empty"]

    try:
        config = VendorSyncConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    if not config.directories:
        errors.append("No directories defined")

    seen: set[str] = set()
    for directory in config.directories:
        if directory.path in seen:
            errors.append(f"Directory '{directory.path}' is defined more than once")
        seen.add(directory.path)
        try:
            DirectorySync(directory).validate()
        except ConfigError as e:
            errors.append(str(e))

    return len(errors) == 0, errors
