"""Click-based CLI for vendorsync - declarative vendoring of third-party content."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from vendorsync import __version__
from vendorsync.config import (
    get_config_path,
    get_lock_path,
    init_config,
    load_config,
    validate_config_file,
)
from vendorsync.errors import VendorSyncError
from vendorsync.output import create_console
from vendorsync.sources.base import SyncOpts
from vendorsync.sync import LockConfig, SyncEngine, load_lock_file, save_lock_file


def _format_validation_error(e: ValidationError) -> str:
    lines = ["Invalid configuration:"]
    for error in e.errors():
        loc = " -> ".join(str(l) for l in error["loc"])
        lines.append(f"  {loc}: {error['msg']}")
    return "\n".join(lines)


@click.group()
@click.version_option(version=__version__, prog_name="vendorsync")
def cli() -> None:
    """vendorsync - assemble vendored directories from declared sources.

    \b
    Sources: git, http, image, github_release, helm_chart, manual, directory
    Every directory is replaced atomically once all its contents are fetched.
    """
    pass


@cli.command()
@click.option(
    "--file",
    "-f",
    "config_file",
    type=click.Path(path_type=Path),
    help="Configuration file (default: ./vendorsync.yml or $VENDORSYNC_CONFIG)",
)
@click.option("--lock-file", type=click.Path(path_type=Path), help="Lock file (default: beside the configuration)")
@click.option(
    "--directory",
    "-d",
    "directories",
    multiple=True,
    help="Only sync this directory (repeatable)",
)
@click.option("--locked", is_flag=True, help="Fetch exactly what the lock file records")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def sync(
    config_file: Optional[Path],
    lock_file: Optional[Path],
    directories: tuple[str, ...],
    locked: bool,
    verbose: bool,
) -> None:
    """Sync configured directories and write the lock file.

    Contents of each directory are fetched in order into a staging area,
    filtered, and swapped into place only when all of them succeeded.
    """
    config_path = config_file or get_config_path()
    lock_path = lock_file or get_lock_path(config_path)
    con = create_console(verbose=verbose)

    try:
        config = load_config(config_path)
        con = create_console(verbose=verbose or config.output.verbose, colored=config.output.colored)

        previous: Optional[LockConfig] = None
        if locked or directories:
            try:
                previous = load_lock_file(lock_path)
            except FileNotFoundError:
                if locked:
                    raise

        token = os.environ.get(config.options.github_token_env) or None
        opts = SyncOpts.from_settings(config.options, github_api_token=token)

        engine = SyncEngine(config, progress=con)
        selected = [d.path for d in engine.select(list(directories))]
        result = engine.sync(
            directories=list(directories) or None,
            lock=previous if locked else None,
            opts=opts,
        )

        # Keep records of directories outside the selection
        if previous is not None and not locked:
            for record in result.directories:
                previous.merge(record)
            result = previous

        save_lock_file(result, lock_path)
    except FileNotFoundError as e:
        con.print_error(str(e))
        sys.exit(1)
    except ValidationError as e:
        con.print_error(_format_validation_error(e))
        sys.exit(1)
    except VendorSyncError as e:
        con.print_error(str(e))
        sys.exit(1)

    con.print_sync_summary(result, selected, str(lock_path))


@cli.group()
def config() -> None:
    """Configuration file commands."""
    pass


@config.command("init")
@click.option("--file", "-f", "config_file", type=click.Path(path_type=Path), help="Configuration file to create")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def config_init(config_file: Optional[Path], force: bool) -> None:
    """Create a starter configuration file."""
    con = create_console()
    path, created = init_config(config_file, force=force)

    if not created:
        con.print_warning(f"Configuration already exists: {path} (use --force to overwrite)")
        return

    con.print_success(f"Created configuration: {path}")


@config.command("validate")
@click.option("--file", "-f", "config_file", type=click.Path(path_type=Path), help="Configuration file to check")
def config_validate(config_file: Optional[Path]) -> None:
    """Validate the configuration without syncing anything."""
    con = create_console()
    path = config_file or get_config_path()
    is_valid, errors = validate_config_file(path)

    if not is_valid:
        con.print_error(f"Configuration is invalid: {path}")
        for error in errors:
            con.print(f"  [red]✗[/red] {error}", highlight=False)
        sys.exit(1)

    con.print_success(f"Configuration is valid: {path}")


@config.command("show")
@click.option("--file", "-f", "config_file", type=click.Path(path_type=Path), help="Configuration file to show")
def config_show(config_file: Optional[Path]) -> None:
    """Show configured directories and contents."""
    con = create_console()
    path = config_file or get_config_path()

    try:
        cfg = load_config(path)
    except FileNotFoundError as e:
        con.print_error(str(e))
        sys.exit(1)
    except ValidationError as e:
        con.print_error(_format_validation_error(e))
        sys.exit(1)
    except VendorSyncError as e:
        con.print_error(str(e))
        sys.exit(1)

    con.print_config_summary(str(path), len(cfg.directories))
    con.print_directories(cfg)


@cli.group()
def lock() -> None:
    """Lock file commands."""
    pass


@lock.command("show")
@click.option("--file", "-f", "config_file", type=click.Path(path_type=Path), help="Configuration file")
@click.option("--lock-file", type=click.Path(path_type=Path), help="Lock file (default: beside the configuration)")
def lock_show(config_file: Optional[Path], lock_file: Optional[Path]) -> None:
    """Show the resolved identity of every synced content."""
    con = create_console()
    path = lock_file or get_lock_path(config_file or get_config_path())

    try:
        records = load_lock_file(path)
    except FileNotFoundError as e:
        con.print_error(str(e))
        sys.exit(1)
    except VendorSyncError as e:
        con.print_error(str(e))
        sys.exit(1)

    con.print_lock(records)


if __name__ == "__main__":
    cli()
