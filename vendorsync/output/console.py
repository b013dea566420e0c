# vendorsync Console Output
# Rich-based console output for user-friendly display

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from vendorsync.config.schema import SourceKind, VendorSyncConfig
from vendorsync.sync.lock import LockConfig, LockDirectory


def format_resolved(resolved: dict[str, Any]) -> str:
    """Render a lock entry's resolved identity as key=value pairs."""
    parts = []
    for key, value in resolved.items():
        if isinstance(value, list):
            value = ",".join(str(v) for v in value)
        parts.append(f"{key}={value}")
    return " ".join(parts)


class Console:
    """
    Console output manager using Rich.

    Also serves as the progress sink of a sync run.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: RichConsole | None = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Optional Rich console to write to.
        """
        self.verbose = verbose
        self._console = console or RichConsole(force_terminal=colored, no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}", highlight=False)

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def content_started(self, directory_path: str, content_path: str, kind: SourceKind, description: str) -> None:
        """Announce a content entry before it is fetched."""
        self._console.print(
            f"[bold]{directory_path}[/bold] + {content_path} [dim]({description})[/dim]",
            highlight=False,
        )

    def print_directory_result(self, record: LockDirectory) -> None:
        """Print the outcome of one directory sync."""
        self._console.print(f"[green]✓[/green] [bold]{record.path}[/bold] - {len(record.contents)} contents synced")
        if self.verbose:
            for entry in record.contents:
                detail = format_resolved(entry.resolved)
                suffix = f" [dim]{detail}[/dim]" if detail else ""
                self._console.print(f"    {entry.path} ({entry.kind.value}){suffix}", highlight=False)

    def print_sync_summary(self, lock: LockConfig, synced: list[str], lock_path: str | None = None) -> None:
        """
        Print sync summary.

        Args:
            lock: Lock records after the run.
            synced: Paths of the directories synced in this run.
            lock_path: Where the lock file was written, if it was.
        """
        for path in synced:
            record = lock.get_directory(path)
            if record is not None:
                self.print_directory_result(record)

        contents = sum(len(d.contents) for d in lock.directories if d.path in synced)
        lines = [
            "[green]Sync completed[/green]",
            f"Directories: {len(synced)}",
            f"Contents: {contents}",
        ]
        if lock_path:
            lines.append(f"Lock file: {lock_path}")

        self._console.print()
        self._console.print(Panel("\n".join(lines), title="Summary", border_style="green"))

    def print_lock(self, lock: LockConfig) -> None:
        """Print all lock records as a table."""
        if not lock.directories:
            self._console.print("[dim]No lock records[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Directory")
        table.add_column("Contents")
        table.add_column("Kind")
        table.add_column("Resolved", style="dim")

        for directory in lock.directories:
            for entry in directory.contents:
                table.add_row(directory.path, entry.path, entry.kind.value, format_resolved(entry.resolved))

        self._console.print(table)

    def print_directories(self, config: VendorSyncConfig) -> None:
        """Print configured directories and their contents as a table."""
        if not config.directories:
            self._console.print("[dim]No directories configured[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Directory")
        table.add_column("Contents")
        table.add_column("Kind")
        table.add_column("Filters", style="dim")

        for directory in config.directories:
            for content in directory.contents:
                kinds = ", ".join(source.kind.value for source in content.populated_sources()) or "?"
                filters = []
                if content.include_paths:
                    filters.append(f"+{len(content.include_paths)}")
                if content.exclude_paths:
                    filters.append(f"-{len(content.exclude_paths)}")
                table.add_row(directory.path, content.path, kinds, " ".join(filters))

        self._console.print(table)

    def print_config_summary(self, config_path: str, directories_count: int) -> None:
        """Print configuration summary."""
        self._console.print(
            Panel(
                f"Config: {config_path}\n" f"Directories: {directories_count}",
                title="vendorsync Configuration",
                border_style="blue",
            )
        )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
