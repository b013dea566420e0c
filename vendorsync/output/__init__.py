# vendorsync Output Module
# Rich console output

from vendorsync.output.console import Console, create_console, format_resolved

__all__ = [
    "Console",
    "create_console",
    "format_resolved",
]
