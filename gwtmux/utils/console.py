"""User-facing output on stderr."""

from rich.console import Console
from rich.markup import escape

# stderr only: stdout stays free for shell integration
console = Console(stderr=True, soft_wrap=True)


def print_error(message) -> None:
    """Hard error, the command will exit non-zero."""
    console.print(f"[red]Error: {escape(str(message))}[/red]")


def print_warning(message) -> None:
    """Soft warning, the command keeps going."""
    console.print(f"[yellow]Warning: {escape(str(message))}[/yellow]")
