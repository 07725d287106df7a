"""User-friendly rendering of authentication errors."""

from rich.console import Console
from rich.panel import Panel

from launcher_auth.auth.errors import AuthError


def format_auth_error(
    error: AuthError,
    console: Console,
    verbose: bool = False,
) -> None:
    """Display a classified authentication error as a panel."""
    content_lines = [f"[white]{error.description}[/white]"]

    # Show technical details in verbose mode
    if verbose:
        content_lines.append("")
        content_lines.append(f"[dim]Slot: {error.displayable.slot}[/dim]")
        if error.code is not None:
            content_lines.append(f"[dim]Code: {error.code.value}[/dim]")

    console.print()
    console.print(Panel(
        "\n".join(content_lines),
        title=f"[red bold]Error: {error.title}[/red bold]",
        border_style="red",
        padding=(1, 2),
    ))
    console.print()
