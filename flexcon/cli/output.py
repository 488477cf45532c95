"""Messages from the CLI itself, as opposed to lines from the radio."""

from rich.markup import escape

from flexcon.display.console import get_console


def print_error(message: str) -> None:
    """Print a fatal startup problem, e.g. an unreachable radio.

    The message is shown literally; brackets in addresses or JSON errors are
    not treated as markup.
    """
    get_console().print(f"[bold red]Error:[/bold red] {escape(message)}", markup=True)


def print_status(message: str) -> None:
    get_console().print(escape(message), style="dim", markup=True)
