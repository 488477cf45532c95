"""Line output: rendered tokens to styled Rich text."""

from rich.console import Console
from rich.text import Text

from flexcon.console.render import Line
from flexcon.display.theme import Theme


class LinePrinter:
    """Writes rendered lines to the shared output.

    Each call prints exactly one line with a single Console.print, so lines
    from concurrent relays never interleave mid-line.
    """

    def __init__(self, console: Console, theme: Theme) -> None:
        self.console = console
        self.theme = theme

    def to_text(self, line: Line) -> Text:
        text = Text()
        for token in line.tokens:
            style = self.theme.style_for(token)
            text.append(token.text, style=style or None)
        return text

    def print_line(self, line: Line) -> None:
        """Print a rendered line (scrolls normally)."""
        self.console.print(self.to_text(line), soft_wrap=True)

    def print_notice(self, message: str) -> None:
        """Print an unstructured status notice, e.g. the exit message."""
        self.console.print(Text(message, style=self.theme.notice or ""), soft_wrap=True)
