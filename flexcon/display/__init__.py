"""flexcon display system: theme, shared console and line printer."""

from flexcon.display.console import get_console, set_console
from flexcon.display.printer import LinePrinter
from flexcon.display.theme import DEFAULT_THEME, Theme, load_theme

__all__ = [
    "DEFAULT_THEME",
    "LinePrinter",
    "Theme",
    "get_console",
    "load_theme",
    "set_console",
]
