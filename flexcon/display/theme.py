"""Theme definitions for the flexcon display system."""

from dataclasses import dataclass, fields, replace

from flexcon.console.render import Emphasis, Role, Token
from flexcon.core.errors import ConfigError


@dataclass(frozen=True)
class Theme:
    """Visual theme configuration.

    All styling in one place. Fields are Rich style strings, except prompt
    which is a prompt_toolkit style string.
    """

    tag: str = "bright_green"
    handle: str = "bright_blue"
    object: str = "bright_yellow"

    # Attributes: unchanged vs changed in this update
    key: str = "cyan"
    key_elevated: str = "bright_cyan"
    value: str = "white"
    value_elevated: str = "bright_white"

    # Command outcome
    success: str = "bright_green"
    alarm: str = "bright_red"

    text: str = ""
    notice: str = "dim"
    prompt: str = "ansibrightmagenta"

    def style_for(self, token: Token) -> str:
        """Resolve the Rich style for a token."""
        if token.emphasis is Emphasis.SUCCESS:
            return self.success
        if token.emphasis is Emphasis.ALARM:
            return self.alarm
        elevated = token.emphasis is Emphasis.ELEVATED
        if token.role is Role.KEY:
            return self.key_elevated if elevated else self.key
        if token.role is Role.VALUE:
            return self.value_elevated if elevated else self.value
        if token.role is Role.TAG:
            return self.tag
        if token.role in (Role.HANDLE, Role.SERIAL):
            return self.handle
        if token.role is Role.OBJECT:
            return self.object
        return self.text


DEFAULT_THEME = Theme()


def load_theme(overrides: dict[str, str] | None = None) -> Theme:
    """Build a theme with field overrides from config.

    Raises:
        ConfigError: If an override names a field Theme doesn't have.
    """
    if not overrides:
        return DEFAULT_THEME
    known = {f.name for f in fields(Theme)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown theme fields: {', '.join(unknown)}")
    return replace(DEFAULT_THEME, **overrides)
