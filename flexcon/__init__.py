"""flexcon - interactive console for SmartSDR-style radios."""

__version__ = "0.1.0"
