"""Core building blocks: errors, channels, logging and shared helpers."""
