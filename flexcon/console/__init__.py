"""The interactive console: relays, command loop, shutdown and startup wiring."""
