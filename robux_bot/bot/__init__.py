"""Command handling: option parsing, routing, formatting and the Telegram adapter."""
