"""Telegram bot that prices Robux in GBP and USD and converts between the two."""
