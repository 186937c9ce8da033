"""Slash command handlers."""
