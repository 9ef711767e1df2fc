"""Presentation layer - terminal rendering of the connection state."""
