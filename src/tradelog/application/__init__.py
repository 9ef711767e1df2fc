"""Application layer - configuration, wiring and user-facing error handling."""
