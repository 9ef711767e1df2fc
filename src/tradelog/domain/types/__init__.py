"""Domain types shared across layers."""

from .connection import ConnectionSnapshot, ConnectionStatus

__all__ = ["ConnectionStatus", "ConnectionSnapshot"]
