"""Domain layer - connection abstractions with zero external dependencies.

This layer contains:
- protocols: Interfaces for the backend actor, identity provider and query cache
- types: Shared domain types (ConnectionStatus, ConnectionSnapshot)
- events: Domain events and event bus
- exceptions: Connection failures and their structured kinds

The domain layer has NO dependencies on application, infrastructure, or presentation layers.
"""
