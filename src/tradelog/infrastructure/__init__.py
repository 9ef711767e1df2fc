"""Infrastructure layer - external system implementations.

This layer contains implementations for external systems:
- Backend actor over HTTP and the connection manager
- Query cache
- Identity store and secret parameter lookup

The infrastructure layer implements domain protocols and has no dependencies
on the application or presentation layers.
"""
