"""Backend actor implementations."""

from .actor import BackendRequestError, HttpActorFactory, HttpBackendActor

__all__ = ["BackendRequestError", "HttpActorFactory", "HttpBackendActor"]
