"""Backend actor over HTTP.

The backend exposes its operations as JSON endpoints. ``requests`` is blocking,
so every call runs in a worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import requests

from tradelog.infrastructure.identity import CallerIdentity
from tradelog.logger import get_logger

logger = get_logger("backend.actor")


class BackendRequestError(Exception):
    """A backend call failed or was rejected.

    Attributes:
        status_code: HTTP status of a rejection, None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HttpBackendActor:
    """Backend client bound to an optional caller identity."""

    def __init__(
        self,
        base_url: str,
        identity: Optional[CallerIdentity] = None,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.identity = identity
        self._timeout = timeout
        self._session = session or requests.Session()

        if identity is not None:
            self._session.headers["X-Caller-Principal"] = identity.principal
            if identity.access_token:
                self._session.headers["Authorization"] = f"Bearer {identity.access_token}"

    async def health_check(self) -> str:
        """Liveness probe; returns the service's status text."""
        body = await self._request("GET", "/health")
        if isinstance(body, dict):
            return str(body.get("status", "ok"))
        return str(body)

    async def initialize_access_control_with_secret(self, token: str) -> None:
        await self._request("POST", "/access-control/initialize", {"secret": token})

    async def call(self, method: str, payload: Optional[dict[str, Any]] = None) -> Any:
        """
        Invoke a domain operation (trades, mistakes, profile, subscriptions, admin).

        Args:
            method: Operation name, e.g. "getCallerUserProfile"
            payload: JSON arguments

        Returns:
            Decoded JSON result
        """
        return await self._request("POST", f"/rpc/{method}", payload or {})

    def close(self) -> None:
        self._session.close()

    async def _request(self, verb: str, path: str, payload: Optional[dict[str, Any]] = None) -> Any:
        return await asyncio.to_thread(self._request_sync, verb, path, payload)

    def _request_sync(self, verb: str, path: str, payload: Optional[dict[str, Any]]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(verb, url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise BackendRequestError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            raise BackendRequestError(_rejection_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


def _rejection_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)


class HttpActorFactory:
    """Create ``HttpBackendActor`` instances for a backend URL."""

    def __init__(self, base_url: str, *, request_timeout: float = 10.0):
        self._base_url = base_url
        self._request_timeout = request_timeout

    async def create_actor(self, identity: Optional[CallerIdentity] = None) -> HttpBackendActor:
        logger.debug(f"Creating actor for {self._base_url} ({'authenticated' if identity else 'anonymous'})")
        return HttpBackendActor(self._base_url, identity, timeout=self._request_timeout)
