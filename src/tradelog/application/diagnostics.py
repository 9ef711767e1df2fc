"""Backend diagnostics report, shown alongside connection errors."""

import json
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Literal, Mapping, Optional
from urllib.parse import urlsplit

DeploymentType = Literal["local", "ic-production", "caffeine-production", "unknown"]

PLACEHOLDER_BACKEND_ID = "__BACKEND_CANISTER_ID__"
_IC_DOMAINS = (".ic0.app", ".icp0.io")
_CAFFEINE_DOMAINS = ("caffeine.xyz", "caffeine.ai")


@dataclass(frozen=True)
class BackendDiagnostics:
    canister_id: str
    canister_id_source: str
    host: str
    origin: str
    timestamp: str
    deployment_type: DeploymentType
    is_possibly_misconfigured: bool


def _resolve_backend_id(hostname: str, env: Mapping[str, str]) -> tuple[str, str, bool]:
    """Return (id, source, is_placeholder)."""
    configured = env.get("TRADELOG_BACKEND_CANISTER_ID")
    if configured and configured != PLACEHOLDER_BACKEND_ID:
        return configured, "TRADELOG_BACKEND_CANISTER_ID", False

    fallback = env.get("CANISTER_ID")
    if fallback:
        return fallback, "CANISTER_ID", False

    if hostname.endswith(_IC_DOMAINS):
        first_label = hostname.split(".")[0]
        if first_label:
            return first_label, "hostname", False

    return "unknown", "not found", True


def deployment_type_for(hostname: str) -> DeploymentType:
    if hostname in ("localhost", "127.0.0.1"):
        return "local"
    if hostname.endswith(_IC_DOMAINS):
        return "ic-production"
    if any(domain in hostname for domain in _CAFFEINE_DOMAINS):
        return "caffeine-production"
    return "unknown"


def get_backend_diagnostics(
    backend_url: str,
    environ: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> BackendDiagnostics:
    """
    Collect where the client thinks the backend lives.

    Args:
        backend_url: Configured backend base URL
        environ: Environment mapping (defaults to os.environ)
        now: Report time (defaults to the current UTC time)

    Returns:
        The diagnostics report
    """
    env = os.environ if environ is None else environ
    parts = urlsplit(backend_url)
    hostname = parts.hostname or ""
    backend_id, source, is_placeholder = _resolve_backend_id(hostname, env)
    deployment_type = deployment_type_for(hostname)
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    return BackendDiagnostics(
        canister_id=backend_id,
        canister_id_source=source,
        host=parts.netloc,
        origin=f"{parts.scheme}://{parts.netloc}" if parts.scheme else parts.netloc,
        timestamp=timestamp,
        deployment_type=deployment_type,
        is_possibly_misconfigured=is_placeholder and deployment_type in ("caffeine-production", "ic-production"),
    )


def format_diagnostics(diagnostics: BackendDiagnostics) -> str:
    return json.dumps(asdict(diagnostics), indent=2)
