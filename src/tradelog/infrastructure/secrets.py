"""Secret parameter lookup.

Secrets such as the admin token are passed out of band, either in the URL the
app was opened with (query string or fragment) or in the environment.
"""

import os
from typing import Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from tradelog.utils import ENV_PREFIX


def _env_name(name: str) -> str:
    snake = "".join(f"_{c}" if c.isupper() else c for c in name).upper().lstrip("_")
    return f"{ENV_PREFIX}{snake}"

def get_url_parameter(url: str, name: str) -> Optional[str]:
    """Read ``name`` from the query string or, failing that, the fragment of ``url``."""
    parts = urlsplit(url)
    for raw in (parts.query, parts.fragment):
        values = parse_qs(raw).get(name)
        if values and values[0]:
            return values[0]
    return None

def get_secret_parameter(
    name: str,
    url: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Look up a secret parameter.

    The URL wins over the environment. ``caffeineAdminToken`` maps to the
    ``TRADELOG_CAFFEINE_ADMIN_TOKEN`` environment variable.

    Args:
        name: Parameter name as it appears in the URL
        url: Launch URL to search, if any
        environ: Environment mapping (defaults to os.environ)

    Returns:
        The secret value, or None when absent or empty
    """
    if url:
        value = get_url_parameter(url, name)
        if value:
            return value

    env = os.environ if environ is None else environ
    return env.get(_env_name(name)) or None
