"""Connection settings.

Settings come from ``TRADELOG_*`` environment variables, optionally loaded
from a ``.env`` file, and are validated by pydantic.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from tradelog.logger import get_logger
from tradelog.utils import ENV_PREFIX

logger = get_logger("config")


class ConnectionSettings(BaseModel):
    """Configuration for the backend connection."""

    model_config = ConfigDict(frozen=True)

    backend_url: str = Field("http://127.0.0.1:4943", description="Base URL of the backend service")
    connection_timeout: float = Field(30.0, gt=0, description="Seconds allowed for create + probe + init")
    base_retry_delay: float = Field(3.0, ge=0, description="Delay before the first automatic retry")
    backoff_multiplier: float = Field(1.5, ge=1, description="Growth factor between automatic retries")
    max_retry_delay: float = Field(15.0, ge=0, description="Upper bound for the retry delay")
    max_auto_retries: int = Field(8, ge=0, description="Automatic retries before manual retry is required")
    countdown_interval: float = Field(1.0, gt=0, description="Seconds between countdown updates")
    admin_token_param: str = Field("caffeineAdminToken", description="Name of the admin secret parameter")
    request_timeout: float = Field(10.0, gt=0, description="Timeout for a single HTTP request")

def load_settings(environ: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> ConnectionSettings:
    """
    Build settings from the environment.

    Args:
        environ: Environment mapping (defaults to os.environ)
        dotenv: Load a ``.env`` file into os.environ first

    Returns:
        Validated settings

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    if dotenv and environ is None:
        load_dotenv()

    env = os.environ if environ is None else environ
    values = {}
    for name in ConnectionSettings.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw != "":
            values[name] = raw

    settings = ConnectionSettings(**values)
    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
