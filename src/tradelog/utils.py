"""
Utility functions for tradelog.
"""

import math
import os

# Prefix of every environment variable read by tradelog
ENV_PREFIX = "TRADELOG_"

def get_project_root() -> str:
    """
    Get the project root directory (parent of src/tradelog).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def whole_seconds(seconds: float) -> int:
    """Round a remaining duration up to whole seconds for display (never negative)."""
    if seconds <= 0:
        return 0
    # Float noise such as 2.0000000001 must still read as 2
    return math.ceil(round(seconds, 6))
