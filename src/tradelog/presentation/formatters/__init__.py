"""
Reusable formatter utilities for terminal presentation.
"""

from .status import (
    format_classification_text,
    format_connection_header_text,
    format_status_line_markup,
    get_status_icon,
    get_status_text,
)

__all__ = [
    "format_classification_text",
    "format_connection_header_text",
    "format_status_line_markup",
    "get_status_icon",
    "get_status_text",
]
