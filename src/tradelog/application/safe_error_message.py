"""Map raw backend rejections to messages that are safe to show users."""

from typing import Optional

# (needle, message) pairs, checked in order; first match wins
_EXACT_RULES: list[tuple[str, str]] = [
    # Payments
    ("File must be a PDF", "Payment proof must be a PDF file"),
    ("File size must be less than 8MB", "Payment proof file size must be less than 8MB"),
    (
        "already have a pending payment",
        "You already have a pending payment. Please wait for admin approval before submitting a new one.",
    ),
    ("No pending payment found", "No pending payment found for this user"),
    ("No existing subscription found", "User subscription record not found. Please create a profile first."),
    # Admin payment review
    ("Only admins can review and approve payments", "Admin access required to approve payments"),
    ("Only admins can reject payments", "Admin access required to reject payments"),
    ("Invalid password", "Invalid admin password. Please try again."),
    ("Password must be at least 8 characters", "Password must be at least 8 characters long"),
    # QR code
    ("Only admins can upload the payment QR code", "Admin access required to upload payment QR code"),
    ("Only admins can clear the payment QR code", "Admin access required to clear payment QR code"),
]

_TIER_MESSAGES: list[tuple[str, str]] = [
    ("Basic", "This feature requires a Basic, Pro, or Premium subscription"),
    ("Pro", "This feature requires a Pro or Premium subscription"),
    ("Premium", "This feature requires a Premium subscription"),
]

_TAIL_RULES: list[tuple[str, str]] = [
    # Profile
    ("Profile already exists", "A profile already exists for this account"),
    ("No profile found", "Please create a profile first"),
    # Trades and mistakes
    ("Invalid index", "The selected entry could not be found"),
    ("No trades found", "No trade entries found"),
    ("No mistakes found", "No mistake entries found"),
    # Connection
    ("Actor not available", "Backend connection not available. Please refresh the page."),
    ("network", "Network error. Please check your connection and try again."),
    ("fetch", "Network error. Please check your connection and try again."),
]


def safe_error_message(error: Optional[object]) -> str:
    """
    Turn a backend error into a user-facing message.

    Args:
        error: Exception or rejection value

    Returns:
        A friendly message; the raw text when no rule matches
    """
    if not error:
        return "An unknown error occurred"

    text = str(error)

    for needle, message in _EXACT_RULES:
        if needle in text:
            return message

    if "Unauthorized" in text or "Only admins" in text:
        if "admin" in text:
            return (
                "Admin access required for this action. "
                "Please unlock admin access or contact a permanent administrator."
            )
        return "You do not have permission to perform this action"

    if "Subscription required" in text:
        for tier, message in _TIER_MESSAGES:
            if tier in text:
                return message
        return "Active subscription required to access this feature"

    for needle, message in _TAIL_RULES:
        if needle in text:
            return message

    return text or "An error occurred. Please try again."
