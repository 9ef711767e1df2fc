"""Tests for user-facing error messages."""

import pytest

from tradelog.application.safe_error_message import safe_error_message


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Error: File must be a PDF", "Payment proof must be a PDF file"),
        ("You already have a pending payment", "You already have a pending payment. Please wait for admin approval before submitting a new one."),
        ("Invalid password", "Invalid admin password. Please try again."),
        ("Unauthorized: Only users can add trades", "You do not have permission to perform this action"),
        (
            "Unauthorized: requires admin",
            "Admin access required for this action. Please unlock admin access or contact a permanent administrator.",
        ),
        ("Subscription required: Pro", "This feature requires a Pro or Premium subscription"),
        ("Subscription required", "Active subscription required to access this feature"),
        ("No profile found for caller", "Please create a profile first"),
        ("Actor not available", "Backend connection not available. Please refresh the page."),
        ("Failed to fetch", "Network error. Please check your connection and try again."),
    ],
)
def test_known_messages(raw, expected):
    assert safe_error_message(RuntimeError(raw)) == expected


def test_specific_admin_rules_win_over_generic_authorization():
    assert safe_error_message("Only admins can reject payments") == "Admin access required to reject payments"


def test_unknown_messages_pass_through():
    assert safe_error_message(RuntimeError("Trade date is in the future")) == "Trade date is in the future"


def test_empty_errors():
    assert safe_error_message(None) == "An unknown error occurred"
    assert safe_error_message("") == "An unknown error occurred"
