"""
Formatting helpers for the backend connection status.
"""

from __future__ import annotations

from rich.markup import escape
from rich.text import Text

from tradelog.application.error_classification import ErrorClassification
from tradelog.domain.types import ConnectionSnapshot, ConnectionStatus


def get_status_icon(status: ConnectionStatus) -> str:
    """Return the emoji used for the given connection status."""
    status_icons = {
        ConnectionStatus.READY: "🟢",
        ConnectionStatus.IDLE: "⚪",
        ConnectionStatus.CONNECTING: "🟡",
        ConnectionStatus.ERROR: "🔴",
    }
    return status_icons.get(status, "⚪")


def get_status_text(status: ConnectionStatus) -> str:
    """Return the Rich markup representing the connection status."""
    status_texts = {
        ConnectionStatus.READY: "[green]Connected[/]",
        ConnectionStatus.IDLE: "[dim]Idle[/]",
        ConnectionStatus.CONNECTING: "[yellow]Connecting...[/]",
        ConnectionStatus.ERROR: "[red]Error[/]",
    }
    return status_texts.get(status, "[dim]Unknown[/]")


def format_status_line_markup(
    snapshot: ConnectionSnapshot,
    max_retries: int,
    classification: ErrorClassification | None = None,
) -> str:
    """
    Build the markup for the status line, including retry countdown or error details.
    """
    status_details: list[str] = []

    if snapshot.retry_count > 0 or snapshot.next_retry_in_seconds is not None:
        attempt = f"retry {snapshot.retry_count}/{max_retries}"
        if snapshot.next_retry_in_seconds is not None:
            status_details.append(f"[dim]{attempt}, next in {snapshot.next_retry_in_seconds}s[/]")
        else:
            status_details.append(f"[dim]{attempt}[/]")

    if snapshot.status == ConnectionStatus.ERROR and snapshot.last_error is not None:
        if classification is not None and not classification.show_raw_error:
            status_details.append(f"[red]{escape(classification.description)}[/]")
        else:
            status_details.append(f"[red]{escape(str(snapshot.last_error))}[/]")

    status_line = get_status_text(snapshot.status)
    if status_details:
        status_line += f" [dim]| {' | '.join(status_details)}[/]"
    return status_line


def format_connection_header_text(
    backend_name: str,
    snapshot: ConnectionSnapshot,
    max_retries: int,
    classification: ErrorClassification | None = None,
) -> Text:
    """Return the Rich Text header describing the backend connection."""
    status_line = format_status_line_markup(snapshot, max_retries, classification)
    status_icon = get_status_icon(snapshot.status)
    return Text.from_markup(f"[bold yellow]📡 {escape(backend_name)}[/] {status_icon} {status_line}")


def format_classification_text(classification: ErrorClassification) -> Text:
    """Return a two-line Rich Text block for a classified error."""
    lines = [f"[bold red]{escape(classification.title)}[/]", f"  {escape(classification.description)}"]
    if classification.show_raw_error and classification.raw_message:
        lines.append(f"  [dim]{escape(classification.raw_message)}[/]")
    if classification.should_retry:
        lines.append("  [dim]Retry to reconnect.[/]")
    return Text.from_markup("\n".join(lines))

