import asyncio
import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from tradelog.application.config import ConnectionSettings, load_settings
from tradelog.application.connection import build_connection_manager
from tradelog.application.diagnostics import format_diagnostics, get_backend_diagnostics
from tradelog.application.error_classification import classify_backend_error
from tradelog.application.safe_error_message import safe_error_message
from tradelog.domain.events import ConnectionStatusChanged, EventBus, RetryCountdown
from tradelog.domain.types import ConnectionStatus
from tradelog.infrastructure.cache import QueryCache
from tradelog.infrastructure.identity import CallerIdentity, IdentityStore
from tradelog.logger import get_logger, setup_logger
from tradelog.presentation.formatters import (
    format_classification_text,
    format_connection_header_text,
    get_status_icon,
    get_status_text,
)

cli = typer.Typer(
    name="tradelog",
    help="Trading journal backend connection client",
    epilog="""
    Examples:
    $ tradelog connect --backend-url https://journal.example.com --principal alice
    """,
    add_completion=False,
)

console = Console()


async def run_connect(
    settings: ConnectionSettings,
    identity: Optional[CallerIdentity],
    launch_url: Optional[str],
) -> bool:
    """Connect once, following automatic retries until the state settles.

    Returns:
        True when the backend actor is ready
    """
    logger = get_logger("main")
    event_bus = EventBus()
    identity_store = IdentityStore(event_bus, identity)
    manager = build_connection_manager(
        settings,
        event_bus=event_bus,
        identity_provider=identity_store,
        query_cache=QueryCache(),
        launch_url=launch_url,
    )

    def on_status(event: ConnectionStatusChanged) -> None:
        console.print(f"{get_status_icon(event.status)} {get_status_text(event.status)}")
        if event.status == ConnectionStatus.ERROR and event.error_message:
            console.print(f"  [red]{escape(safe_error_message(event.error_message))}[/]")

    def on_countdown(event: RetryCountdown) -> None:
        if event.seconds_remaining > 0:
            console.print(
                f"[dim]retry {event.retry_count + 1}/{event.max_retries} in {event.seconds_remaining}s[/]"
            )

    event_bus.subscribe(ConnectionStatusChanged, on_status)
    event_bus.subscribe(RetryCountdown, on_countdown)

    try:
        await manager.start()
        snapshot = await manager.wait_until_settled()
    finally:
        await manager.dispose()

    classification = classify_backend_error(snapshot.last_error) if snapshot.has_error else None
    console.print(format_connection_header_text(settings.backend_url, snapshot, manager.max_auto_retries, classification))
    if classification is not None:
        console.print(format_classification_text(classification))

    logger.info(f"Connect finished with status {snapshot.status.value}")
    return snapshot.status == ConnectionStatus.READY


@cli.command()
def connect(
    backend_url: Optional[str] = typer.Option(None, "--backend-url", help="Backend base URL (overrides TRADELOG_BACKEND_URL)"),
    principal: Optional[str] = typer.Option(None, "--principal", help="Connect as this caller"),
    access_token: Optional[str] = typer.Option(None, "--access-token", envvar="TRADELOG_ACCESS_TOKEN", help="Bearer token for the caller"),
    launch_url: Optional[str] = typer.Option(None, "--launch-url", help="URL carrying secret parameters"),
    debug: bool = typer.Option(os.getenv("DEBUG", "false").lower() == "true", "--debug", help="Enable debug mode"),
):
    """Connect to the backend and report the resulting status."""
    setup_logger(log_level="DEBUG" if debug else "INFO")

    settings = load_settings()
    if backend_url:
        settings = settings.model_copy(update={"backend_url": backend_url})

    identity = CallerIdentity(principal=principal, access_token=access_token) if principal else None
    ready = asyncio.run(run_connect(settings, identity, launch_url))
    raise typer.Exit(code=0 if ready else 1)


@cli.command()
def diagnostics(
    backend_url: Optional[str] = typer.Option(None, "--backend-url", help="Backend base URL (overrides TRADELOG_BACKEND_URL)"),
):
    """Print where the client expects the backend to be."""
    settings = load_settings()
    url = backend_url or settings.backend_url
    console.print_json(format_diagnostics(get_backend_diagnostics(url)))


def run():
    """Entry point for the tradelog CLI."""
    cli()


if __name__ == "__main__":
    run()
