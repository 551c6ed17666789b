"""Main entry point for the reviewclient application.

Defines the Typer commands (prewarm, list, submit). create_dependencies is
the composition root: it reads configuration once and builds the client,
display and CommandHandler for each invocation.
"""

import asyncio
import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

import httpx
import typer

# --- Setup Logging Early ---
# Use basic config until setup_logging is called with the configured settings
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Core Layer ---
from reviewclient.core.client import ReviewClient
from reviewclient.core.command_handler import CommandHandler
from reviewclient.domain.models.review import SubmissionPayload

# --- Infrastructure Layer ---
# Config
from reviewclient.infrastructure.config.settings import (
    get_backoff_policy,
    get_config,
    get_endpoints,
    get_prewarm_delay_ms,
    get_prewarm_timeout_ms,
    get_request_timeout_ms,
    get_site_host,
    load_configuration,
)
# UI
from reviewclient.infrastructure.cli.display import ConsoleDisplay
# Monitoring
from reviewclient.infrastructure.monitoring.logger_setup import level_from_name, setup_logging

# --- Dependency Injection Container (Manual) ---

def create_dependencies(host: Optional[str] = None, http_client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    This acts as the Composition Root: it is the only place that reads
    configuration. The client receives plain, immutable values.
    """
    # 1. Load Configuration First
    load_configuration()
    setup_logging(
        log_level=level_from_name(get_config('logging.level', 'INFO')),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        log_file=get_config('logging.file'),
    )
    logger.debug("Configuration and logging initialized.")

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()

    # 2. Build the client from configuration
    dependencies['client'] = ReviewClient(
        host or get_site_host(),
        endpoints=get_endpoints(),
        policy=get_backoff_policy(),
        deadline_ms=get_request_timeout_ms(),
        prewarm_delay_ms=get_prewarm_delay_ms(),
        prewarm_deadline_ms=get_prewarm_timeout_ms(),
        http_client=http_client,
    )

    # 3. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        client=dependencies['client'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies

# --- Typer App Definition ---
app = typer.Typer(
    name="reviewclient",
    help="Resilient client for the reviews backend: prewarm it, list reviews, submit a review.",
    add_completion=False,
)

# --- Helper for Running Async Commands ---
def run_async(ctx: typer.Context, command: Callable[[CommandHandler], Awaitable[bool]]) -> None:
    """Builds the dependencies, runs one handler coroutine and exits non-zero on failure."""
    host = (ctx.obj or {}).get('host')
    try:
        dependencies = create_dependencies(host)
    except ValueError as e:
        # Invalid retry settings (e.g., max_attempts < 1)
        logger.error(f"Invalid configuration: {e}")
        ConsoleDisplay().display_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=2)

    handler: CommandHandler = dependencies['command_handler']

    async def _run() -> bool:
        try:
            return await command(handler)
        finally:
            await handler.close()

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)

# --- CLI Commands ---

@app.command()
def prewarm(ctx: typer.Context):
    """Wake the backend up and wait for its health check."""
    run_async(ctx, lambda handler: handler.handle_prewarm())

@app.command(name="list")
def list_command(ctx: typer.Context):
    """List approved reviews."""
    run_async(ctx, lambda handler: handler.handle_list())

@app.command()
def submit(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", "-n", help="Reviewer name.")],
    city: Annotated[str, typer.Option("--city", "-c", help="Reviewer city.")],
    message: Annotated[str, typer.Option("--message", "-m", help="Review text.")],
    email: Annotated[str, typer.Option("--email", "-e", help="Contact e-mail (not published).")],
    rating: Annotated[int, typer.Option("--rating", "-r", min=0, max=5, help="Rating from 0 to 5.")] = 5,
    website: Annotated[str, typer.Option("--website", hidden=True)] = "",
):
    """Submit a new review."""
    payload = SubmissionPayload(
        name=name,
        city=city,
        message=message,
        email=email,
        rating=rating,
        website=website,
    )
    run_async(ctx, lambda handler: handler.handle_submit(payload))

@app.callback()
def main_callback(
    ctx: typer.Context,
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-H", help="Host the site runs on; loopback hosts use the local backend.")
    ] = None,
):
    """Global options shared by all commands."""
    ctx.obj = {'host': host}

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
