"""CLI entry point for worker-bridge."""

import asyncio
import sys
from datetime import datetime

import httpx
from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError, UpstreamError
from core.protocols import NullRequestLogger
from services.worker import WorkerClient
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            sys.exit(0 if check_worker(config) else 1)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Worker:[/bold] {config.worker.base_url}")
            key_state = "set" if config.worker.internal_api_key else "not set"
            console.print(f"[bold]Internal API key:[/bold] {key_state}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    if not config.worker.internal_api_key:
        console.print(
            "[yellow]Warning:[/yellow] INTERNAL_API_KEY not set, "
            "system calls to the worker will be unauthenticated"
        )

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host="127.0.0.1",
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Worker bridge started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Worker bridge stopped", duration=str(duration))
        dashboard.stop()


def check_worker(config: Config) -> bool:
    """Fetch the onboarding checklist to confirm the worker is reachable."""
    try:
        checklist = asyncio.run(_fetch_checklist(config))
    except UpstreamError as e:
        console.print(f"[red]Worker check failed:[/red] {e}")
        return False
    console.print(f"[green]Worker reachable[/green] at {config.worker.base_url}")
    console.print(checklist)
    return True


async def _fetch_checklist(config: Config):
    async with httpx.AsyncClient(timeout=config.worker.timeout) as client:
        worker = WorkerClient(client, config.worker, NullRequestLogger())
        return await worker.get_checklist(tenant_id=config.tenancy.default_tenant_id)


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Worker Bridge[/bold cyan]

Forwards app server requests to the worker service (email, users, API keys).

[bold]Usage:[/bold]
    worker-bridge              Start with live dashboard
    worker-bridge --check      Check the worker is reachable
    worker-bridge --config     Show config location and worker URL
    worker-bridge --help       Show this help

[bold]Environment:[/bold]
    WORKER_URL          Worker base URL
    INTERNAL_API_KEY    Key used for calls made without a user request
    DEFAULT_TENANT_ID   Tenant used when a request carries none
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
