"""CLI entry point for berg-relay."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from core.router import RouteMapping
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
        routes = RouteMapping.from_config(config)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg == "--routes":
            for entry in routes:
                console.print(f"GET {entry.local_path} [dim]->[/dim] {entry.upstream_url}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        _print_help()
        sys.exit(2)

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Relay started",
        port=config.proxy.port,
        upstream=config.upstream.base_url,
        routes=len(routes),
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Relay stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Berg Relay[/bold cyan]

Relays a fixed set of GET endpoints to a berg CTF server, adding CORS headers.

[bold]Usage:[/bold]
    berg-relay              Start with live dashboard
    berg-relay --routes     Show the route table
    berg-relay --config     Show config location
    berg-relay --help       Show this help

[bold]Environment:[/bold]
    BERG_RELAY_PORT                 Listen port (default 3000, PORT also works)
    BERG_RELAY_HOST                 Listen address (default 127.0.0.1)
    BERG_RELAY_UPSTREAM_BASE        Upstream base URL
    BERG_RELAY_REQUEST_TIMEOUT_MS   Upstream timeout in milliseconds (default 10000)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
