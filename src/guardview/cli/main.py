"""guardview CLI - live terminal dashboard for AdGuard Home."""

import asyncio
import logging
import sys
from pathlib import Path

import httpx
import typer

from guardview import __version__
from guardview.client import AdGuardClient, create_http_client
from guardview.config import DashboardConfig
from guardview.exceptions import ConfigError, TerminalSetupError
from guardview.tui.channel import FacetChannel
from guardview.tui.controller import Dashboard
from guardview.tui.poller import FacetPoller
from guardview.tui.shutdown import ShutdownSignal

app = typer.Typer(
    name="guardview",
    help="Live terminal dashboard for AdGuard Home",
    no_args_is_help=True,
)


def configure_logging(log_file: Path | None, verbose: bool = False) -> None:
    """
    Send package logs to log_file, or nowhere.

    The dashboard owns the terminal, so logs are never written to stderr.
    """
    package_logger = logging.getLogger("guardview")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger.addHandler(handler)


async def run_dashboard(config: DashboardConfig) -> None:
    """
    Fetch the filter list once, then run producers and the dashboard.

    Raises:
        TerminalSetupError: If the terminal could not be acquired
        httpx.HTTPError: If the initial filter list request fails
    """
    async with create_http_client(config) as http:
        client = AdGuardClient(http=http)
        filters = await client.get_filtering_status()

        shutdown = ShutdownSignal()
        query_rx: FacetChannel = FacetChannel("query_log")
        stats_rx: FacetChannel = FacetChannel("statistics")
        status_rx: FacetChannel = FacetChannel("status")

        pollers = [
            FacetPoller(
                "query_log",
                lambda: client.get_query_log(config.query_limit),
                query_rx,
                shutdown,
                config.update_interval,
            ),
            FacetPoller("statistics", client.get_stats, stats_rx, shutdown, config.update_interval),
            FacetPoller("status", client.get_status, status_rx, shutdown, config.update_interval),
        ]
        dashboard = Dashboard(
            query_rx,
            stats_rx,
            status_rx,
            filters,
            shutdown,
            input_fd=sys.stdin.fileno() if sys.stdin.isatty() else None,
            min_frame_interval=config.min_frame_interval,
        )

        async with asyncio.TaskGroup() as tg:
            for poller in pollers:
                tg.create_task(poller.run())
            tg.create_task(dashboard.run())


@app.command("run")
def run(
    host: str = typer.Option(
        "127.0.0.1", "--host", envvar="ADGUARD_IP", help="AdGuard Home address"
    ),
    port: int = typer.Option(80, "--port", "-p", envvar="ADGUARD_PORT", help="Web interface port"),
    protocol: str = typer.Option(
        "http", "--protocol", envvar="ADGUARD_PROTOCOL", help="http or https"
    ),
    username: str = typer.Option(
        "", "--username", "-u", envvar="ADGUARD_USERNAME", help="Web interface user"
    ),
    password: str = typer.Option(
        "", "--password", envvar="ADGUARD_PASSWORD", help="Web interface password"
    ),
    interval: float = typer.Option(
        2.0, "--interval", "-i", envvar="ADGUARD_UPDATE_INTERVAL", help="Poll interval in seconds"
    ),
    query_limit: int = typer.Option(100, "--queries", help="Query log records per poll"),
    min_frame_interval: float = typer.Option(
        0.1, "--min-frame-interval", help="Minimum seconds between redraws"
    ),
    log_file: Path = typer.Option(
        None, "--log-file", envvar="GUARDVIEW_LOG_FILE", help="Write logs to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Run the dashboard.

    Press q or Ctrl+C to quit.

    Environment variables:
        ADGUARD_IP, ADGUARD_PORT, ADGUARD_PROTOCOL: Server address
        ADGUARD_USERNAME, ADGUARD_PASSWORD: Credentials
        ADGUARD_UPDATE_INTERVAL: Poll interval in seconds
        GUARDVIEW_LOG_FILE: Log destination
    """
    config = DashboardConfig(
        host=host,
        port=port,
        protocol=protocol,
        username=username,
        password=password,
        update_interval=interval,
        query_limit=query_limit,
        min_frame_interval=min_frame_interval,
        log_file=log_file,
    )
    try:
        config.validate()
    except ConfigError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)

    configure_logging(config.log_file, verbose)

    try:
        asyncio.run(run_dashboard(config))
    except (httpx.HTTPError, ValueError) as e:
        # Raised by the filter list fetch, before any task starts
        print(f"Error: could not load filter list from {config.base_url}: {e}")
        raise typer.Exit(1)
    except ExceptionGroup as eg:
        setup_errors, _ = eg.split(TerminalSetupError)
        if setup_errors is None:
            raise
        print(f"Error: {setup_errors.exceptions[0]}")
        raise typer.Exit(1)


@app.command("version")
def version() -> None:
    """Print the version."""
    print(f"guardview {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
