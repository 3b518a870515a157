"""Command line interface for the edge IP info service."""

from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from edge_ipinfo import __version__
from edge_ipinfo.config.settings import Settings, get_settings
from edge_ipinfo.core.logging import setup_logging
from edge_ipinfo.exceptions import ConfigurationError


console = Console()

app = typer.Typer(
    name="edge-ipinfo",
    help="Edge HTTP service reporting client IP, network metadata and headers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"edge-ipinfo {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Edge IP info service."""


def _load_settings(config: Path | None, **overrides: object) -> Settings:
    try:
        settings = get_settings(config_path=config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    server_overrides = {k: v for k, v in overrides.items() if v is not None}
    if not server_overrides:
        return settings
    server = settings.server.model_copy(update=server_overrides)
    return settings.model_copy(update={"server": server})


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool | None = typer.Option(
        None, "--reload/--no-reload", help="Auto-reload on code changes"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="TOML config file"
    ),
) -> None:
    """Run the HTTP server."""
    settings = _load_settings(
        config, host=host, port=port, reload=reload, log_level=log_level
    )
    setup_logging(
        json_logs=settings.server.json_logs,
        log_level_name=settings.server.log_level,
        log_file=settings.server.log_file,
    )

    if settings.server.reload:
        # The reloader re-imports the factory, which reads config itself.
        uvicorn.run(
            "edge_ipinfo.api.app:get_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            reload=True,
            log_config=None,
        )
        return

    from edge_ipinfo.api.app import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


@app.command("config")
def show_config(
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="TOML config file"
    ),
) -> None:
    """Show the effective configuration and resolved origin policy."""
    settings = _load_settings(config)
    policy = settings.cors.to_policy()

    table = Table(title="Edge IP Info Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("server.url", settings.server_url)
    table.add_row("server.log_level", settings.server.log_level)
    table.add_row("cors.origin_policy", type(policy.origin).__name__)
    table.add_row("cors.origins", str(policy.origin))
    table.add_row("cors.credentials", str(policy.allow_credentials).lower())
    table.add_row("cors.methods", policy.methods_value)
    table.add_row("cors.headers", policy.headers_value)
    table.add_row("cors.expose_headers", policy.expose_value or "-")
    table.add_row("cors.max_age", policy.max_age_value)
    table.add_row("metadata.provider", settings.metadata.provider)
    table.add_row("metadata.client_ip_header", settings.metadata.client_ip_header)

    console.print(table)


def main() -> None:
    app()
