"""Typer CLI root application with serve command."""

import typer

from civic_snapshot.core.config import get_settings
from civic_snapshot.core.logging import setup_logging

app = typer.Typer(name="civic-snapshot", help="Civic data for US ZIP codes")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "civic_snapshot.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommands."""
    from civic_snapshot.cli.snapshot_cmd import jurisdiction, snapshot

    app.command("snapshot")(snapshot)
    app.command("jurisdiction")(jurisdiction)


_register_subcommands()
