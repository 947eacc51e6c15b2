
from __future__ import annotations

import logging
from pathlib import Path

import typer

from config import Settings
from dispatcher import create_app
from fastmcp_app import create_mcp


cli = typer.Typer(add_completion=False)


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind (HTTP transport)."),
    port: int = typer.Option(None, help="Port to bind (HTTP transport)."),
    base_dir: Path = typer.Option(None, help="Directory holding standards/ and context-template/."),
    transport: str = typer.Option("http", help="Transport: 'http' or 'stdio'."),
) -> None:
    """Start the MCP server (defaults to stateless HTTP on /mcp)."""

    settings = Settings.from_env()
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if base_dir is not None:
        settings.base_dir = base_dir.expanduser().absolute()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if transport == "stdio":
        create_mcp(settings).run()
    else:
        app = create_app(settings)
        import uvicorn
        logging.getLogger(__name__).info(
            "MCP Stateless Streamable HTTP Server listening on port %s", settings.port
        )
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


@cli.callback(invoke_without_command=True)
def _default(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        run(host=None, port=None, base_dir=None, transport="http")


if __name__ == "__main__":
    cli()
