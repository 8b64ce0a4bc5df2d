#!/usr/bin/env python3
"""
Main CLI entry point for the Octograph server.
"""

import os
import sys

import click
import uvicorn

from octograph import __version__
from octograph.config import settings
from octograph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="octograph")
def cli() -> None:
    """Octograph CLI - serve the GitHub GraphQL schema or print it."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Host to bind to")
@click.option(
    "--port", default=settings.api_port, type=int, show_default=True, help="Port to bind to"
)
@click.option(
    "--reload", is_flag=True, default=settings.api_reload, help="Enable auto-reload for development"
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    show_default=True,
)
@click.option(
    "--graphiql/--no-graphiql",
    default=settings.graphiql,
    help="Serve the GraphiQL explorer on GET /",
)
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="Token for GitHub API calls (also read from GITHUB_TOKEN)",
)
def serve(
    host: str, port: int, reload: bool, log_level: str, graphiql: bool, github_token: str | None
) -> None:
    """Start the GraphQL server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info(
        "Starting Octograph server",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        graphiql=graphiql,
        authenticated=github_token is not None,
    )

    # Settings are read at import time, so export them before the app module loads
    os.environ["OCTOGRAPH_DEBUG"] = "true" if log_level == "debug" else "false"
    os.environ["OCTOGRAPH_LOG_LEVEL"] = log_level
    os.environ["OCTOGRAPH_GRAPHIQL"] = "true" if graphiql else "false"
    if github_token:
        os.environ["OCTOGRAPH_GITHUB_TOKEN"] = github_token

    try:
        if reload:
            uvicorn.run(
                "octograph.api.app:app",
                host=host,
                port=port,
                reload=True,
                log_level=log_level,
                access_log=True,
            )
        else:
            settings.debug = log_level == "debug"
            settings.log_level = log_level
            if github_token:
                settings.github_token = github_token

            from octograph.api.app import create_app

            app = create_app(graphiql=graphiql)
            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the SDL to this file instead of stdout",
)
def schema(output: str | None) -> None:
    """Print the schema in GraphQL SDL."""
    from octograph.engine import OctographError
    from octograph.graphql.schema import export_sdl

    try:
        sdl = export_sdl()
    except OctographError as e:
        click.echo(f"✗ Schema is invalid: {e}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(sdl)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(sdl + "\n")
    click.echo(f"✓ Schema written to {output}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
