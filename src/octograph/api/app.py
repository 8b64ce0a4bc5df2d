"""
Main FastAPI application for the Octograph GraphQL server
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from .. import __version__
from ..config import settings
from ..engine import HandlerRegistry
from ..github import GitHubClient, GitHubDataSource, create_http_client
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Octograph API...")
    http_client = None
    if app.state.data_source is None:
        http_client = create_http_client(timeout=settings.github_timeout)
        app.state.data_source = GitHubClient(
            http_client,
            base_url=settings.github_api_url,
            token=settings.github_token,
            user_agent=settings.user_agent,
        )
        logger.info(
            "GitHub data source initialized",
            base_url=settings.github_api_url,
            authenticated=settings.github_token is not None,
        )

    yield

    # Shutdown
    logger.info("Shutting down Octograph API...")
    if http_client is not None:
        await http_client.aclose()
        app.state.data_source = None


def create_app(
    handlers: HandlerRegistry | None = None,
    data_source: GitHubDataSource | None = None,
    graphiql: bool | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        handlers: Root field handlers; defaults to the GitHub-backed ones.
        data_source: Pre-built data source. When omitted the lifespan opens a
            GitHub REST client and closes it on shutdown.
        graphiql: Serve the in-browser explorer on ``GET /``; defaults to
            ``settings.graphiql``.
    """

    app = FastAPI(
        title="Octograph API",
        description="GraphQL schema over a subset of the GitHub API",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.data_source = data_source
    app.state.graphiql = settings.graphiql if graphiql is None else graphiql

    # Add logging context middleware
    app.add_middleware(LoggingContextMiddleware)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.api_route("/graphql", methods=["GET", "POST"], include_in_schema=False)
    async def graphql_redirect():  # pyright: ignore [reportUnusedFunction]
        """Legacy GraphQL path; 307 keeps the method and body."""
        return RedirectResponse(url="/", status_code=307)

    try:
        from ..graphql.schema import create_engine, validate_schema
        from .endpoints import graphql

        engine = create_engine(handlers)

        # Validate schema at startup to catch a broken type graph early
        logger.info("Validating GraphQL schema...")
        validate_schema(engine)

        app.state.engine = engine
        app.include_router(graphql.router, tags=["GraphQL"])
        logger.info("GraphQL endpoint initialized successfully", endpoint="/")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        # Re-raise to fail fast - server should not start with broken GraphQL
        raise

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "octograph.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
