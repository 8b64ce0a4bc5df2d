"""
Main GraphQL schema definition for the GitHub API subset
"""

from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema

from ..config import settings
from ..engine import HandlerRegistry, ResolutionEngine, SchemaError, TypeRegistry
from ..engine.introspection import print_sdl
from ..logging import get_logger
from .queries.root import query_type
from .resolvers.owner import RepositoryOwnerHandler
from .resolvers.repository import RepositoryHandler
from .resolvers.resource import ResourceHandler
from .resolvers.topic import TopicHandler
from .types.node import node_interface, uniform_resource_locatable_interface
from .types.owner import organization_type, repository_owner_interface, user_type
from .types.repository import repository_type
from .types.topic import topic_type

logger = get_logger(__name__)


def build_registry() -> TypeRegistry:
    """Register every GitHub type plus the query root and close the registry."""
    registry = TypeRegistry()
    for descriptor in (
        node_interface,
        uniform_resource_locatable_interface,
        repository_owner_interface,
        topic_type,
        user_type,
        organization_type,
        repository_type,
        query_type,
    ):
        registry.register_type(descriptor)
    return registry.close()


def build_handlers() -> HandlerRegistry:
    """Bind the default GitHub-backed handler to each root field."""
    handlers = HandlerRegistry()
    handlers.register("topic", TopicHandler())
    handlers.register("repositoryOwner", RepositoryOwnerHandler())
    handlers.register("repository", RepositoryHandler())
    handlers.register("resource", ResourceHandler())
    return handlers


def create_engine(handlers: HandlerRegistry | None = None) -> ResolutionEngine:
    """Create the resolution engine for the GitHub schema.

    Args:
        handlers: Root field handlers; defaults to the GitHub-backed ones.
            Tests inject fakes here.
    """
    return ResolutionEngine(
        build_registry(),
        handlers if handlers is not None else build_handlers(),
        max_depth=settings.max_query_depth,
    )


def validate_schema(engine: ResolutionEngine) -> None:
    """Validate the schema at startup.

    Runs graphql-core's schema validation and an introspection query over the
    mirrored schema so a broken type graph fails the process before it serves.

    Raises:
        SchemaError: If the schema is invalid
    """
    try:
        graphql_schema = engine.graphql_schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise SchemaError(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise SchemaError(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful", types=len(engine.registry))

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def export_sdl() -> str:
    """Print the GitHub schema as SDL."""
    return print_sdl(build_registry())
