"""
Repository resolvers for GraphQL API
"""

from typing import Any

from ...engine import RootFieldHandler
from ...github.base import Record
from ...github.client import topic_record
from ..context import RequestContext


class RepositoryHandler(RootFieldHandler):
    """Look up a repository by owner login and name."""

    async def resolve(self, arguments: dict[str, Any], context: RequestContext) -> Record | None:
        return await context.loaders.repository_loader.load(
            (arguments["owner"], arguments["name"])
        )


def resolve_repository_topics(repository: Record, context: RequestContext) -> list[Record]:
    """Topics applied to a repository, as stubs completed lazily on demand."""
    _ = context  # Unused but part of the resolver interface

    if repository.get("repositoryTopics") is not None:
        return list(repository["repositoryTopics"])
    return [topic_record(name) for name in repository.get("topicNames") or []]
