"""
Repository owner resolvers for GraphQL API
"""

from typing import Any

from ...engine import RootFieldHandler
from ...github.base import Record
from ..context import RequestContext


class RepositoryOwnerHandler(RootFieldHandler):
    """Look up a user or organization by login."""

    async def resolve(self, arguments: dict[str, Any], context: RequestContext) -> Record | None:
        return await context.loaders.owner_loader.load(arguments["login"])
