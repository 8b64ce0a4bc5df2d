"""
URL lookup resolvers for GraphQL API
"""

from typing import Any

from ...engine import RootFieldHandler
from ...github.base import Record
from ..context import RequestContext


class ResourceHandler(RootFieldHandler):
    """Look up the resource addressed by a github.com URL."""

    async def resolve(self, arguments: dict[str, Any], context: RequestContext) -> Record | None:
        return await context.data_source.get_uniform_resource_locatable(arguments["url"])
