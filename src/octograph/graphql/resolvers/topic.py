"""
Topic resolvers for GraphQL API
"""

from __future__ import annotations

from typing import Any

from ...engine import RootFieldHandler
from ...github.base import Record
from ...github.client import topic_record
from ..context import RequestContext

MAX_RELATED_TOPICS = 10


class TopicHandler(RootFieldHandler):
    """Look up a topic by name."""

    async def resolve(self, arguments: dict[str, Any], context: RequestContext) -> Record | None:
        return await context.loaders.topic_loader.load(arguments["name"])


async def resolve_related_topics(
    topic: Record, first: int | None, context: RequestContext
) -> list[Record]:
    """Resolve ``Topic.relatedTopics``.

    Records may carry related topics inline (``relatedTopics``) or only
    their names (``relatedTopicNames``). Stubs whose names were never
    fetched are completed through the topic loader.
    """
    limit = MAX_RELATED_TOPICS if first is None else max(0, min(first, MAX_RELATED_TOPICS))

    inline = topic.get("relatedTopics")
    if inline is not None:
        return list(inline)[:limit]

    names = topic.get("relatedTopicNames")
    if names is None:
        fetched = await context.loaders.topic_loader.load(topic["name"])
        names = (fetched or {}).get("relatedTopicNames") or []

    return [topic_record(name) for name in names[:limit]]
