"""
Topic GraphQL type definitions
"""

from ...engine import ID, Argument, Field, Int, ListOf, NonNull, ObjectType, String
from .node import node_interface


async def resolve_related_topics(topic, args, context):
    from ..resolvers.topic import resolve_related_topics as resolve

    return await resolve(topic, args["first"], context)


topic_type = ObjectType(
    "Topic",
    description="A topic aggregates entities that are related to a subject.",
    fields=lambda: {
        "id": Field(NonNull(ID), description="The Node ID of the Topic object."),
        "name": Field(NonNull(String), description="The topic's name."),
        "relatedTopics": Field(
            NonNull(ListOf(NonNull(topic_type))),
            resolve=resolve_related_topics,
            args={
                "first": Argument(
                    Int,
                    default_value=3,
                    description="How many topics to return.",
                ),
            },
            description=(
                "A list of related topics, including aliases of this topic, sorted with the "
                "most relevant first. Returns up to 10 Topics."
            ),
        ),
    },
    interfaces=lambda: [node_interface],
)
