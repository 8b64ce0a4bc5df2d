"""
Repository GraphQL type definitions
"""

from ...engine import (
    ID,
    URI,
    Boolean,
    DateTime,
    Field,
    Int,
    ListOf,
    NonNull,
    ObjectType,
    String,
)
from .node import node_interface, uniform_resource_locatable_interface
from .owner import repository_owner_interface
from .topic import topic_type


def resolve_repository_topics(repository, args, context):
    from ..resolvers.repository import resolve_repository_topics as resolve

    return resolve(repository, context)


repository_type = ObjectType(
    "Repository",
    description="A repository contains the content for a project.",
    fields=lambda: {
        "id": Field(NonNull(ID), description="The Node ID of the Repository object."),
        "name": Field(NonNull(String), description="The name of the repository."),
        "nameWithOwner": Field(
            NonNull(String), description="The repository's name with owner."
        ),
        "description": Field(String, description="The description of the repository."),
        "owner": Field(
            NonNull(repository_owner_interface),
            description="The User owner of the repository.",
        ),
        "isPrivate": Field(
            NonNull(Boolean), description="Identifies if the repository is private or internal."
        ),
        "isFork": Field(NonNull(Boolean), description="Identifies if the repository is a fork."),
        "stargazerCount": Field(
            NonNull(Int), description="Returns a count of how many stargazers there are."
        ),
        "forkCount": Field(
            NonNull(Int), description="Returns how many forks there are of this repository."
        ),
        "primaryLanguage": Field(
            String, description="The primary language of the repository's code."
        ),
        "homepageUrl": Field(URI, description="The repository's URL."),
        "createdAt": Field(
            NonNull(DateTime),
            description="Identifies the date and time when the object was created.",
        ),
        "resourcePath": Field(NonNull(URI), description="The HTTP path for this repository."),
        "url": Field(NonNull(URI), description="The HTTP URL for this repository."),
        "repositoryTopics": Field(
            NonNull(ListOf(NonNull(topic_type))),
            resolve=resolve_repository_topics,
            description="A list of applied repository-topic associations for this repository.",
        ),
    },
    interfaces=lambda: [node_interface, uniform_resource_locatable_interface],
)
