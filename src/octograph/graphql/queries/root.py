"""
Root GraphQL query definitions
"""

from ...engine import URI, Argument, Field, NonNull, ObjectType, String
from ..types.node import uniform_resource_locatable_interface
from ..types.owner import repository_owner_interface
from ..types.repository import repository_type
from ..types.topic import topic_type

query_type = ObjectType(
    "Query",
    description="The query root of the GitHub GraphQL API.",
    fields=lambda: {
        "topic": Field(
            topic_type,
            args={"name": Argument(NonNull(String), description="The topic's name.")},
            description="Look up a topic by name.",
        ),
        "repositoryOwner": Field(
            repository_owner_interface,
            args={
                "login": Argument(
                    NonNull(String), description="The username to lookup the owner by."
                ),
            },
            description="Lookup a repository owner (ie. either a User or an Organization) by login.",
        ),
        "repository": Field(
            repository_type,
            args={
                "owner": Argument(
                    NonNull(String), description="The login field of a user or organization"
                ),
                "name": Argument(NonNull(String), description="The name of the repository"),
            },
            description="Lookup a given repository by the owner and repository name.",
        ),
        "resource": Field(
            uniform_resource_locatable_interface,
            args={"url": Argument(NonNull(URI), description="The URL.")},
            description="Lookup resource by a URL.",
        ),
    },
)
