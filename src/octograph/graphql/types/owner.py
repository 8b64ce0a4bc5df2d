"""
Repository owner GraphQL type definitions
"""

from ...engine import ID, URI, DateTime, Field, InterfaceType, NonNull, ObjectType, String
from .node import node_interface, uniform_resource_locatable_interface

repository_owner_interface = InterfaceType(
    "RepositoryOwner",
    description="Represents an owner of a Repository.",
    fields=lambda: {
        "id": Field(NonNull(ID)),
        "login": Field(NonNull(String), description="The username used to login."),
        "avatarUrl": Field(
            NonNull(URI), description="A URL pointing to the owner's public avatar."
        ),
        "resourcePath": Field(NonNull(URI), description="The HTTP path for the owner."),
        "url": Field(NonNull(URI), description="The HTTP URL for the owner."),
    },
)

user_type = ObjectType(
    "User",
    description="A user is an individual's account on GitHub that owns repositories.",
    fields=lambda: {
        "id": Field(NonNull(ID), description="The Node ID of the User object."),
        "login": Field(NonNull(String), description="The username used to login."),
        "name": Field(String, description="The user's public profile name."),
        "bio": Field(String, description="The user's public profile bio."),
        "company": Field(String, description="The user's public profile company."),
        "location": Field(String, description="The user's public profile location."),
        "avatarUrl": Field(NonNull(URI), description="A URL pointing to the user's public avatar."),
        "resourcePath": Field(NonNull(URI), description="The HTTP path for this user."),
        "url": Field(NonNull(URI), description="The HTTP URL for this user."),
        "createdAt": Field(
            DateTime, description="Identifies the date and time when the object was created."
        ),
    },
    interfaces=lambda: [
        node_interface,
        repository_owner_interface,
        uniform_resource_locatable_interface,
    ],
)

organization_type = ObjectType(
    "Organization",
    description="An account on GitHub, with one or more owners, that has repositories.",
    fields=lambda: {
        "id": Field(NonNull(ID), description="The Node ID of the Organization object."),
        "login": Field(NonNull(String), description="The organization's login name."),
        "name": Field(String, description="The organization's public profile name."),
        "description": Field(
            String, description="The organization's public profile description."
        ),
        "location": Field(String, description="The organization's public profile location."),
        "avatarUrl": Field(
            NonNull(URI), description="A URL pointing to the organization's public avatar."
        ),
        "resourcePath": Field(NonNull(URI), description="The HTTP path for this organization."),
        "url": Field(NonNull(URI), description="The HTTP URL for this organization."),
        "createdAt": Field(
            DateTime, description="Identifies the date and time when the object was created."
        ),
    },
    interfaces=lambda: [
        node_interface,
        repository_owner_interface,
        uniform_resource_locatable_interface,
    ],
)
