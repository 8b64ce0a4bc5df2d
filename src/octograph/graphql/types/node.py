"""
Shared interface definitions
"""

from ...engine import ID, URI, Field, InterfaceType, NonNull

node_interface = InterfaceType(
    "Node",
    description="An object with an ID.",
    fields=lambda: {
        "id": Field(NonNull(ID), description="ID of the object."),
    },
)

uniform_resource_locatable_interface = InterfaceType(
    "UniformResourceLocatable",
    description="Represents a type that can be retrieved by a URL.",
    fields=lambda: {
        "resourcePath": Field(NonNull(URI), description="The HTML path to this resource."),
        "url": Field(NonNull(URI), description="The URL to this resource."),
    },
)
