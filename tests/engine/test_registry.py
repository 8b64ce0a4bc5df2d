"""
Tests for the type registry.
"""

import pytest

from octograph.engine import (
    ID,
    DuplicateTypeError,
    Field,
    InterfaceType,
    ListOf,
    NonNull,
    ObjectType,
    SchemaError,
    String,
    TypeRegistry,
    UnknownFieldError,
    UnknownTypeError,
)


def make_node_interface():
    return InterfaceType("Node", fields={"id": NonNull(ID)})


def make_topic_type(node_interface):
    topic = ObjectType(
        "Topic",
        fields=lambda: {
            "id": NonNull(ID),
            "name": NonNull(String),
            "relatedTopics": NonNull(ListOf(NonNull(topic))),
        },
        interfaces=lambda: [node_interface],
    )
    return topic


class TestTypeRegistry:
    """Tests for TypeRegistry."""

    def setup_method(self):
        """Set up a fresh registry for each test."""
        self.registry = TypeRegistry()
        self.node = make_node_interface()
        self.topic = make_topic_type(self.node)
        self.query = ObjectType("Query", fields=lambda: {"topic": Field(self.topic)})

    def test_builtin_scalars_preloaded(self):
        """Test that the specified scalars are available without registration."""
        for name in ("String", "Int", "Float", "Boolean", "ID"):
            assert name in self.registry

    def test_register_type(self):
        """Test registering a type returns it and makes it retrievable."""
        registered = self.registry.register_type(self.topic)

        assert registered is self.topic
        assert "Topic" in self.registry
        assert self.registry.get_type("Topic") is self.topic

    def test_register_duplicate_name(self):
        """Test registering two types with the same name fails."""
        self.registry.register_type(self.topic)
        other = ObjectType("Topic", fields={"name": String})

        with pytest.raises(DuplicateTypeError, match="Topic"):
            self.registry.register_type(other)

        # The first registration stays in place
        assert self.registry.get_type("Topic") is self.topic

    def test_register_duplicate_scalar_name(self):
        """Test that a custom type cannot shadow a built-in scalar."""
        with pytest.raises(DuplicateTypeError):
            self.registry.register_type(ObjectType("String", fields={"value": String}))

    def test_register_non_descriptor(self):
        """Test that only named type descriptors can be registered."""
        with pytest.raises(SchemaError):
            self.registry.register_type(NonNull(String))  # type: ignore[arg-type]

    def test_get_unknown_type(self):
        """Test looking up an unregistered type."""
        with pytest.raises(UnknownTypeError):
            self.registry.get_type("Nope")

    def test_resolve_field_type(self):
        """Test resolving the declared type of a field."""
        self.registry.register_type(self.topic)

        assert self.registry.resolve_field_type("Topic", "name") == NonNull(String)
        assert self.registry.resolve_field_type("Topic", "id") == NonNull(ID)

    def test_resolve_field_type_unknown_field(self):
        """Test resolving a field the type does not declare."""
        self.registry.register_type(self.topic)

        with pytest.raises(UnknownFieldError) as exc_info:
            self.registry.resolve_field_type("Topic", "owner")

        assert "Topic" in str(exc_info.value)
        assert "owner" in str(exc_info.value)

    def test_resolve_field_type_on_scalar(self):
        """Test that scalars have no fields."""
        with pytest.raises(UnknownFieldError):
            self.registry.resolve_field_type("String", "length")

    def test_typename_is_always_resolvable(self):
        """Test the meta field is available on every composite type."""
        self.registry.register_type(self.topic)

        assert self.registry.resolve_field_type("Topic", "__typename") == NonNull(String)

    def test_self_referencing_field_is_lazy(self):
        """Test that a field referring to its own type resolves after construction."""
        self.registry.register_type(self.topic)

        field_type = self.registry.resolve_field_type("Topic", "relatedTopics")

        assert field_type == NonNull(ListOf(NonNull(self.topic)))
        assert field_type.of_type.of_type.of_type is self.topic

    def test_close_collects_reachable_types(self):
        """Test that close pulls in types only referenced through fields."""
        self.registry.register_type(self.query)

        self.registry.close()

        assert self.registry.closed
        assert self.registry.get_type("Topic") is self.topic
        assert self.registry.get_type("Node") is self.node

    def test_close_is_idempotent(self):
        """Test closing twice returns the same registry."""
        self.registry.register_type(self.query)

        assert self.registry.close() is self.registry
        assert self.registry.close() is self.registry

    def test_register_after_close_fails(self):
        """Test that a closed registry is read-only."""
        self.registry.register_type(self.query)
        self.registry.close()

        with pytest.raises(SchemaError, match="closed"):
            self.registry.register_type(ObjectType("Late", fields={"x": String}))

    def test_close_without_query_root(self):
        """Test that a schema needs a query root."""
        self.registry.register_type(self.topic)

        with pytest.raises(SchemaError):
            self.registry.close()

    def test_close_detects_distinct_types_with_same_name(self):
        """Test that two different descriptors reachable under one name are rejected."""
        impostor = ObjectType("Topic", fields={"name": String})
        query = ObjectType(
            "Query", fields=lambda: {"topic": Field(self.topic), "other": Field(impostor)}
        )
        self.registry.register_type(query)

        with pytest.raises(DuplicateTypeError, match="Topic"):
            self.registry.close()

    def test_close_rejects_missing_interface_field(self):
        """Test conformance: an object must provide every interface field."""
        broken = ObjectType("Broken", fields={"name": String}, interfaces=[self.node])
        query = ObjectType("Query", fields={"broken": broken})
        self.registry.register_type(query)

        with pytest.raises(SchemaError, match="Node.id"):
            self.registry.close()

    def test_close_rejects_incompatible_interface_field(self):
        """Test conformance: a nullable field cannot satisfy a non-null interface field."""
        broken = ObjectType("Broken", fields={"id": ID}, interfaces=[self.node])
        query = ObjectType("Query", fields={"broken": broken})
        self.registry.register_type(query)

        with pytest.raises(SchemaError, match="expects type ID!"):
            self.registry.close()

    def test_possible_types(self):
        """Test listing the object types implementing an interface."""
        user = ObjectType("User", fields={"id": NonNull(ID)}, interfaces=[self.node])
        query = ObjectType("Query", fields=lambda: {"node": self.node, "topic": self.topic})
        self.registry.register_type(query)
        self.registry.register_type(user)
        self.registry.close()

        possible = self.registry.possible_types(self.node)

        assert set(possible) == {self.topic, user}
        assert self.registry.possible_types("Node") == possible
        assert self.registry.is_possible_type(self.node, user)
        assert not self.registry.is_possible_type(self.topic, user)

    def test_len_and_iteration(self):
        """Test container protocol."""
        before = len(self.registry)
        self.registry.register_type(self.topic)

        assert len(self.registry) == before + 1
        assert self.topic in list(self.registry)
