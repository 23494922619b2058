"""Tests for reference resolution."""

import pytest
from bson import ObjectId

from swagger_odm.compiler.properties import PropertyCompiler
from swagger_odm.compiler.references import (
    is_container,
    parse_reference,
    reference_descriptor,
)
from swagger_odm.core.config import CompilerConfig
from swagger_odm import SwaggerODMConfig
from swagger_odm.core.exceptions import MalformedReferenceError, UnresolvedReferenceError

HOUSE = {
    "type": "object",
    "required": ["lng"],
    "properties": {
        "lng": {"type": "number", "format": "double"},
        "description": {"type": "string"},
    },
}

HOUSE_MAP = {
    "lng": {"type": float, "required": True},
    "description": {"type": str},
}


class TestParseReference:
    """Test pointer parsing."""

    def test_definition_pointer(self) -> None:
        """The last path segment is the definition name."""
        assert parse_reference("#/definitions/House") == "House"

    @pytest.mark.parametrize(
        "reference",
        [
            "House",
            "#/definitions/",
            "#/components/schemas/House",
            "other.json#/definitions/House",
            "#/definitions/House/properties/lng",
            None,
        ],
    )
    def test_malformed(self, reference) -> None:
        """Anything but a local definition pointer is rejected."""
        with pytest.raises(MalformedReferenceError):
            parse_reference(reference)


class TestIsContainer:
    """Test container detection."""

    def test_explicit_types(self) -> None:
        """Objects and arrays are containers."""
        assert is_container({"type": "object"})
        assert is_container({"type": "array", "items": {"type": "string"}})

    def test_untyped_with_properties(self) -> None:
        """Untyped definitions with properties are objects."""
        assert is_container({"properties": {"a": {"type": "string"}}})

    def test_scalar_wrapper(self) -> None:
        """Scalar definitions are not containers."""
        assert not is_container({"type": "string", "format": "email"})


class TestReferenceResolver:
    """Test embedding and self references."""

    def _compile(self, context, owner: str, field_name: str):
        compiler = PropertyCompiler(context)
        definition = context.definition(owner)
        return compiler.compile_property(
            definition["properties"][field_name],
            field_name,
            definition.get("required"),
            owner,
        )

    def test_embeds_object_definition(self, make_context) -> None:
        """A reference to an object embeds its compiled schema."""
        context = make_context(
            {
                "House": HOUSE,
                "Person": {"properties": {"home": {"$ref": "#/definitions/House"}}},
            }
        )
        assert self._compile(context, "Person", "home") == HOUSE_MAP

    def test_embeds_array_of_references(self, make_context) -> None:
        """Array references embed a list holding the schema."""
        context = make_context(
            {
                "House": HOUSE,
                "Person": {
                    "properties": {
                        "houses": {
                            "type": "array",
                            "items": {"$ref": "#/definitions/House"},
                        }
                    }
                },
            }
        )
        assert self._compile(context, "Person", "houses") == [HOUSE_MAP]

    def test_array_target_definition(self, make_context) -> None:
        """A reference to an array-typed definition is list-wrapped."""
        context = make_context(
            {
                "House": HOUSE,
                "Houses": {"type": "array", "items": {"$ref": "#/definitions/House"}},
                "Street": {"properties": {"houses": {"$ref": "#/definitions/Houses"}}},
            }
        )
        assert self._compile(context, "Street", "houses") == [HOUSE_MAP]

    def test_scalar_target_is_inlined(self, make_context) -> None:
        """A scalar definition compiles as an inline property."""
        context = make_context(
            {
                "Email": {
                    "type": "string",
                    "x-swagger-mongoose": {"validator": "isEmail"},
                },
                "Person": {"properties": {"email": {"$ref": "#/definitions/Email"}}},
            }
        )
        # The target's own extension block is stripped before inlining
        assert self._compile(context, "Person", "email") == {"type": str}

    def test_array_of_scalar_target(self, make_context) -> None:
        """Array references to scalars are list-wrapped."""
        context = make_context(
            {
                "Tag": {"type": "string", "enum": ["a", "b"]},
                "Post": {
                    "properties": {
                        "tags": {"type": "array", "items": {"$ref": "#/definitions/Tag"}}
                    }
                },
            }
        )
        assert self._compile(context, "Post", "tags") == [{"type": str, "enum": ["a", "b"]}]

    def test_self_reference(self, make_context) -> None:
        """A definition referring to itself gets a foreign reference."""
        context = make_context(
            {"Node": {"properties": {"parent": {"$ref": "#/definitions/Node"}}}}
        )
        assert self._compile(context, "Node", "parent") == {"type": ObjectId, "ref": "Node"}

    def test_array_self_reference(self, make_context) -> None:
        """Arrays of self references hold reference descriptors."""
        context = make_context(
            {
                "Person": {
                    "properties": {
                        "friends": {
                            "type": "array",
                            "items": {"$ref": "#/definitions/Person"},
                        }
                    }
                }
            }
        )
        assert self._compile(context, "Person", "friends") == [
            {"type": ObjectId, "ref": "Person"}
        ]

    def test_embedded_target_keeps_its_self_reference(self, make_context) -> None:
        """Self references inside an embedded definition stay references."""
        context = make_context(
            {
                "Node": {
                    "type": "object",
                    "properties": {"parent": {"$ref": "#/definitions/Node"}},
                },
                "Tree": {"properties": {"root": {"$ref": "#/definitions/Node"}}},
            }
        )
        assert self._compile(context, "Tree", "root") == {
            "parent": {"type": ObjectId, "ref": "Node"}
        }

    def test_required_reference(self, make_context) -> None:
        """Required references are wrapped to carry the facet."""
        context = make_context(
            {
                "House": HOUSE,
                "Person": {
                    "required": ["home"],
                    "properties": {"home": {"$ref": "#/definitions/House"}},
                },
            }
        )
        assert self._compile(context, "Person", "home") == {
            "type": HOUSE_MAP,
            "required": True,
        }

    def test_unknown_target(self, make_context) -> None:
        """References to missing definitions fail."""
        context = make_context(
            {"Person": {"properties": {"home": {"$ref": "#/definitions/House"}}}}
        )
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            self._compile(context, "Person", "home")
        assert exc_info.value.definition_name == "House"

    def test_malformed_reference(self, make_context) -> None:
        """Malformed pointers fail."""
        context = make_context(
            {"Person": {"properties": {"home": {"$ref": "House.json"}}}}
        )
        with pytest.raises(MalformedReferenceError):
            self._compile(context, "Person", "home")


class TestIndirectCycles:
    """Test indirect reference cycles."""

    DEFINITIONS = {
        "A": {"type": "object", "properties": {"b": {"$ref": "#/definitions/B"}}},
        "B": {"type": "object", "properties": {"a": {"$ref": "#/definitions/A"}}},
    }

    def test_guard_emits_reference(self, make_context) -> None:
        """With cycle detection the back edge becomes a reference."""
        config = SwaggerODMConfig(compiler=CompilerConfig(detect_cycles=True))
        context = make_context(self.DEFINITIONS, config=config)
        compiler = PropertyCompiler(context)

        context.resolving.append("A")
        compiled = compiler.compile_property_set("A", context.definition("A"))
        assert compiled == {"b": {"a": {"type": ObjectId, "ref": "A"}}}
        assert context.resolving == ["A"]

    def test_unguarded_cycle_recurses(self, make_context) -> None:
        """Without cycle detection the recursion is unbounded."""
        context = make_context(self.DEFINITIONS)
        compiler = PropertyCompiler(context)
        with pytest.raises(RecursionError):
            compiler.compile_property_set("A", context.definition("A"))


def test_reference_descriptor() -> None:
    """Descriptors can omit the target name."""
    assert reference_descriptor("Person") == {"type": ObjectId, "ref": "Person"}
    assert reference_descriptor("Person", include_ref=False) == {"type": ObjectId}
