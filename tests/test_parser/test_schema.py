"""Tests for oasmodel.parser.schema."""

from __future__ import annotations

import pytest

from oasmodel.exceptions import SchemaCycleError, SchemaTypeError
from oasmodel.models import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)
from oasmodel.parser.resolver import resolve_refs
from oasmodel.parser.schema import default_media_type, parse_schema


class TestParseSchema:
    @pytest.mark.parametrize(
        ("type_tag", "variant"),
        [
            ("string", StringSchema),
            ("integer", IntegerSchema),
            ("number", NumberSchema),
            ("object", ObjectSchema),
            ("array", ArraySchema),
            ("boolean", BooleanSchema),
            ("null", NullSchema),
        ],
    )
    def test_type_selects_variant(self, type_tag: str, variant: type) -> None:
        assert isinstance(parse_schema({"type": type_tag}), variant)

    def test_missing_type_is_object(self) -> None:
        schema = parse_schema({"properties": {"a": {"type": "string"}}})
        assert isinstance(schema, ObjectSchema)
        assert isinstance(schema.properties["a"], StringSchema)

    def test_none_and_empty_are_open_objects(self) -> None:
        assert parse_schema(None) == ObjectSchema()
        assert parse_schema({}) == ObjectSchema()

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(SchemaTypeError, match="file"):
            parse_schema({"type": "file"})

    def test_non_string_type_raises(self) -> None:
        with pytest.raises(SchemaTypeError):
            parse_schema({"type": ["string", "null"]})

    def test_non_mapping_node_raises(self) -> None:
        with pytest.raises(SchemaTypeError, match="must be an object"):
            parse_schema({"type": "array", "items": "string"})

    def test_boolean_flags_default_false(self) -> None:
        schema = parse_schema({"type": "string"})
        assert schema.nullable is False
        assert schema.read_only is False
        assert schema.write_only is False
        assert schema.deprecated is False
        assert schema.format is None

    def test_common_fields(self) -> None:
        schema = parse_schema(
            {
                "type": "string",
                "title": "Name",
                "description": "A name",
                "nullable": True,
                "readOnly": True,
                "default": "rex",
                "example": "fido",
                "enum": ["rex", "fido"],
                "xml": {"name": "petName", "attribute": True},
                "externalDocs": {"url": "https://example.com/docs"},
            }
        )
        assert schema.title == "Name"
        assert schema.description == "A name"
        assert schema.nullable is True
        assert schema.read_only is True
        assert schema.default == "rex"
        assert schema.example == "fido"
        assert schema.enum == ["rex", "fido"]
        assert schema.xml is not None and schema.xml.name == "petName"
        assert schema.xml.attribute is True
        assert schema.external_docs is not None
        assert schema.external_docs.url == "https://example.com/docs"

    def test_string_constraints(self) -> None:
        schema = parse_schema(
            {"type": "string", "format": "date", "pattern": "^\\d+$", "minLength": 1, "maxLength": 9}
        )
        assert schema.format == "date"
        assert schema.pattern == "^\\d+$"
        assert (schema.min_length, schema.max_length) == (1, 9)

    def test_numeric_constraints(self) -> None:
        schema = parse_schema(
            {
                "type": "number",
                "minimum": 0,
                "maximum": 10,
                "exclusiveMaximum": True,
                "multipleOf": 0.5,
            }
        )
        assert schema.minimum == 0
        assert schema.maximum == 10
        assert schema.exclusive_minimum is False
        assert schema.exclusive_maximum is True
        assert schema.multiple_of == 0.5

    def test_array_items(self) -> None:
        schema = parse_schema(
            {"type": "array", "items": {"type": "integer"}, "minItems": 1, "uniqueItems": True}
        )
        assert isinstance(schema.items, IntegerSchema)
        assert schema.min_items == 1
        assert schema.unique_items is True

    def test_object_fields(self) -> None:
        schema = parse_schema(
            {
                "type": "object",
                "required": ["id"],
                "properties": {"id": {"type": "integer"}, "x-extra": {"type": "string"}},
                "additionalProperties": {"type": "string"},
                "minProperties": 1,
                "discriminator": {"propertyName": "kind", "mapping": {"dog": "#/Dog"}},
            }
        )
        assert list(schema.properties) == ["id", "x-extra"]
        assert schema.required == ["id"]
        assert isinstance(schema.additional_properties, StringSchema)
        assert schema.min_properties == 1
        assert schema.discriminator is not None
        assert schema.discriminator.property_name == "kind"
        assert schema.discriminator.mapping == {"dog": "#/Dog"}

    def test_string_discriminator_shorthand(self) -> None:
        schema = parse_schema({"type": "object", "discriminator": "kind"})
        assert schema.discriminator is not None
        assert schema.discriminator.property_name == "kind"

    def test_additional_properties_true_and_false(self) -> None:
        assert parse_schema({"additionalProperties": True}).additional_properties == ObjectSchema()
        assert parse_schema({"additionalProperties": False}).additional_properties is None

    def test_composition(self) -> None:
        schema = parse_schema(
            {
                "allOf": [{"type": "object"}],
                "oneOf": [{"type": "string"}, {"type": "integer"}],
                "anyOf": [{"type": "boolean"}],
                "not": {"type": "null"},
            }
        )
        assert isinstance(schema.all_of[0], ObjectSchema)
        assert [type(s) for s in schema.one_of] == [StringSchema, IntegerSchema]
        assert isinstance(schema.any_of[0], BooleanSchema)
        assert isinstance(schema.not_, NullSchema)

    def test_not_dumps_under_its_openapi_name(self) -> None:
        dumped = parse_schema({"not": {"type": "null"}}).model_dump(by_alias=True)
        assert dumped["not"]["type"] == "null"

    def test_ref_recorded_from_resolver_tag(self) -> None:
        doc = {
            "root": {"$ref": "#/components/schemas/Pet"},
            "components": {"schemas": {"Pet": {"type": "object"}}},
        }
        resolve_refs(doc)
        assert parse_schema(doc["root"]).ref == "#/components/schemas/Pet"

    def test_shared_node_is_not_a_cycle(self) -> None:
        doc = {
            "root": {
                "type": "object",
                "properties": {
                    "a": {"$ref": "#/components/schemas/Leaf"},
                    "b": {"$ref": "#/components/schemas/Leaf"},
                },
            },
            "components": {"schemas": {"Leaf": {"type": "string"}}},
        }
        resolve_refs(doc)
        schema = parse_schema(doc["root"])
        assert schema.properties["a"] == schema.properties["b"]

    def test_self_reference_raises_cycle_error(self) -> None:
        doc = {
            "components": {
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {"next": {"$ref": "#/components/schemas/Node"}},
                    }
                }
            }
        }
        resolve_refs(doc)
        with pytest.raises(SchemaCycleError, match="#/components/schemas/Node"):
            parse_schema(doc["components"]["schemas"]["Node"])

    def test_mutual_reference_through_array_raises(self) -> None:
        doc = {
            "components": {
                "schemas": {
                    "Tree": {
                        "type": "object",
                        "properties": {
                            "children": {
                                "type": "array",
                                "items": {"$ref": "#/components/schemas/Tree"},
                            }
                        },
                    }
                }
            }
        }
        resolve_refs(doc)
        with pytest.raises(SchemaCycleError):
            parse_schema(doc["components"]["schemas"]["Tree"])

    def test_null_composition_lists_are_empty(self) -> None:
        schema = parse_schema({"type": "string", "allOf": None, "oneOf": None, "anyOf": None})
        assert schema.all_of == []
        assert schema.one_of == []
        assert schema.any_of == []

    def test_integer_property_names_become_strings(self) -> None:
        schema = parse_schema(
            {"properties": {200: {"type": "string"}}, "required": [200]}
        )
        assert isinstance(schema, ObjectSchema)
        assert list(schema.properties) == ["200"]
        assert schema.required == ["200"]


class TestDefaultMediaType:
    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            ({"type": "string", "format": "binary"}, "application/octet-stream"),
            ({"type": "string"}, "text/plain"),
            ({"type": "integer"}, "text/plain"),
            ({"type": "boolean"}, "text/plain"),
            ({"type": "object"}, "application/json"),
            ({"type": "array", "items": {"type": "string", "format": "binary"}}, "application/octet-stream"),
            ({"type": "array", "items": {"type": "integer"}}, "text/plain"),
            ({"type": "array"}, "application/json"),
        ],
    )
    def test_defaults(self, schema: dict, expected: str) -> None:
        assert default_media_type(parse_schema(schema)) == expected
