"""Normalize OpenAPI *Schema Objects* into the :data:`~oasmodel.models.Schema` variants.

A schema without ``type`` is an object schema.  Boolean flags default to
``False``, everything else to absent.  Nested schemas (``allOf``, ``oneOf``,
``anyOf``, ``not``, ``items``, ``properties``, ``additionalProperties``)
are normalized recursively.

Cyclic documents are not supported.  The resolver turns a self-referencing
schema into a cyclic object graph; :func:`parse_schema` tracks the nodes on
its current descent and raises
:class:`~oasmodel.exceptions.SchemaCycleError` instead of recursing forever.
A node shared by two unrelated sites is not a cycle and is normalized once
per site.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from oasmodel.exceptions import SchemaCycleError, SchemaTypeError
from oasmodel.models import (
    ArraySchema,
    BooleanSchema,
    Discriminator,
    IntegerSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
    Xml,
)
from oasmodel.parser.resolver import REF_PATH_KEY
from oasmodel.parser.util import object_items, parse_external_docs

_Active = frozenset[int]


def parse_schema(schema: Optional[dict[str, Any]]) -> Schema:
    """Normalize a resolved schema node.

    Args:
        schema: The schema mapping; ``None`` or ``{}`` yield an open
            object schema.

    Returns:
        One of the seven schema variants.

    Raises:
        SchemaTypeError: For an unknown ``type`` tag or a non-mapping node.
        SchemaCycleError: If the schema (transitively) contains itself.
    """
    return _parse(schema or {}, frozenset())


def default_media_type(schema: Schema) -> str:
    """Return the media type a property of this schema is encoded with by default.

    Binary strings are ``application/octet-stream``, objects
    ``application/json``, other scalars ``text/plain``.  Arrays take the
    default of their items.
    """
    if isinstance(schema, StringSchema) and schema.format == "binary":
        return "application/octet-stream"
    if isinstance(schema, ObjectSchema):
        return "application/json"
    if isinstance(schema, ArraySchema):
        if schema.items is None:
            return "application/json"
        return default_media_type(schema.items)
    return "text/plain"


def _parse(node: Any, active: _Active) -> Schema:
    if not isinstance(node, dict):
        raise SchemaTypeError(
            f"Schema must be an object, got {type(node).__name__}"
        )
    if id(node) in active:
        origin = node.get(REF_PATH_KEY, "<inline schema>")
        raise SchemaCycleError(
            f"Cyclic schema reference through '{origin}' is not supported"
        )
    active = active | {id(node)}

    schema_type = node.get("type", "object")
    build = _BUILDERS.get(schema_type) if isinstance(schema_type, str) else None
    if build is None:
        raise SchemaTypeError(f"Unknown schema type '{schema_type}'")

    return build(node, _shared(node, active), active)


def _shared(node: dict[str, Any], active: _Active) -> dict[str, Any]:
    """Keyword arguments common to every variant."""
    return {
        "ref": node.get(REF_PATH_KEY),
        "title": node.get("title"),
        "description": node.get("description"),
        "nullable": node.get("nullable", False),
        "read_only": node.get("readOnly", False),
        "write_only": node.get("writeOnly", False),
        "deprecated": node.get("deprecated", False),
        "default": node.get("default"),
        "example": node.get("example"),
        "enum": node.get("enum"),
        "xml": _parse_xml(node.get("xml")),
        "external_docs": parse_external_docs(node.get("externalDocs")),
        "all_of": [_parse(s, active) for s in node.get("allOf") or []],
        "one_of": [_parse(s, active) for s in node.get("oneOf") or []],
        "any_of": [_parse(s, active) for s in node.get("anyOf") or []],
        "not_": _parse(node["not"], active) if node.get("not") is not None else None,
    }


def _parse_xml(node: Optional[dict[str, Any]]) -> Optional[Xml]:
    if not node:
        return None
    return Xml(
        name=node.get("name"),
        namespace=node.get("namespace"),
        prefix=node.get("prefix"),
        attribute=node.get("attribute", False),
        wrapped=node.get("wrapped", False),
    )


def _numeric(node: dict[str, Any]) -> dict[str, Any]:
    return {
        "format": node.get("format"),
        "minimum": node.get("minimum"),
        "maximum": node.get("maximum"),
        "exclusive_minimum": node.get("exclusiveMinimum", False),
        "exclusive_maximum": node.get("exclusiveMaximum", False),
        "multiple_of": node.get("multipleOf"),
    }


def _string(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    return StringSchema(
        **shared,
        format=node.get("format"),
        pattern=node.get("pattern"),
        min_length=node.get("minLength"),
        max_length=node.get("maxLength"),
    )


def _integer(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    return IntegerSchema(**shared, **_numeric(node))


def _number(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    return NumberSchema(**shared, **_numeric(node))


def _object(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    properties = node.get("properties") or {}
    discriminator = node.get("discriminator")
    if isinstance(discriminator, str):
        # 3.0.0-rc0 shorthand: the discriminator is just the property name
        discriminator = {"propertyName": discriminator}

    return ObjectSchema(
        **shared,
        properties={
            name: _parse(value, active)
            for name, value in object_items(properties, extensions=True)
        },
        required=[str(name) for name in node.get("required") or []],
        additional_properties=_additional_properties(
            node.get("additionalProperties"), active
        ),
        min_properties=node.get("minProperties"),
        max_properties=node.get("maxProperties"),
        discriminator=(
            Discriminator(
                property_name=discriminator.get("propertyName", ""),
                mapping=discriminator.get("mapping") or {},
            )
            if discriminator
            else None
        ),
    )


def _additional_properties(value: Any, active: _Active) -> Optional[Schema]:
    """``None``/``False`` close the object, ``True`` opens it to any value."""
    if value is None or value is False:
        return None
    if value is True:
        return ObjectSchema()
    return _parse(value, active)


def _array(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    items = node.get("items")
    return ArraySchema(
        **shared,
        items=_parse(items, active) if items is not None else None,
        min_items=node.get("minItems"),
        max_items=node.get("maxItems"),
        unique_items=node.get("uniqueItems", False),
    )


def _boolean(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    return BooleanSchema(**shared)


def _null(node: dict[str, Any], shared: dict[str, Any], active: _Active) -> Schema:
    return NullSchema(**shared)


_BUILDERS: dict[str, Callable[[dict[str, Any], dict[str, Any], _Active], Schema]] = {
    "string": _string,
    "integer": _integer,
    "number": _number,
    "object": _object,
    "array": _array,
    "boolean": _boolean,
    "null": _null,
}
