"""Normalize parameters, headers, media-type content and encodings.

Serialization defaults depend on where a value travels: ``style`` defaults to
``form`` for query and cookie parameters and to ``simple`` elsewhere, and
``explode`` defaults to ``True`` exactly when the effective style is
``form``.  Encoded multipart/form properties follow the query rules.

A parameter's own ``schema`` / ``example`` / ``examples`` are folded into
its content map under the ``""`` media type, next to any explicit
``content`` entries, so consumers read one shape for both declaration
forms.

Path-level and operation-level parameter lists are merged by
:func:`merge_parameters`: an operation parameter with the same
``(name, in)`` key replaces the path parameter at its position.
"""

from __future__ import annotations

from typing import Any, Optional

from oasmodel.exceptions import EncodingError, ParameterError
from oasmodel.models import (
    CookieParameter,
    Encoding,
    Example,
    Format,
    HeaderParameter,
    MediaTypeContent,
    ModelerOptions,
    ObjectSchema,
    Parameter,
    ParameterLocation,
    PathParameter,
    QueryParameter,
)
from oasmodel.parser.schema import default_media_type, parse_schema
from oasmodel.parser.util import object_items

_STYLES = frozenset(
    ["matrix", "label", "form", "simple", "spaceDelimited", "pipeDelimited", "deepObject"]
)

_VARIANTS = {
    ParameterLocation.HEADER: HeaderParameter,
    ParameterLocation.PATH: PathParameter,
    ParameterLocation.COOKIE: CookieParameter,
}


def normalize_format(location: ParameterLocation, node: dict[str, Any]) -> Format:
    """Compute the effective ``style``/``explode`` pair for *location*.

    Raises:
        ParameterError: If ``style`` is not an OpenAPI style name.
    """
    style = node.get("style")
    if style is None:
        if location in (ParameterLocation.QUERY, ParameterLocation.COOKIE):
            style = "form"
        else:
            style = "simple"
    elif style not in _STYLES:
        raise ParameterError(f"Unknown serialization style '{style}'")

    explode = node.get("explode")
    if explode is None:
        explode = style == "form"

    return Format(style=style, explode=explode)


def normalize_examples(node: dict[str, Any]) -> dict[str, Example]:
    """Merge ``examples`` and the shorthand ``example`` (stored under ``""``)."""
    raw = node.get("examples") or {}
    examples = {
        key: _parse_example(value) for key, value in object_items(raw, extensions=True)
    }
    if "example" in node:
        examples[""] = Example(value=node["example"])
    return examples


def _parse_example(node: Any) -> Example:
    if not isinstance(node, dict):
        return Example(value=node)
    return Example(
        summary=node.get("summary"),
        description=node.get("description"),
        value=node.get("value"),
        external_value=node.get("externalValue"),
    )


def _is_form_media_type(media_type: str) -> bool:
    essence = media_type.split(";")[0].strip().lower()
    return essence.startswith("multipart/") or essence == "application/x-www-form-urlencoded"


def parse_content(content: Optional[dict[str, Any]]) -> dict[str, MediaTypeContent]:
    """Normalize a *Content Object* (media type -> *Media Type Object*).

    The schema of each media type defaults to an open object schema.
    Encodings are kept only for multipart and form-urlencoded media types
    whose schema is an object.

    Raises:
        EncodingError: If an encoding entry names a property the schema
            does not declare.
    """
    result: dict[str, MediaTypeContent] = {}
    for media_type, media in object_items(content, extensions=True):
        media = media or {}
        schema = parse_schema(media.get("schema"))

        encoding = {}
        if _is_form_media_type(media_type) and isinstance(schema, ObjectSchema):
            declared = media.get("encoding") or {}
            encoding = {
                prop: parse_encoding(prop, node or {}, schema)
                for prop, node in object_items(declared, extensions=True)
            }

        result[media_type] = MediaTypeContent(
            schema_=schema,
            examples=normalize_examples(media),
            encoding=encoding,
        )
    return result


def parse_encoding(prop: str, node: dict[str, Any], schema: ObjectSchema) -> Encoding:
    """Normalize the *Encoding Object* for property *prop* of *schema*."""
    if prop not in schema.properties:
        raise EncodingError(
            f"Encoding refers to property '{prop}' which the schema does not declare"
        )
    return Encoding(
        content_type=node.get("contentType") or default_media_type(schema.properties[prop]),
        headers=parse_headers(node.get("headers")),
        format=normalize_format(ParameterLocation.QUERY, node),
        allow_reserved=node.get("allowReserved", False),
    )


def parse_parameter_base(parameter: dict[str, Any]) -> dict[str, Any]:
    """Validate *parameter* and return the fields shared by all locations.

    Raises:
        ParameterError: If the name is missing, the location is unknown, or
            a path parameter is not marked required.
    """
    name = parameter.get("name")
    if not name:
        raise ParameterError("Parameter declared without a name")

    try:
        location = ParameterLocation(parameter.get("in"))
    except ValueError:
        raise ParameterError(
            f"Parameter '{name}' has unknown location '{parameter.get('in')}'"
        ) from None

    if location == ParameterLocation.PATH and not parameter.get("required"):
        raise ParameterError(f"Expected required=true on path parameter '{name}'")

    content = parse_content(parameter.get("content"))
    schema = parameter.get("schema")
    content[""] = MediaTypeContent(
        schema_=parse_schema(schema) if schema is not None else None,
        examples=normalize_examples(parameter),
    )

    return {
        "name": name,
        "description": parameter.get("description"),
        "required": parameter.get("required", False),
        "deprecated": parameter.get("deprecated", False),
        "content": content,
        "format": normalize_format(location, parameter),
    }


def parse_parameter(
    parameter: dict[str, Any], options: Optional[ModelerOptions] = None
) -> Parameter:
    """Normalize a *Parameter Object* into its location-specific variant.

    ``allowEmptyValue`` and ``allowReserved`` only exist on query
    parameters.  Elsewhere ``allowEmptyValue`` is dropped, or rejected when
    ``options.strict_allow_empty_value`` is set.
    """
    options = options or ModelerOptions()
    base = parse_parameter_base(parameter)
    location = ParameterLocation(parameter["in"])

    if location == ParameterLocation.QUERY:
        return QueryParameter(
            **base,
            allow_empty_value=parameter.get("allowEmptyValue", False),
            allow_reserved=parameter.get("allowReserved", False),
        )

    if parameter.get("allowEmptyValue") and options.strict_allow_empty_value:
        raise ParameterError(
            f"allowEmptyValue is only valid for query parameters, "
            f"found on {location.value} parameter '{base['name']}'"
        )
    return _VARIANTS[location](**base)


def parse_header(name: str, header: dict[str, Any]) -> HeaderParameter:
    """Normalize a *Header Object* as a ``header`` parameter called *name*.

    The header node is not modified; it may be shared with other sites.
    """
    base = parse_parameter_base({**header, "name": name, "in": "header"})
    return HeaderParameter(**base)


def parse_headers(headers: Optional[dict[str, Any]]) -> list[HeaderParameter]:
    """Normalize a headers map, skipping ``Content-Type`` which OpenAPI ignores there."""
    return [
        parse_header(name, header or {})
        for name, header in object_items(headers, extensions=True)
        if name.lower() != "content-type"
    ]


def parse_parameters(
    parameters: Optional[list[dict[str, Any]]],
    options: Optional[ModelerOptions] = None,
    where: str = "parameter list",
) -> list[Parameter]:
    """Normalize a declared parameter list and enforce key uniqueness.

    Raises:
        ParameterError: If two parameters share a ``(name, in)`` key.
    """
    result = [parse_parameter(p, options) for p in parameters or []]
    if not check_parameters(result):
        raise ParameterError(f"Duplicate (name, in) parameter declared in {where}")
    return result


def get_parameter_key(parameter: Parameter) -> tuple[str, str]:
    return (parameter.name, parameter.location.value)


def check_parameters(parameters: list[Parameter]) -> bool:
    """Return ``True`` when no two parameters share a ``(name, in)`` key."""
    keys = sorted(get_parameter_key(p) for p in parameters)
    return not any(keys[i] == keys[i - 1] for i in range(1, len(keys)))


def merge_parameters(
    path_params: list[Parameter],
    op_params: list[Parameter],
) -> list[Parameter]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location in place; the others are appended in declaration
    order.

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        A new merged list; the inputs are not modified.
    """
    merged = list(path_params)
    positions = {get_parameter_key(p): i for i, p in enumerate(merged)}

    for param in op_params:
        key = get_parameter_key(param)
        if key in positions:
            merged[positions[key]] = param
        else:
            positions[key] = len(merged)
            merged.append(param)

    return merged
