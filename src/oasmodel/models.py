"""Canonical Pydantic models shared across all oasmodel modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ModelerOptions`, and :class:`GlobalConfig`.

**Document models** -- produced by the modeler and handed to consumers
(code generators, documentation renderers, validators):
    :class:`PathConstant` / :class:`PathVariable`, :class:`Server`, the seven
    schema variants joined in :data:`Schema`, :class:`Format`,
    :class:`Encoding`, :class:`MediaTypeContent`, the four parameter variants
    joined in :data:`Parameter`, :class:`RequestBody`, :class:`Response`,
    :class:`SecurityScheme`, :class:`SecurityRequirement`, :class:`Method`,
    and the top-level :class:`Model`.

Document models are frozen: a :class:`Model` is immutable once the modeler
returns it. Tagged variants use Pydantic discriminated unions so that a
dumped model can be validated back into the right variant.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "yaml", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, yaml, plain, rich"
    )


class ModelerOptions(BaseModel):
    """Switches that tighten the modeler beyond the OpenAPI 3.0.0 baseline.

    Passed to :func:`~oasmodel.parser.modeler.build_model`. The defaults
    produce the permissive behaviour; every switch only ever turns an
    accepted document into a rejected one.
    """

    strict_allow_empty_value: bool = Field(
        default=False,
        description="Reject allowEmptyValue on parameters outside the query location",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/oasmodel/config.json``.

    Loaded and saved by :func:`~oasmodel.config.load_global_config` and
    :func:`~oasmodel.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~oasmodel.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    modeler: ModelerOptions = Field(default_factory=ModelerOptions)


# --- Document Models ---


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on an OpenAPI 3.0 *Path Item Object*.

    Declaration order is the order in which the modeler visits the methods
    of a path item, and therefore the order of :attr:`Model.operations`
    within one path.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class PathConstant(_Frozen):
    """A literal run of characters in a path template."""

    kind: Literal["const"] = "const"
    value: str


class PathVariable(_Frozen):
    """A ``{name}`` placeholder in a path template. ``name`` is never empty."""

    kind: Literal["param"] = "param"
    name: str


PathComponent = Annotated[Union[PathConstant, PathVariable], Field(discriminator="kind")]


class ServerVariable(_Frozen):
    enum: Optional[list[str]] = None
    default: str = ""
    description: Optional[str] = None


class Server(_Frozen):
    """A server entry whose URL has been parsed into a path template.

    Variables in ``url_prefix`` are looked up in ``variables`` by name.
    """

    url_prefix: list[PathComponent] = Field(default_factory=list)
    description: Optional[str] = None
    variables: dict[str, ServerVariable] = Field(default_factory=dict)


class ExternalDocs(_Frozen):
    url: str
    description: Optional[str] = None


class Xml(_Frozen):
    name: Optional[str] = None
    namespace: Optional[str] = None
    prefix: Optional[str] = None
    attribute: bool = False
    wrapped: bool = False


class Discriminator(_Frozen):
    property_name: str
    mapping: dict[str, str] = Field(default_factory=dict)


class Tag(_Frozen):
    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None


class APIInfo(_Frozen):
    """API metadata taken from the document's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None


# --- Schemas ---


class SchemaBase(_Frozen):
    """Attributes shared by every schema variant.

    ``ref`` holds the canonical JSON pointer (``#/components/schemas/Pet``)
    when the schema was reached through a ``$ref``; consumers use it to
    recognise named types.
    """

    ref: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    nullable: bool = False
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False
    default: Any = None
    example: Any = None
    enum: Optional[list[Any]] = None
    xml: Optional[Xml] = None
    external_docs: Optional[ExternalDocs] = None
    all_of: list[Schema] = Field(default_factory=list)
    one_of: list[Schema] = Field(default_factory=list)
    any_of: list[Schema] = Field(default_factory=list)
    not_: Optional[Schema] = Field(default=None, alias="not")


class StringSchema(SchemaBase):
    type: Literal["string"] = "string"
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


class _NumericConstraints(SchemaBase):
    format: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: Optional[float] = None


class IntegerSchema(_NumericConstraints):
    type: Literal["integer"] = "integer"


class NumberSchema(_NumericConstraints):
    type: Literal["number"] = "number"


class ObjectSchema(SchemaBase):
    """An object schema. ``additional_properties`` is ``None`` when closed."""

    type: Literal["object"] = "object"
    properties: dict[str, Schema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: Optional[Schema] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None
    discriminator: Optional[Discriminator] = None


class ArraySchema(SchemaBase):
    type: Literal["array"] = "array"
    items: Optional[Schema] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False


class BooleanSchema(SchemaBase):
    type: Literal["boolean"] = "boolean"


class NullSchema(SchemaBase):
    type: Literal["null"] = "null"


Schema = Annotated[
    Union[
        StringSchema,
        IntegerSchema,
        NumberSchema,
        ObjectSchema,
        ArraySchema,
        BooleanSchema,
        NullSchema,
    ],
    Field(discriminator="type"),
]


# --- Parameters and content ---


Style = Literal[
    "matrix", "label", "form", "simple", "spaceDelimited", "pipeDelimited", "deepObject"
]


class Format(_Frozen):
    """Serialization of a parameter or encoded property (``style`` + ``explode``)."""

    style: Style
    explode: bool


class Example(_Frozen):
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = None


class Encoding(_Frozen):
    """Encoding of one schema property inside a multipart or form body."""

    content_type: str
    headers: list[HeaderParameter] = Field(default_factory=list)
    format: Format
    allow_reserved: bool = False


class MediaTypeContent(_Frozen):
    """Normalized *Media Type Object*.

    ``examples`` stores the shorthand single ``example`` under the ``""``
    key. ``encoding`` is only populated for multipart and form-urlencoded
    media types with an object schema.
    """

    schema_: Optional[Schema] = Field(default=None, alias="schema")
    examples: dict[str, Example] = Field(default_factory=dict)
    encoding: dict[str, Encoding] = Field(default_factory=dict)


class ParameterBase(_Frozen):
    """Fields shared by every parameter location.

    ``content`` always carries a ``""`` entry holding the parameter's inline
    ``schema`` and examples, next to any explicit ``content`` media types.
    """

    name: str
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    content: dict[str, MediaTypeContent] = Field(default_factory=dict)
    format: Format


class QueryParameter(ParameterBase):
    location: Literal[ParameterLocation.QUERY] = ParameterLocation.QUERY
    allow_empty_value: bool = False
    allow_reserved: bool = False


class HeaderParameter(ParameterBase):
    location: Literal[ParameterLocation.HEADER] = ParameterLocation.HEADER


class PathParameter(ParameterBase):
    location: Literal[ParameterLocation.PATH] = ParameterLocation.PATH


class CookieParameter(ParameterBase):
    location: Literal[ParameterLocation.COOKIE] = ParameterLocation.COOKIE


Parameter = Annotated[
    Union[QueryParameter, HeaderParameter, PathParameter, CookieParameter],
    Field(discriminator="location"),
]


class RequestBody(_Frozen):
    description: Optional[str] = None
    content: dict[str, MediaTypeContent] = Field(default_factory=dict)
    required: bool = False


class Response(_Frozen):
    """A normalized response.

    ``key`` is a 3-character status pattern; ``XXX`` stands for the
    document's ``default`` response.
    """

    key: str
    description: Optional[str] = None
    headers: list[HeaderParameter] = Field(default_factory=list)
    content: dict[str, MediaTypeContent] = Field(default_factory=dict)


# --- Security ---


class SecurityScheme(_Frozen):
    """An OpenAPI *Security Scheme Object* from ``components.securitySchemes``.

    The ``type`` field discriminates between ``apiKey``, ``http``, ``oauth2``,
    and ``openIdConnect`` schemes. Only the fields relevant to the active
    scheme type are populated; the rest remain ``None``.
    """

    name: str
    type: str  # apiKey, http, oauth2, openIdConnect
    description: Optional[str] = None
    # apiKey
    param_name: Optional[str] = None
    location: Optional[str] = None  # header, query, cookie
    # http
    scheme: Optional[str] = None  # bearer, basic
    bearer_format: Optional[str] = None
    # oauth2
    flows: Optional[dict[str, Any]] = None
    # openIdConnect
    openid_connect_url: Optional[str] = None


class SecurityRequirement(_Frozen):
    scheme: SecurityScheme
    scopes: list[str] = Field(default_factory=list)


# --- Operations ---


class Method(_Frozen):
    """A single fully assembled operation (one path template + HTTP method).

    ``security`` is an OR of ANDs: any inner list whose requirements all
    hold authorises the call. An empty outer list means no authentication.
    """

    method: HTTPMethod
    path: str
    url_suffix: list[PathComponent] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None
    operation_id: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: list[Response] = Field(default_factory=list)
    deprecated: bool = False
    security: list[list[SecurityRequirement]] = Field(default_factory=list)
    servers: list[Server] = Field(default_factory=list)


class Model(_Frozen):
    """Complete normalized representation of an OpenAPI 3.0.0 document.

    Produced by :func:`~oasmodel.parser.modeler.build_model`.

    See Also:
        :class:`Method`: Individual operation within the document.
        :class:`APIInfo`: Metadata (title, version, etc.).
    """

    openapi_version: str
    info: APIInfo
    operations: list[Method] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    external_docs: Optional[ExternalDocs] = None


for _model in (
    SchemaBase,
    StringSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    ArraySchema,
    BooleanSchema,
    NullSchema,
    Encoding,
    MediaTypeContent,
    QueryParameter,
    HeaderParameter,
    PathParameter,
    CookieParameter,
    RequestBody,
    Response,
    Method,
):
    _model.model_rebuild()
