"""Build the normalized :class:`~oasmodel.models.Model` from a resolved OpenAPI 3.0.0 document.

This module walks a ``$ref``-resolved document (see
:func:`~oasmodel.parser.resolver.resolve_refs`) and assembles one
:class:`~oasmodel.models.Method` per path + HTTP method.  The single public
entry point is :func:`build_model`.  Internally it delegates to helpers that
each handle one section of the OpenAPI structure:

* ``_extract_info`` / ``_extract_tags`` -- document metadata.
* :func:`parse_servers` -- ``servers`` arrays at every level.
* :func:`parse_security_schemes` / :func:`parse_security_requirements` --
  the scheme registry and OR-of-AND requirement lists.
* :func:`parse_responses` -- status keys, headers and content.
* ``_extract_operations`` -- the ``paths`` object.

Override rules follow the OpenAPI specification: servers come from the
operation, else the path item, else the document; security comes from the
operation, else the document (an explicit empty list means no
authentication); operation parameters override path parameters sharing the
same ``name`` and ``in``; summary and description fall back to the path
item.

Every violation raises a :class:`~oasmodel.exceptions.ModelingError`
subclass; no partial model is ever returned.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from oasmodel.exceptions import (
    InvalidFieldError,
    PathParameterMismatchError,
    ResponseKeyError,
    SecuritySchemeError,
    UnsupportedVersionError,
)
from oasmodel.models import (
    APIInfo,
    HTTPMethod,
    Method,
    Model,
    ModelerOptions,
    ParameterLocation,
    RequestBody,
    Response,
    SecurityRequirement,
    SecurityScheme,
    Server,
    ServerVariable,
    Tag,
)
from oasmodel.parser.parameters import (
    merge_parameters,
    parse_content,
    parse_headers,
    parse_parameters,
)
from oasmodel.parser.paths import parse_path, path_variables
from oasmodel.parser.resolver import REF_PATH_KEY
from oasmodel.parser.util import object_items, object_keys, parse_external_docs

logger = logging.getLogger(__name__)

SUPPORTED_OPENAPI_VERSION = "3.0.0"

DEFAULT_RESPONSE_KEY = "XXX"

_STATUS_KEY = re.compile(r"[0-9X]{3}")

SecurityAlternatives = list[list[SecurityRequirement]]


def build_model(
    document: dict[str, Any], options: Optional[ModelerOptions] = None
) -> Model:
    """Build a :class:`~oasmodel.models.Model` from a resolved document.

    Pure with respect to *document*: nothing is written back into it.

    Args:
        document: An OpenAPI 3.0.0 document whose ``$ref`` nodes have been
            replaced by :func:`~oasmodel.parser.resolver.resolve_refs`.
        options: Optional strictness switches; defaults to
            :class:`~oasmodel.models.ModelerOptions`.

    Returns:
        The immutable model.

    Raises:
        UnsupportedVersionError: If ``openapi`` is not ``"3.0.0"``.
        InvalidFieldError: If a value has the wrong type for its field,
            e.g. a YAML number where a name is expected.
        ModelingError: For any other structural violation.

    Example::

        raw = load_spec("petstore.yaml")
        model = build_model(resolve_refs(raw))
        for op in model.operations:
            print(f"{op.method.value.upper()} {op.path}")
    """
    version = document.get("openapi")
    if version != SUPPORTED_OPENAPI_VERSION:
        raise UnsupportedVersionError(
            f"This modeler is for OpenAPI {SUPPORTED_OPENAPI_VERSION}, found {version}"
        )

    try:
        return _build(document, version, options or ModelerOptions())
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidFieldError(
            f"Invalid value in {exc.title} at '{location}': {first['msg']}"
        ) from None


def _build(document: dict[str, Any], version: str, options: ModelerOptions) -> Model:
    components = document.get("components") or {}
    schemes = parse_security_schemes(components.get("securitySchemes"))

    servers = parse_servers(document.get("servers")) or [
        Server(url_prefix=parse_path("/"))
    ]
    security = parse_security_requirements(schemes, document.get("security")) or []

    operations = _extract_operations(document, servers, schemes, security, options)
    logger.debug(
        "Modeled %d operation(s) from %d path(s)",
        len(operations),
        len(object_keys(document.get("paths"))),
    )

    return Model(
        openapi_version=version,
        info=_extract_info(document),
        operations=operations,
        tags=_extract_tags(document),
        external_docs=parse_external_docs(document.get("externalDocs")),
    )


def _extract_info(document: dict[str, Any]) -> APIInfo:
    """Extract API metadata from the document's ``info`` object.

    Missing optional fields default to ``None``.
    """
    info = document.get("info") or {}
    contact = info.get("contact") or {}
    license_info = info.get("license") or {}

    return APIInfo(
        title=info.get("title", "Untitled API"),
        version=str(info.get("version", "0.0.0")),
        description=info.get("description"),
        terms_of_service=info.get("termsOfService"),
        contact_name=contact.get("name"),
        contact_email=contact.get("email"),
        contact_url=contact.get("url"),
        license_name=license_info.get("name"),
        license_url=license_info.get("url"),
    )


def _extract_tags(document: dict[str, Any]) -> list[Tag]:
    return [
        Tag(
            name=tag.get("name", ""),
            description=tag.get("description"),
            external_docs=parse_external_docs(tag.get("externalDocs")),
        )
        for tag in document.get("tags") or []
    ]


def parse_servers(servers: Optional[list[dict[str, Any]]]) -> Optional[list[Server]]:
    """Parse a ``servers`` array; ``None`` when absent or empty so callers inherit."""
    if not servers:
        return None

    result: list[Server] = []
    for server in servers:
        result.append(
            Server(
                url_prefix=parse_path(server.get("url", "/")),
                description=server.get("description"),
                variables={
                    name: _parse_server_variable(variable or {})
                    for name, variable in object_items(
                        server.get("variables"), extensions=True
                    )
                },
            )
        )
    return result


def _parse_server_variable(variable: dict[str, Any]) -> ServerVariable:
    """Substitution values are strings; YAML may decode them as numbers."""
    enum = variable.get("enum")
    return ServerVariable(
        enum=[str(value) for value in enum] if enum is not None else None,
        default=str(variable.get("default", "")),
        description=variable.get("description"),
    )


def parse_security_schemes(
    schemes: Optional[dict[str, Any]],
) -> dict[str, SecurityScheme]:
    """Build the registry of declared security schemes, keyed by name."""
    registry: dict[str, SecurityScheme] = {}
    for name, node in object_items(schemes):
        registry[name] = SecurityScheme(
            name=name,
            type=node.get("type", ""),
            description=node.get("description"),
            param_name=node.get("name"),
            location=node.get("in"),
            scheme=node.get("scheme"),
            bearer_format=node.get("bearerFormat"),
            flows=_detached(node.get("flows") or node.get("flow")),
            openid_connect_url=node.get("openIdConnectUrl"),
        )
    return registry


def _detached(value: Any) -> Any:
    """Copy plain document data out of the resolved graph, dropping ``$path`` tags."""
    if isinstance(value, dict):
        return {
            str(key): _detached(item)
            for key, item in value.items()
            if key != REF_PATH_KEY
        }
    if isinstance(value, list):
        return [_detached(item) for item in value]
    return value


def parse_security_requirements(
    schemes: dict[str, SecurityScheme],
    security: Optional[list[dict[str, list[str]]]],
) -> Optional[SecurityAlternatives]:
    """Resolve a ``security`` array into alternatives of requirement lists.

    Returns ``None`` when *security* is absent so the caller can inherit;
    an explicit empty list yields an empty list.

    Raises:
        SecuritySchemeError: If a requirement names an undeclared scheme.
    """
    if security is None:
        return None

    alternatives: SecurityAlternatives = []
    for requirement in security:
        requirements: list[SecurityRequirement] = []
        for name, scopes in object_items(requirement, extensions=True):
            scheme = schemes.get(name)
            if scheme is None:
                raise SecuritySchemeError(f"Security scheme '{name}' not found")
            requirements.append(
                SecurityRequirement(scheme=scheme, scopes=[str(s) for s in scopes or []])
            )
        alternatives.append(requirements)
    return alternatives


def parse_responses(responses: Optional[dict[str, Any]]) -> list[Response]:
    """Normalize a *Responses Object*, most specific status keys first.

    ``default`` becomes ``XXX``.  Ordering is by the number of ``X``
    wildcards, ascending; declaration order is kept among equals.

    Raises:
        ResponseKeyError: For a key that is not a 3-character digit/``X``
            pattern.
    """
    result: list[Response] = []
    for raw_key in object_keys(responses):
        node = responses[raw_key] or {}
        # YAML decodes unquoted status codes as integers
        key = str(raw_key)
        if key == "default":
            key = DEFAULT_RESPONSE_KEY
        if not _STATUS_KEY.fullmatch(key):
            raise ResponseKeyError(f"Invalid HTTP status code pattern '{raw_key}'")

        result.append(
            Response(
                key=key,
                description=node.get("description"),
                headers=parse_headers(node.get("headers")),
                content=parse_content(node.get("content")),
            )
        )

    result.sort(key=lambda r: r.key.count("X"))
    return result


def _parse_request_body(body: Optional[dict[str, Any]]) -> Optional[RequestBody]:
    if body is None:
        return None
    return RequestBody(
        description=body.get("description"),
        content=parse_content(body.get("content")),
        required=body.get("required", False),
    )


def _extract_operations(
    document: dict[str, Any],
    servers: list[Server],
    schemes: dict[str, SecurityScheme],
    security: SecurityAlternatives,
    options: ModelerOptions,
) -> list[Method]:
    """Assemble every operation under ``paths``.

    Paths are visited in declaration order and methods in
    :class:`~oasmodel.models.HTTPMethod` order.
    """
    paths = document.get("paths") or {}
    operations: list[Method] = []

    for raw_path in object_keys(paths):
        path_item = paths[raw_path] or {}
        url_suffix = parse_path(raw_path)
        path_servers = parse_servers(path_item.get("servers")) or servers
        path_params = parse_parameters(
            path_item.get("parameters"), options, where=f"path '{raw_path}'"
        )

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if operation is None:
                continue
            where = f"{method.value.upper()} {raw_path}"

            op_params = parse_parameters(
                operation.get("parameters"), options, where=where
            )
            parameters = merge_parameters(path_params, op_params)

            declared = sorted(
                p.name for p in parameters if p.location == ParameterLocation.PATH
            )
            expected = sorted(path_variables(url_suffix))
            if declared != expected:
                raise PathParameterMismatchError(
                    f"Path parameters mismatch in {where}: template has "
                    f"{expected}, declared {declared}"
                )

            op_security = parse_security_requirements(
                schemes, operation.get("security")
            )

            operations.append(
                Method(
                    method=method,
                    path=raw_path,
                    url_suffix=url_suffix,
                    tags=list(operation.get("tags") or []),
                    summary=operation.get("summary") or path_item.get("summary"),
                    description=operation.get("description")
                    or path_item.get("description"),
                    external_docs=parse_external_docs(operation.get("externalDocs")),
                    operation_id=operation.get("operationId"),
                    parameters=parameters,
                    request_body=_parse_request_body(operation.get("requestBody")),
                    responses=parse_responses(operation.get("responses")),
                    deprecated=operation.get("deprecated", False),
                    security=op_security if op_security is not None else security,
                    servers=parse_servers(operation.get("servers")) or path_servers,
                )
            )

    return operations
