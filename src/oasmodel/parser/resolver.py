"""Resolve ``$ref`` JSON Reference pointers in an OpenAPI document, in place.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  This module
replaces every such node with the node it designates.  Unlike a deep-copy
inliner, substitution is by identity: after resolution the referencing
location and the referenced location hold the *same* object, so a change made
through one is visible through the other.  Consumers must treat resolved
nodes as shared and read-only.

Only **internal** references (those starting with ``#``) are supported.
External file or URL references raise
:class:`~oasmodel.exceptions.ReferenceResolutionError`.

Every node that is the target of a reference is tagged with a ``$path`` key
holding its canonical pointer, so later stages can tell that a node is a
named component and where it came from.

No cycle detection is performed.  A schema that references itself becomes a
genuinely cyclic object graph; the modeler rejects such graphs when it walks
them (see :mod:`oasmodel.parser.schema`).  Reference chains (a ``$ref``
pointing at another ``$ref`` node) are substituted independently in
discovery order and are not flattened.

The public function is :func:`resolve_refs`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Union

from oasmodel.exceptions import ReferenceResolutionError

logger = logging.getLogger(__name__)

REF_KEY = "$ref"
REF_PATH_KEY = "$path"

_Location = tuple[Union[dict, list], Union[str, int]]


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Replace every local ``$ref`` node in *document* with its target.

    The document is mutated in place and returned for convenience.  All
    ``$ref`` locations are collected before any substitution takes place;
    they are then rewritten in discovery order (depth-first, mapping
    insertion order, list index order).

    Args:
        document: The raw OpenAPI document, as returned by
            :func:`~oasmodel.parser.loader.load_spec`.

    Returns:
        The same *document* object, with references substituted.

    Raises:
        ReferenceResolutionError: If a reference is external, or names a
            location that does not exist in the document.

    Example::

        raw = load_spec("petstore.yaml")
        resolve_refs(raw)
        pet = raw["components"]["schemas"]["Pet"]
        assert raw["paths"]["/pets/{id}"]["get"]["responses"]["200"][
            "content"]["application/json"]["schema"] is pet
    """
    hits = list(_find_references(document))
    logger.debug("Found %d $ref node(s)", len(hits))

    for container, key in hits:
        ref = container[key][REF_KEY]
        segments = _parse_reference(ref)
        source = _resolve_pointer(document, segments, ref)
        if isinstance(source, dict):
            source[REF_PATH_KEY] = format_pointer(segments)
        container[key] = source

    return document


def format_pointer(segments: list[str]) -> str:
    """Build the canonical ``#/...`` pointer for decoded *segments*."""
    escaped = [s.replace("~", "~0").replace("/", "~1") for s in segments]
    return "#/" + "/".join(escaped) if escaped else "#"


def _find_references(root: Any) -> Iterator[_Location]:
    """Yield ``(container, key)`` for every child that is a ``$ref`` node.

    Containers shared between several locations (YAML anchors) are visited
    once; their children have a single location each.
    """
    seen: set[int] = set()
    stack: list[Any] = [root]
    # Explicit stack, children pushed in reverse to keep document order.
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))

        if isinstance(node, dict):
            items = list(node.items())
        elif isinstance(node, list):
            items = list(enumerate(node))
        else:
            continue

        found: list[Any] = []
        for key, child in items:
            if _is_reference(child):
                yield node, key
            elif isinstance(child, (dict, list)):
                found.append(child)
        stack.extend(reversed(found))


def _is_reference(node: Any) -> bool:
    return isinstance(node, dict) and isinstance(node.get(REF_KEY), str)


def _parse_reference(ref: str) -> list[str]:
    """Split a local reference into decoded JSON Pointer segments.

    ``"#"`` designates the document root.  Segments are decoded per
    RFC 6901 (``~1`` becomes ``/`` before ``~0`` becomes ``~``).

    Raises:
        ReferenceResolutionError: If *ref* is not a local reference.
    """
    if not ref.startswith("#"):
        raise ReferenceResolutionError(
            f"External $ref not supported: {ref}. "
            "Only local references (#/...) are handled."
        )

    pointer = ref[1:]
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise ReferenceResolutionError(
            f"Invalid $ref '{ref}': fragment must be a JSON Pointer starting with '/'"
        )

    return [part.replace("~1", "/").replace("~0", "~") for part in pointer[1:].split("/")]


def _resolve_pointer(root: Any, segments: list[str], ref: str) -> Any:
    """Walk *segments* from *root* and return the node found there.

    Mapping segments are keys; list segments must be decimal indexes.

    Raises:
        ReferenceResolutionError: If any segment does not exist.
    """
    current: Any = root
    for segment in segments:
        if isinstance(current, dict):
            if segment not in current:
                raise ReferenceResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            if not segment.isdigit() or int(segment) >= len(current):
                raise ReferenceResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                )
            current = current[int(segment)]
        else:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
