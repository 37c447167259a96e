"""Helpers shared by the modeler stages.

OpenAPI objects mix entry keys with specification-extension keys
(``x-...``), and the resolver adds a ``$path`` tag to every referenced
node.  :func:`object_keys` is the one place that decides which keys of a
mapping are entries; :func:`object_items` pairs them, as strings, with
their values.
"""

from __future__ import annotations

from typing import Any, Mapping

from oasmodel.models import ExternalDocs
from oasmodel.parser.resolver import REF_PATH_KEY


def object_keys(mapping: Mapping[str, Any] | None, *, extensions: bool = False) -> list[str]:
    """Return the entry keys of *mapping* in declaration order.

    The ``$path`` tag is always excluded.  Keys starting with ``x-`` are
    excluded unless *extensions* is true.  Only extensible OpenAPI objects
    (paths, responses, components) carry extension keys; plain maps such as
    schema ``properties``, ``headers``, ``content`` or ``encoding`` pass
    ``extensions=True`` because an entry may be named ``x-...``.

    Args:
        mapping: An OpenAPI map (paths, responses, content, headers, ...),
            or ``None`` when the field is absent.
        extensions: Keep ``x-`` prefixed keys.

    Returns:
        A new list of keys; empty for ``None``.
    """
    if not mapping:
        return []
    return [
        key
        for key in mapping
        if key != REF_PATH_KEY and (extensions or not str(key).startswith("x-"))
    ]


def object_items(
    mapping: Mapping[Any, Any] | None, *, extensions: bool = False
) -> list[tuple[str, Any]]:
    """Return ``(name, value)`` entry pairs, filtered like :func:`object_keys`.

    Names are always strings: YAML decodes unquoted keys such as ``200``
    as integers, and every model keys its maps by ``str``.
    """
    return [(str(key), mapping[key]) for key in object_keys(mapping, extensions=extensions)]


def parse_external_docs(node: Mapping[str, Any] | None) -> ExternalDocs | None:
    """Convert an *External Documentation Object*; ``None`` when absent."""
    if not node:
        return None
    return ExternalDocs(url=node.get("url", ""), description=node.get("description"))
