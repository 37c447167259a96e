"""Parse OpenAPI path templates (``/pets/{petId}``) into component lists.

The same parser handles API paths and server URLs, which share the
``{name}`` placeholder syntax.
"""

from __future__ import annotations

from typing import Union

from oasmodel.exceptions import PathTemplateError
from oasmodel.models import PathConstant, PathVariable

PathComponents = list[Union[PathConstant, PathVariable]]


def parse_path(template: str) -> PathComponents:
    """Split *template* into constants and variables.

    Empty constants are dropped, so ``"/a/{b}"`` yields two components and
    ``""`` yields none.

    Raises:
        PathTemplateError: If braces are unbalanced or nested, or a
            placeholder has an empty name.

    Example::

        >>> [c.kind for c in parse_path("/pets/{petId}/photos")]
        ['const', 'param', 'const']
    """
    fragments = template.split("{")
    components: PathComponents = [PathConstant(value=fragments[0])]

    for fragment in fragments[1:]:
        parts = fragment.split("}")
        if len(parts) != 2:
            raise PathTemplateError(f"Invalid path format '{template}'")
        name, constant = parts
        if not name:
            raise PathTemplateError(
                f"Empty parameter names not allowed in path '{template}'"
            )
        components.append(PathVariable(name=name))
        components.append(PathConstant(value=constant))

    # A stray '}' in the leading constant is just as unbalanced.
    if "}" in fragments[0]:
        raise PathTemplateError(f"Invalid path format '{template}'")

    return [c for c in components if not (isinstance(c, PathConstant) and c.value == "")]


def format_path(components: PathComponents) -> str:
    """Join *components* back into a template string."""
    return "".join(
        c.value if isinstance(c, PathConstant) else "{" + c.name + "}"
        for c in components
    )


def path_variables(components: PathComponents) -> list[str]:
    """Return the variable names of *components* in template order."""
    return [c.name for c in components if isinstance(c, PathVariable)]
