"""OpenAPI document pipeline -- load, resolve ``$ref`` pointers, and build the model.

Typical usage::

    from oasmodel.parser import load_spec, model_spec

    raw = load_spec("https://example.com/petstore.yaml")
    model = model_spec(raw)

Sub-modules:

* :mod:`~oasmodel.parser.loader` -- I/O layer (URL, file, stdin) plus
  text decoding and JSON/YAML detection.
* :mod:`~oasmodel.parser.resolver` -- In-place ``$ref`` substitution.
* :mod:`~oasmodel.parser.modeler` -- Walks the resolved document and
  produces a :class:`~oasmodel.models.Model`, with the help of
  :mod:`~oasmodel.parser.paths`, :mod:`~oasmodel.parser.schema` and
  :mod:`~oasmodel.parser.parameters`.
"""

from __future__ import annotations

import copy as _copy
from typing import Any, Optional

from oasmodel.models import Model, ModelerOptions
from oasmodel.parser.loader import load_spec
from oasmodel.parser.modeler import SUPPORTED_OPENAPI_VERSION, build_model
from oasmodel.parser.resolver import resolve_refs

__all__ = [
    "SUPPORTED_OPENAPI_VERSION",
    "build_model",
    "load_spec",
    "model_spec",
    "resolve_refs",
]


def model_spec(
    raw_spec: dict[str, Any],
    options: Optional[ModelerOptions] = None,
    copy: bool = False,
) -> Model:
    """Resolve references in *raw_spec* and build its model.

    Args:
        raw_spec: The document as returned by :func:`load_spec`.
        options: Optional modeler switches.
        copy: Resolve a deep copy so *raw_spec* is left untouched.

    Returns:
        The normalized :class:`~oasmodel.models.Model`.
    """
    document = _copy.deepcopy(raw_spec) if copy else raw_spec
    return build_model(resolve_refs(document), options)
