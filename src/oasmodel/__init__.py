"""oasmodel -- Normalize OpenAPI 3.0.0 documents into an immutable operation model.

This package turns a raw OpenAPI 3.0.0 document into a flat list of fully
assembled operations. Every ``$ref`` is resolved, path templates and server
URLs are split into constant and variable components, parameters, request
bodies and responses are normalized, and server and security inheritance is
applied. Consumers such as code generators or documentation renderers work
from the resulting :class:`~oasmodel.models.Model` without re-implementing
any of the OpenAPI lookup rules.

Typical workflow::

    oasmodel validate petstore.yaml   # check the document models cleanly
    oasmodel model petstore.yaml      # print the normalized model

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    parser: Loading, ``$ref`` resolution, and modeling.
    config: XDG-aware configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
