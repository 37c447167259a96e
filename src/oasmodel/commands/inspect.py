"""Inspect commands -- examine a modeled document.

Provides the ``oasmodel inspect`` sub-command group with read-only
commands for viewing what the modeler produced: operations, effective
servers, effective security, and general API info. Every sub-command
loads and models the given document first, so inheritance (servers,
security, path-level parameters) is already applied in what is shown.
"""

from __future__ import annotations

from typing import Optional

import typer

from oasmodel.commands.model import load_model
from oasmodel.models import Method, Server
from oasmodel.output import format_response, get_output, info
from oasmodel.parser.paths import format_path


inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_ARGUMENT = typer.Argument(
    help="OpenAPI 3.0.0 document: URL, file path, or '-' for stdin."
)


def _server_url(server: Server) -> str:
    return format_path(server.url_prefix)


def _security_label(op: Method) -> str:
    """Render OR-of-AND security as ``a+b | c``; ``-`` when unauthenticated."""
    if not op.security:
        return "-"
    return " | ".join(
        "+".join(req.scheme.name for req in alternative) or "(none)"
        for alternative in op.security
    )


@inspect_app.command("operations")
def inspect_operations(
    ctx: typer.Context,
    source: str = _SOURCE_ARGUMENT,
) -> None:
    """List all operations in document order.

    Displays a table of every operation with its HTTP method, path,
    operation id, summary, and deprecation status.

    Example::

        oasmodel inspect operations petstore.yaml
    """
    model = load_model(ctx, source)

    headers = ["Method", "Path", "Operation ID", "Summary", "Deprecated"]
    rows: list[list[str]] = []
    for op in model.operations:
        rows.append([
            op.method.value.upper(),
            op.path,
            op.operation_id or "-",
            op.summary or "-",
            "Yes" if op.deprecated else "",
        ])

    get_output().print_table(
        headers, rows, title=f"{model.info.title} -- Operations ({len(rows)})"
    )


@inspect_app.command("servers")
def inspect_servers(
    ctx: typer.Context,
    source: str = _SOURCE_ARGUMENT,
) -> None:
    """Show the effective servers of every operation.

    Each row is one (operation, server) pair after path-item and document
    servers have been inherited.

    Example::

        oasmodel inspect servers petstore.yaml
    """
    model = load_model(ctx, source)

    headers = ["Method", "Path", "Server", "Variables"]
    rows: list[list[str]] = []
    for op in model.operations:
        for server in op.servers:
            variables = ", ".join(
                f"{name}={var.default}" for name, var in server.variables.items()
            )
            rows.append([
                op.method.value.upper(),
                op.path,
                _server_url(server),
                variables or "-",
            ])

    get_output().print_table(headers, rows, title="Servers")


@inspect_app.command("security")
def inspect_security(
    ctx: typer.Context,
    source: str = _SOURCE_ARGUMENT,
) -> None:
    """Show the effective security requirements of every operation.

    Alternatives are separated by ``|``; schemes that must all hold
    together are joined by ``+``.

    Example::

        oasmodel inspect security petstore.yaml
    """
    model = load_model(ctx, source)

    if not any(op.security for op in model.operations):
        info("No operation requires authentication.")
        return

    headers = ["Method", "Path", "Security", "Scopes"]
    rows: list[list[str]] = []
    for op in model.operations:
        scopes = sorted(
            {scope for alt in op.security for req in alt for scope in req.scopes}
        )
        rows.append([
            op.method.value.upper(),
            op.path,
            _security_label(op),
            ", ".join(scopes) or "-",
        ])

    get_output().print_table(headers, rows, title="Security")


@inspect_app.command("info")
def inspect_info(
    ctx: typer.Context,
    source: str = _SOURCE_ARGUMENT,
) -> None:
    """Show API info (title, version, description, etc.).

    Outputs a structured view of the API metadata: title, version,
    OpenAPI version, description, distinct server URLs, operation count,
    tags, and optional contact/license fields.

    Example::

        oasmodel inspect info petstore.yaml
    """
    model = load_model(ctx, source)

    servers: list[str] = []
    for op in model.operations:
        for server in op.servers:
            url = _server_url(server)
            if url not in servers:
                servers.append(url)

    data: dict = {
        "title": model.info.title,
        "version": model.info.version,
        "openapi_version": model.openapi_version,
        "description": model.info.description or "-",
        "servers": servers,
        "operations": len(model.operations),
        "tags": [tag.name for tag in model.tags],
    }

    contact: Optional[str] = model.info.contact_email or model.info.contact_name
    if contact:
        data["contact"] = contact
    if model.info.license_name:
        data["license"] = model.info.license_name

    format_response(data)
