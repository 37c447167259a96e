"""Model commands -- run the modeling pipeline on a document.

Provides the ``oasmodel model`` and ``oasmodel validate`` commands. Both
load a document from a URL, file, or stdin, resolve its ``$ref`` pointers,
and build the :class:`~oasmodel.models.Model`. ``model`` prints the result;
``validate`` only reports whether the pipeline succeeded, and exits with
the failing error's exit code otherwise.

:func:`load_model` is shared with :mod:`oasmodel.commands.inspect`.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from oasmodel.exceptions import OasModelError
from oasmodel.models import GlobalConfig, Model
from oasmodel.output import (
    OutputFormat,
    OutputManager,
    error,
    format_document,
    format_response,
    set_output,
    success,
)

logger = logging.getLogger(__name__)


def _apply_config(ctx: typer.Context, strict: Optional[bool]) -> GlobalConfig:
    """Resolve the effective config and honour its output format.

    An explicit ``--json``/``--yaml``/``--plain`` flag always wins; otherwise
    a non-``auto`` format from env or config files replaces the manager
    installed by the root callback.
    """
    from oasmodel.config import resolve_config

    obj = ctx.obj or {}
    config = resolve_config(cli_format=obj.get("format"), cli_strict=strict)

    if obj.get("format") is None and config.output.format != OutputFormat.AUTO.value:
        set_output(
            OutputManager(
                format=OutputFormat(config.output.format),
                no_color=obj.get("no_color", False),
                quiet=obj.get("quiet", False),
                verbose=obj.get("verbose", False),
                output_file=obj.get("output_file"),
            )
        )
    return config


def load_model(
    ctx: typer.Context,
    source: str,
    strict: Optional[bool] = None,
) -> Model:
    """Load *source* and model it under the effective configuration.

    Errors are reported on stderr and converted into ``typer.Exit`` carrying
    the error's exit code.

    Args:
        ctx: Typer context carrying the root callback's options.
        source: URL, file path, or ``-`` for stdin.
        strict: ``--strict`` override; ``None`` defers to config.

    Returns:
        The built :class:`~oasmodel.models.Model`.

    Raises:
        typer.Exit: If configuration, loading, or modeling fails.
    """
    from oasmodel.parser import load_spec, model_spec

    try:
        config = _apply_config(ctx, strict)
        raw = load_spec(source)
        logger.debug("Loaded document from %s", source)
        return model_spec(raw, options=config.modeler)
    except OasModelError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


_STRICT_OPTION = typer.Option(
    None,
    "--strict/--no-strict",
    help="Reject allowEmptyValue outside query parameters.",
    show_default=False,
)


def model_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI 3.0.0 document: URL, file path, or '-' for stdin."),
    strict: Optional[bool] = _STRICT_OPTION,
) -> None:
    """Build the normalized model of a document and print it.

    The model is printed as JSON with ``--json`` and as YAML otherwise.

    Example::

        oasmodel model petstore.yaml
        oasmodel --json model https://example.com/openapi.json -o model.json
    """
    model = load_model(ctx, source, strict=strict)
    format_document(model.model_dump(mode="json", by_alias=True))


def validate_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI 3.0.0 document: URL, file path, or '-' for stdin."),
    strict: Optional[bool] = _STRICT_OPTION,
) -> None:
    """Check that a document can be resolved and modeled.

    Prints a short summary on success. On failure the error is printed to
    stderr and the process exits with code 7 (unreadable document) or 8
    (invalid document).

    Example::

        oasmodel validate petstore.yaml
        oasmodel --json validate - < petstore.json
    """
    model = load_model(ctx, source, strict=strict)
    success(f"{source} is a valid OpenAPI {model.openapi_version} document.")
    format_response(
        {
            "title": model.info.title,
            "version": model.info.version,
            "openapi_version": model.openapi_version,
            "operations": len(model.operations),
        }
    )
