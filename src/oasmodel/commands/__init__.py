"""Built-in CLI sub-commands for oasmodel.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~oasmodel.commands.model` -- ``model`` and ``validate``: run the
  load / resolve / model pipeline on a document.
* :mod:`~oasmodel.commands.inspect` -- tabulate operations, servers,
  security, and API info of a modeled document.
* :mod:`~oasmodel.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or plain callback
functions registered directly on the root app (``model``, ``validate``).
"""
