"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oasmodel.exceptions.OasModelError` subclass.
CI scripts that gate on document validity can inspect the exit code to tell
an unreadable document apart from a readable but invalid one.

Example::

    $ oasmodel validate petstore.yaml
    $ echo $?
    8   # EXIT_INVALID_DOCUMENT -- the document violates an OpenAPI rule
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_LOAD_ERROR = 7
"""The document could not be fetched or decoded as JSON/YAML."""

EXIT_INVALID_DOCUMENT = 8
"""The document was decoded but failed reference resolution or modeling."""
