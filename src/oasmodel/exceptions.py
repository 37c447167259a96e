"""Exception hierarchy for oasmodel.

All exceptions inherit from :class:`OasModelError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oasmodel.exit_codes`.
The top-level error handler in :func:`oasmodel.app.main` catches
``OasModelError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Every :class:`ModelingError` is fatal to the current modeling run: the
pipeline never returns a partial model.

Subclass hierarchy::

    OasModelError (exit 1)
    +-- InvalidUsageError               (exit 2)
    +-- SpecLoadError                   (exit 7)
    +-- ModelingError                   (exit 8)
    |   +-- ReferenceResolutionError
    |   +-- PathTemplateError
    |   +-- SchemaTypeError
    |   +-- SchemaCycleError
    |   +-- ParameterError
    |   +-- PathParameterMismatchError
    |   +-- SecuritySchemeError
    |   +-- EncodingError
    |   +-- ResponseKeyError
    |   +-- UnsupportedVersionError
    |   +-- InvalidFieldError
    +-- ConfigError                     (exit 1)
"""

from oasmodel.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_DOCUMENT,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_LOAD_ERROR,
)


class OasModelError(Exception):
    """Base exception for all oasmodel errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasmodel.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(OasModelError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class SpecLoadError(OasModelError):
    """Raised when a document cannot be fetched, read, or decoded."""

    exit_code = EXIT_SPEC_LOAD_ERROR


class ModelingError(OasModelError):
    """Base class for violations found while resolving or modeling a document."""

    exit_code = EXIT_INVALID_DOCUMENT


class ReferenceResolutionError(ModelingError):
    """Raised for a non-local ``$ref`` or a pointer that designates nothing."""


class PathTemplateError(ModelingError):
    """Raised for unbalanced ``{``/``}`` nesting or an empty variable name."""


class SchemaTypeError(ModelingError):
    """Raised when a schema declares a ``type`` outside the seven known tags."""


class SchemaCycleError(ModelingError):
    """Raised when schema normalization reaches a node it is already inside."""


class ParameterError(ModelingError):
    """Raised for parameter contract violations.

    Covers an unknown ``in`` location, a path parameter not marked required,
    and a duplicate ``(name, in)`` pair within one declared list.
    """


class PathParameterMismatchError(ModelingError):
    """Raised when declared path parameters and URL template variables disagree."""


class SecuritySchemeError(ModelingError):
    """Raised when a security requirement names an undeclared scheme."""


class EncodingError(ModelingError):
    """Raised when an encoding entry names a property its schema does not have."""


class ResponseKeyError(ModelingError):
    """Raised for a response key that is neither ``default`` nor a 3-character status pattern."""


class UnsupportedVersionError(ModelingError):
    """Raised when the document's ``openapi`` field is not the supported version."""


class InvalidFieldError(ModelingError):
    """Raised when a document value has the wrong type for the model field it fills."""


class ConfigError(OasModelError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
