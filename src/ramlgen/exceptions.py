"""Exception hierarchy for ramlgen.

All exceptions inherit from :class:`RamlgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ramlgen.exit_codes`.
The top-level error handler in :func:`ramlgen.app.main` catches
``RamlgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    RamlgenError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ResponseBuildError         (exit 2)
    +-- DescriptionParseError      (exit 7)
    |   +-- DescriptionInvalidError (exit 7)
    +-- CompilationError           (exit 8)
    +-- ConfigError                (exit 1)
"""

from __future__ import annotations

from ramlgen.exit_codes import (
    EXIT_COMPILATION_ERROR,
    EXIT_DESCRIPTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class RamlgenError(Exception):
    """Base exception for all ramlgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`ramlgen.exit_codes`. The entry point catches
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


class InvalidUsageError(RamlgenError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class DescriptionParseError(RamlgenError):
    """Raised when the API description cannot be read or parsed as JSON/YAML."""

    exit_code = EXIT_DESCRIPTION_ERROR


class DescriptionInvalidError(DescriptionParseError):
    """Raised when the description parsed but has structural problems.

    All problems found while building the resource graph are collected
    first and reported together, so a single run shows every mistake.

    Args:
        errors: One message per structural problem, in discovery order.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid RAML definition:\n" + "\n".join(self.errors))


class CompilationError(RamlgenError):
    """Raised when walking the resource tree fails unexpectedly.

    The original exception is always chained as ``__cause__``.
    """

    exit_code = EXIT_COMPILATION_ERROR


class ResponseBuildError(RamlgenError):
    """Raised when a response factory is applied with missing or unknown arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(RamlgenError):
    """Raised for configuration problems (bad output directory, empty package, invalid JSON)."""

    exit_code = EXIT_GENERIC_FAILURE
