"""Exception hierarchy for specmine.

All exceptions inherit from :class:`SpecmineError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specmine.exit_codes`.
The top-level error handler in :func:`specmine.app.main` catches
``SpecmineError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Inside the extraction engine these exceptions are mostly caught rather than
propagated: a :class:`StructureError` skips one section, and any error
raised while handling one page only drops that page's contribution.

Subclass hierarchy::

    SpecmineError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- DocumentSourceError  (exit 6)
    +-- ExtractionError      (exit 7)
    |   +-- StructureError   (exit 7)
    +-- BuildTimeoutError    (exit 8)
    +-- ConfigError          (exit 1)
        +-- OverrideError    (exit 1)
"""

from specmine.exit_codes import (
    EXIT_EXTRACTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_ERROR,
    EXIT_TIMEOUT,
)


class SpecmineError(Exception):
    """Base exception for all specmine errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specmine.exit_codes`. The entry point catches
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


class InvalidUsageError(SpecmineError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class DocumentSourceError(SpecmineError):
    """Raised when a documentation page cannot be fetched, read, or rendered."""

    exit_code = EXIT_SOURCE_ERROR


class ExtractionError(SpecmineError):
    """Raised when a page cannot be turned into definition records."""

    exit_code = EXIT_EXTRACTION_ERROR


class StructureError(ExtractionError):
    """Raised when a single section does not have the expected shape.

    Builders raise this for a heading that is not an operation header or a
    model heading without an ``id``. The caller skips the section and moves
    on to the next one.
    """


class BuildTimeoutError(SpecmineError):
    """Raised when building the definition exceeds the configured timeout."""

    exit_code = EXIT_TIMEOUT


class ConfigError(SpecmineError):
    """Raised for configuration problems (invalid JSON, bad values, missing paths)."""

    exit_code = EXIT_GENERIC_FAILURE


class OverrideError(ConfigError):
    """Raised when a curated override file cannot be read or validated."""
