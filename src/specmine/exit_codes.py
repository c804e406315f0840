"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specmine.exceptions.SpecmineError` subclass.
External tooling (CI scripts, cron wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specmine build --source ./missing
    $ echo $?
    6   # EXIT_SOURCE_ERROR -- the document source could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SOURCE_ERROR = 6
"""A documentation page could not be fetched or read."""

EXIT_EXTRACTION_ERROR = 7
"""A documentation page could not be turned into definition records."""

EXIT_TIMEOUT = 8
"""Building the definition took longer than the configured timeout."""
