"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ramlgen.exceptions.RamlgenError` subclass.
Build scripts can inspect the exit code to tell a broken description apart
from a broken generator without parsing stderr.

Example::

    $ ramlgen generate api.raml -o build/
    $ echo $?
    7   # EXIT_DESCRIPTION_ERROR -- the RAML document did not validate
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_DESCRIPTION_ERROR = 7
"""The API description could not be loaded, parsed or validated."""

EXIT_COMPILATION_ERROR = 8
"""The resource tree could not be compiled into interfaces."""
