"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~easier_requests.exceptions.EasierRequestsError`
subclass.  The ``easier-requests`` CLI exits with these codes so shell
wrappers can tell a rejected credential from a dead server without parsing
stderr.

Example::

    $ easier-requests fetch https://api.example.com/missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The server rejected the request's credentials (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_HTTP_ERROR = 5
"""The remote server answered with another HTTP 4xx or 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_LEDGER_ERROR = 8
"""A request identifier was misused (already in use, not complete, or unknown)."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
