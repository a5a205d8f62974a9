"""Exception hierarchy for easier_requests.

All exceptions inherit from :class:`EasierRequestsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`easier_requests.exit_codes`.  The CLI entry point
:func:`easier_requests.app.main` catches ``EasierRequestsError`` and exits
with the appropriate code.

Two families matter to library callers:

* :class:`LedgerError` subclasses signal misuse of a request identifier.
  They are raised synchronously by the offending
  :class:`~easier_requests.ledger.RequestLedger` call and are never
  recorded.
* :class:`TransportError` subclasses describe a request that failed on the
  wire.  The ledger records them as the terminal outcome of the request so
  they can be fetched later with
  :meth:`~easier_requests.ledger.RequestLedger.error`.

Subclass hierarchy::

    EasierRequestsError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- LedgerError                (exit 8)
    |   +-- IDInUseError
    |   +-- RequestNotCompleteError
    |   +-- InvalidRequestError
    |   +-- UnbalancedParametersError
    +-- TransportError             (exit 5)
    |   +-- AuthError              (exit 3)
    |   +-- NotFoundError          (exit 4)
    |   +-- ClientError            (exit 5)
    |   +-- ServerError            (exit 5)
    |   +-- ConnectionError_       (exit 6)
    +-- ConfigError                (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from easier_requests.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_LEDGER_ERROR,
    EXIT_NOT_FOUND,
)

if TYPE_CHECKING:
    import httpx


class EasierRequestsError(Exception):
    """Base exception for all easier_requests errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`easier_requests.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(EasierRequestsError):
    """Raised for invalid CLI arguments (e.g. a ``--param`` without ``=``)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(EasierRequestsError):
    """Raised for configuration problems (invalid JSON, bad option values, bad env vars)."""

    exit_code = EXIT_GENERIC_FAILURE


# --- Identifier misuse ---


class LedgerError(EasierRequestsError):
    """Base class for request-identifier contract violations.

    Args:
        message: Human-readable error description.
        request_id: The identifier the offending call was made with.
    """

    exit_code = EXIT_LEDGER_ERROR

    def __init__(self, message: str, request_id: Optional[str] = None):
        super().__init__(message)
        self.request_id = request_id


class IDInUseError(LedgerError):
    """Raised when a request is dispatched under an identifier that is in flight or holds an unretrieved outcome."""


class RequestNotCompleteError(LedgerError):
    """Raised when the outcome of a request is read while it is still in flight."""


class InvalidRequestError(LedgerError):
    """Raised when the outcome of a request that was never made, or was already retrieved, is read."""


class UnbalancedParametersError(LedgerError):
    """Raised when a flat parameter list does not hold an even number of tokens."""


# --- Transport failures ---


class TransportError(EasierRequestsError):
    """A request that failed on the wire or was answered with an error status.

    Args:
        message: Human-readable error description.
        response: The :class:`httpx.Response` when the server answered,
            ``None`` for network-level failures and stub transports.
    """

    exit_code = EXIT_HTTP_ERROR

    def __init__(self, message: str, response: Optional[httpx.Response] = None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, if there was one."""
        if self.response is None:
            return None
        return self.response.status_code


class AuthError(TransportError):
    """Raised when the server answers HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TransportError):
    """Raised when the server answers HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ClientError(TransportError):
    """Raised for any other HTTP 4xx answer."""


class ServerError(TransportError):
    """Raised when the server answers with an HTTP 5xx status."""


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
