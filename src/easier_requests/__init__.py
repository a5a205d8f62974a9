"""easier_requests -- fire HTTP requests now, collect their results later by ID.

A :class:`RequestLedger` dispatches each request under an identifier of the
caller's choosing (or one from :meth:`RequestLedger.create_unique_id`),
lets the caller get on with other work, and keeps the outcome until it is
collected -- exactly once -- with :meth:`RequestLedger.response` or
:meth:`RequestLedger.error`.

Typical use::

    import asyncio
    from easier_requests import RequestLedger

    async def main():
        async with RequestLedger(options={"throw_on_failure": False}) as ledger:
            users = ledger.create_unique_id("users")
            await asyncio.gather(
                ledger.get("https://api.example.com/users", users, "page", 1),
                ledger.post("https://api.example.com/audit", "audit-1", {"event": "sync"}),
            )
            print(ledger.response(users).json())

For scripts that want one shared ledger, :func:`get_requester` returns a
lazily created process-wide default.

Modules:
    ledger: The request ledger.
    ids: Unique identifier generation.
    params: Query-parameter normalisation.
    transport: Transport boundary and the httpx-backed default.
    models: Pydantic config models and ledger records.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting used by the CLI.
    app: Typer CLI entry point.
"""

from __future__ import annotations

from typing import Optional

from easier_requests.exceptions import (
    IDInUseError,
    InvalidRequestError,
    RequestNotCompleteError,
    TransportError,
    UnbalancedParametersError,
)
from easier_requests.ledger import RequestLedger
from easier_requests.models import RequestOptions, RequestState

__version__ = "0.1.0"

__all__ = [
    "RequestLedger",
    "RequestOptions",
    "RequestState",
    "IDInUseError",
    "InvalidRequestError",
    "RequestNotCompleteError",
    "TransportError",
    "UnbalancedParametersError",
    "get_requester",
    "set_requester",
    "reset_requester",
]


_requester: Optional[RequestLedger] = None


def get_requester() -> RequestLedger:
    """Return the process-wide default :class:`RequestLedger`, creating it on first use."""
    global _requester
    if _requester is None:
        _requester = RequestLedger()
    return _requester


def set_requester(requester: RequestLedger) -> None:
    """Install *requester* as the process-wide default."""
    global _requester
    _requester = requester


def reset_requester() -> None:
    """Forget the process-wide default.  The old ledger's transport is not closed."""
    global _requester
    _requester = None
