"""Abstract transport boundary used by the request ledger.

A transport performs one HTTP request and either returns a success payload
or raises :class:`~easier_requests.exceptions.TransportError`.  The ledger
never looks inside the payload; what "success" carries is up to the
transport (the default :class:`~easier_requests.transport.HttpxTransport`
returns an :class:`httpx.Response`).

Example:
    A stub transport for tests::

        async def fake_send(request):
            if request.url.endswith("/boom"):
                raise TransportError("boom")
            return {"data": 42}

        ledger = RequestLedger(transport=CallableTransport(fake_send))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, Callable

from easier_requests.models import PreparedRequest


class Transport(ABC):
    """Base class for everything that can carry a :class:`PreparedRequest`.

    Subclasses implement :meth:`send`.  :meth:`aclose` defaults to a no-op
    so stateless transports need not override it.
    """

    @abstractmethod
    async def send(self, request: PreparedRequest) -> Any:
        """Perform *request* and return the success payload.

        Args:
            request: Method, URL, body and normalised parameters.

        Returns:
            Whatever the transport defines as a success payload.

        Raises:
            TransportError: If the request failed.  Any other exception is
                treated as a bug and is not recorded by the ledger.
        """
        ...

    async def aclose(self) -> None:
        """Release any connections held by the transport."""


class CallableTransport(Transport):
    """Adapt a plain ``async def send(request)`` function to :class:`Transport`."""

    def __init__(self, func: Callable[[PreparedRequest], Awaitable[Any]]) -> None:
        self._func = func

    async def send(self, request: PreparedRequest) -> Any:
        return await self._func(request)
