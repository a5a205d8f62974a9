"""Transports that carry ledger requests over the wire.

Classes:
    :class:`Transport` -- abstract base every transport implements.
    :class:`CallableTransport` -- wraps an ``async def send(request)`` function.
    :class:`HttpxTransport` -- default transport backed by :class:`httpx.AsyncClient`.

Example::

    from easier_requests.transport import HttpxTransport

    async with HttpxTransport() as transport:
        payload = await transport.send(PreparedRequest("GET", "https://example.com"))
"""

from easier_requests.transport.base import CallableTransport, Transport
from easier_requests.transport.httpx_transport import HttpxTransport

__all__ = ["Transport", "CallableTransport", "HttpxTransport"]
