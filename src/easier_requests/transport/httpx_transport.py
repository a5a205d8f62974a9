"""Default transport backed by :class:`httpx.AsyncClient`.

:class:`HttpxTransport` performs the actual network call for a
:class:`~easier_requests.ledger.RequestLedger` and translates everything
that can go wrong into the :class:`~easier_requests.exceptions.TransportError`
family:

- **Status mapping** -- 401/403 become :class:`AuthError`, 404
  :class:`NotFoundError`, other 4xx :class:`ClientError`, 5xx
  :class:`ServerError`.
- **Network errors** -- timeouts and connection failures become
  :class:`ConnectionError_`.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.

Retries, auth and pooling policy are left to httpx and its configuration;
the transport sends each request exactly once.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from easier_requests.exceptions import (
    AuthError,
    ClientError,
    ConnectionError_,
    NotFoundError,
    ServerError,
    TransportError,
)
from easier_requests.models import PreparedRequest, TransportConfig
from easier_requests.output import get_output
from easier_requests.transport.base import Transport

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Asynchronous HTTP transport for the request ledger.

    Can be used as an async context manager.  When used without one, an
    :class:`httpx.AsyncClient` is opened lazily on the first request and
    must be released with :meth:`aclose`.

    Args:
        config: Base URL, timeout, SSL verification and default headers.
        client: An already-configured :class:`httpx.AsyncClient`.  The
            transport does not close a client it did not create.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.

    Example::

        async with HttpxTransport(TransportConfig(base_url="https://api.example.com")) as transport:
            ledger = RequestLedger(transport=transport)
            await ledger.get("/users", "users")
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config or TransportConfig()
        self._client = client
        self._owns_client = client is None
        self._dry_run = dry_run

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport opened it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport interface
    # ------------------------------------------------------------------ #

    async def send(self, request: PreparedRequest) -> httpx.Response:
        """Send *request* once and return the response.

        ``str`` and ``bytes`` bodies are sent as-is; any other non-``None``
        body is JSON-encoded.

        Returns:
            The :class:`httpx.Response` for any status below 400.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ClientError: On any other 4xx.
            ServerError: On 5xx.
            ConnectionError_: On network / timeout errors.
            TransportError: On a malformed URL, a body that cannot be
                JSON-encoded, or any other httpx failure.
        """
        if self._dry_run:
            return self._print_dry_run(request)

        client = self._ensure_client()
        kwargs: dict[str, Any] = {
            "method": request.method,
            "url": request.url,
            "params": request.params,
        }
        if isinstance(request.body, (str, bytes)):
            kwargs["content"] = request.body
        elif request.body is not None:
            kwargs["json"] = request.body

        try:
            http_request = client.build_request(**kwargs)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise TransportError(
                f"{request.method} {request.url} could not be built: {exc}"
            ) from exc

        logger.debug("Sending %s %s", request.method, request.url)
        try:
            response = await client.send(http_request)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(
                f"{request.method} {request.url} failed: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}"
            ) from exc

        self._map_response_error(response)
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url or "",
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                headers=self._config.headers,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg, response=response)
        if status == 404:
            raise NotFoundError(full_msg, response=response)
        if status >= 500:
            raise ServerError(full_msg, response=response)
        raise ClientError(full_msg, response=response)

    def _print_dry_run(self, request: PreparedRequest) -> httpx.Response:
        """Print request details to stderr and return a synthetic 200 response."""
        base = self._config.base_url or ""
        url = request.url if "://" in request.url else f"{base}{request.url}"

        output = get_output()
        output.info(f"[dry-run] {request.method} {url}")

        for key, value in request.params.items():
            output.info(f"  Param: {key}={value}")

        if isinstance(request.body, bytes):
            output.info(f"  Body: <{len(request.body)} bytes>")
        elif isinstance(request.body, str):
            output.info(f"  Body: {request.body}")
        elif request.body is not None:
            output.info(f"  Body (JSON): {json.dumps(request.body, indent=2, default=str)}")

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=httpx.Request(method=request.method, url=url),
        )
