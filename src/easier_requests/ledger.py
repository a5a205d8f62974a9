"""Identifier-keyed request ledger.

:class:`RequestLedger` lets a caller fire an HTTP request under an
identifier, carry on with other work, and later collect the outcome exactly
once by that identifier.  Every identifier moves through three states:

1. **In flight** -- dispatched, transport outcome unknown.  Reading the
   outcome raises :class:`~easier_requests.exceptions.RequestNotCompleteError`.
2. **Completed** -- the transport settled; exactly one of a
   :class:`~easier_requests.models.Success` or
   :class:`~easier_requests.models.Failure` is stored.
3. **Absent** -- never used, or the outcome was collected.  Reading raises
   :class:`~easier_requests.exceptions.InvalidRequestError`.

An identifier can only be reused once it is absent again.

Outcomes are collected with :meth:`RequestLedger.response` (success
payload) and :meth:`RequestLedger.error` (failure).  Asking the wrong
accessor returns ``None`` and leaves the entry in place, so a caller who
checks :meth:`~RequestLedger.response` first does not lose the error; the
matching accessor then returns the value and frees the identifier.

Example::

    ledger = RequestLedger()
    await ledger.get("https://api.example.com/users", "users", "page", 2)
    resp = ledger.response("users")
    if resp is None:
        raise ledger.error("users")
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from easier_requests.exceptions import (
    ConfigError,
    IDInUseError,
    InvalidRequestError,
    RequestNotCompleteError,
    TransportError,
)
from easier_requests.ids import UniqueIDGenerator
from easier_requests.models import (
    Failure,
    GlobalConfig,
    Outcome,
    PendingRequest,
    PreparedRequest,
    RequestOptions,
    RequestState,
    Success,
)
from easier_requests.params import normalize_params
from easier_requests.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

_OPTION_ALIASES = {
    info.alias: name
    for name, info in RequestOptions.model_fields.items()
    if info.alias
}


class RequestLedger:
    """Dispatches requests and holds their outcomes until they are collected.

    Each ledger has its own identifier namespace, its own unique-ID
    generator and its own options, so independent ledgers never interfere.
    Use one ledger per event loop; the identifier bookkeeping is guarded by
    a lock, so identifiers may also be created and outcomes read from other
    threads.

    Args:
        transport: Carries requests over the wire.  Defaults to a fresh
            :class:`~easier_requests.transport.HttpxTransport`.
        options: Initial options, as a :class:`RequestOptions` or a mapping
            merged over the defaults.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
    ) -> None:
        self._transport = transport if transport is not None else HttpxTransport()
        self._in_flight: dict[str, PendingRequest] = {}
        self._outcomes: dict[str, Outcome] = {}
        self._ids = UniqueIDGenerator()
        self._options = RequestOptions()
        self._lock = threading.Lock()
        if options:
            self.set_options(options)

    @classmethod
    def from_config(cls, config: GlobalConfig, dry_run: bool = False) -> RequestLedger:
        """Build a ledger with an :class:`HttpxTransport` from resolved configuration.

        Args:
            config: Typically the result of
                :func:`~easier_requests.config.resolve_config`.
            dry_run: Print requests instead of sending them.
        """
        transport = HttpxTransport(config.transport, dry_run=dry_run)
        return cls(transport=transport, options=config.options)

    async def __aenter__(self) -> RequestLedger:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport.  Stored outcomes stay readable."""
        await self._transport.aclose()

    @property
    def transport(self) -> Transport:
        return self._transport

    # ------------------------------------------------------------------ #
    # Identifiers
    # ------------------------------------------------------------------ #

    def create_unique_id(self, prefix: str = "") -> str:
        """Return an identifier no other call on this ledger will return.

        Args:
            prefix: Free-form text placed in front of the identifier.

        Returns:
            ``f"{prefix}#{serial}#{timestamp}"``.
        """
        return self._ids.next(prefix)

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        url: str,
        request_id: str,
        body: Any = None,
        *params: Any,
    ) -> None:
        """Perform a request and store its outcome under *request_id*.

        The outcome is not returned; collect it with :meth:`response` or
        :meth:`error`.

        Args:
            method: HTTP method, case-insensitive.
            url: Absolute URL, or a path relative to the transport's base URL.
            request_id: Identifier to file the outcome under.
            body: Request body, ``None`` for none.
            *params: Query parameters as ``name, value, ...`` tokens or a
                single mapping.

        Raises:
            IDInUseError: If *request_id* is in flight or holds an
                uncollected outcome.
            UnbalancedParametersError: If *params* has an odd number of tokens.
            TransportError: If the transport failed and ``throw_on_failure``
                is set.  The failure is recorded either way.
        """
        prepared = self._register(method, url, request_id, body, params)
        await self._settle(request_id, prepared)

    def submit(
        self,
        method: str,
        url: str,
        request_id: str,
        body: Any = None,
        *params: Any,
    ) -> asyncio.Task[None]:
        """Register a request now and run it in the background.

        Identifier and parameter checks happen before this method returns,
        so :class:`IDInUseError` and :class:`UnbalancedParametersError` are
        raised here rather than inside the task.  Must be called from a
        running event loop.

        Returns:
            The task performing the request.  Await it to observe a
            transport failure when ``throw_on_failure`` is set.
        """
        loop = asyncio.get_running_loop()
        prepared = self._register(method, url, request_id, body, params)
        return loop.create_task(self._settle(request_id, prepared))

    async def get(self, url: str, request_id: str, *params: Any) -> None:
        """Send a GET request.  See :meth:`request`."""
        await self.request("GET", url, request_id, None, *params)

    async def delete(self, url: str, request_id: str, *params: Any) -> None:
        """Send a DELETE request.  See :meth:`request`."""
        await self.request("DELETE", url, request_id, None, *params)

    async def post(self, url: str, request_id: str, body: Any, *params: Any) -> None:
        """Send a POST request with *body*.  See :meth:`request`."""
        await self.request("POST", url, request_id, body, *params)

    async def patch(self, url: str, request_id: str, body: Any, *params: Any) -> None:
        """Send a PATCH request with *body*.  See :meth:`request`."""
        await self.request("PATCH", url, request_id, body, *params)

    async def push(self, url: str, request_id: str, body: Any, *params: Any) -> None:
        """Send a PUT request with *body*.  See :meth:`request`."""
        await self.request("PUT", url, request_id, body, *params)

    async def put(self, url: str, request_id: str, body: Any, *params: Any) -> None:
        """Send a PUT request with *body*.  Same as :meth:`push`."""
        await self.push(url, request_id, body, *params)

    # ------------------------------------------------------------------ #
    # Retrieval
    # ------------------------------------------------------------------ #

    def response(self, request_id: str) -> Any:
        """Collect the success payload stored under *request_id*.

        Returns:
            The payload, after which the identifier is free again.  ``None``
            if the request failed; the entry is then kept until
            :meth:`error` collects the failure.

        Raises:
            RequestNotCompleteError: If the request is still in flight.
            InvalidRequestError: If there is nothing stored under *request_id*.
        """
        with self._lock:
            outcome = self._completed_outcome(request_id)
            if isinstance(outcome, Failure):
                return None
            del self._outcomes[request_id]
        logger.debug("Collected response for %s", request_id)
        return outcome.payload

    def error(self, request_id: str) -> Optional[TransportError]:
        """Collect the failure stored under *request_id*.

        Returns:
            The :class:`TransportError`, after which the identifier is free
            again.  ``None`` if the request succeeded; the entry is then
            kept until :meth:`response` collects the payload.

        Raises:
            RequestNotCompleteError: If the request is still in flight.
            InvalidRequestError: If there is nothing stored under *request_id*.
        """
        with self._lock:
            outcome = self._completed_outcome(request_id)
            if isinstance(outcome, Success):
                return None
            del self._outcomes[request_id]
        logger.debug("Collected error for %s", request_id)
        return outcome.error

    def state(self, request_id: str) -> RequestState:
        """Report where *request_id* is in its lifecycle without consuming anything."""
        with self._lock:
            if request_id in self._in_flight:
                return RequestState.IN_FLIGHT
            if request_id in self._outcomes:
                return RequestState.COMPLETED
            return RequestState.ABSENT

    def in_flight(self) -> list[str]:
        """Identifiers currently in flight, in dispatch order."""
        with self._lock:
            return list(self._in_flight)

    def completed(self) -> list[str]:
        """Identifiers holding an outcome that has not been collected yet."""
        with self._lock:
            return list(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._in_flight) + len(self._outcomes)

    def __contains__(self, request_id: object) -> bool:
        with self._lock:
            return request_id in self._in_flight or request_id in self._outcomes

    # ------------------------------------------------------------------ #
    # Options
    # ------------------------------------------------------------------ #

    @property
    def options(self) -> RequestOptions:
        """A copy of the current options; changing it does not affect the ledger."""
        return self._options.model_copy(deep=True)

    def set_options(
        self,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
    ) -> RequestOptions:
        """Read, reset, or update the ledger's options.

        Args:
            options: ``None`` leaves the options unchanged.  An empty
                mapping resets every option to its default.  A non-empty
                mapping is merged over the current options; keys may be
                snake_case or camelCase and unknown keys are kept.  A
                :class:`RequestOptions` replaces the options outright.

        Returns:
            A copy of the resulting options.

        Raises:
            ConfigError: If a value does not validate.  The current
                options are left untouched.
        """
        if options is None:
            return self.options

        if isinstance(options, RequestOptions):
            updated = options
        elif not options:
            updated = RequestOptions()
        else:
            merged = self._options.model_dump()
            merged.update({_OPTION_ALIASES.get(k, k): v for k, v in options.items()})
            try:
                updated = RequestOptions.model_validate(merged)
            except ValidationError as exc:
                raise ConfigError(f"Invalid request options: {exc}") from exc

        self._options = updated.model_copy(deep=True)
        logger.debug("Options set to %s", updated.model_dump())
        return self.options

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _register(
        self,
        method: str,
        url: str,
        request_id: str,
        body: Any,
        params: tuple[Any, ...],
    ) -> PreparedRequest:
        """Claim *request_id* and mark it in flight.

        Runs without awaiting, so no other task can see the identifier
        half-registered.
        """
        with self._lock:
            if request_id in self._in_flight or request_id in self._outcomes:
                raise IDInUseError(f"ID {request_id} is already in use", request_id=request_id)
            prepared = PreparedRequest(
                method=method.upper(),
                url=url,
                body=body,
                params=normalize_params(*params),
            )
            self._in_flight[request_id] = PendingRequest(prepared)
        logger.debug("Dispatching %s %s as %s", prepared.method, url, request_id)
        return prepared

    async def _settle(self, request_id: str, prepared: PreparedRequest) -> None:
        """Await the transport and file the outcome under *request_id*.

        The in-flight marker is removed exactly once, whatever happens.  A
        cancelled request stores nothing and frees its identifier.
        """
        outcome: Optional[Outcome] = None
        try:
            payload = await self._transport.send(prepared)
            outcome = Success(payload)
        except TransportError as exc:
            outcome = Failure(exc)
            logger.debug("Request %s failed: %s", request_id, exc)
            if self._options.throw_on_failure:
                raise
        finally:
            with self._lock:
                del self._in_flight[request_id]
                if outcome is not None:
                    self._outcomes[request_id] = outcome

    def _completed_outcome(self, request_id: str) -> Outcome:
        """Return the stored outcome, or raise if there is none to read.

        Must be called with ``self._lock`` held.
        """
        if request_id in self._in_flight:
            raise RequestNotCompleteError(
                f"Request {request_id} is still in flight", request_id=request_id
            )
        try:
            return self._outcomes[request_id]
        except KeyError:
            raise InvalidRequestError(
                f"No request with ID {request_id}: it was never made or was already retrieved",
                request_id=request_id,
            ) from None
