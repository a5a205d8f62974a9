"""Canonical data shapes shared across easier_requests modules.

The models fall into two groups:

**Configuration models** -- pydantic models, serialised as JSON in the
user's config directory: :class:`RequestOptions`, :class:`TransportConfig`
and :class:`GlobalConfig`.

**Ledger records** -- plain dataclasses describing a request and its
lifecycle inside a :class:`~easier_requests.ledger.RequestLedger`:
:class:`PreparedRequest`, :class:`PendingRequest`, :class:`Success`,
:class:`Failure` and the :class:`RequestState` enum.

A terminal outcome is stored as exactly one of :class:`Success` or
:class:`Failure` per identifier, so "succeeded" and "failed" can never be
recorded side by side.
"""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from easier_requests.exceptions import TransportError


# --- Options ---


class RequestOptions(BaseModel):
    """Per-ledger behaviour switches.

    Instances are frozen: :meth:`~easier_requests.ledger.RequestLedger.set_options`
    builds a new one on every change, so a snapshot handed to a caller never
    changes underneath them.

    Keys may be given in snake_case or with their camelCase alias
    (``throwOnFailure``).  Unknown keys are kept in ``model_extra`` and
    otherwise ignored by the ledger.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    throw_on_failure: bool = Field(
        default=True,
        alias="throwOnFailure",
        description="Re-raise transport failures from the dispatch call as well as recording them",
    )


class TransportConfig(BaseModel):
    """Settings for the default :class:`~easier_requests.transport.HttpxTransport`."""

    base_url: Optional[str] = Field(
        default=None, description="Prefix joined to relative request URLs"
    )
    timeout: float = Field(default=30.0, description="httpx timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/easier-requests/config.json``.

    Loaded and saved by :func:`~easier_requests.config.load_global_config`
    and :func:`~easier_requests.config.save_global_config`.  See
    :func:`~easier_requests.config.resolve_config` for how environment
    variables and CLI flags override it.
    """

    options: RequestOptions = Field(default_factory=RequestOptions)
    transport: TransportConfig = Field(default_factory=TransportConfig)


# --- Ledger records ---


class RequestState(str, enum.Enum):
    """Where an identifier currently sits in its lifecycle."""

    ABSENT = "absent"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PreparedRequest:
    """Everything a transport needs to perform one HTTP request.

    Attributes:
        method: Upper-case HTTP method (``"GET"``, ``"POST"``, ...).
        url: Absolute URL, or a path relative to the transport's base URL.
        body: Request body; ``None`` for body-less verbs.
        params: Normalised query parameters.
    """

    method: str
    url: str
    body: Any = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class PendingRequest:
    """In-flight marker kept by the ledger until the transport settles."""

    request: PreparedRequest
    started_at: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class Success:
    """Terminal outcome of a request the transport completed."""

    payload: Any


@dataclass(frozen=True)
class Failure:
    """Terminal outcome of a request the transport rejected."""

    error: TransportError


Outcome = Union[Success, Failure]
