"""Bridge from retrieved payloads to the output system.

Once a caller has taken a payload out of the ledger with
:meth:`~easier_requests.ledger.RequestLedger.response`, :func:`render_payload`
prints it: :class:`httpx.Response` payloads get a status line on stderr and
their decoded body on stdout, anything else (payloads from stub or custom
transports) is rendered as data directly.

See Also:
    :mod:`easier_requests.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

import httpx

from easier_requests.output import get_output


def render_payload(payload: Any) -> None:
    """Print a retrieved success payload with the global output manager.

    Args:
        payload: An :class:`httpx.Response` or any JSON-like value.
    """
    if isinstance(payload, httpx.Response):
        format_api_response(payload)
    elif payload is not None:
        get_output().format_response(payload)


def format_api_response(response: httpx.Response) -> None:
    """Write ``HTTP <status> <reason>`` to stderr and the decoded body to stdout."""
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}")

    content_type = response.headers.get("content-type", "application/json")
    data = extract_response_data(response)
    if data is not None:
        output.format_response(data, content_type)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Returns:
        The JSON-decoded body, the raw text when the body is not JSON, or
        ``None`` for an empty body.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
