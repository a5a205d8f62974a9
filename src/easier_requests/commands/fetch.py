"""The ``fetch`` command -- send several requests at once through one ledger.

Every URL is dispatched under its own generated identifier, all requests
run concurrently, and the outcomes are then collected identifier by
identifier: payloads go to stdout, failures to stderr.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, List, Optional

import typer

from easier_requests.exceptions import InvalidUsageError, TransportError
from easier_requests.exit_codes import EXIT_SUCCESS
from easier_requests.ledger import RequestLedger
from easier_requests.models import GlobalConfig, RequestState
from easier_requests.output import get_output
from easier_requests.params import parse_param_pairs
from easier_requests.transport.response import render_payload

_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
_BODYLESS_METHODS = ("GET", "DELETE")


def fetch_command(
    urls: List[str] = typer.Argument(help="One or more URLs (or paths relative to the base URL)."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method for every URL."),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Request body. Sent as JSON when it parses as JSON."
    ),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-P", help="Query parameter as NAME=VALUE. Repeatable."
    ),
    id_prefix: str = typer.Option("", "--id-prefix", help="Prefix for generated request IDs."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL for relative paths."),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print requests without sending them."),
    throw: Optional[bool] = typer.Option(
        None,
        "--throw/--no-throw",
        help="Exit on the first failed request instead of reporting every outcome.",
    ),
) -> None:
    """Request every URL concurrently and print each outcome.

    Example::

        easier-requests fetch https://api.example.com/users -P page=2
        easier-requests fetch -X POST -d '{"name": "x"}' /items --base-url https://api.example.com
    """
    from easier_requests.config import resolve_config

    method = method.upper()
    if method not in _METHODS:
        raise InvalidUsageError(
            f"Unsupported method '{method}'. Choose from: {', '.join(_METHODS)}"
        )

    body = _parse_body(data)
    if body is not None and method in _BODYLESS_METHODS:
        raise InvalidUsageError(f"{method} requests do not take a body")

    tokens = parse_param_pairs(param or [])
    config = resolve_config(cli_throw_on_failure=throw, cli_base_url=base_url)

    try:
        exit_code = asyncio.run(
            _fetch_all(config, urls, method, body, tokens, id_prefix, dry_run)
        )
    except TransportError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if exit_code != EXIT_SUCCESS:
        raise typer.Exit(code=exit_code)


async def _fetch_all(
    config: GlobalConfig,
    urls: list[str],
    method: str,
    body: Any,
    tokens: list[str],
    id_prefix: str,
    dry_run: bool,
) -> int:
    """Dispatch *urls* concurrently, then collect and print every outcome.

    Returns:
        The exit code of the first failed request, or ``EXIT_SUCCESS``.
    """
    output = get_output()
    exit_code = EXIT_SUCCESS

    async with RequestLedger.from_config(config, dry_run=dry_run) as ledger:
        request_ids = [ledger.create_unique_id(id_prefix) for _ in urls]
        for request_id, url in zip(request_ids, urls):
            output.debug(f"{request_id}: {method} {url}")

        results = await asyncio.gather(
            *(
                ledger.request(method, url, request_id, body, *tokens)
                for request_id, url in zip(request_ids, urls)
            ),
            return_exceptions=True,
        )
        # Transport failures come back here only when throw_on_failure is set.
        for result in results:
            if isinstance(result, BaseException):
                raise result

        for request_id, url in zip(request_ids, urls):
            if len(urls) > 1:
                output.info(f"==> {url}")
            payload = ledger.response(request_id)
            if ledger.state(request_id) is RequestState.ABSENT:
                render_payload(payload)
                continue
            # response() left the entry in place, so the request failed.
            failure = ledger.error(request_id)
            output.error(f"{url}: {failure}")
            if exit_code == EXIT_SUCCESS:
                exit_code = failure.exit_code

    return exit_code


def _parse_body(body: Optional[str]) -> Any:
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body
