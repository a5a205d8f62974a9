"""Query-parameter normalisation.

Callers hand parameters to the ledger either as a ready-made mapping or as
a flat run of alternating name/value tokens::

    await ledger.get(url, "users", "page", 2, "limit", 50)
    await ledger.get(url, "users", {"page": 2, "limit": 50})

Both shapes end up as the same ``dict`` before anything is sent.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from easier_requests.exceptions import InvalidUsageError, UnbalancedParametersError


def normalize_params(*params: Any) -> dict[str, Any]:
    """Turn a flat name/value token list (or one mapping) into a ``dict``.

    Args:
        *params: Either a single :class:`~collections.abc.Mapping`, or an
            even number of tokens ``name1, value1, name2, value2, ...``.

    Returns:
        A new ``dict``.  When a name repeats, the last value wins and the
        name keeps the position of its first occurrence.

    Raises:
        UnbalancedParametersError: If a flat token list has odd length.
    """
    if len(params) == 1 and isinstance(params[0], Mapping):
        return dict(params[0])

    if len(params) % 2 != 0:
        raise UnbalancedParametersError(
            f"Expected name/value pairs but got {len(params)} parameter tokens"
        )

    normalized: dict[str, Any] = {}
    for index in range(0, len(params), 2):
        normalized[params[index]] = params[index + 1]
    return normalized


def parse_param_pairs(pairs: Iterable[str]) -> list[str]:
    """Split CLI ``name=value`` strings into a flat token list.

    Only the first ``=`` separates name from value, so values may contain
    ``=`` themselves.

    Args:
        pairs: Strings such as ``"page=2"``.

    Returns:
        ``["page", "2", ...]``, ready for :func:`normalize_params`.

    Raises:
        InvalidUsageError: If a string has no ``=`` or an empty name.
    """
    tokens: list[str] = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise InvalidUsageError(
                f"Invalid parameter '{pair}': expected NAME=VALUE"
            )
        tokens.extend((name, value))
    return tokens
