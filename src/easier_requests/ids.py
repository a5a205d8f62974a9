"""Unique request-identifier generation.

Identifiers have the form ``<prefix>#<serial>#<timestamp>``.  The serial
number strictly increases for the lifetime of a generator, so two calls can
never collide even when the clock has not moved; the timestamp (whole
seconds) only makes identifiers easier to read in logs.
"""

from __future__ import annotations

import threading
import time

ID_DELIMITER = "#"


class UniqueIDGenerator:
    """Hands out identifiers that are unique for the lifetime of the instance.

    Each :class:`~easier_requests.ledger.RequestLedger` owns one generator,
    so identifiers are unique per ledger, not process-wide.
    """

    def __init__(self) -> None:
        self._serial = 0
        self._lock = threading.Lock()

    @property
    def serial(self) -> int:
        """The serial number used by the most recent identifier (0 before the first)."""
        return self._serial

    def next(self, prefix: str = "") -> str:
        """Return a fresh identifier.

        Args:
            prefix: Free-form text placed in front of the identifier, e.g.
                the name of the resource being requested.

        Returns:
            ``f"{prefix}#{serial}#{timestamp}"``.
        """
        with self._lock:
            self._serial += 1
            serial = self._serial
        return ID_DELIMITER.join((prefix, str(serial), str(int(time.time()))))
