"""Terminal output for the ``easier-requests`` CLI.

Two streams, two jobs:

* **stdout** carries retrieved payloads and nothing else, so the output of
  ``easier-requests fetch`` can be piped straight into ``jq``.
* **stderr** carries status lines, dry-run notices and errors.

Payloads are rendered in one of three formats (:class:`OutputFormat`).
``AUTO`` picks Rich syntax highlighting on an interactive terminal and
plain text when stdout is redirected.  Colour is turned off by
``--no-color``, by ``NO_COLOR`` (any value) or by ``TERM=dumb``.

Library code does not print on its own except for
:class:`~easier_requests.transport.HttpxTransport` in dry-run mode; the
ledger logs through :mod:`logging` instead.  The CLI installs a configured
:class:`OutputManager` with :func:`set_output`; everything else reaches it
through :func:`get_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """How payloads are written to stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Rich markup wrapped around each kind of diagnostic, and the plain-text
# prefix used instead when colour is off.
_STYLES = {
    "info": ("{}", ""),
    "success": ("[green]{}[/green]", ""),
    "error": ("[bold red]Error:[/bold red] {}", "Error: "),
    "debug": ("[dim]\\[debug] {}[/dim]", "[debug] "),
}


class OutputManager:
    """Renders payloads to stdout and diagnostics to stderr.

    Args:
        format: Payload format; ``AUTO`` is resolved once, here.
        no_color: Never emit colour or Rich markup.
        quiet: Drop ``info`` and ``success`` lines.  Errors and payloads
            are always written.
        verbose: Write ``debug`` lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format is OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Write a decoded payload to stdout in the active format.

        Args:
            data: Typically a dict, list or string.
            content_type: MIME type of the original body.  In Rich mode a
                string is only re-parsed as JSON when this mentions JSON.
        """
        if self._format is OutputFormat.JSON:
            self._write_json(data)
        elif self._format is OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        else:
            self._write_rich(data, content_type)

    def print_data(self, text: str) -> None:
        """Write one line of raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic("info", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic("success", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic("debug", message)

    def _diagnostic(self, kind: str, message: str) -> None:
        markup, prefix = _STYLES[kind]
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(escape(message)))

    # --- renderers ---

    def _write_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError:
                self.print_data(data)
                return
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _write_rich(self, data: Any, content_type: str) -> None:
        if isinstance(data, str) and "json" in content_type:
            try:
                data = json.loads(data)
            except json.JSONDecodeError:
                pass
        if isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False)


def _plain_lines(data: Any) -> list[str]:
    """Tab-separated lines: ``key<TAB>value`` for dicts, one row per list item."""
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested is not OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)
