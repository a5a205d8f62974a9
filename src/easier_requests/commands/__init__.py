"""Built-in CLI sub-commands for easier-requests.

* :mod:`~easier_requests.commands.fetch` -- dispatch URLs through a ledger
  and print each outcome.
* :mod:`~easier_requests.commands.config` -- view and modify global settings.

``fetch`` is a plain callback registered directly on the root app;
``config`` is a :class:`typer.Typer` sub-application.
"""
