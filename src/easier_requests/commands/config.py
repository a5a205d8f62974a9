"""Config commands -- view and modify the global configuration.

Provides the ``easier-requests config`` sub-command group.  Settings live
in the user's config directory (:class:`~easier_requests.models.GlobalConfig`)
and supply the defaults ``fetch`` starts from: whether failures abort the
run and which base URL relative paths are joined to.
"""

from __future__ import annotations

import typer

from easier_requests.output import format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        False,
        "--resolved",
        help="Apply EASIER_REQUESTS_* environment overrides before showing.",
    ),
) -> None:
    """Show the current configuration.

    Example::

        easier-requests config show
        easier-requests --json config show --resolved
    """
    from easier_requests.config import get_config_dir, load_global_config, resolve_config

    config = resolve_config() if resolved else load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key: options.throw_on_failure, transport.base_url, "
        "transport.timeout or transport.verify_ssl."
    ),
    value: str = typer.Argument(help="Value to set (empty string clears transport.base_url)."),
) -> None:
    """Set a configuration value.

    Example::

        easier-requests config set options.throw_on_failure false
        easier-requests config set transport.base_url https://api.example.com
    """
    from easier_requests.config import set_config_value

    set_config_value(key, value)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults."""
    from easier_requests.config import save_global_config
    from easier_requests.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
