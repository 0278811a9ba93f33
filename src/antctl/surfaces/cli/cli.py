import json
import logging
import sys
from typing import Optional, Sequence, Union

import click
import typer

from ...command_list import build_command_registry
from ...commands.registry import CommandRegistry
from ...commands.session import CommandSession
from ...core.config import ClientConfig, load_client_config
from ...core.exceptions import ConfigError
from ...core.logging_utils import setup_logging, verbosity_to_level
from ...core.runtime import RuntimeMode, parse_runtime_mode
from .utils import require_session

logger = logging.getLogger("antctl.cli")

app = typer.Typer(
    add_completion=False,
    rich_markup_mode=None,
    help="antctl is the command line tool for Antrea, connected to ${component}.",
)


@app.callback()
def _root(
    ctx: typer.Context,
    server: Optional[str] = typer.Option(
        None,
        "--server",
        "-s",
        help="Base URL of the component API server (overrides config)",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Request timeout in seconds"
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase log verbosity"
    ),
) -> None:
    session = require_session(ctx)
    if server:
        session.server = server
    if timeout is not None:
        if timeout <= 0:
            raise typer.BadParameter("must be positive", param_hint="--timeout")
        session.timeout = timeout
    if verbose:
        setup_logging(verbosity_to_level(verbose))


@app.command("debug-commands", hidden=True)
def debug_commands(ctx: typer.Context) -> None:
    """Print the command paths available in the active mode as JSON."""
    session = require_session(ctx)
    registry = session.registry or build_command_registry()
    typer.echo(json.dumps(registry.get_debug_commands(session.mode)))


def build_root_command(
    mode: Union[RuntimeMode, str],
    *,
    registry: Optional[CommandRegistry] = None,
) -> click.Group:
    """Build a fresh root group holding the commands visible in ``mode``."""
    root = typer.main.get_command(app)
    if not isinstance(root, click.Group):  # pragma: no cover
        raise TypeError("antctl root command must be a group")
    resolved = parse_runtime_mode(mode)
    (registry or build_command_registry()).apply_to_root_command(root, resolved)
    return root


def build_session(
    config: ClientConfig, *, registry: Optional[CommandRegistry] = None
) -> CommandSession:
    return CommandSession(config=config, mode=config.mode, registry=registry)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entrypoint for CLI execution."""
    try:
        config = load_client_config()
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    setup_logging(config.log_level)
    registry = build_command_registry()
    root = build_root_command(config.mode, registry=registry)
    session = build_session(config, registry=registry)
    root.main(
        args=list(argv) if argv is not None else None,
        prog_name="antctl",
        obj=session,
    )
