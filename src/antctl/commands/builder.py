"""Attach the commands visible in one runtime mode to a click root group."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

import click

from ..core.exceptions import (
    AntctlError,
    CommandDefinitionError,
    RequestCancelledError,
)
from ..core.logging_utils import log_event
from ..core.runtime import RuntimeMode
from .definition import (
    CommandDefinition,
    CommandGroup,
    Endpoint,
    ParamSpec,
    render_template,
    resolve_endpoint,
)
from .output import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS, format_output
from .pipeline import execute
from .session import CommandSession

if TYPE_CHECKING:
    from .registry import CommandRegistry

logger = logging.getLogger("antctl.builder")

CANCELLED_EXIT_CODE = 130


class CommandFailed(click.ClickException):
    """Surface an :class:`AntctlError` through click's error reporting."""

    def __init__(self, error: AntctlError) -> None:
        super().__init__(str(error))
        self.error = error
        if isinstance(error, RequestCancelledError):
            self.exit_code = CANCELLED_EXIT_CODE


def _validate_params(definition: CommandDefinition, mode: RuntimeMode, params: Sequence[ParamSpec]) -> None:
    where = f"{definition.use} ({mode.value})"
    names: set[str] = set()
    shorthands: set[str] = {"o"}
    positional = 0
    for param in params:
        if param.name in names or param.name == "output":
            raise CommandDefinitionError(f"{where}: duplicate parameter {param.name!r}")
        names.add(param.name)
        if param.arg:
            positional += 1
            continue
        if param.shorthand:
            if param.shorthand in shorthands:
                raise CommandDefinitionError(
                    f"{where}: duplicate shorthand -{param.shorthand}"
                )
            shorthands.add(param.shorthand)
    if positional > 1:
        raise CommandDefinitionError(
            f"{where}: at most one positional parameter is allowed, found {positional}"
        )


def _click_params(params: Sequence[ParamSpec]) -> tuple[list[click.Parameter], dict[str, str]]:
    click_params: list[click.Parameter] = []
    names: dict[str, str] = {}
    for spec in params:
        param: click.Parameter
        if spec.arg:
            param = click.Argument([spec.name], required=False, default=spec.default)
        else:
            decls = [f"--{spec.name}"]
            if spec.shorthand:
                decls.append(f"-{spec.shorthand}")
            param = click.Option(
                decls, default=spec.default, help=spec.usage, show_default=spec.default is not None
            )
        if param.name is None:
            raise CommandDefinitionError(
                f"cannot derive a parameter name from {spec.name!r}"
            )
        names[param.name] = spec.name
        click_params.append(param)
    click_params.append(
        click.Option(
            ["--output", "-o"],
            type=click.Choice(OUTPUT_FORMATS),
            default=DEFAULT_OUTPUT_FORMAT,
            show_default=True,
            help="Output format.",
        )
    )
    return click_params, names


def _help_text(definition: CommandDefinition, endpoint: Endpoint, mode: RuntimeMode) -> str:
    text = render_template(definition.long or definition.short, mode)
    positional = endpoint.positional
    if positional is not None:
        text = f"{text}\n\n\b\nArguments:\n  {positional.name.upper()}  {positional.usage}"
    if definition.example:
        text = f"{text}\n\n\b\nExamples:\n{definition.example}"
    return text


def build_command(
    definition: CommandDefinition,
    endpoint: Endpoint,
    registry: "CommandRegistry",
    mode: RuntimeMode,
) -> click.Command:
    params = endpoint.params
    _validate_params(definition, mode, params)
    click_params, names = _click_params(params)

    @click.pass_context
    def _run(ctx: click.Context, output: str, **kwargs: Any) -> None:
        session = ctx.find_object(CommandSession)
        if session is None:
            raise click.UsageError("antctl session is not initialized")
        bound = {names[key]: value for key, value in kwargs.items() if value is not None}
        log_event(
            logger,
            logging.DEBUG,
            "command.invoke",
            command=definition.use,
            mode=mode.value,
            args=bound,
        )
        try:
            with session.backend_client(mode) as client:
                value = execute(
                    endpoint,
                    bound,
                    client=client,
                    codec=registry.codec,
                    response_type=definition.response_type,
                    cancel=session.cancel,
                )
        except AntctlError as exc:
            raise CommandFailed(exc) from exc
        except KeyboardInterrupt as exc:
            session.cancel.set()
            raise CommandFailed(
                RequestCancelledError(f"{definition.use} was interrupted")
            ) from exc
        rendered = format_output(value, output)
        if rendered:
            click.echo(rendered)

    return click.Command(
        name=definition.use,
        callback=_run,
        params=click_params,
        help=_help_text(definition, endpoint, mode),
        short_help=render_template(definition.short, mode),
    )


def _ensure_group(root: click.Group, group: CommandGroup) -> click.Group:
    if group is CommandGroup.FLAT:
        return root
    existing = root.commands.get(group.value)
    if existing is None:
        created = click.Group(name=group.value, help=group.description)
        root.add_command(created)
        return created
    if not isinstance(existing, click.Group):
        raise CommandDefinitionError(
            f"command group {group.value!r} clashes with an existing command"
        )
    return existing


def _attach(root: click.Group, group: CommandGroup, command: click.Command) -> None:
    parent = _ensure_group(root, group)
    name = command.name or ""
    if name in parent.commands:
        path = " ".join(part for part in (group.value, name) if part)
        raise CommandDefinitionError(f"duplicate command {path!r}")
    parent.add_command(command, name)


def apply_to_root_command(
    root: click.Group,
    registry: "CommandRegistry",
    mode: RuntimeMode,
) -> click.Group:
    if root.help:
        root.help = render_template(root.help, mode)
    if root.short_help:
        root.short_help = render_template(root.short_help, mode)

    attached = 0
    for definition in registry.definitions:
        endpoint = resolve_endpoint(definition, mode)
        if endpoint is None:
            continue
        _attach(root, definition.group, build_command(definition, endpoint, registry, mode))
        attached += 1
    for raw in registry.raw_commands:
        if not raw.supports(mode):
            continue
        _attach(root, raw.group, raw.command)
        attached += 1

    log_event(
        logger,
        logging.DEBUG,
        "command.tree.built",
        mode=mode.value,
        commands=attached,
    )
    return root
