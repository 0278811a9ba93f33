from __future__ import annotations

from typing import NoReturn, Optional

import typer

from ...commands.session import CommandSession


def raise_exit(
    message: str, *, cause: Optional[BaseException] = None, code: int = 1
) -> NoReturn:
    typer.echo(message, err=True)
    if cause is not None:
        raise typer.Exit(code=code) from cause
    raise typer.Exit(code=code)


def require_session(ctx: typer.Context) -> CommandSession:
    session = ctx.find_object(CommandSession)
    if session is None:
        raise_exit("antctl session is not initialized.")
    return session
