"""Collect a support bundle from the component antctl is connected to."""

import logging
import time
from pathlib import Path
from typing import Optional

import typer

from ..commands.transport import BackendRequest
from ..core.exceptions import AntctlError, RequestCancelledError
from ..core.logging_utils import log_event
from ..surfaces.cli.utils import raise_exit, require_session

logger = logging.getLogger("antctl.raw.supportbundle")

supportbundle_app = typer.Typer(add_completion=False, rich_markup_mode=None)


def bundle_filename(component: str, now: Optional[float] = None) -> str:
    stamp = time.strftime("%Y%m%d-%H%M%S", time.gmtime(now))
    return f"{component}_{stamp}.tar.gz"


@supportbundle_app.command(
    "supportbundle",
    help="Generate a support bundle on the connected component and download it.",
)
def supportbundle(
    ctx: typer.Context,
    directory: Path = typer.Option(
        Path("."), "--dir", "-d", help="Directory to save the support bundle in"
    ),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        help="Only include logs newer than a relative duration like 5s, 2m or 3h",
    ),
) -> None:
    session = require_session(ctx)
    component = session.mode.component
    params = {"since": since} if since else {}
    destination = directory / bundle_filename(component)
    try:
        with session.backend_client() as client:
            client.send(
                BackendRequest(method="POST", path="/supportbundle", params=params),
                cancel=session.cancel,
            )
            written = client.download(
                BackendRequest(method="GET", path="/supportbundle/download"),
                destination,
            )
    except KeyboardInterrupt as exc:
        session.cancel.set()
        raise_exit("Interrupted while collecting support bundle", cause=exc, code=130)
    except RequestCancelledError as exc:
        raise_exit(str(exc), cause=exc, code=130)
    except AntctlError as exc:
        raise_exit(f"Failed to collect support bundle: {exc}", cause=exc)
    log_event(
        logger,
        logging.INFO,
        "supportbundle.saved",
        component=component,
        path=str(destination),
        bytes=written,
    )
    typer.echo(f"Support bundle saved to {destination}")


Command = typer.main.get_command(supportbundle_app)
