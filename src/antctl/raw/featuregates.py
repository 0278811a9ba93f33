import logging

import typer

from ..commands.codec import JsonCodec
from ..commands.output import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS, format_output
from ..commands.transport import BackendRequest
from ..core.exceptions import AntctlError, RequestCancelledError
from ..surfaces.cli.utils import raise_exit, require_session
from ..transform.featuregates import FeatureGateList

logger = logging.getLogger("antctl.raw.featuregates")

featuregates_app = typer.Typer(add_completion=False, rich_markup_mode=None)


@featuregates_app.command(
    "featuregates",
    help="Get feature gates status of the component antctl is connected to.",
)
def featuregates(
    ctx: typer.Context,
    output: str = typer.Option(
        DEFAULT_OUTPUT_FORMAT,
        "--output",
        "-o",
        help=f"Output format: {', '.join(OUTPUT_FORMATS)}",
    ),
) -> None:
    if output not in OUTPUT_FORMATS:
        raise_exit(f"Unsupported output format: {output}")
    session = require_session(ctx)
    try:
        with session.backend_client() as client:
            body = client.send(
                BackendRequest(method="GET", path="/featuregates"),
                cancel=session.cancel,
            )
        gates = JsonCodec().decode(body, FeatureGateList, many=False)
    except KeyboardInterrupt as exc:
        session.cancel.set()
        raise_exit("Interrupted while getting feature gates", cause=exc, code=130)
    except RequestCancelledError as exc:
        raise_exit(str(exc), cause=exc, code=130)
    except AntctlError as exc:
        raise_exit(f"Failed to get feature gates: {exc}", cause=exc)
    typer.echo(format_output(gates, output))


Command = typer.main.get_command(featuregates_app)
