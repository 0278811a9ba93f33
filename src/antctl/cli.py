"""Backward-compatible CLI entrypoint.

Re-export the Typer app from the CLI surface.
"""

from .surfaces.cli.cli import app, build_root_command, main  # noqa: F401

__all__ = ["app", "build_root_command", "main"]


if __name__ == "__main__":  # pragma: no cover
    main()
