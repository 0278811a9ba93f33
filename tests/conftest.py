"""Test harness configuration.

This repo uses a `src/` layout; make sure tests import the in-repo code even
when an older `antctl` is installed.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = str(repo_root / "src")
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture()
def client_config(tmp_path: Path):
    from antctl.core.config import load_client_config

    return load_client_config(tmp_path / "missing.yml", env={})


@pytest.fixture()
def make_session(client_config) -> Callable[..., object]:
    """Build a session whose HTTP calls are answered by ``handler``."""
    from antctl.command_list import build_command_registry
    from antctl.commands.session import CommandSession
    from antctl.core.runtime import parse_runtime_mode

    def _make(mode, handler, registry=None):
        resolved = parse_runtime_mode(mode)
        return CommandSession(
            config=client_config,
            mode=resolved,
            registry=registry or build_command_registry(),
            transport=httpx.MockTransport(handler),
        )

    return _make
