from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import httpx

from ..core.config import ClientConfig
from ..core.runtime import RuntimeMode
from .transport import BackendClient

if TYPE_CHECKING:
    from .registry import CommandRegistry


@dataclass
class CommandSession:
    """Per-invocation state shared by every command through ``ctx.obj``."""

    config: ClientConfig
    mode: RuntimeMode
    registry: Optional["CommandRegistry"] = None
    server: Optional[str] = None
    timeout: Optional[float] = None
    transport: Optional[httpx.BaseTransport] = None
    cancel: threading.Event = field(default_factory=threading.Event)

    def server_url(self, mode: Optional[RuntimeMode] = None) -> str:
        if self.server:
            return self.server.rstrip("/")
        return self.config.server_for(mode or self.mode)

    def backend_client(self, mode: Optional[RuntimeMode] = None) -> BackendClient:
        resolved = mode or self.mode
        return BackendClient(
            self.server_url(resolved),
            backend=resolved.component,
            token=self.config.auth_token(),
            timeout=self.timeout or self.config.timeout_seconds,
            verify=self.config.verify_tls,
            transport=self.transport,
        )
