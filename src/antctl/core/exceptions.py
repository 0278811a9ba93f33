from __future__ import annotations

from typing import Optional


class AntctlError(Exception):
    """Base antctl error."""


class ConfigError(AntctlError):
    """Client configuration is missing or invalid."""


class CommandDefinitionError(AntctlError):
    """A command registry was authored inconsistently.

    Raised while the command tree is assembled, never at invocation time.
    """


class RequestError(AntctlError):
    """The backend could not be reached or answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        backend: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.backend = backend
        self.url = url
        self.status_code = status_code


class RequestCancelledError(AntctlError):
    """The caller timed out or aborted the request.

    Deliberately not a RequestError subclass: fallbacks never apply to it.
    """


class DecodeError(AntctlError):
    """A successful response body did not match the declared response type."""


class TransformError(AntctlError):
    """The response-shaping function rejected a decoded response."""
