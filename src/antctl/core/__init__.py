from .exceptions import (
    AntctlError,
    CommandDefinitionError,
    ConfigError,
    DecodeError,
    RequestCancelledError,
    RequestError,
    TransformError,
)
from .runtime import RuntimeMode, parse_runtime_mode

__all__ = [
    "AntctlError",
    "CommandDefinitionError",
    "ConfigError",
    "DecodeError",
    "RequestCancelledError",
    "RequestError",
    "RuntimeMode",
    "TransformError",
    "parse_runtime_mode",
]
