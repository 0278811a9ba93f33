from .builder import CommandFailed, apply_to_root_command
from .codec import JsonCodec, ResponseCodec
from .definition import (
    COMPONENT_PLACEHOLDER,
    CommandDefinition,
    CommandGroup,
    Endpoint,
    GroupVersionResource,
    NonResourceEndpoint,
    OutputCardinality,
    ParamSpec,
    RawCommand,
    ResourceEndpoint,
    render_template,
    resolve_endpoint,
)
from .pipeline import build_request, execute
from .registry import CommandRegistry
from .session import CommandSession
from .transport import BackendClient, BackendRequest

__all__ = [
    "BackendClient",
    "BackendRequest",
    "COMPONENT_PLACEHOLDER",
    "CommandDefinition",
    "CommandFailed",
    "CommandGroup",
    "CommandRegistry",
    "CommandSession",
    "Endpoint",
    "GroupVersionResource",
    "JsonCodec",
    "NonResourceEndpoint",
    "OutputCardinality",
    "ParamSpec",
    "RawCommand",
    "ResourceEndpoint",
    "ResponseCodec",
    "apply_to_root_command",
    "build_request",
    "execute",
    "render_template",
    "resolve_endpoint",
]
