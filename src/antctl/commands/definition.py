"""Declarative command model.

A :class:`CommandDefinition` declares a command once and binds it to at most
one :class:`Endpoint` per :class:`RuntimeMode`. A :class:`RawCommand` wraps a
hand-built click command that only needs to be placed in the tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, Union

import click

from ..core.exceptions import CommandDefinitionError, RequestError
from ..core.runtime import RuntimeMode

COMPONENT_PLACEHOLDER = "${component}"
_PARAM_NAME = re.compile(r"^[a-z][a-z0-9-]*$")


class CommandGroup(str, Enum):
    FLAT = ""
    GET = "get"
    QUERY = "query"

    @property
    def description(self) -> str:
        return _GROUP_DESCRIPTIONS[self]


_GROUP_DESCRIPTIONS = {
    CommandGroup.FLAT: "",
    CommandGroup.GET: "Get the status or resource of a topic",
    CommandGroup.QUERY: "Execute a user-provided query",
}


class OutputCardinality(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class ParamSpec:
    name: str
    usage: str
    shorthand: str = ""
    arg: bool = False
    default: Optional[str] = None

    def __post_init__(self) -> None:
        if not _PARAM_NAME.fullmatch(self.name):
            raise CommandDefinitionError(
                "parameter name must be lowercase letters, digits and dashes, "
                f"got {self.name!r}"
            )
        if self.shorthand and len(self.shorthand) != 1:
            raise CommandDefinitionError(
                f"shorthand for {self.name!r} must be a single letter, "
                f"got {self.shorthand!r}"
            )
        if self.arg and self.shorthand:
            raise CommandDefinitionError(
                f"positional parameter {self.name!r} cannot have a shorthand"
            )


NAMESPACE_PARAM = ParamSpec(
    name="namespace",
    usage="Namespace of the resource.",
    shorthand="n",
)


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def __str__(self) -> str:
        if self.group:
            return f"{self.resource}.{self.version}.{self.group}"
        return f"{self.resource}.{self.version}"


@dataclass(frozen=True)
class ResourceEndpoint:
    """A resource served through the backend's API discovery surface.

    An empty ``resource_name`` means the name is taken from a positional
    argument and the collection is listed when it is omitted.
    """

    group_version_resource: GroupVersionResource
    resource_name: str = ""
    namespaced: bool = False

    @property
    def params(self) -> Tuple[ParamSpec, ...]:
        params = []
        if not self.resource_name:
            params.append(
                ParamSpec(
                    name="name",
                    usage="Retrieve the resource by name.",
                    arg=True,
                )
            )
        if self.namespaced:
            params.append(NAMESPACE_PARAM)
        return tuple(params)

    def cardinality(self, bound_args: Mapping[str, Any]) -> OutputCardinality:
        if self.resource_name or bound_args.get("name"):
            return OutputCardinality.SINGLE
        return OutputCardinality.MULTIPLE


@dataclass(frozen=True)
class NonResourceEndpoint:
    path: str
    params: Tuple[ParamSpec, ...] = ()
    output: OutputCardinality = OutputCardinality.SINGLE
    method: str = "GET"
    # Verb used instead of ``method`` when the positional argument is supplied.
    write_method: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            raise CommandDefinitionError(f"endpoint path must be absolute: {self.path!r}")
        object.__setattr__(self, "params", tuple(self.params))

    def cardinality(self, bound_args: Mapping[str, Any]) -> OutputCardinality:
        return self.output


EndpointTarget = Union[ResourceEndpoint, NonResourceEndpoint]
Transform = Callable[[Any], Any]
Fallback = Callable[[RequestError], Any]


@dataclass(frozen=True)
class Endpoint:
    target: EndpointTarget
    transform: Optional[Transform] = None
    # Only consulted when the request itself fails; never for decode errors.
    fallback: Optional[Fallback] = None

    def __post_init__(self) -> None:
        if not isinstance(self.target, (ResourceEndpoint, NonResourceEndpoint)):
            raise CommandDefinitionError(
                f"endpoint target must be a ResourceEndpoint or NonResourceEndpoint, "
                f"got {type(self.target).__name__}"
            )

    @property
    def params(self) -> Tuple[ParamSpec, ...]:
        return self.target.params

    @property
    def positional(self) -> Optional[ParamSpec]:
        for param in self.params:
            if param.arg:
                return param
        return None


@dataclass(frozen=True)
class CommandDefinition:
    use: str
    short: str
    long: str = ""
    example: str = ""
    group: CommandGroup = CommandGroup.FLAT
    response_type: Any = None
    endpoints: Mapping[RuntimeMode, Endpoint] = field(default_factory=dict)
    # Registered in these modes but left out of debug listings, e.g. because
    # the command cannot be executed remotely there.
    debug_skip_modes: frozenset = frozenset()

    def __post_init__(self) -> None:
        if not self.use:
            raise CommandDefinitionError("command use string must be non-empty")
        for mode, endpoint in self.endpoints.items():
            if not isinstance(mode, RuntimeMode):
                raise CommandDefinitionError(
                    f"{self.use}: endpoint key {mode!r} is not a RuntimeMode"
                )
            if not isinstance(endpoint, Endpoint):
                raise CommandDefinitionError(
                    f"{self.use}: endpoint for {mode.value} is not an Endpoint"
                )
        object.__setattr__(self, "endpoints", MappingProxyType(dict(self.endpoints)))
        object.__setattr__(self, "debug_skip_modes", frozenset(self.debug_skip_modes))

    def path(self) -> list[str]:
        return command_path(self.group, self.use)


@dataclass(frozen=True)
class RawCommand:
    """A prebuilt command; raw commands never exist in flow aggregator mode."""

    command: click.Command
    support_agent: bool = False
    support_controller: bool = False
    group: CommandGroup = CommandGroup.FLAT
    # Runs until interrupted, so it is not listed as a debug command.
    debug_skip: bool = False

    @property
    def name(self) -> str:
        if not self.command.name:
            raise CommandDefinitionError("raw command must have a name")
        return self.command.name

    def supports(self, mode: RuntimeMode) -> bool:
        if mode is RuntimeMode.AGENT:
            return self.support_agent
        if mode is RuntimeMode.CONTROLLER:
            return self.support_controller
        return False

    def path(self) -> list[str]:
        return command_path(self.group, self.name)


def resolve_endpoint(
    definition: CommandDefinition, mode: RuntimeMode
) -> Optional[Endpoint]:
    return definition.endpoints.get(mode)


def render_template(template: str, mode: RuntimeMode) -> str:
    return template.replace(COMPONENT_PLACEHOLDER, mode.value)


def command_path(group: CommandGroup, name: str) -> list[str]:
    if group is CommandGroup.FLAT:
        return [name]
    return [group.value, name]
