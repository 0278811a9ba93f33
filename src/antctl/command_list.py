"""The commands shipped with antctl."""

from __future__ import annotations

from .commands.codec import JsonCodec
from .commands.definition import (
    CommandDefinition,
    CommandGroup,
    Endpoint,
    GroupVersionResource,
    NonResourceEndpoint,
    OutputCardinality,
    ParamSpec,
    RawCommand,
    ResourceEndpoint,
)
from .commands.registry import CommandRegistry
from .core.runtime import RuntimeMode
from .raw import featuregates, supportbundle
from .transform import multicast, version

CONTROLLER_INFO_RESOURCE = GroupVersionResource(
    group="system.antrea.io", version="v1beta1", resource="controllerinfos"
)
CONTROLLER_INFO_RESOURCE_NAME = "antrea-controller"


def _version_path_endpoint(transform) -> Endpoint:
    return Endpoint(
        target=NonResourceEndpoint(path="/version"),
        transform=transform,
        fallback=version.request_error_fallback,
    )


def _log_level_endpoint() -> Endpoint:
    return Endpoint(
        target=NonResourceEndpoint(
            path="/loglevel",
            params=(
                ParamSpec(
                    name="level",
                    usage="The integer log verbosity level to set",
                    arg=True,
                ),
            ),
            output=OutputCardinality.SINGLE,
            write_method="PUT",
        )
    )


VERSION = CommandDefinition(
    use="version",
    short="Print version information",
    long="Print version information of antctl and ${component}",
    group=CommandGroup.FLAT,
    response_type=version.ComponentVersion,
    endpoints={
        RuntimeMode.CONTROLLER: Endpoint(
            target=ResourceEndpoint(
                group_version_resource=CONTROLLER_INFO_RESOURCE,
                resource_name=CONTROLLER_INFO_RESOURCE_NAME,
            ),
            transform=version.controller_transform,
            fallback=version.request_error_fallback,
        ),
        RuntimeMode.AGENT: _version_path_endpoint(version.agent_transform),
        RuntimeMode.FLOW_AGGREGATOR: _version_path_endpoint(
            version.flow_aggregator_transform
        ),
    },
)

POD_MULTICAST_STATS = CommandDefinition(
    use="podmulticaststats",
    short="Show multicast statistics",
    long="Show multicast traffic statistics of Pods",
    example="""  Show multicast traffic statistics of all local Pods on the Node
  $ antctl get podmulticaststats
  Show multicast traffic statistics of a given Pod
  $ antctl get podmulticaststats pod -n namespace""",
    group=CommandGroup.GET,
    response_type=multicast.Response,
    endpoints={
        RuntimeMode.AGENT: Endpoint(
            target=NonResourceEndpoint(
                path="/podmulticaststats",
                output=OutputCardinality.MULTIPLE,
                params=(
                    ParamSpec(
                        name="name",
                        usage="Retrieve Pod Multicast Statistics by name. "
                        "If present, Namespace must be provided.",
                        arg=True,
                    ),
                    ParamSpec(
                        name="namespace",
                        usage="Get Pod Multicast Statistics from specific Namespace.",
                        shorthand="n",
                    ),
                ),
            )
        ),
    },
)

LOG_LEVEL = CommandDefinition(
    use="log-level",
    short="Show or set log verbosity level",
    long="Show or set the log verbosity level of ${component}",
    example="""  Show the current log verbosity level
  $ antctl log-level
  Set the log verbosity level to 2
  $ antctl log-level 2""",
    group=CommandGroup.FLAT,
    response_type=int,
    endpoints={
        RuntimeMode.CONTROLLER: _log_level_endpoint(),
        RuntimeMode.AGENT: _log_level_endpoint(),
        RuntimeMode.FLOW_AGGREGATOR: _log_level_endpoint(),
    },
    # The controller log level cannot be changed through a remote exec.
    debug_skip_modes=frozenset({RuntimeMode.CONTROLLER}),
)


def build_command_registry() -> CommandRegistry:
    return CommandRegistry(
        definitions=(VERSION, POD_MULTICAST_STATS, LOG_LEVEL),
        raw_commands=(
            RawCommand(
                command=supportbundle.Command,
                support_agent=True,
                support_controller=True,
            ),
            RawCommand(
                command=featuregates.Command,
                support_agent=True,
                support_controller=True,
                group=CommandGroup.GET,
            ),
        ),
        codec=JsonCodec(),
    )
