from __future__ import annotations

import click
import pytest

from antctl.commands.builder import apply_to_root_command
from antctl.commands.definition import (
    CommandDefinition,
    CommandGroup,
    Endpoint,
    GroupVersionResource,
    NonResourceEndpoint,
    ParamSpec,
    RawCommand,
    ResourceEndpoint,
    render_template,
    resolve_endpoint,
)
from antctl.commands.registry import CommandRegistry
from antctl.core.exceptions import CommandDefinitionError
from antctl.core.runtime import RuntimeMode


def _endpoint(path: str = "/test", *params: ParamSpec) -> Endpoint:
    return Endpoint(target=NonResourceEndpoint(path=path, params=params))


def _everywhere(endpoint: Endpoint) -> dict[RuntimeMode, Endpoint]:
    return {mode: endpoint for mode in RuntimeMode}


def _root() -> click.Group:
    return click.Group(
        name="antctl",
        help="The component is ${component}",
        short_help="The component is ${component}",
    )


TEMPLATED = CommandDefinition(
    use="test",
    short="test short description ${component}",
    long="test description ${component}",
    endpoints=_everywhere(_endpoint()),
)


@pytest.mark.parametrize("mode", list(RuntimeMode))
def test_apply_to_root_command_renders_component(mode: RuntimeMode) -> None:
    root = _root()
    CommandRegistry(definitions=[TEMPLATED]).apply_to_root_command(root, mode)

    assert root.help == f"The component is {mode.value}"
    assert root.short_help == f"The component is {mode.value}"
    command = root.commands["test"]
    assert command.short_help == f"test short description {mode.value}"
    assert command.help is not None
    assert command.help.startswith(f"test description {mode.value}")
    assert "${component}" not in command.help


def test_render_template_is_pure() -> None:
    assert render_template("${component} and ${component}", RuntimeMode.AGENT) == (
        "agent and agent"
    )
    assert render_template("no placeholder", RuntimeMode.CONTROLLER) == "no placeholder"


def test_definitions_without_endpoint_are_not_registered() -> None:
    agent_only = CommandDefinition(
        use="agentonly",
        short="Agent only",
        endpoints={RuntimeMode.AGENT: _endpoint("/agentonly")},
    )
    registry = CommandRegistry(definitions=[agent_only])

    controller_root = registry.apply_to_root_command(_root(), "controller")
    agent_root = registry.apply_to_root_command(_root(), "agent")

    assert "agentonly" not in controller_root.commands
    assert "agentonly" in agent_root.commands
    assert resolve_endpoint(agent_only, RuntimeMode.CONTROLLER) is None


def test_group_command_is_created_once_and_shared() -> None:
    definition = CommandDefinition(
        use="stats",
        short="Show stats",
        group=CommandGroup.GET,
        endpoints={RuntimeMode.AGENT: _endpoint("/stats")},
    )
    raw = RawCommand(
        command=click.Command("gates"),
        support_agent=True,
        group=CommandGroup.GET,
    )
    root = CommandRegistry(definitions=[definition], raw_commands=[raw]).apply_to_root_command(
        _root(), RuntimeMode.AGENT
    )

    get_group = root.commands["get"]
    assert isinstance(get_group, click.Group)
    assert sorted(get_group.commands) == ["gates", "stats"]
    assert list(root.commands) == ["get"]


def test_group_is_not_created_when_nothing_is_visible() -> None:
    definition = CommandDefinition(
        use="stats",
        short="Show stats",
        group=CommandGroup.GET,
        endpoints={RuntimeMode.AGENT: _endpoint("/stats")},
    )
    root = CommandRegistry(definitions=[definition]).apply_to_root_command(
        _root(), RuntimeMode.FLOW_AGGREGATOR
    )
    assert root.commands == {}


def test_raw_commands_follow_support_flags() -> None:
    registry = CommandRegistry(
        raw_commands=[
            RawCommand(command=click.Command("both"), support_agent=True, support_controller=True),
            RawCommand(command=click.Command("controlleronly"), support_controller=True),
        ]
    )
    assert sorted(registry.apply_to_root_command(_root(), "agent").commands) == ["both"]
    assert sorted(registry.apply_to_root_command(_root(), "controller").commands) == [
        "both",
        "controlleronly",
    ]
    assert registry.apply_to_root_command(_root(), "flowaggregator").commands == {}


def test_params_are_bound_as_options_and_one_argument() -> None:
    definition = CommandDefinition(
        use="pods",
        short="Pods",
        example="  $ antctl pods web -n default",
        endpoints={
            RuntimeMode.AGENT: _endpoint(
                "/pods",
                ParamSpec(name="name", usage="Pod name", arg=True),
                ParamSpec(name="namespace", usage="Pod namespace", shorthand="n"),
                ParamSpec(name="sort-by", usage="Sort key"),
            )
        },
    )
    root = CommandRegistry(definitions=[definition]).apply_to_root_command(_root(), "agent")
    command = root.commands["pods"]

    by_name = {param.name: param for param in command.params}
    assert isinstance(by_name["name"], click.Argument)
    assert by_name["name"].required is False
    namespace = by_name["namespace"]
    assert isinstance(namespace, click.Option)
    assert namespace.opts == ["--namespace", "-n"]
    assert by_name["sort_by"].opts == ["--sort-by"]
    assert by_name["output"].opts == ["--output", "-o"]
    assert command.help is not None
    assert "$ antctl pods web -n default" in command.help


def test_resource_endpoint_without_name_takes_name_argument() -> None:
    definition = CommandDefinition(
        use="networkpolicy",
        short="Network policies",
        group=CommandGroup.GET,
        endpoints={
            RuntimeMode.CONTROLLER: Endpoint(
                target=ResourceEndpoint(
                    group_version_resource=GroupVersionResource(
                        "controlplane.antrea.io", "v1beta2", "networkpolicies"
                    ),
                    namespaced=True,
                )
            )
        },
    )
    root = CommandRegistry(definitions=[definition]).apply_to_root_command(
        _root(), "controller"
    )
    group = root.commands["get"]
    assert isinstance(group, click.Group)
    params = {param.name: param for param in group.commands["networkpolicy"].params}
    assert isinstance(params["name"], click.Argument)
    assert params["namespace"].opts == ["--namespace", "-n"]


def test_duplicate_use_is_a_definition_error() -> None:
    registry = CommandRegistry(
        definitions=[
            CommandDefinition(use="dup", short="one", endpoints=_everywhere(_endpoint("/a"))),
            CommandDefinition(use="dup", short="two", endpoints=_everywhere(_endpoint("/b"))),
        ]
    )
    with pytest.raises(CommandDefinitionError, match="duplicate command 'dup'"):
        registry.apply_to_root_command(_root(), "agent")


def test_raw_command_clashing_with_definition_is_rejected() -> None:
    registry = CommandRegistry(
        definitions=[
            CommandDefinition(
                use="featuregates",
                short="dup",
                group=CommandGroup.GET,
                endpoints={RuntimeMode.AGENT: _endpoint("/fg")},
            )
        ],
        raw_commands=[
            RawCommand(
                command=click.Command("featuregates"),
                support_agent=True,
                group=CommandGroup.GET,
            )
        ],
    )
    with pytest.raises(CommandDefinitionError, match="get featuregates"):
        registry.apply_to_root_command(_root(), "agent")


def test_two_positional_params_are_rejected() -> None:
    definition = CommandDefinition(
        use="broken",
        short="broken",
        endpoints={
            RuntimeMode.AGENT: _endpoint(
                "/broken",
                ParamSpec(name="first", usage="first", arg=True),
                ParamSpec(name="second", usage="second", arg=True),
            )
        },
    )
    registry = CommandRegistry(definitions=[definition])
    with pytest.raises(CommandDefinitionError, match="at most one positional"):
        registry.apply_to_root_command(_root(), "agent")
    # Invisible in controller mode, so nothing is validated there.
    registry.apply_to_root_command(_root(), "controller")


def test_duplicate_shorthand_is_rejected() -> None:
    definition = CommandDefinition(
        use="broken",
        short="broken",
        endpoints={
            RuntimeMode.AGENT: _endpoint(
                "/broken",
                ParamSpec(name="node", usage="node", shorthand="n"),
                ParamSpec(name="namespace", usage="namespace", shorthand="n"),
            )
        },
    )
    with pytest.raises(CommandDefinitionError, match="duplicate shorthand -n"):
        CommandRegistry(definitions=[definition]).apply_to_root_command(_root(), "agent")


def test_group_name_clashing_with_flat_command_is_rejected() -> None:
    registry = CommandRegistry(
        definitions=[
            CommandDefinition(use="get", short="flat get", endpoints={RuntimeMode.AGENT: _endpoint("/g")}),
            CommandDefinition(
                use="stats",
                short="stats",
                group=CommandGroup.GET,
                endpoints={RuntimeMode.AGENT: _endpoint("/s")},
            ),
        ]
    )
    with pytest.raises(CommandDefinitionError, match="clashes"):
        registry.apply_to_root_command(_root(), "agent")


def test_endpoint_keys_must_be_runtime_modes() -> None:
    with pytest.raises(CommandDefinitionError, match="not a RuntimeMode"):
        CommandDefinition(use="typo", short="typo", endpoints={"agnet": _endpoint()})  # type: ignore[dict-item]


def test_endpoint_target_must_be_resource_or_non_resource() -> None:
    with pytest.raises(CommandDefinitionError):
        Endpoint(target="/version")  # type: ignore[arg-type]


def test_shorthand_must_be_single_letter() -> None:
    with pytest.raises(CommandDefinitionError, match="single letter"):
        ParamSpec(name="namespace", usage="ns", shorthand="ns")


def test_apply_to_root_command_function_matches_registry_method() -> None:
    registry = CommandRegistry(definitions=[TEMPLATED])
    root = apply_to_root_command(_root(), registry, RuntimeMode.CONTROLLER)
    assert list(root.commands) == ["test"]


@pytest.mark.parametrize("name", ["--namespace", "Namespace", "sort_by", "1st"])
def test_param_names_must_map_to_flags(name: str) -> None:
    with pytest.raises(CommandDefinitionError, match="lowercase letters"):
        ParamSpec(name=name, usage="bad")
