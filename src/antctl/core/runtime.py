from __future__ import annotations

from enum import Enum

from .exceptions import ConfigError


class RuntimeMode(str, Enum):
    """The backend role a client session talks to."""

    AGENT = "agent"
    CONTROLLER = "controller"
    FLOW_AGGREGATOR = "flowaggregator"

    @property
    def component(self) -> str:
        return _COMPONENT_NAMES[self]


_COMPONENT_NAMES = {
    RuntimeMode.AGENT: "antrea-agent",
    RuntimeMode.CONTROLLER: "antrea-controller",
    RuntimeMode.FLOW_AGGREGATOR: "flow-aggregator",
}

_MODE_ALIASES = {
    "flow-aggregator": RuntimeMode.FLOW_AGGREGATOR,
    "flow_aggregator": RuntimeMode.FLOW_AGGREGATOR,
}


def parse_runtime_mode(value: "str | RuntimeMode") -> RuntimeMode:
    if isinstance(value, RuntimeMode):
        return value
    normalized = str(value).strip().lower()
    alias = _MODE_ALIASES.get(normalized)
    if alias is not None:
        return alias
    try:
        return RuntimeMode(normalized)
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in RuntimeMode)
        raise ConfigError(
            f"Unknown runtime mode {value!r}; expected one of: {choices}"
        ) from exc
