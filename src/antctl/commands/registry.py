from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

import click

from ..core.runtime import RuntimeMode, parse_runtime_mode
from .builder import apply_to_root_command
from .codec import JsonCodec, ResponseCodec
from .definition import CommandDefinition, RawCommand, resolve_endpoint


@dataclass(frozen=True)
class CommandRegistry:
    """Ordered command declarations for one client build.

    Declaration order is kept verbatim in the built tree and in
    :meth:`get_debug_commands`.
    """

    definitions: Sequence[CommandDefinition] = ()
    raw_commands: Sequence[RawCommand] = ()
    codec: ResponseCodec = field(default_factory=JsonCodec)

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions", tuple(self.definitions))
        object.__setattr__(self, "raw_commands", tuple(self.raw_commands))

    def apply_to_root_command(
        self, root: click.Group, mode: Union[RuntimeMode, str]
    ) -> click.Group:
        return apply_to_root_command(root, self, parse_runtime_mode(mode))

    def get_debug_commands(self, mode: Union[RuntimeMode, str]) -> list[list[str]]:
        """Command paths registered in ``mode``: definitions first, then raw commands."""
        resolved = parse_runtime_mode(mode)
        commands: list[list[str]] = []
        for definition in self.definitions:
            if resolve_endpoint(definition, resolved) is None:
                continue
            if resolved in definition.debug_skip_modes:
                continue
            commands.append(definition.path())
        for raw in self.raw_commands:
            if not raw.supports(resolved) or raw.debug_skip:
                continue
            commands.append(raw.path())
        return commands
