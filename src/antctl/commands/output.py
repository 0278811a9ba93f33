from __future__ import annotations

import json
from typing import Any

import yaml
from pydantic_core import to_jsonable_python

OUTPUT_FORMATS = ("json", "yaml")
DEFAULT_OUTPUT_FORMAT = "json"


def to_plain_data(value: Any) -> Any:
    """Convert models and dataclasses into JSON-compatible builtins."""
    return to_jsonable_python(value, by_alias=True, exclude_none=True)


def format_output(value: Any, output: str = DEFAULT_OUTPUT_FORMAT) -> str:
    if value is None:
        return ""
    data = to_plain_data(value)
    if output == "yaml":
        return yaml.safe_dump(data, sort_keys=False).rstrip("\n")
    if output == "json":
        return json.dumps(data, indent=2)
    raise ValueError(f"Unsupported output format: {output}")
