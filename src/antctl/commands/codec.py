from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Protocol

from pydantic import TypeAdapter, ValidationError

from ..core.exceptions import DecodeError


class ResponseCodec(Protocol):
    def decode(
        self, body: bytes, response_type: Any, *, many: bool, allow_empty: bool = False
    ) -> Any: ...


@lru_cache(maxsize=128)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class JsonCodec:
    """Decode JSON bodies into the declared response type with pydantic."""

    def decode(
        self, body: bytes, response_type: Any, *, many: bool, allow_empty: bool = False
    ) -> Any:
        """Decode ``body``; an empty body is only accepted when none is expected."""
        if not body.strip():
            if response_type is None or allow_empty:
                return None
            raise DecodeError(
                f"Empty response body, expected {_type_name(response_type)}"
            )
        target: Any = Any if response_type is None else response_type
        if many:
            target = List[target]  # type: ignore[valid-type]
        try:
            return _adapter_for(target).validate_json(body)
        except ValidationError as exc:
            preview = body[:200].decode("utf-8", errors="replace").strip()
            raise DecodeError(
                f"Unexpected response shape for {_type_name(target)}: "
                f"{exc.error_count()} error(s); body_preview={preview!r}"
            ) from exc


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)
