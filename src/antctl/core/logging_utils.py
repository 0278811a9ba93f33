from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional

ROOT_LOGGER_NAME = "antctl"
_HANDLER_MARKER = "_antctl_handler"


def _coerce_field(value: Any) -> Any:
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def log_event(
    logger: logging.Logger, level: int, event: str, **fields: Any
) -> None:
    """Emit a single structured log line: ``{"event": ..., **fields}``."""
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        payload[key] = _coerce_field(value)
    logger.log(level, json.dumps(payload, sort_keys=False))


def setup_logging(level: Optional[str | int] = None) -> logging.Logger:
    """Attach a stderr handler to the ``antctl`` logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING
    elif isinstance(level, int):
        resolved = level
    else:
        resolved = logging.WARNING
    logger.setLevel(resolved)
    if not any(getattr(h, _HANDLER_MARKER, False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
    return logger


def verbosity_to_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING
