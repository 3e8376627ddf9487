from __future__ import annotations

import json
import logging
from typing import Any


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    return str(value)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """Emit one structured log line as a JSON object keyed by ``event``."""
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    exc = fields.pop("exc", None)
    for key, value in fields.items():
        payload[key] = _json_safe(value)
    if isinstance(exc, BaseException):
        payload["exc"] = str(exc)
        payload["exc_type"] = type(exc).__name__
    elif exc is not None:
        payload["exc"] = str(exc)
    logger.log(level, json.dumps(payload, sort_keys=False))
