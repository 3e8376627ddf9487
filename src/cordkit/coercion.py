from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import DiscordDecodeError


def coerce_int(
    value: Any, default: Optional[int] = None, *, reject_bool: bool = True
) -> Optional[int]:
    if value is None:
        return default
    if isinstance(value, bool):
        return default if reject_bool else int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return default
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            pass
    return default


def as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def as_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def as_bool(value: object, default: bool = False) -> bool:
    return value if isinstance(value, bool) else default


def parse_bitmask(value: Any, *, field: str) -> int:
    """Decode a permission-style bitmask.

    Discord quotes 64-bit masks as JSON strings so they survive clients that
    only have doubles; plain integers are accepted too. Bits outside the
    known permission set are preserved.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise DiscordDecodeError(f"{field} must be an integer bitmask, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise DiscordDecodeError(
                f"{field} must be an integer bitmask, got {value!r}"
            ) from exc
    raise DiscordDecodeError(
        f"{field} must be an integer bitmask, got {type(value).__name__}"
    )


def format_bitmask(value: int) -> str:
    return str(int(value))


def require_mapping(value: Any, *, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DiscordDecodeError(
            f"{what} must be a JSON object, got {type(value).__name__}"
        )
    return value


def optional_mapping(value: Any, *, what: str) -> Mapping[str, Any] | None:
    if value is None:
        return None
    return require_mapping(value, what=what)


def optional_list(value: Any, *, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DiscordDecodeError(
            f"{what} must be a JSON array, got {type(value).__name__}"
        )
    return value
