from __future__ import annotations

from typing import Any, Optional


class DiscordError(Exception):
    """Base cordkit error."""

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class DiscordConfigError(DiscordError):
    """Client configuration error."""


class DiscordDecodeError(DiscordError):
    """Payload did not have the shape Discord documents for it."""


class UnknownComponentError(DiscordDecodeError):
    """Component payload carried a discriminant no variant claims."""

    def __init__(self, component_type: Any) -> None:
        super().__init__(f"unknown component type: {component_type!r}")
        self.component_type = component_type


class ComponentTypeMismatchError(DiscordDecodeError):
    """Decoded component cannot be used where it was found."""

    def __init__(self, component: object, expected: type) -> None:
        super().__init__(
            f"{type(component).__name__} is not a valid {expected.__name__}"
        )
        self.component = component
        self.expected = expected


class DiscordAPIError(DiscordError):
    """Discord API request error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message is None:
            user_message = "Discord API error. Retrying with backoff..."
        super().__init__(message, user_message=user_message)
        self.status_code = status_code
        self.retry_after = retry_after


class DiscordTransientError(DiscordAPIError):
    """Retryable Discord API error (server errors, network issues)."""


class DiscordPermanentError(DiscordAPIError):
    """Non-retryable Discord API error (auth failures, invalid requests)."""


class AccessorContractError(TypeError):
    """A typed accessor was called on a value of another declared type.

    This signals a disagreement between the caller's command schema and its
    handler code, not bad input, so it is intentionally outside the
    ``DiscordError`` hierarchy.
    """


class StateNotFoundError(LookupError):
    """Requested entity is not held by the state cache."""
