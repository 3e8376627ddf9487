from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .components import Component, MessageComponent, ModalComponent
from .errors import ComponentTypeMismatchError
from .types import InteractionResponseType, MessageFlags


@dataclass
class CommandOptionChoice:
    name: str
    value: Union[str, int, float]
    name_localizations: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "value": self.value}
        if self.name_localizations:
            payload["name_localizations"] = dict(self.name_localizations)
        return payload


@dataclass
class InteractionResponseData:
    content: str = ""
    tts: bool = False
    components: list[Component] = field(default_factory=list)
    # Embeds, allowed mentions and polls are passed through as raw objects.
    embeds: list[dict[str, Any]] = field(default_factory=list)
    allowed_mentions: Optional[dict[str, Any]] = None
    flags: MessageFlags = MessageFlags(0)
    choices: list[CommandOptionChoice] = field(default_factory=list)
    custom_id: str = ""
    title: str = ""

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.content:
            payload["content"] = self.content
        if self.tts:
            payload["tts"] = True
        if self.components:
            payload["components"] = [item.to_payload() for item in self.components]
        if self.embeds:
            payload["embeds"] = [dict(embed) for embed in self.embeds]
        if self.allowed_mentions is not None:
            payload["allowed_mentions"] = dict(self.allowed_mentions)
        if self.flags:
            payload["flags"] = int(self.flags)
        if self.choices:
            payload["choices"] = [choice.to_payload() for choice in self.choices]
        if self.custom_id:
            payload["custom_id"] = self.custom_id
        if self.title:
            payload["title"] = self.title
        return payload


@dataclass
class InteractionResponse:
    type: InteractionResponseType
    data: Optional[InteractionResponseData] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": int(self.type)}
        if self.data is not None:
            data = self.data.to_payload()
            if self.type == InteractionResponseType.APPLICATION_COMMAND_AUTOCOMPLETE_RESULT:
                # An empty suggestion list is still sent as an array.
                data.setdefault("choices", [])
            if data:
                payload["data"] = data
        return payload


def pong() -> InteractionResponse:
    return InteractionResponse(type=InteractionResponseType.PONG)


def autocomplete_result(choices: list[CommandOptionChoice]) -> InteractionResponse:
    return InteractionResponse(
        type=InteractionResponseType.APPLICATION_COMMAND_AUTOCOMPLETE_RESULT,
        data=InteractionResponseData(choices=list(choices)),
    )


class SimpleResponse:
    """Fluent builder for message replies.

    ``response()`` produces the initial callback; ``webhook_edit()`` produces
    the body for editing the original response or sending a follow-up.
    """

    def __init__(self) -> None:
        self._type = InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE
        self._data = InteractionResponseData()

    def message(self, content: str) -> "SimpleResponse":
        self._data.content = content
        return self

    def ephemeral(self) -> "SimpleResponse":
        self._data.flags |= MessageFlags.EPHEMERAL
        return self

    def components_v2(self) -> "SimpleResponse":
        self._data.flags |= MessageFlags.IS_COMPONENTS_V2
        return self

    def deferred(self) -> "SimpleResponse":
        self._type = InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE
        return self

    def update(self) -> "SimpleResponse":
        """Edit the message the component belongs to instead of replying."""
        self._type = InteractionResponseType.UPDATE_MESSAGE
        return self

    def add_embed(self, embed: dict[str, Any]) -> "SimpleResponse":
        self._data.embeds.append(dict(embed))
        return self

    def add_component(self, component: MessageComponent) -> "SimpleResponse":
        if not isinstance(component, MessageComponent):
            raise ComponentTypeMismatchError(component, MessageComponent)
        self._data.components.append(component)
        return self

    def response(self) -> InteractionResponse:
        return InteractionResponse(type=self._type, data=self._data)

    def webhook_edit(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "content": self._data.content,
            "embeds": [dict(embed) for embed in self._data.embeds],
            "components": [item.to_payload() for item in self._data.components],
        }
        if self._data.flags:
            payload["flags"] = int(self._data.flags)
        return payload


class ModalResponse:
    def __init__(self) -> None:
        self._data = InteractionResponseData()

    def title(self, title: str) -> "ModalResponse":
        self._data.title = title
        return self

    def custom_id(self, custom_id: str) -> "ModalResponse":
        self._data.custom_id = custom_id
        return self

    def add_component(self, component: ModalComponent) -> "ModalResponse":
        if not isinstance(component, ModalComponent):
            raise ComponentTypeMismatchError(component, ModalComponent)
        self._data.components.append(component)
        return self

    def response(self) -> InteractionResponse:
        return InteractionResponse(type=InteractionResponseType.MODAL, data=self._data)
