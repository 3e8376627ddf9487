from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional, Protocol, TypeVar, Union

from .channels import Channel
from .coercion import (
    as_bool,
    as_id,
    as_str,
    coerce_int,
    format_bitmask,
    optional_list,
    optional_mapping,
    parse_bitmask,
    require_mapping,
)
from .components import (
    ActionsRow,
    Component,
    Label,
    ModalComponent,
    decode_components,
)
from .errors import AccessorContractError, DiscordDecodeError
from .guilds import Role
from .logging_utils import log_event
from .types import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    ComponentType,
    InteractionContextType,
    InteractionType,
    enum_or_int,
)
from .users import Member, User

logger = logging.getLogger(__name__)

_D = TypeVar("_D")


class StateChannelGetter(Protocol):
    def channel(self, channel_id: str) -> Channel: ...


class StateRoleGetter(Protocol):
    def role(self, guild_id: str, role_id: str) -> Role: ...


class StateUserGetter(Protocol):
    def user(self, user_id: str) -> User: ...


class ChannelFetcher(Protocol):
    async def channel(self, channel_id: str) -> Channel: ...


class RolesFetcher(Protocol):
    async def roles(self, guild_id: str) -> list[Role]: ...


class UserFetcher(Protocol):
    async def user(self, user_id: str) -> User: ...


def _keyed(
    value: Any, *, what: str, build: Any
) -> dict[str, Any]:
    data = optional_mapping(value, what=what)
    if data is None:
        return {}
    return {str(key): build(item) for key, item in data.items()}


def _raw_mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


@dataclass
class MessageComponentDataResolved:
    users: dict[str, User] = field(default_factory=dict)
    # Partial members: no user, deaf or mute.
    members: dict[str, Member] = field(default_factory=dict)
    roles: dict[str, Role] = field(default_factory=dict)
    # Partial channels: id, name, type and permissions only.
    channels: dict[str, Channel] = field(default_factory=dict)

    @classmethod
    def _fields_from_raw(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "users": _keyed(data.get("users"), what="resolved.users", build=User.from_raw),
            "members": _keyed(
                data.get("members"), what="resolved.members", build=Member.from_raw
            ),
            "roles": _keyed(data.get("roles"), what="resolved.roles", build=Role.from_raw),
            "channels": _keyed(
                data.get("channels"), what="resolved.channels", build=Channel.from_raw
            ),
        }

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "MessageComponentDataResolved":
        data = require_mapping(payload, what="resolved")
        return cls(**cls._fields_from_raw(data))

    def to_payload(self) -> dict[str, Any]:
        return {
            "users": {key: value.to_payload() for key, value in self.users.items()},
            "members": {key: value.to_payload() for key, value in self.members.items()},
            "roles": {key: value.to_payload() for key, value in self.roles.items()},
            "channels": {
                key: value.to_payload() for key, value in self.channels.items()
            },
        }


@dataclass
class CommandInteractionDataResolved(MessageComponentDataResolved):
    # Messages and attachments are kept as raw objects.
    messages: dict[str, dict[str, Any]] = field(default_factory=dict)
    attachments: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "CommandInteractionDataResolved":
        data = require_mapping(payload, what="resolved")
        return cls(
            **cls._fields_from_raw(data),
            messages=_keyed(
                data.get("messages"), what="resolved.messages", build=_raw_mapping
            ),
            attachments=_keyed(
                data.get("attachments"), what="resolved.attachments", build=_raw_mapping
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["messages"] = {key: dict(value) for key, value in self.messages.items()}
        payload["attachments"] = {
            key: dict(value) for key, value in self.attachments.items()
        }
        return payload


@dataclass
class CommandInteractionDataOption:
    name: str
    type: ApplicationCommandOptionType | int
    # Raw JSON value; INTEGER and NUMBER both arrive as JSON numbers.
    value: Any = None
    options: list["CommandInteractionDataOption"] = field(default_factory=list)
    focused: bool = False

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "CommandInteractionDataOption":
        data = require_mapping(payload, what="command option")
        option_type = enum_or_int(ApplicationCommandOptionType, data.get("type"))
        if option_type is None:
            raise DiscordDecodeError(
                f"command option type must be an integer, got {data.get('type')!r}"
            )
        return cls(
            name=as_str(data.get("name")) or "",
            type=option_type,
            value=data.get("value"),
            options=[
                cls.from_raw(item)
                for item in optional_list(data.get("options"), what="option.options")
            ],
            focused=as_bool(data.get("focused")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "type": int(self.type)}
        if self.value is not None:
            payload["value"] = self.value
        if self.options:
            payload["options"] = [option.to_payload() for option in self.options]
        if self.focused:
            payload["focused"] = True
        return payload

    def get_option(self, name: str) -> Optional["CommandInteractionDataOption"]:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def _require_type(self, accessor: str, *allowed: ApplicationCommandOptionType) -> None:
        if self.type not in allowed:
            raise AccessorContractError(
                f"{accessor} called on option {self.name!r} of type {_type_name(self.type)}"
            )

    def _number(self) -> Union[int, float]:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise DiscordDecodeError(
                f"option {self.name!r} value is not a number: {self.value!r}"
            )
        return self.value

    def _snowflake(self) -> str:
        snowflake = as_id(self.value)
        if snowflake is None:
            raise DiscordDecodeError(f"option {self.name!r} has no id value")
        return snowflake

    def int_value(self) -> int:
        self._require_type("int_value", ApplicationCommandOptionType.INTEGER)
        return int(self._number())

    def float_value(self) -> float:
        self._require_type("float_value", ApplicationCommandOptionType.NUMBER)
        return float(self._number())

    def string_value(self) -> str:
        self._require_type("string_value", ApplicationCommandOptionType.STRING)
        if not isinstance(self.value, str):
            raise DiscordDecodeError(
                f"option {self.name!r} value is not a string: {self.value!r}"
            )
        return self.value

    def bool_value(self) -> bool:
        self._require_type("bool_value", ApplicationCommandOptionType.BOOLEAN)
        if not isinstance(self.value, bool):
            raise DiscordDecodeError(
                f"option {self.name!r} value is not a boolean: {self.value!r}"
            )
        return self.value

    async def channel_value(
        self,
        *,
        fetcher: Optional[ChannelFetcher] = None,
        state: Optional[StateChannelGetter] = None,
    ) -> Channel:
        """Resolve a CHANNEL option.

        Tries ``state`` first, then ``fetcher``; when both are missing or fail
        a stub ``Channel`` holding only the id is returned.
        """
        self._require_type("channel_value", ApplicationCommandOptionType.CHANNEL)
        channel_id = self._snowflake()
        if state is not None:
            try:
                return state.channel(channel_id)
            except Exception as exc:
                _log_fallback("channel", channel_id, "state", exc)
        if fetcher is not None:
            try:
                return await fetcher.channel(channel_id)
            except Exception as exc:
                _log_fallback("channel", channel_id, "fetch", exc)
        return Channel(id=channel_id)

    async def role_value(
        self,
        guild_id: Optional[str],
        *,
        fetcher: Optional[RolesFetcher] = None,
        state: Optional[StateRoleGetter] = None,
    ) -> Role:
        """Resolve a ROLE or MENTIONABLE option within ``guild_id``.

        Without a guild id no lookup is attempted and a stub is returned.
        """
        self._require_type(
            "role_value",
            ApplicationCommandOptionType.ROLE,
            ApplicationCommandOptionType.MENTIONABLE,
        )
        role_id = self._snowflake()
        if not guild_id:
            return Role(id=role_id)
        if state is not None:
            try:
                return state.role(guild_id, role_id)
            except Exception as exc:
                _log_fallback("role", role_id, "state", exc)
        if fetcher is not None:
            try:
                roles = await fetcher.roles(guild_id)
            except Exception as exc:
                _log_fallback("role", role_id, "fetch", exc)
            else:
                for role in roles:
                    if role.id == role_id:
                        return role
                _log_fallback("role", role_id, "fetch", None)
        return Role(id=role_id)

    async def user_value(
        self,
        *,
        fetcher: Optional[UserFetcher] = None,
        state: Optional[StateUserGetter] = None,
    ) -> User:
        self._require_type(
            "user_value",
            ApplicationCommandOptionType.USER,
            ApplicationCommandOptionType.MENTIONABLE,
        )
        user_id = self._snowflake()
        if state is not None:
            try:
                return state.user(user_id)
            except Exception as exc:
                _log_fallback("user", user_id, "state", exc)
        if fetcher is not None:
            try:
                return await fetcher.user(user_id)
            except Exception as exc:
                _log_fallback("user", user_id, "fetch", exc)
        return User(id=user_id)


def _type_name(value: Any) -> str:
    return value.name if isinstance(value, ApplicationCommandOptionType) else str(value)


def _log_fallback(
    kind: str, entity_id: str, tier: str, exc: Optional[BaseException]
) -> None:
    log_event(
        logger,
        logging.DEBUG,
        "discord.option.resolve.fallback",
        kind=kind,
        entity_id=entity_id,
        tier=tier,
        exc=exc,
    )


@dataclass
class CommandInteractionData:
    id: str
    name: str
    type: ApplicationCommandType | int = ApplicationCommandType.CHAT_INPUT
    guild_id: Optional[str] = None
    # User or message a context-menu command was invoked on.
    target_id: Optional[str] = None
    options: list[CommandInteractionDataOption] = field(default_factory=list)
    resolved: Optional[CommandInteractionDataResolved] = None

    @property
    def interaction_type(self) -> InteractionType:
        return InteractionType.APPLICATION_COMMAND

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "CommandInteractionData":
        data = require_mapping(payload, what="command data")
        resolved_raw = optional_mapping(data.get("resolved"), what="command resolved")
        return cls(
            id=as_id(data.get("id")) or "",
            name=as_str(data.get("name")) or "",
            type=enum_or_int(ApplicationCommandType, data.get("type"))
            or ApplicationCommandType.CHAT_INPUT,
            guild_id=as_id(data.get("guild_id")),
            target_id=as_id(data.get("target_id")),
            options=[
                CommandInteractionDataOption.from_raw(item)
                for item in optional_list(data.get("options"), what="command options")
            ],
            resolved=(
                CommandInteractionDataResolved.from_raw(resolved_raw)
                if resolved_raw is not None
                else None
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": int(self.type),
        }
        if self.guild_id is not None:
            payload["guild_id"] = self.guild_id
        if self.target_id is not None:
            payload["target_id"] = self.target_id
        if self.options:
            payload["options"] = [option.to_payload() for option in self.options]
        if self.resolved is not None:
            payload["resolved"] = self.resolved.to_payload()
        return payload

    def get_option(self, name: str) -> Optional[CommandInteractionDataOption]:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def command_path(self) -> tuple[tuple[str, ...], list[CommandInteractionDataOption]]:
        """Walk subcommand groups and subcommands.

        Returns the name path (``("admin", "ban")``) and the leaf options.
        """
        path: list[str] = [self.name]
        current = self.options
        while current and current[0].type in (
            ApplicationCommandOptionType.SUB_COMMAND,
            ApplicationCommandOptionType.SUB_COMMAND_GROUP,
        ):
            path.append(current[0].name)
            current = current[0].options
        return tuple(path), current


@dataclass
class MessageComponentData:
    custom_id: str
    component_type: ComponentType | int
    # Only filled for select menus.
    values: list[str] = field(default_factory=list)
    resolved: MessageComponentDataResolved = field(
        default_factory=MessageComponentDataResolved
    )

    @property
    def interaction_type(self) -> InteractionType:
        return InteractionType.MESSAGE_COMPONENT

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "MessageComponentData":
        data = require_mapping(payload, what="component data")
        component_type = enum_or_int(ComponentType, data.get("component_type"))
        if component_type is None:
            raise DiscordDecodeError(
                "component data is missing an integer component_type"
            )
        resolved_raw = optional_mapping(data.get("resolved"), what="component resolved")
        return cls(
            custom_id=as_str(data.get("custom_id")) or "",
            component_type=component_type,
            values=[
                str(item)
                for item in optional_list(data.get("values"), what="component values")
            ],
            resolved=(
                MessageComponentDataResolved.from_raw(resolved_raw)
                if resolved_raw is not None
                else MessageComponentDataResolved()
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "custom_id": self.custom_id,
            "component_type": int(self.component_type),
        }
        if self.values:
            payload["values"] = list(self.values)
        resolved = self.resolved.to_payload()
        if any(resolved.values()):
            payload["resolved"] = resolved
        return payload


@dataclass
class ModalSubmitData:
    custom_id: str
    components: list[ModalComponent] = field(default_factory=list)

    @property
    def interaction_type(self) -> InteractionType:
        return InteractionType.MODAL_SUBMIT

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "ModalSubmitData":
        data = require_mapping(payload, what="modal submit data")
        return cls(
            custom_id=as_str(data.get("custom_id")) or "",
            components=decode_components(
                optional_list(data.get("components"), what="modal components"),
                expect=ModalComponent,
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "custom_id": self.custom_id,
            "components": [component.to_payload() for component in self.components],
        }

    def iter_components(self) -> Iterator[Component]:
        """Yield submitted components, unwrapping labels and action rows."""
        for component in self.components:
            if isinstance(component, ActionsRow):
                yield from component.components
            elif isinstance(component, Label):
                if component.component is not None:
                    yield component.component
            else:
                yield component

    def find_component(self, custom_id: str) -> Optional[Component]:
        for component in self.iter_components():
            if getattr(component, "custom_id", None) == custom_id:
                return component
        return None


InteractionData = Union[CommandInteractionData, MessageComponentData, ModalSubmitData]


@dataclass
class Interaction:
    id: str
    application_id: str
    type: InteractionType | int
    token: str = ""
    version: int = 1
    data: Optional[InteractionData] = None
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    channel: Optional[Channel] = None
    # Message a component was attached to, kept raw.
    message: Optional[dict[str, Any]] = None
    app_permissions: int = 0
    member: Optional[Member] = None
    user: Optional[User] = None
    locale: Optional[str] = None
    guild_locale: Optional[str] = None
    context: Optional[InteractionContextType | int] = None
    authorizing_integration_owners: dict[str, str] = field(default_factory=dict)
    entitlements: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "Interaction":
        data = require_mapping(payload, what="interaction")
        interaction_type = enum_or_int(InteractionType, data.get("type"))
        if interaction_type is None:
            raise DiscordDecodeError(
                f"interaction type must be an integer, got {data.get('type')!r}"
            )
        member_raw = optional_mapping(data.get("member"), what="interaction.member")
        user_raw = optional_mapping(data.get("user"), what="interaction.user")
        channel_raw = optional_mapping(data.get("channel"), what="interaction.channel")
        message_raw = optional_mapping(data.get("message"), what="interaction.message")
        owners_raw = optional_mapping(
            data.get("authorizing_integration_owners"),
            what="interaction.authorizing_integration_owners",
        )
        return cls(
            id=as_id(data.get("id")) or "",
            application_id=as_id(data.get("application_id")) or "",
            type=interaction_type,
            token=as_str(data.get("token")) or "",
            version=coerce_int(data.get("version"), 1) or 1,
            data=_decode_data(interaction_type, data.get("data")),
            guild_id=as_id(data.get("guild_id")),
            channel_id=as_id(data.get("channel_id")),
            channel=Channel.from_raw(channel_raw) if channel_raw is not None else None,
            message=dict(message_raw) if message_raw is not None else None,
            app_permissions=parse_bitmask(
                data.get("app_permissions"), field="interaction.app_permissions"
            ),
            member=Member.from_raw(member_raw) if member_raw is not None else None,
            user=User.from_raw(user_raw) if user_raw is not None else None,
            locale=as_str(data.get("locale")),
            guild_locale=as_str(data.get("guild_locale")),
            context=enum_or_int(InteractionContextType, data.get("context")),
            authorizing_integration_owners=(
                {str(key): str(value) for key, value in owners_raw.items()}
                if owners_raw is not None
                else {}
            ),
            entitlements=[
                dict(item)
                for item in optional_list(
                    data.get("entitlements"), what="interaction.entitlements"
                )
                if isinstance(item, Mapping)
            ],
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "application_id": self.application_id,
            "type": int(self.type),
            "token": self.token,
            "version": self.version,
            "app_permissions": format_bitmask(self.app_permissions),
        }
        optional: dict[str, Any] = {
            "data": self.data.to_payload() if self.data is not None else None,
            "guild_id": self.guild_id,
            "channel_id": self.channel_id,
            "channel": self.channel.to_payload() if self.channel is not None else None,
            "message": self.message,
            "member": self.member.to_payload() if self.member is not None else None,
            "user": self.user.to_payload() if self.user is not None else None,
            "locale": self.locale,
            "guild_locale": self.guild_locale,
            "context": int(self.context) if self.context is not None else None,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        if self.authorizing_integration_owners:
            payload["authorizing_integration_owners"] = dict(
                self.authorizing_integration_owners
            )
        if self.entitlements:
            payload["entitlements"] = [dict(item) for item in self.entitlements]
        return payload

    def get_user(self) -> Optional[User]:
        if self.member is not None:
            return self.member.user
        return self.user

    def _require_data(self, kind: type[_D]) -> _D:
        if not isinstance(self.data, kind):
            raise AccessorContractError(
                f"interaction {self.id!r} carries no {kind.__name__}"
            )
        return self.data

    def command_data(self) -> CommandInteractionData:
        if self.type not in (
            InteractionType.APPLICATION_COMMAND,
            InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE,
        ):
            raise AccessorContractError(
                f"command_data called on interaction of type {self.type!r}"
            )
        return self._require_data(CommandInteractionData)

    def message_component_data(self) -> MessageComponentData:
        if self.type != InteractionType.MESSAGE_COMPONENT:
            raise AccessorContractError(
                f"message_component_data called on interaction of type {self.type!r}"
            )
        return self._require_data(MessageComponentData)

    def modal_submit_data(self) -> ModalSubmitData:
        if self.type != InteractionType.MODAL_SUBMIT:
            raise AccessorContractError(
                f"modal_submit_data called on interaction of type {self.type!r}"
            )
        return self._require_data(ModalSubmitData)


def _decode_data(
    interaction_type: InteractionType | int, raw: Any
) -> Optional[InteractionData]:
    if interaction_type in (
        InteractionType.APPLICATION_COMMAND,
        InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE,
    ):
        return CommandInteractionData.from_raw(raw)
    if interaction_type == InteractionType.MESSAGE_COMPONENT:
        return MessageComponentData.from_raw(raw)
    if interaction_type == InteractionType.MODAL_SUBMIT:
        return ModalSubmitData.from_raw(raw)
    # PING and types this module does not know carry no actionable data.
    return None


def decode_interaction(raw: Union[Mapping[str, Any], str, bytes]) -> Interaction:
    """Decode an interaction from a parsed object or a JSON document."""
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise DiscordDecodeError(f"interaction is not valid JSON: {exc}") from exc
    return Interaction.from_raw(raw)
