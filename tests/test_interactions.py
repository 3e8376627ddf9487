from __future__ import annotations

import json
from typing import Any

import pytest

from cordkit.components import ActionsRow, Label, TextInput
from cordkit.errors import (
    AccessorContractError,
    ComponentTypeMismatchError,
    DiscordDecodeError,
    DiscordError,
)
from cordkit.interactions import (
    CommandInteractionData,
    CommandInteractionDataOption,
    Interaction,
    MessageComponentData,
    ModalSubmitData,
    decode_interaction,
)
from cordkit.permissions import SEND_MESSAGES, VIEW_CHANNEL
from cordkit.types import (
    ApplicationCommandOptionType,
    ComponentType,
    InteractionContextType,
    InteractionType,
)


def _interaction(interaction_type: int, data: Any = None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "900",
        "application_id": "800",
        "type": interaction_type,
        "token": "tok",
        "version": 1,
    }
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return payload


def _guild_member(user_id: str = "42") -> dict[str, Any]:
    return {
        "user": {"id": user_id, "username": "alice", "discriminator": "0"},
        "roles": ["200"],
        "permissions": str(VIEW_CHANNEL | SEND_MESSAGES),
    }


def test_ping_carries_no_data() -> None:
    interaction = decode_interaction(_interaction(1))

    assert interaction.type == InteractionType.PING
    assert interaction.data is None
    assert interaction.get_user() is None


def test_unknown_interaction_type_leaves_data_unset() -> None:
    interaction = decode_interaction(_interaction(99, data={"whatever": True}))

    assert interaction.type == 99
    assert interaction.data is None


def test_decode_application_command_from_json_text() -> None:
    payload = _interaction(
        2,
        data={
            "id": "cmd",
            "name": "ban",
            "type": 1,
            "options": [
                {"name": "user", "type": 6, "value": "42"},
                {"name": "days", "type": 4, "value": 7},
            ],
            "resolved": {
                "users": {"42": {"id": "42", "username": "alice"}},
                "members": {"42": {"roles": ["200"], "permissions": "1024"}},
            },
        },
        guild_id="100",
        channel_id="300",
        member=_guild_member(),
        app_permissions="2048",
        locale="en-US",
        context=0,
    )

    interaction = decode_interaction(json.dumps(payload))

    data = interaction.command_data()
    assert isinstance(data, CommandInteractionData)
    assert data.interaction_type == InteractionType.APPLICATION_COMMAND
    assert data.name == "ban"
    days = data.get_option("days")
    assert days is not None
    assert days.int_value() == 7
    assert data.get_option("missing") is None
    assert data.resolved is not None
    assert data.resolved.users["42"].username == "alice"
    assert data.resolved.members["42"].permissions == VIEW_CHANNEL
    assert interaction.app_permissions == SEND_MESSAGES
    assert interaction.context == InteractionContextType.GUILD
    assert interaction.member is not None
    assert interaction.member.permissions == VIEW_CHANNEL | SEND_MESSAGES
    user = interaction.get_user()
    assert user is not None and user.id == "42"


def test_command_data_round_trip() -> None:
    data = {
        "id": "cmd",
        "name": "ban",
        "type": 1,
        "options": [
            {"name": "user", "type": 6, "value": "42"},
            {"name": "days", "type": 4, "value": 7},
        ],
    }

    interaction = decode_interaction(_interaction(2, data=data))

    assert interaction.data is not None
    assert interaction.data.to_payload() == data


def test_dm_interaction_uses_user() -> None:
    interaction = decode_interaction(
        _interaction(
            2,
            data={"id": "cmd", "name": "ping", "type": 1},
            user={"id": "7", "username": "bob"},
        )
    )

    assert interaction.member is None
    user = interaction.get_user()
    assert user is not None and user.username == "bob"


def test_decode_from_bytes() -> None:
    raw = json.dumps(_interaction(1)).encode("utf-8")

    assert decode_interaction(raw).type == InteractionType.PING


@pytest.mark.parametrize("raw", ["{not json", "[]", json.dumps({"type": "x"})])
def test_invalid_interaction_documents(raw: str) -> None:
    with pytest.raises(DiscordDecodeError):
        decode_interaction(raw)


def test_autocomplete_decodes_command_data() -> None:
    interaction = decode_interaction(
        _interaction(
            4,
            data={
                "id": "cmd",
                "name": "search",
                "type": 1,
                "options": [
                    {"name": "query", "type": 3, "value": "py", "focused": True}
                ],
            },
        )
    )

    data = interaction.command_data()
    query = data.get_option("query")
    assert query is not None
    assert query.focused is True
    assert query.string_value() == "py"


def test_message_component_interaction() -> None:
    interaction = decode_interaction(
        _interaction(
            3,
            data={
                "custom_id": "pick-user",
                "component_type": 5,
                "values": ["42"],
                "resolved": {"users": {"42": {"id": "42", "username": "alice"}}},
            },
            message={"id": "555", "content": "choose"},
            member=_guild_member(),
        )
    )

    data = interaction.message_component_data()
    assert isinstance(data, MessageComponentData)
    assert data.component_type == ComponentType.USER_SELECT
    assert data.values == ["42"]
    assert data.resolved.users["42"].username == "alice"
    assert interaction.message == {"id": "555", "content": "choose"}

    with pytest.raises(AccessorContractError):
        interaction.command_data()
    with pytest.raises(AccessorContractError):
        interaction.modal_submit_data()


def test_button_click_round_trip() -> None:
    data = {"custom_id": "ok", "component_type": 2}

    interaction = decode_interaction(_interaction(3, data=data))

    assert interaction.message_component_data().to_payload() == data


def test_modal_submit_round_trip() -> None:
    data = {
        "custom_id": "feedback",
        "components": [
            {
                "type": 18,
                "id": 1,
                "component": {
                    "type": 4,
                    "id": 2,
                    "custom_id": "name",
                    "value": "Alice",
                },
            },
            {
                "type": 1,
                "components": [
                    {"type": 4, "custom_id": "details", "value": "All good"}
                ],
            },
        ],
    }

    interaction = decode_interaction(_interaction(5, data=data))

    assert interaction.modal_submit_data().to_payload() == data


def test_typed_view_without_data_is_a_contract_error() -> None:
    interaction = Interaction(
        id="1", application_id="app", type=InteractionType.APPLICATION_COMMAND
    )

    with pytest.raises(AccessorContractError):
        interaction.command_data()


def test_modal_submit_with_label_and_legacy_row() -> None:
    interaction = decode_interaction(
        _interaction(
            5,
            data={
                "custom_id": "feedback",
                "components": [
                    {
                        "type": 18,
                        "id": 1,
                        "component": {
                            "type": 4,
                            "id": 2,
                            "custom_id": "name",
                            "value": "Alice",
                        },
                    },
                    {
                        "type": 1,
                        "components": [
                            {"type": 4, "custom_id": "details", "value": "All good"}
                        ],
                    },
                    {
                        "type": 18,
                        "id": 3,
                        "component": {
                            "type": 3,
                            "custom_id": "rating",
                            "values": ["5"],
                        },
                    },
                ],
            },
        )
    )

    data = interaction.modal_submit_data()
    assert isinstance(data, ModalSubmitData)
    assert isinstance(data.components[0], Label)
    assert isinstance(data.components[1], ActionsRow)
    name = data.find_component("name")
    assert isinstance(name, TextInput)
    assert name.value == "Alice"
    details = data.find_component("details")
    assert isinstance(details, TextInput) and details.value == "All good"
    rating = data.find_component("rating")
    assert rating is not None and getattr(rating, "values") == ["5"]
    assert data.find_component("nope") is None

    with pytest.raises(AccessorContractError):
        interaction.message_component_data()


def test_modal_submit_rejects_message_only_component() -> None:
    with pytest.raises(ComponentTypeMismatchError):
        decode_interaction(
            _interaction(
                5,
                data={
                    "custom_id": "m",
                    "components": [{"type": 2, "style": 1, "custom_id": "b"}],
                },
            )
        )


def test_command_path_walks_subcommands() -> None:
    data = CommandInteractionData.from_raw(
        {
            "id": "cmd",
            "name": "admin",
            "type": 1,
            "options": [
                {
                    "name": "user",
                    "type": 2,
                    "options": [
                        {
                            "name": "ban",
                            "type": 1,
                            "options": [{"name": "reason", "type": 3, "value": "spam"}],
                        }
                    ],
                }
            ],
        }
    )

    path, options = data.command_path()

    assert path == ("admin", "user", "ban")
    assert [option.name for option in options] == ["reason"]
    assert data.options[0].get_option("ban") is not None


def _option(option_type: ApplicationCommandOptionType, value: Any) -> CommandInteractionDataOption:
    return CommandInteractionDataOption(name="opt", type=option_type, value=value)


def test_scalar_accessors() -> None:
    assert _option(ApplicationCommandOptionType.INTEGER, 5.0).int_value() == 5
    assert _option(ApplicationCommandOptionType.NUMBER, 2).float_value() == 2.0
    assert _option(ApplicationCommandOptionType.STRING, "hi").string_value() == "hi"
    assert _option(ApplicationCommandOptionType.BOOLEAN, True).bool_value() is True


def test_accessor_type_guards_abort() -> None:
    integer = _option(ApplicationCommandOptionType.INTEGER, 5)
    string = _option(ApplicationCommandOptionType.STRING, "5")

    with pytest.raises(AccessorContractError):
        integer.string_value()
    with pytest.raises(AccessorContractError):
        string.int_value()
    with pytest.raises(AccessorContractError):
        integer.float_value()
    with pytest.raises(AccessorContractError):
        string.bool_value()


def test_accessor_contract_error_is_not_a_data_error() -> None:
    assert issubclass(AccessorContractError, TypeError)
    assert not issubclass(AccessorContractError, DiscordError)


def test_mistyped_value_is_a_decode_error() -> None:
    with pytest.raises(DiscordDecodeError):
        _option(ApplicationCommandOptionType.INTEGER, "seven").int_value()
    with pytest.raises(DiscordDecodeError):
        _option(ApplicationCommandOptionType.BOOLEAN, "true").bool_value()


def test_option_without_integer_type_is_rejected() -> None:
    with pytest.raises(DiscordDecodeError):
        CommandInteractionDataOption.from_raw({"name": "x", "type": "string"})
