from __future__ import annotations

import logging
from typing import Any

import pytest

from cordkit import permissions as perms
from cordkit.errors import StateNotFoundError
from cordkit.guilds import Guild
from cordkit.state import StateCache


@pytest.fixture()
def cache(guild_payload: dict[str, Any]) -> StateCache:
    state = StateCache()
    assert state.apply_event("GUILD_CREATE", guild_payload) is True
    return state


def test_guild_create_populates_lookups(cache: StateCache) -> None:
    assert cache.guild("100").name == "Test Guild"
    assert cache.channel("301").guild_id == "100"
    assert cache.role("100", "200").name == "mods"
    assert cache.member("100", "42").roles == ["200"]
    assert cache.user("43").username == "member"
    assert cache.snapshot_counts() == {
        "guilds": 1,
        "channels": 2,
        "members": 2,
        "users": 2,
    }


def test_misses_raise_lookup_errors(cache: StateCache) -> None:
    with pytest.raises(StateNotFoundError):
        cache.guild("999")
    with pytest.raises(StateNotFoundError):
        cache.channel("999")
    with pytest.raises(StateNotFoundError):
        cache.role("100", "999")
    with pytest.raises(LookupError):
        cache.member("100", "999")
    with pytest.raises(LookupError):
        cache.user("999")


def test_user_channel_permissions(cache: StateCache) -> None:
    moderator = cache.user_channel_permissions("42", "301")
    regular = cache.user_channel_permissions("43", "301")

    assert perms.has_permission(moderator, perms.VIEW_CHANNEL)
    assert not perms.has_permission(regular, perms.VIEW_CHANNEL)
    assert perms.has_permission(cache.user_channel_permissions("43", "300"), perms.VIEW_CHANNEL)


def test_owner_has_every_permission(cache: StateCache) -> None:
    cache.apply_event(
        "GUILD_MEMBER_ADD",
        {"guild_id": "100", "user": {"id": "1", "username": "owner"}, "roles": []},
    )

    assert cache.user_channel_permissions("1", "301") == perms.ALL


def test_channel_events(cache: StateCache) -> None:
    cache.apply_event(
        "CHANNEL_CREATE",
        {"id": "302", "type": 0, "guild_id": "100", "name": "new"},
    )
    cache.apply_event(
        "THREAD_CREATE",
        {"id": "400", "type": 11, "guild_id": "100", "parent_id": "300"},
    )
    cache.apply_event(
        "CHANNEL_UPDATE",
        {"id": "300", "type": 0, "guild_id": "100", "name": "renamed"},
    )

    guild = cache.guild("100")
    assert [channel.id for channel in guild.channels] == ["300", "301", "302"]
    assert [thread.id for thread in guild.threads] == ["400"]
    assert cache.channel("300").name == "renamed"

    cache.apply_event("CHANNEL_DELETE", {"id": "302", "guild_id": "100"})
    cache.apply_event("THREAD_DELETE", {"id": "400", "guild_id": "100"})

    with pytest.raises(StateNotFoundError):
        cache.channel("302")
    assert [channel.id for channel in guild.channels] == ["300", "301"]
    assert guild.threads == []


def test_role_events_change_permissions(cache: StateCache) -> None:
    cache.apply_event(
        "GUILD_ROLE_UPDATE",
        {
            "guild_id": "100",
            "role": {"id": "100", "name": "@everyone", "permissions": "0"},
        },
    )
    assert not perms.has_permission(
        cache.user_channel_permissions("43", "300"), perms.VIEW_CHANNEL
    )

    cache.apply_event(
        "GUILD_ROLE_CREATE",
        {"guild_id": "100", "role": {"id": "500", "name": "new", "permissions": "8"}},
    )
    assert cache.role("100", "500").permissions == perms.ADMINISTRATOR

    cache.apply_event("GUILD_ROLE_DELETE", {"guild_id": "100", "role_id": "500"})
    with pytest.raises(StateNotFoundError):
        cache.role("100", "500")


def test_member_events(cache: StateCache) -> None:
    cache.apply_event(
        "GUILD_MEMBER_UPDATE",
        {"guild_id": "100", "user": {"id": "43", "username": "member"}, "roles": ["200"]},
    )
    assert cache.member("100", "43").roles == ["200"]
    assert cache.member("100", "43").guild_id == "100"

    cache.apply_event(
        "GUILD_MEMBER_REMOVE", {"guild_id": "100", "user": {"id": "43"}}
    )
    with pytest.raises(StateNotFoundError):
        cache.member("100", "43")
    assert cache.user("43").username == "member"


def test_guild_update_keeps_channels(cache: StateCache) -> None:
    cache.apply_event(
        "GUILD_UPDATE",
        {"id": "100", "name": "Renamed", "owner_id": "1", "roles": []},
    )

    assert cache.guild("100").name == "Renamed"
    assert [channel.id for channel in cache.guild("100").channels] == ["300", "301"]
    assert cache.member("100", "42").roles == ["200"]


def test_guild_delete_drops_channels_and_members(cache: StateCache) -> None:
    cache.apply_event("GUILD_DELETE", {"id": "100"})

    with pytest.raises(StateNotFoundError):
        cache.guild("100")
    with pytest.raises(StateNotFoundError):
        cache.channel("300")
    with pytest.raises(StateNotFoundError):
        cache.member("100", "42")


def test_events_for_unknown_guild_are_ignored(
    caplog: pytest.LogCaptureFixture,
) -> None:
    state = StateCache()

    with caplog.at_level(logging.DEBUG, logger="cordkit.state"):
        handled = state.apply_event(
            "GUILD_ROLE_CREATE",
            {"guild_id": "nope", "role": {"id": "1", "name": "x"}},
        )

    assert handled is True
    assert "discord.state.event_for_unknown_guild" in caplog.text


def test_untracked_event_types() -> None:
    assert StateCache().apply_event("MESSAGE_CREATE", {"id": "1"}) is False


def test_member_without_user_is_skipped() -> None:
    state = StateCache()
    state.add_guild(Guild.from_raw({"id": "g", "members": [{"roles": []}]}))

    assert state.snapshot_counts()["members"] == 0
