from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from .channels import Channel
from .errors import StateNotFoundError
from .guilds import Guild, Role
from .logging_utils import log_event
from .permissions import compute_effective_permissions
from .users import Member, User

logger = logging.getLogger(__name__)


class StateCache:
    """In-memory snapshots of guilds, channels, members and users.

    Lookups raise ``StateNotFoundError`` on a miss, which lets the cache serve
    as the state tier of option resolution. Stored objects are returned as-is;
    callers must not mutate them.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._guilds: dict[str, Guild] = {}
        self._channels: dict[str, Channel] = {}
        self._members: dict[tuple[str, str], Member] = {}
        self._users: dict[str, User] = {}

    def add_guild(self, guild: Guild) -> None:
        with self._lock:
            self._guilds[guild.id] = guild
            for channel in (*guild.channels, *guild.threads):
                if channel.guild_id is None:
                    channel.guild_id = guild.id
                self._channels[channel.id] = channel
            for member in guild.members:
                self._store_member(guild.id, member)

    def remove_guild(self, guild_id: str) -> None:
        with self._lock:
            guild = self._guilds.pop(guild_id, None)
            if guild is None:
                return
            for channel_id in [
                key
                for key, channel in self._channels.items()
                if channel.guild_id == guild_id
            ]:
                del self._channels[channel_id]
            for key in [key for key in self._members if key[0] == guild_id]:
                del self._members[key]

    def add_channel(self, channel: Channel) -> None:
        with self._lock:
            self._channels[channel.id] = channel
            guild = self._guilds.get(channel.guild_id or "")
            if guild is None:
                return
            bucket = guild.threads if channel.is_thread() else guild.channels
            for index, existing in enumerate(bucket):
                if existing.id == channel.id:
                    bucket[index] = channel
                    return
            bucket.append(channel)

    def remove_channel(self, channel_id: str) -> None:
        with self._lock:
            channel = self._channels.pop(channel_id, None)
            if channel is None:
                return
            guild = self._guilds.get(channel.guild_id or "")
            if guild is not None:
                guild.channels = [c for c in guild.channels if c.id != channel_id]
                guild.threads = [c for c in guild.threads if c.id != channel_id]

    def add_role(self, guild_id: str, role: Role) -> None:
        with self._lock:
            guild = self._require_guild(guild_id)
            for index, existing in enumerate(guild.roles):
                if existing.id == role.id:
                    guild.roles[index] = role
                    return
            guild.roles.append(role)

    def remove_role(self, guild_id: str, role_id: str) -> None:
        with self._lock:
            guild = self._guilds.get(guild_id)
            if guild is not None:
                guild.roles = [role for role in guild.roles if role.id != role_id]

    def add_member(self, guild_id: str, member: Member) -> None:
        with self._lock:
            self._store_member(guild_id, member)

    def remove_member(self, guild_id: str, user_id: str) -> None:
        with self._lock:
            self._members.pop((guild_id, user_id), None)

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def _store_member(self, guild_id: str, member: Member) -> None:
        if member.user is None:
            log_event(
                logger,
                logging.DEBUG,
                "discord.state.member_without_user",
                guild_id=guild_id,
            )
            return
        member.guild_id = guild_id
        self._members[(guild_id, member.user.id)] = member
        self._users[member.user.id] = member.user

    def _require_guild(self, guild_id: str) -> Guild:
        guild = self._guilds.get(guild_id)
        if guild is None:
            raise StateNotFoundError(f"guild {guild_id} is not cached")
        return guild

    def guild(self, guild_id: str) -> Guild:
        with self._lock:
            return self._require_guild(guild_id)

    def channel(self, channel_id: str) -> Channel:
        with self._lock:
            channel = self._channels.get(channel_id)
            if channel is None:
                raise StateNotFoundError(f"channel {channel_id} is not cached")
            return channel

    def role(self, guild_id: str, role_id: str) -> Role:
        with self._lock:
            role = self._require_guild(guild_id).get_role(role_id)
            if role is None:
                raise StateNotFoundError(
                    f"role {role_id} is not cached for guild {guild_id}"
                )
            return role

    def member(self, guild_id: str, user_id: str) -> Member:
        with self._lock:
            member = self._members.get((guild_id, user_id))
            if member is None:
                raise StateNotFoundError(
                    f"member {user_id} is not cached for guild {guild_id}"
                )
            return member

    def user(self, user_id: str) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise StateNotFoundError(f"user {user_id} is not cached")
            return user

    def user_channel_permissions(self, user_id: str, channel_id: str) -> int:
        """Effective permissions of a cached member in a cached guild channel."""
        with self._lock:
            channel = self.channel(channel_id)
            if channel.guild_id is None:
                raise StateNotFoundError(f"channel {channel_id} is not in a guild")
            guild = self._require_guild(channel.guild_id)
            member = self.member(guild.id, user_id)
            return compute_effective_permissions(
                guild, channel, user_id, member.roles
            )

    def apply_event(self, event_type: str, data: Mapping[str, Any]) -> bool:
        """Fold a gateway dispatch into the cache.

        Returns ``True`` when the event type is one the cache tracks.
        """
        if event_type in {"GUILD_CREATE", "GUILD_UPDATE"}:
            guild = Guild.from_raw(data)
            with self._lock:
                existing = self._guilds.get(guild.id)
                if event_type == "GUILD_UPDATE" and existing is not None:
                    # Updates omit channels, threads and members.
                    guild.channels = existing.channels
                    guild.threads = existing.threads
                self.add_guild(guild)
            return True
        if event_type == "GUILD_DELETE":
            self.remove_guild(str(data.get("id", "")))
            return True
        if event_type in {"CHANNEL_CREATE", "CHANNEL_UPDATE", "THREAD_CREATE", "THREAD_UPDATE"}:
            self.add_channel(Channel.from_raw(data))
            return True
        if event_type in {"CHANNEL_DELETE", "THREAD_DELETE"}:
            self.remove_channel(str(data.get("id", "")))
            return True
        if event_type in {"GUILD_ROLE_CREATE", "GUILD_ROLE_UPDATE"}:
            role_raw = data.get("role")
            if isinstance(role_raw, Mapping):
                self._apply_guild_scoped(
                    data, lambda guild_id: self.add_role(guild_id, Role.from_raw(role_raw))
                )
            return True
        if event_type == "GUILD_ROLE_DELETE":
            role_id = str(data.get("role_id", ""))
            self._apply_guild_scoped(
                data, lambda guild_id: self.remove_role(guild_id, role_id)
            )
            return True
        if event_type in {"GUILD_MEMBER_ADD", "GUILD_MEMBER_UPDATE"}:
            member = Member.from_raw(data)
            self._apply_guild_scoped(
                data, lambda guild_id: self.add_member(guild_id, member)
            )
            return True
        if event_type == "GUILD_MEMBER_REMOVE":
            user_raw = data.get("user")
            if isinstance(user_raw, Mapping):
                user_id = str(user_raw.get("id", ""))
                self._apply_guild_scoped(
                    data, lambda guild_id: self.remove_member(guild_id, user_id)
                )
            return True
        return False

    def _apply_guild_scoped(self, data: Mapping[str, Any], apply: Any) -> None:
        guild_id = data.get("guild_id")
        if not guild_id:
            return
        try:
            apply(str(guild_id))
        except StateNotFoundError as exc:
            log_event(
                logger,
                logging.DEBUG,
                "discord.state.event_for_unknown_guild",
                guild_id=str(guild_id),
                exc=exc,
            )

    def snapshot_counts(self) -> dict[str, int]:
        with self._lock:
            return {
                "guilds": len(self._guilds),
                "channels": len(self._channels),
                "members": len(self._members),
                "users": len(self._users),
            }
