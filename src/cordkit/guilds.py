from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

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
from .users import Member


@dataclass
class RoleColors:
    primary_color: int = 0
    secondary_color: Optional[int] = None
    tertiary_color: Optional[int] = None

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "RoleColors":
        data = require_mapping(payload, what="role.colors")
        return cls(
            primary_color=coerce_int(data.get("primary_color"), 0) or 0,
            secondary_color=coerce_int(data.get("secondary_color")),
            tertiary_color=coerce_int(data.get("tertiary_color")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
            "tertiary_color": self.tertiary_color,
        }


@dataclass
class Role:
    id: str
    name: str = ""
    position: int = 0
    permissions: int = 0
    color: int = 0
    colors: RoleColors = field(default_factory=RoleColors)
    hoist: bool = False
    managed: bool = False
    mentionable: bool = False
    icon: Optional[str] = None
    unicode_emoji: Optional[str] = None
    flags: int = 0

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "Role":
        data = require_mapping(payload, what="role")
        colors_raw = optional_mapping(data.get("colors"), what="role.colors")
        color = coerce_int(data.get("color"), 0) or 0
        return cls(
            id=as_id(data.get("id")) or "",
            name=as_str(data.get("name")) or "",
            position=coerce_int(data.get("position"), 0) or 0,
            permissions=parse_bitmask(data.get("permissions"), field="role.permissions"),
            color=color,
            colors=(
                RoleColors.from_raw(colors_raw)
                if colors_raw is not None
                else RoleColors(primary_color=color)
            ),
            hoist=as_bool(data.get("hoist")),
            managed=as_bool(data.get("managed")),
            mentionable=as_bool(data.get("mentionable")),
            icon=as_str(data.get("icon")),
            unicode_emoji=as_str(data.get("unicode_emoji")),
            flags=coerce_int(data.get("flags"), 0) or 0,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "permissions": format_bitmask(self.permissions),
            "color": self.color,
            "colors": self.colors.to_payload(),
            "hoist": self.hoist,
            "managed": self.managed,
            "mentionable": self.mentionable,
            "icon": self.icon,
            "unicode_emoji": self.unicode_emoji,
            "flags": self.flags,
        }

    @property
    def mention(self) -> str:
        return f"<@&{self.id}>"


@dataclass
class Guild:
    id: str
    owner_id: Optional[str] = None
    name: Optional[str] = None
    icon: Optional[str] = None
    roles: list[Role] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)
    threads: list[Channel] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "Guild":
        data = require_mapping(payload, what="guild")
        guild_id = as_id(data.get("id")) or ""
        channels = [
            Channel.from_raw(item)
            for item in optional_list(data.get("channels"), what="guild.channels")
        ]
        threads = [
            Channel.from_raw(item)
            for item in optional_list(data.get("threads"), what="guild.threads")
        ]
        # GUILD_CREATE omits guild_id on nested channels.
        for channel in (*channels, *threads):
            if channel.guild_id is None:
                channel.guild_id = guild_id
        return cls(
            id=guild_id,
            owner_id=as_id(data.get("owner_id")),
            name=as_str(data.get("name")),
            icon=as_str(data.get("icon")),
            roles=[
                Role.from_raw(item)
                for item in optional_list(data.get("roles"), what="guild.roles")
            ],
            channels=channels,
            threads=threads,
            members=[
                Member.from_raw(item)
                for item in optional_list(data.get("members"), what="guild.members")
            ],
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "icon": self.icon,
            "roles": [role.to_payload() for role in self.roles],
            "channels": [channel.to_payload() for channel in self.channels],
            "threads": [thread.to_payload() for thread in self.threads],
            "members": [member.to_payload() for member in self.members],
        }

    def get_role(self, role_id: str) -> Optional[Role]:
        for role in self.roles:
            if role.id == role_id:
                return role
        return None

    @property
    def everyone_role(self) -> Optional[Role]:
        return self.get_role(self.id)

    def get_channel(self, channel_id: str) -> Optional[Channel]:
        for channel in (*self.channels, *self.threads):
            if channel.id == channel_id:
                return channel
        return None


def first_role_color(guild: Guild, member_role_ids: Iterable[str]) -> int:
    """Colour a client shows for a member's name, 0 if none applies."""
    wanted = set(member_role_ids)
    ordered = sorted(guild.roles, key=lambda role: role.position, reverse=True)
    for role in ordered:
        if role.id in wanted and role.colors.primary_color != 0:
            return role.colors.primary_color
    everyone = guild.everyone_role
    if everyone is not None:
        return everyone.colors.primary_color
    return 0
