from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

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
from .constants import DISCORD_CDN_URL


@dataclass
class User:
    id: str
    username: Optional[str] = None
    discriminator: Optional[str] = None
    global_name: Optional[str] = None
    avatar: Optional[str] = None
    banner: Optional[str] = None
    accent_color: Optional[int] = None
    bot: bool = False
    system: bool = False
    public_flags: int = 0

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "User":
        data = require_mapping(payload, what="user")
        return cls(
            id=as_id(data.get("id")) or "",
            username=as_str(data.get("username")),
            discriminator=as_str(data.get("discriminator")),
            global_name=as_str(data.get("global_name")),
            avatar=as_str(data.get("avatar")),
            banner=as_str(data.get("banner")),
            accent_color=coerce_int(data.get("accent_color")),
            bot=as_bool(data.get("bot")),
            system=as_bool(data.get("system")),
            public_flags=coerce_int(data.get("public_flags"), 0) or 0,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "username": self.username,
            "discriminator": self.discriminator,
            "global_name": self.global_name,
            "avatar": self.avatar,
            "bot": self.bot,
            "system": self.system,
            "public_flags": self.public_flags,
        }
        if self.banner is not None:
            payload["banner"] = self.banner
        if self.accent_color is not None:
            payload["accent_color"] = self.accent_color
        return payload

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    @property
    def display_name(self) -> str:
        return self.global_name or self.username or self.id

    def __str__(self) -> str:
        name = self.username or self.id
        # Users migrated off the legacy username system report "0".
        if not self.discriminator or self.discriminator == "0":
            return name
        return f"{name}#{self.discriminator}"

    def default_avatar_index(self) -> int:
        if not self.discriminator or self.discriminator == "0":
            snowflake = coerce_int(self.id, 0) or 0
            return (snowflake >> 22) % 6
        return (coerce_int(self.discriminator, 0) or 0) % 5

    def avatar_url(self, size: Optional[int] = None) -> str:
        if self.avatar:
            extension = "gif" if self.avatar.startswith("a_") else "png"
            url = f"{DISCORD_CDN_URL}/avatars/{self.id}/{self.avatar}.{extension}"
        else:
            url = f"{DISCORD_CDN_URL}/embed/avatars/{self.default_avatar_index()}.png"
        if size:
            url = f"{url}?size={size}"
        return url


@dataclass
class Member:
    user: Optional[User] = None
    nick: Optional[str] = None
    roles: list[str] = field(default_factory=list)
    joined_at: Optional[str] = None
    premium_since: Optional[str] = None
    deaf: bool = False
    mute: bool = False
    avatar: Optional[str] = None
    pending: bool = False
    flags: int = 0
    # Only sent inside interaction payloads, where it already includes overwrites.
    permissions: Optional[int] = None
    communication_disabled_until: Optional[str] = None
    guild_id: Optional[str] = None

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "Member":
        data = require_mapping(payload, what="member")
        user_raw = optional_mapping(data.get("user"), what="member.user")
        permissions_raw = data.get("permissions")
        return cls(
            user=User.from_raw(user_raw) if user_raw is not None else None,
            nick=as_str(data.get("nick")),
            roles=[
                role_id
                for role_id in (
                    as_id(item)
                    for item in optional_list(data.get("roles"), what="member.roles")
                )
                if role_id
            ],
            joined_at=as_str(data.get("joined_at")),
            premium_since=as_str(data.get("premium_since")),
            deaf=as_bool(data.get("deaf")),
            mute=as_bool(data.get("mute")),
            avatar=as_str(data.get("avatar")),
            pending=as_bool(data.get("pending")),
            flags=coerce_int(data.get("flags"), 0) or 0,
            permissions=(
                parse_bitmask(permissions_raw, field="member.permissions")
                if permissions_raw is not None
                else None
            ),
            communication_disabled_until=as_str(
                data.get("communication_disabled_until")
            ),
            guild_id=as_id(data.get("guild_id")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "nick": self.nick,
            "roles": list(self.roles),
            "joined_at": self.joined_at,
            "premium_since": self.premium_since,
            "deaf": self.deaf,
            "mute": self.mute,
            "avatar": self.avatar,
            "pending": self.pending,
            "flags": self.flags,
            "communication_disabled_until": self.communication_disabled_until,
        }
        if self.user is not None:
            payload["user"] = self.user.to_payload()
        if self.permissions is not None:
            payload["permissions"] = format_bitmask(self.permissions)
        if self.guild_id is not None:
            payload["guild_id"] = self.guild_id
        return payload

    @property
    def mention(self) -> str:
        user_id = self.user.id if self.user is not None else ""
        return f"<@!{user_id}>"

    @property
    def display_name(self) -> str:
        if self.nick:
            return self.nick
        if self.user is not None:
            return self.user.display_name
        return ""
