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
from .types import (
    THREAD_CHANNEL_TYPES,
    ChannelType,
    PermissionOverwriteType,
    enum_or_int,
)


@dataclass
class PermissionOverwrite:
    id: str
    type: PermissionOverwriteType | int
    allow: int = 0
    deny: int = 0

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "PermissionOverwrite":
        data = require_mapping(payload, what="permission overwrite")
        overwrite_type = enum_or_int(PermissionOverwriteType, data.get("type"))
        return cls(
            id=as_id(data.get("id")) or "",
            type=overwrite_type if overwrite_type is not None else -1,
            allow=parse_bitmask(data.get("allow"), field="overwrite.allow"),
            deny=parse_bitmask(data.get("deny"), field="overwrite.deny"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": int(self.type),
            "allow": format_bitmask(self.allow),
            "deny": format_bitmask(self.deny),
        }


@dataclass
class ThreadMetadata:
    archived: bool = False
    auto_archive_duration: int = 0
    archive_timestamp: Optional[str] = None
    locked: bool = False
    invitable: bool = False

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "ThreadMetadata":
        data = require_mapping(payload, what="thread metadata")
        return cls(
            archived=as_bool(data.get("archived")),
            auto_archive_duration=coerce_int(data.get("auto_archive_duration"), 0)
            or 0,
            archive_timestamp=as_str(data.get("archive_timestamp")),
            locked=as_bool(data.get("locked")),
            invitable=as_bool(data.get("invitable")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "archived": self.archived,
            "auto_archive_duration": self.auto_archive_duration,
            "archive_timestamp": self.archive_timestamp,
            "locked": self.locked,
            "invitable": self.invitable,
        }


@dataclass
class Channel:
    id: str
    type: ChannelType | int = ChannelType.GUILD_TEXT
    guild_id: Optional[str] = None
    name: Optional[str] = None
    topic: Optional[str] = None
    position: int = 0
    parent_id: Optional[str] = None
    nsfw: bool = False
    last_message_id: Optional[str] = None
    rate_limit_per_user: int = 0
    owner_id: Optional[str] = None
    flags: int = 0
    permission_overwrites: list[PermissionOverwrite] = field(default_factory=list)
    thread_metadata: Optional[ThreadMetadata] = None
    # Present on partial channels in interaction resolved data.
    permissions: Optional[int] = None

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "Channel":
        data = require_mapping(payload, what="channel")
        channel_type = enum_or_int(ChannelType, data.get("type"))
        metadata_raw = optional_mapping(
            data.get("thread_metadata"), what="channel.thread_metadata"
        )
        permissions_raw = data.get("permissions")
        return cls(
            id=as_id(data.get("id")) or "",
            type=channel_type if channel_type is not None else ChannelType.GUILD_TEXT,
            guild_id=as_id(data.get("guild_id")),
            name=as_str(data.get("name")),
            topic=as_str(data.get("topic")),
            position=coerce_int(data.get("position"), 0) or 0,
            parent_id=as_id(data.get("parent_id")),
            nsfw=as_bool(data.get("nsfw")),
            last_message_id=as_id(data.get("last_message_id")),
            rate_limit_per_user=coerce_int(data.get("rate_limit_per_user"), 0) or 0,
            owner_id=as_id(data.get("owner_id")),
            flags=coerce_int(data.get("flags"), 0) or 0,
            permission_overwrites=[
                PermissionOverwrite.from_raw(item)
                for item in optional_list(
                    data.get("permission_overwrites"),
                    what="channel.permission_overwrites",
                )
            ],
            thread_metadata=(
                ThreadMetadata.from_raw(metadata_raw)
                if metadata_raw is not None
                else None
            ),
            permissions=(
                parse_bitmask(permissions_raw, field="channel.permissions")
                if permissions_raw is not None
                else None
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": int(self.type),
            "guild_id": self.guild_id,
            "name": self.name,
            "topic": self.topic,
            "position": self.position,
            "parent_id": self.parent_id,
            "nsfw": self.nsfw,
            "last_message_id": self.last_message_id,
            "rate_limit_per_user": self.rate_limit_per_user,
            "owner_id": self.owner_id,
            "flags": self.flags,
            "permission_overwrites": [
                overwrite.to_payload() for overwrite in self.permission_overwrites
            ],
        }
        if self.thread_metadata is not None:
            payload["thread_metadata"] = self.thread_metadata.to_payload()
        if self.permissions is not None:
            payload["permissions"] = format_bitmask(self.permissions)
        return payload

    def is_thread(self) -> bool:
        return self.type in THREAD_CHANNEL_TYPES

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"
