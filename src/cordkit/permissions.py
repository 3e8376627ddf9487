"""Permission bits and the channel permission resolver.

Resolution follows Discord's documented hierarchy:
https://support.discord.com/hc/en-us/articles/206141927
"""

from __future__ import annotations

from typing import Iterable

from .channels import Channel
from .guilds import Guild
from .types import PermissionOverwriteType

# General
CREATE_INSTANT_INVITE = 1 << 0
KICK_MEMBERS = 1 << 1
BAN_MEMBERS = 1 << 2
ADMINISTRATOR = 1 << 3
MANAGE_CHANNELS = 1 << 4
MANAGE_GUILD = 1 << 5
ADD_REACTIONS = 1 << 6
VIEW_AUDIT_LOG = 1 << 7
VIEW_CHANNEL = 1 << 10
VIEW_GUILD_INSIGHTS = 1 << 19
MODERATE_MEMBERS = 1 << 40

# Text
SEND_MESSAGES = 1 << 11
SEND_TTS_MESSAGES = 1 << 12
MANAGE_MESSAGES = 1 << 13
EMBED_LINKS = 1 << 14
ATTACH_FILES = 1 << 15
READ_MESSAGE_HISTORY = 1 << 16
MENTION_EVERYONE = 1 << 17
USE_EXTERNAL_EMOJIS = 1 << 18
USE_APPLICATION_COMMANDS = 1 << 31
MANAGE_THREADS = 1 << 34
CREATE_PUBLIC_THREADS = 1 << 35
CREATE_PRIVATE_THREADS = 1 << 36
USE_EXTERNAL_STICKERS = 1 << 37
SEND_MESSAGES_IN_THREADS = 1 << 38
SEND_VOICE_MESSAGES = 1 << 46
SEND_POLLS = 1 << 49
USE_EXTERNAL_APPS = 1 << 50

# Voice
PRIORITY_SPEAKER = 1 << 8
STREAM = 1 << 9
CONNECT = 1 << 20
SPEAK = 1 << 21
MUTE_MEMBERS = 1 << 22
DEAFEN_MEMBERS = 1 << 23
MOVE_MEMBERS = 1 << 24
USE_VAD = 1 << 25
REQUEST_TO_SPEAK = 1 << 32
USE_EMBEDDED_ACTIVITIES = 1 << 39
USE_SOUNDBOARD = 1 << 42
USE_EXTERNAL_SOUNDS = 1 << 45

# Management
CHANGE_NICKNAME = 1 << 26
MANAGE_NICKNAMES = 1 << 27
MANAGE_ROLES = 1 << 28
MANAGE_WEBHOOKS = 1 << 29
MANAGE_GUILD_EXPRESSIONS = 1 << 30
MANAGE_EVENTS = 1 << 33
VIEW_CREATOR_MONETIZATION_ANALYTICS = 1 << 41
CREATE_GUILD_EXPRESSIONS = 1 << 43
CREATE_EVENTS = 1 << 44

ALL_TEXT = (
    VIEW_CHANNEL
    | SEND_MESSAGES
    | SEND_TTS_MESSAGES
    | MANAGE_MESSAGES
    | EMBED_LINKS
    | ATTACH_FILES
    | READ_MESSAGE_HISTORY
    | MENTION_EVERYONE
)
ALL_VOICE = (
    VIEW_CHANNEL
    | CONNECT
    | SPEAK
    | MUTE_MEMBERS
    | DEAFEN_MEMBERS
    | MOVE_MEMBERS
    | USE_VAD
    | PRIORITY_SPEAKER
)
# Ceiling for what can be granted inside a single channel.
ALL_CHANNEL = (
    ALL_TEXT
    | ALL_VOICE
    | CREATE_INSTANT_INVITE
    | MANAGE_ROLES
    | MANAGE_CHANNELS
    | ADD_REACTIONS
    | VIEW_AUDIT_LOG
)
ALL = (
    ALL_CHANNEL
    | KICK_MEMBERS
    | BAN_MEMBERS
    | MANAGE_GUILD
    | ADMINISTRATOR
    | MANAGE_WEBHOOKS
    | MANAGE_GUILD_EXPRESSIONS
)


def has_permission(permissions: int, flag: int) -> bool:
    return permissions & flag == flag


def compute_effective_permissions(
    guild: Guild,
    channel: Channel,
    user_id: str,
    member_role_ids: Iterable[str],
) -> int:
    """Effective permission bitmask of a member inside ``channel``.

    The guild owner short-circuits to ``ALL``. Otherwise the @everyone role and
    the member's roles form the base, then channel overwrites are layered:
    @everyone overwrite, all matching role overwrites combined, and finally
    the member overwrite, each clearing its denies before setting its allows.

    Role ids that do not exist in ``guild.roles`` are ignored and bits outside
    the known permission set pass through untouched.
    """
    if user_id == guild.owner_id:
        return ALL

    role_ids = set(member_role_ids)
    permissions = 0

    for role in guild.roles:
        if role.id == guild.id:
            permissions |= role.permissions
            break

    for role in guild.roles:
        if role.id in role_ids:
            permissions |= role.permissions

    if has_permission(permissions, ADMINISTRATOR):
        permissions |= ALL

    overwrites = channel.permission_overwrites

    for overwrite in overwrites:
        if overwrite.id == guild.id:
            permissions &= ~overwrite.deny
            permissions |= overwrite.allow
            break

    # Role overwrites are merged before applying, so a deny on one role and an
    # allow on another resolve to allow.
    denies = 0
    allows = 0
    for overwrite in overwrites:
        if overwrite.type == PermissionOverwriteType.ROLE and overwrite.id in role_ids:
            denies |= overwrite.deny
            allows |= overwrite.allow
    permissions &= ~denies
    permissions |= allows

    for overwrite in overwrites:
        if overwrite.type == PermissionOverwriteType.MEMBER and overwrite.id == user_id:
            permissions &= ~overwrite.deny
            permissions |= overwrite.allow
            break

    if has_permission(permissions, ADMINISTRATOR):
        permissions |= ALL_CHANNEL

    return permissions
