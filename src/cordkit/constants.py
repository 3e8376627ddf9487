from __future__ import annotations

from datetime import timedelta

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DISCORD_CDN_URL = "https://cdn.discordapp.com"
DISCORD_GATEWAY_URL = "wss://gateway.discord.gg/?v=10&encoding=json"

# An interaction must be acknowledged within this window.
INTERACTION_ACK_DEADLINE = timedelta(seconds=3)
# The interaction token stays valid for follow-ups this long after creation.
INTERACTION_TOKEN_LIFETIME = timedelta(minutes=15)

# Producer-side component limits; decoding does not enforce them.
MAX_ACTION_ROW_COMPONENTS = 5
MAX_SECTION_COMPONENTS = 3
MAX_MEDIA_GALLERY_ITEMS = 10
MAX_SELECT_OPTIONS = 25

SIGNATURE_HEADER = "X-Signature-Ed25519"
SIGNATURE_TIMESTAMP_HEADER = "X-Signature-Timestamp"
