"""Gateway frame decoding.

Only frame parsing and dispatch routing live here; opening and keeping a
websocket session alive is left to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .errors import DiscordDecodeError
from .interactions import Interaction, decode_interaction
from .logging_utils import log_event

if TYPE_CHECKING:
    from .handlers import InteractionRouter
    from .state import StateCache

logger = logging.getLogger(__name__)

OP_DISPATCH = 0
OP_HEARTBEAT = 1
OP_IDENTIFY = 2
OP_RESUME = 6
OP_RECONNECT = 7
OP_INVALID_SESSION = 9
OP_HELLO = 10
OP_HEARTBEAT_ACK = 11

INTERACTION_CREATE = "INTERACTION_CREATE"


@dataclass(frozen=True)
class GatewayFrame:
    op: int
    d: Any = None
    s: Optional[int] = None
    t: Optional[str] = None
    raw: dict[str, Any] | None = None

    @property
    def is_dispatch(self) -> bool:
        return self.op == OP_DISPATCH and self.t is not None


def parse_gateway_frame(frame: str | bytes | dict[str, Any]) -> GatewayFrame:
    try:
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8")
        payload = json.loads(frame) if isinstance(frame, str) else dict(frame)
    except ValueError as exc:
        raise DiscordDecodeError(f"Discord gateway frame is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise DiscordDecodeError("Discord gateway frame must be a JSON object")
    op = payload.get("op")
    if not isinstance(op, int) or isinstance(op, bool):
        raise DiscordDecodeError(f"Discord gateway frame missing numeric op: {payload!r}")
    seq = payload.get("s")
    event_type = payload.get("t")
    return GatewayFrame(
        op=op,
        d=payload.get("d"),
        s=seq if isinstance(seq, int) else None,
        t=event_type if isinstance(event_type, str) else None,
        raw=payload,
    )


def interaction_from_frame(frame: GatewayFrame) -> Optional[Interaction]:
    """Decode the interaction carried by an ``INTERACTION_CREATE`` dispatch."""
    if not frame.is_dispatch or frame.t != INTERACTION_CREATE:
        return None
    if not isinstance(frame.d, dict):
        raise DiscordDecodeError("INTERACTION_CREATE dispatch has no payload object")
    return decode_interaction(frame.d)


async def handle_dispatch(
    frame: GatewayFrame,
    *,
    state: Optional["StateCache"] = None,
    router: Optional["InteractionRouter"] = None,
) -> bool:
    """Feed one dispatch frame to the state cache and interaction router.

    Returns ``True`` if either of them consumed the frame.
    """
    event_type = frame.t
    if not frame.is_dispatch or event_type is None:
        return False
    if event_type == INTERACTION_CREATE:
        if router is None:
            return False
        interaction = interaction_from_frame(frame)
        if interaction is None:
            return False
        return await router.dispatch(interaction)
    if state is None or not isinstance(frame.d, dict):
        return False
    try:
        return state.apply_event(event_type, frame.d)
    except DiscordDecodeError as exc:
        log_event(
            logger,
            logging.WARNING,
            "discord.gateway.dispatch_decode_failed",
            event_type=event_type,
            seq=frame.s,
            exc=exc,
        )
        return False
