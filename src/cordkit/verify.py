from __future__ import annotations

import logging
from typing import Mapping, Optional

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from .constants import SIGNATURE_HEADER, SIGNATURE_TIMESTAMP_HEADER
from .logging_utils import log_event

logger = logging.getLogger(__name__)

_SIGNATURE_LENGTH = 64


def verify_interaction(
    public_key_hex: str,
    signature_hex: Optional[str],
    timestamp: Optional[str],
    body: bytes | str,
) -> bool:
    """Check the Ed25519 signature Discord puts on interaction webhooks.

    The signed message is the timestamp header followed by the raw body.
    Any malformed input yields ``False``.
    """
    if not signature_hex or not timestamp:
        return False
    try:
        signature = bytes.fromhex(signature_hex)
        key = VerifyKey(bytes.fromhex(public_key_hex))
    except ValueError as exc:
        log_event(logger, logging.DEBUG, "discord.verify.malformed_hex", exc=exc)
        return False
    if len(signature) != _SIGNATURE_LENGTH:
        return False
    body_bytes = body.encode("utf-8") if isinstance(body, str) else body
    try:
        key.verify(timestamp.encode("utf-8") + body_bytes, signature)
    except BadSignatureError:
        return False
    return True


def verify_request_headers(
    public_key_hex: str, headers: Mapping[str, str], body: bytes | str
) -> bool:
    """``verify_interaction`` reading signature and timestamp from headers."""
    lowered = {key.lower(): value for key, value in headers.items()}
    return verify_interaction(
        public_key_hex,
        lowered.get(SIGNATURE_HEADER.lower()),
        lowered.get(SIGNATURE_TIMESTAMP_HEADER.lower()),
        body,
    )
