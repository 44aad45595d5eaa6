"""Payload decoding for the supported record encodings.

WHY: Records carry their payload either as plain text or hex-encoded.
The registry needs raw bytes either way, and a bad payload must be a
typed, recoverable error rather than a crash.

HOW: decode_payload maps the raw encoding tag onto Encoding, then
dispatches. Hex payloads are validated up front with a regex so that
bytes.fromhex never sees whitespace or stray characters.

RULES:
- ASCII → payload bytes unchanged (UTF-8 encoded from the input text)
- HEX → even length, [0-9a-fA-F] only, high nibble first
- Unknown tag → InvalidEncodingError
- No side effects
"""

from __future__ import annotations

import re

from pipeline_reassembler.core.ir import Encoding
from pipeline_reassembler.errors import DecodeError, InvalidEncodingError

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def to_encoding(tag: int) -> Encoding:
    """Map a raw encoding tag onto Encoding, or raise InvalidEncodingError."""
    try:
        return Encoding(tag)
    except ValueError:
        raise InvalidEncodingError(tag) from None


def decode_hex(payload: str) -> bytes:
    if len(payload) % 2:
        raise DecodeError(
            "Failed to decode message as hex: odd length {}".format(len(payload))
        )
    if not _HEX_RE.fullmatch(payload):
        raise DecodeError(
            "Failed to decode message as hex: invalid character in {!r}".format(payload)
        )
    return bytes.fromhex(payload)


def decode_payload(encoding: int, payload: str) -> bytes:
    """Decode a record payload according to its encoding tag.

    Args:
        encoding: Raw tag from the record (0 = ASCII, 1 = HEX).
        payload: The payload token as read from the input line.

    Returns:
        The decoded fragment body.

    Raises:
        InvalidEncodingError: If the tag is not a known Encoding.
        DecodeError: If a HEX payload is malformed.
    """
    kind = to_encoding(encoding)
    if kind is Encoding.HEX:
        return decode_hex(payload)
    return payload.encode("utf-8")
