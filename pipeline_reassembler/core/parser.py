"""Record parsing: one input line → RawRecord.

WHY: Input lines are untrusted text. The registry should only ever see
records whose ids are already known to be in range, so every field is
validated here before anything touches pipeline state.

HOW: Split on any run of whitespace, take the first five tokens, and
validate each numeric token against a strict decimal regex and the
8-bit range. Extra tokens after the fifth are ignored.

RULES:
- Fewer than five tokens → ParseError
- Tokens 0, 1, 2, 4 must be plain decimal digits in 0–255
- Token 4 may also be "-1", meaning "no next fragment" (next_id=None)
- Token 2 stays a raw integer; unknown encodings fail later, in the decoder
- "+5", "0x1f", "1_0" are rejected even though int() would accept some of them
"""

from __future__ import annotations

import re
from typing import Optional

from pipeline_reassembler.config import (
    MAX_FIELD_VALUE,
    NO_NEXT_ID_SENTINEL,
    RECORD_FIELD_COUNT,
)
from pipeline_reassembler.core.ir import RawRecord
from pipeline_reassembler.errors import ParseError

_DIGITS_RE = re.compile(r"[0-9]+")

_FIELD_NAMES = ("pipeline id", "id", "encoding", "msg", "next_id")


def _parse_field(token: str, name: str) -> int:
    if not _DIGITS_RE.fullmatch(token):
        raise ParseError("Invalid {} {!r}: not an unsigned integer".format(name, token))
    value = int(token)
    if value > MAX_FIELD_VALUE:
        raise ParseError(
            "Invalid {} {!r}: out of range 0-{}".format(name, token, MAX_FIELD_VALUE)
        )
    return value


def _parse_next_id(token: str) -> Optional[int]:
    if token == NO_NEXT_ID_SENTINEL:
        return None
    return _parse_field(token, "next_id")


def parse_record(line: str) -> RawRecord:
    """Parse one input line into a RawRecord.

    Args:
        line: A single record line, with or without its trailing newline.

    Returns:
        The parsed record with its payload still encoded.

    Raises:
        ParseError: If a field is missing, non-numeric, or out of range.
    """
    tokens = line.split()
    if len(tokens) < RECORD_FIELD_COUNT:
        missing = _FIELD_NAMES[len(tokens)]
        raise ParseError(
            "Missing {} (got {} of {} fields)".format(missing, len(tokens), RECORD_FIELD_COUNT)
        )

    return RawRecord(
        channel_id=_parse_field(tokens[0], "pipeline id"),
        fragment_id=_parse_field(tokens[1], "id"),
        encoding=_parse_field(tokens[2], "encoding"),
        payload=tokens[3],
        next_id=_parse_next_id(tokens[4]),
    )
