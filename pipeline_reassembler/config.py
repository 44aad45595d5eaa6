"""Configuration constants, protocol limits, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Protocol limits (field range, sentinel, field
count) are plain data, not buried in the parser, so both humans and
tooling can see the wire contract at a glance.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level. load_registry_config() turns the environment into a
RegistryConfig for the reassembly registry.

RULES:
- Every numeric record field is an unsigned 8-bit value (0–255)
- "-1" in the next-id field is the "no further fragment" sentinel
- Strict sequencing is off unless PIPELINE_DISCARD_INVALID_NEXT_ID says otherwise
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from pipeline_reassembler.core.ir import RegistryConfig

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Wire protocol constants
# ---------------------------------------------------------------------------

MAX_FIELD_VALUE = 255
"""Largest value accepted in any numeric record field."""

NO_NEXT_ID_SENTINEL = "-1"
"""Next-id token meaning "this is the last fragment of the pipeline"."""

RECORD_FIELD_COUNT = 5
"""Minimum number of whitespace-separated tokens in a record line."""

# ---------------------------------------------------------------------------
# Runtime defaults
# ---------------------------------------------------------------------------

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def parse_bool(value: str) -> bool:
    """Parse a boolean environment value.

    RULES:
    - "true", "1", "yes", "on" → True (case-insensitive)
    - "false", "0", "no", "off", "" → False
    - Anything else raises ValueError
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError("Not a boolean value: {!r}".format(value))


DEFAULT_LOG_LEVEL = os.getenv("PIPELINE_LOG_LEVEL", "WARNING").upper()
DEFAULT_OUTPUT_FORMAT = os.getenv("PIPELINE_OUTPUT_FORMAT", "text")


def load_registry_config() -> RegistryConfig:
    """Build the registry configuration from the environment.

    WHY: The CLI and library callers should agree on the default
    sequencing policy without each reading the environment themselves.

    HOW: Reads PIPELINE_DISCARD_INVALID_NEXT_ID at call time, so a bad
    value surfaces as a ValueError here and never breaks module import.
    """
    raw = os.getenv("PIPELINE_DISCARD_INVALID_NEXT_ID", "false")
    return RegistryConfig(discard_invalid_next_id=parse_bool(raw))
