"""Exception taxonomy for record parsing, decoding, and reassembly.

WHY: The ingestion loop must tell input-driven problems (a bad line, a
payload that will not decode, a fragment the policy refuses) apart from
programming errors. Input problems become diagnostics; programming
errors must surface.

HOW: All input-driven errors derive from ReassemblyError. ParseError and
DecodeError also derive from ValueError so callers that only know the
stdlib hierarchy still catch them. RegistryInvariantError derives from
RuntimeError and deliberately sits outside ReassemblyError.

RULES:
- Never catch RegistryInvariantError in the ingestion loop
- RejectedByPolicy carries a machine-readable reason
"""

from __future__ import annotations


class ReassemblyError(Exception):
    """Base class for every input-driven reassembly error."""


class ParseError(ReassemblyError, ValueError):
    """Raised when a raw line cannot be decomposed into a record.

    WHY: Lines with missing tokens or out-of-range numbers carry no
    trustworthy channel or fragment id, so nothing about them can be
    applied to the registry.

    HOW: Raised by parse_record with the offending token in the message.

    RULES:
    - The line is skipped; no channel state changes
    """


class DecodeError(ReassemblyError, ValueError):
    """Raised when a payload cannot be decoded under its declared encoding.

    RULES:
    - The fragment content is dropped, but the record's next-id still
      advances or closes its pipeline
    """


class InvalidEncodingError(DecodeError):
    """Raised when a record's encoding tag is not a known Encoding."""

    def __init__(self, tag: int) -> None:
        self.tag = tag
        super().__init__("Not a valid encoding: {}".format(tag))


class RejectedByPolicy(ReassemblyError):
    """Raised when the acceptance policy refuses a record.

    WHY: Closed pipelines and strict-sequencing mismatches are not data
    errors; the record is well-formed but unwanted. The registry needs
    one type to route both cases to the same "discard, change nothing"
    branch.

    HOW: Raised inside Registry.insert and caught there; the reason tells
    the outcome apart.

    RULES:
    - reason is "closed" or "sequence"
    - expected_id is the pipeline's expectation for "sequence" rejections
    """

    CLOSED = "closed"
    SEQUENCE = "sequence"

    def __init__(self, reason: str, channel_id: int, fragment_id: int,
                 expected_id: int | None = None) -> None:
        self.reason = reason
        self.channel_id = channel_id
        self.fragment_id = fragment_id
        self.expected_id = expected_id
        if reason == self.CLOSED:
            message = "pipeline {} is closed, ignoring fragment {}".format(
                channel_id, fragment_id)
        else:
            message = "pipeline {} expected fragment {}, ignoring fragment {}".format(
                channel_id, expected_id, fragment_id)
        super().__init__(message)


class RegistryInvariantError(RuntimeError):
    """Raised when the registry's own bookkeeping is inconsistent.

    WHY: A pipeline vanishing between listing and rendering can only be a
    bug. Treating it like an input error would hide it.

    RULES:
    - Not a ReassemblyError; propagates out of the CLI
    """
