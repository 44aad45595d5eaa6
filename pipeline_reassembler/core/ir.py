"""Intermediate representation dataclasses for records, pipelines, and output.

WHY: Parsing, reassembly, and formatting each need a shared vocabulary.
A parsed line is not yet trusted content, a stored fragment is, and a
rendered pipeline is what formatters print. Keeping the three apart
stops formatters from reaching into mutable registry state.

HOW: Plain dataclasses plus one IntEnum:
  Encoding          — closed set of payload encodings (ASCII, HEX)
  RawRecord         — one parsed, not yet decoded input line
  Fragment          — decoded, immutable unit ordered by fragment_id
  Channel           — mutable per-pipeline state and ordered store
  RegistryConfig    — acceptance policy knobs
  RenderedFragment / RenderedPipeline / Reassembly — formatter input

RULES:
- Fragments order by fragment_id only; the body never takes part in comparisons
- Channel.closed is monotonic: once True it never reverts
- Channel.store is a heapq heap; use push_fragment/drain_fragments, not list ops
- Reassembly is the stable contract between the registry and formatters
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class Encoding(IntEnum):
    """Payload encodings understood by the decoder."""

    ASCII = 0
    HEX = 1


@dataclass(frozen=True)
class RawRecord:
    """One input line split into its five fields, payload still encoded.

    RULES:
    - encoding is the raw tag; mapping to Encoding happens at decode time
    - next_id is None when the record carried the "-1" sentinel
    """

    channel_id: int
    fragment_id: int
    encoding: int
    payload: str
    next_id: Optional[int]

    @property
    def is_last(self) -> bool:
        """True when this record closes its pipeline."""
        return self.next_id is None


@dataclass(frozen=True, order=True)
class Fragment:
    """A decoded fragment of one pipeline.

    WHY: The store must hand fragments back in ascending id order no
    matter how they arrived. Making the dataclass orderable on
    fragment_id alone lets heapq do that directly.

    RULES:
    - Comparison uses fragment_id only (body has compare=False)
    - Immutable once constructed
    """

    fragment_id: int
    body: bytes = field(compare=False)


@dataclass
class Channel:
    """Mutable state of one pipeline.

    WHY: Each pipeline tracks what it expects next and whether it has
    seen its final fragment, independently of every other pipeline.

    HOW: store is a heapq min-heap of Fragment. Draining pops until
    empty, yielding ascending fragment ids.

    RULES:
    - next_id None means "no constraint yet" while open
    - close() is the only way to set closed; there is no reopen
    - push_fragment refuses to store into a closed channel
    """

    channel_id: int
    next_id: Optional[int] = None
    closed: bool = False
    store: List[Fragment] = field(default_factory=list)

    def close(self) -> None:
        self.closed = True

    def push_fragment(self, fragment: Fragment) -> None:
        if self.closed:
            raise ValueError(
                "pipeline {} is closed; cannot store fragment {}".format(
                    self.channel_id, fragment.fragment_id)
            )
        heapq.heappush(self.store, fragment)

    def drain_fragments(self) -> List[Fragment]:
        """Pop every stored fragment in ascending id order, emptying the store."""
        drained: List[Fragment] = []
        while self.store:
            drained.append(heapq.heappop(self.store))
        return drained

    def sorted_fragments(self) -> List[Fragment]:
        """Stored fragments in ascending id order, leaving the store intact."""
        return sorted(self.store)


@dataclass(frozen=True)
class RegistryConfig:
    """Acceptance policy for a Registry.

    RULES:
    - discard_invalid_next_id=True enables strict sequencing: a fragment
      whose id differs from the pipeline's expectation is discarded
    - The default (False) is permissive, matching the upstream producers
    """

    discard_invalid_next_id: bool = False


@dataclass(frozen=True)
class RenderedFragment:
    """One fragment as seen by formatters."""

    fragment_id: int
    body: bytes

    @property
    def text(self) -> str:
        """Body as text; invalid UTF-8 bytes become U+FFFD."""
        return self.body.decode("utf-8", errors="replace")


@dataclass
class RenderedPipeline:
    """One pipeline's reassembled content, fragments in ascending id order."""

    channel_id: int
    closed: bool
    next_id: Optional[int]
    fragments: List[RenderedFragment] = field(default_factory=list)


@dataclass
class Reassembly:
    """Every pipeline in ascending channel id order.

    WHY: This is the top-level container formatters receive, the same
    way every output format works from one shared structure.
    """

    pipelines: List[RenderedPipeline] = field(default_factory=list)

    @property
    def fragment_count(self) -> int:
        return sum(len(p.fragments) for p in self.pipelines)
