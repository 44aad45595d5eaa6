"""Reassembly registry: per-pipeline acceptance policy and ordered rendering.

WHY: Fragments of many pipelines arrive interleaved and out of order.
Something has to own every pipeline's state, decide which fragments to
keep, and hand the survivors back in sequence. This module is that
owner; everything else in the package is plumbing around it.

HOW: Registry keeps a dict of channel_id → Channel, created lazily on
first reference. insert() runs the acceptance policy for one record:
policy checks first (closed pipeline, strict sequencing), then decoding,
then the next-id bookkeeping, then storage. render() walks channel ids
in ascending order and drains each pipeline's heap into a Reassembly.

RULES:
- Closed pipeline → record discarded, no state change (REJECTED_CLOSED)
- Strict sequencing + id != expected → discarded, no state change (REJECTED_SEQUENCE)
- Decode failure → body dropped, but next_id / closure still applied (DECODE_FAILED)
- Otherwise next_id updated, pipeline closed on sentinel, fragment stored (ACCEPTED)
- render() is destructive and meant to run once; snapshot() is the read-only view
- Every discard is logged at WARNING; nothing input-driven raises out of insert()
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

from pipeline_reassembler.core.decoder import decode_payload
from pipeline_reassembler.core.ir import (
    Channel,
    Fragment,
    RawRecord,
    Reassembly,
    RegistryConfig,
    RenderedFragment,
    RenderedPipeline,
)
from pipeline_reassembler.errors import (
    DecodeError,
    RegistryInvariantError,
    RejectedByPolicy,
)

logger = logging.getLogger(__name__)


class InsertOutcome(str, Enum):
    """What Registry.insert did with a record."""

    ACCEPTED = "accepted"
    DECODE_FAILED = "decode_failed"
    REJECTED_CLOSED = "rejected_closed"
    REJECTED_SEQUENCE = "rejected_sequence"

    @property
    def stored(self) -> bool:
        return self is InsertOutcome.ACCEPTED


class Registry:
    """Owns every pipeline and applies the acceptance policy.

    WHY: A single owned aggregate is passed to the ingestion loop and
    queried once by the rendering step; there is no module-level state.

    RULES:
    - Pipelines are never removed once created
    - Channel ids iterate in ascending order
    """

    def __init__(self, config: Optional[RegistryConfig] = None) -> None:
        self.config = config if config is not None else RegistryConfig()
        self._channels: Dict[int, Channel] = {}

    def __len__(self) -> int:
        return len(self._channels)

    def channel_ids(self) -> List[int]:
        """All known channel ids in ascending order."""
        return sorted(self._channels)

    def get(self, channel_id: int) -> Optional[Channel]:
        return self._channels.get(channel_id)

    def _get_or_create(self, channel_id: int) -> Channel:
        channel = self._channels.get(channel_id)
        if channel is None:
            channel = Channel(channel_id=channel_id)
            self._channels[channel_id] = channel
            logger.debug("Created pipeline %d", channel_id)
        return channel

    def _check_policy(self, channel: Channel, record: RawRecord) -> None:
        """Raise RejectedByPolicy if the record must be discarded untouched."""
        if channel.closed:
            raise RejectedByPolicy(
                RejectedByPolicy.CLOSED, record.channel_id, record.fragment_id,
            )
        expected = channel.next_id
        if (
            expected is not None
            and record.fragment_id != expected
            and self.config.discard_invalid_next_id
        ):
            raise RejectedByPolicy(
                RejectedByPolicy.SEQUENCE, record.channel_id, record.fragment_id,
                expected_id=expected,
            )

    def insert(self, record: RawRecord) -> InsertOutcome:
        """Apply one parsed record to its pipeline.

        Args:
            record: A record produced by parse_record.

        Returns:
            The InsertOutcome describing what happened to the record.
        """
        channel = self._get_or_create(record.channel_id)

        try:
            self._check_policy(channel, record)
        except RejectedByPolicy as e:
            logger.warning("Message was ignored: %s", e)
            if e.reason == RejectedByPolicy.CLOSED:
                return InsertOutcome.REJECTED_CLOSED
            return InsertOutcome.REJECTED_SEQUENCE

        fragment: Optional[Fragment] = None
        try:
            fragment = Fragment(
                fragment_id=record.fragment_id,
                body=decode_payload(record.encoding, record.payload),
            )
        except DecodeError as e:
            logger.warning(
                "Message %d of pipeline %d is not valid: %s",
                record.fragment_id, record.channel_id, e,
            )

        # Store before closing: a closed channel refuses new fragments.
        if fragment is not None:
            channel.push_fragment(fragment)

        channel.next_id = record.next_id
        if record.is_last:
            channel.close()
            logger.debug("Pipeline %d closed by fragment %d",
                         record.channel_id, record.fragment_id)

        if fragment is None:
            return InsertOutcome.DECODE_FAILED
        logger.debug("Accepted fragment %d of pipeline %d",
                     record.fragment_id, record.channel_id)
        return InsertOutcome.ACCEPTED

    def _require(self, channel_id: int) -> Channel:
        channel = self._channels.get(channel_id)
        if channel is None:
            raise RegistryInvariantError(
                "Pipeline {} disappeared from the registry during rendering".format(channel_id)
            )
        return channel

    def _build(self, take: Callable[[Channel], List[Fragment]]) -> Reassembly:
        pipelines: List[RenderedPipeline] = []
        for channel_id in self.channel_ids():
            channel = self._require(channel_id)
            pipelines.append(RenderedPipeline(
                channel_id=channel.channel_id,
                closed=channel.closed,
                next_id=channel.next_id,
                fragments=[
                    RenderedFragment(fragment_id=f.fragment_id, body=f.body)
                    for f in take(channel)
                ],
            ))
        return Reassembly(pipelines=pipelines)

    def render(self) -> Reassembly:
        """Drain every pipeline into a Reassembly, ascending by channel id.

        WHY: Final output happens once per run; draining releases the
        stored fragments as they are emitted.

        RULES:
        - Destructive: every store is empty afterwards
        - Calling it again yields pipelines with no fragments
        """
        return self._build(Channel.drain_fragments)

    def snapshot(self) -> Reassembly:
        """Same shape as render(), computed without touching any store."""
        return self._build(Channel.sorted_fragments)

    def __iter__(self) -> Iterator[Channel]:
        for channel_id in self.channel_ids():
            yield self._channels[channel_id]
