"""Line ingestion: feed a line source through the parser into a Registry.

WHY: The CLI, tests, and embedding callers all need the same loop:
stop at the first blank line, skip unparsable lines with a diagnostic,
insert the rest. Keeping it here means the CLI only deals with files
and flags.

HOW: read_records() trims line endings and stops at the terminator.
ingest() parses each line, inserts it, and tallies outcomes in
IngestStats.

RULES:
- An empty line (after stripping the line ending) ends the input
- ParseError → WARNING diagnostic naming the line, then continue
- Only ReassemblyError subclasses are treated as input errors
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from pipeline_reassembler.core.parser import parse_record
from pipeline_reassembler.core.registry import InsertOutcome, Registry
from pipeline_reassembler.errors import ParseError

logger = logging.getLogger(__name__)


@dataclass
class IngestStats:
    """Counters for one ingestion run."""

    lines_read: int = 0
    parse_failures: int = 0
    outcomes: Counter = field(default_factory=Counter)

    @property
    def accepted(self) -> int:
        return self.outcomes[InsertOutcome.ACCEPTED]

    @property
    def discarded(self) -> int:
        return sum(n for outcome, n in self.outcomes.items() if not outcome.stored)


def read_records(lines: Iterable[str]) -> Iterator[str]:
    """Yield record lines up to the first blank line or end of input."""
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            return
        yield line


def ingest(lines: Iterable[str], registry: Registry) -> IngestStats:
    """Parse and insert every record line into the registry.

    Args:
        lines: Any iterable of text lines (file object, list, stdin).
        registry: The registry that receives the records.

    Returns:
        IngestStats for the run.
    """
    stats = IngestStats()
    for line in read_records(lines):
        stats.lines_read += 1
        try:
            record = parse_record(line)
        except ParseError as e:
            stats.parse_failures += 1
            logger.warning("Could not parse line `%s` with err: %s", line, e)
            continue
        stats.outcomes[registry.insert(record)] += 1
    return stats
