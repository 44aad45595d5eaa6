"""Shared test fixtures for the pipeline_reassembler test suite.

WHY: Several test modules need the same mixed record stream — valid
records for several pipelines, malformed lines, hex payloads, records
for closed pipelines — and the outputs it must produce under both
sequencing policies. Centralizing it here keeps those expectations in
one place.

HOW: MIXED_RECORDS is a realistic interleaved stream. The expected
renderings for the permissive and strict policies are kept next to it.
Fixtures hand out fresh copies and fresh registries.

RULES:
- MIXED_RECORDS must stay in sync with both expected outputs below
- Registries from fixtures are new per test
"""

import logging
from typing import List

import pytest

from pipeline_reassembler.core.ir import RegistryConfig
from pipeline_reassembler.core.registry import Registry


# ---------------------------------------------------------------------------
# Interleaved record stream covering every acceptance branch
# ---------------------------------------------------------------------------

MIXED_RECORDS: List[str] = [
    "3 1 0 message_31 -1",
    "      1 0 0 message_10 1 This text should be ignored",
    "1 3 0 message_13 -1",
    "err",
    "12 8 m...",
    "1 1 0 message_11 2",
    "5 9 0 message_59 10",
    "2 0 0 message_20 2",
    "13 1 1 66616E63792031335F31 2",
    "13 2 1 66616E63792074657874 -1",
    "1 2 0 message_12 3",
    "2 2 0 message_22 -1",
    "1 0 0 message_10_2 1",
    "5 11 0 message_510_2 -1",
]

PERMISSIVE_OUTPUT = (
    "Pipeline:1\n"
    "\t0| message_10\n"
    "\t3| message_13\n"
    "Pipeline:2\n"
    "\t0| message_20\n"
    "\t2| message_22\n"
    "Pipeline:3\n"
    "\t1| message_31\n"
    "Pipeline:5\n"
    "\t9| message_59\n"
    "\t11| message_510_2\n"
    "Pipeline:13\n"
    "\t1| fancy 13_1\n"
    "\t2| fancy text\n"
)

STRICT_OUTPUT = (
    "Pipeline:1\n"
    "\t0| message_10\n"
    "\t1| message_11\n"
    "\t2| message_12\n"
    "Pipeline:2\n"
    "\t0| message_20\n"
    "\t2| message_22\n"
    "Pipeline:3\n"
    "\t1| message_31\n"
    "Pipeline:5\n"
    "\t9| message_59\n"
    "Pipeline:13\n"
    "\t1| fancy 13_1\n"
    "\t2| fancy text\n"
)


@pytest.fixture
def mixed_records():
    """The interleaved record stream, one line per record."""
    return list(MIXED_RECORDS)


@pytest.fixture
def registry():
    """A registry with the default (permissive) policy."""
    return Registry()


@pytest.fixture
def strict_registry():
    """A registry with strict sequencing enabled."""
    return Registry(RegistryConfig(discard_invalid_next_id=True))


@pytest.fixture
def restore_root_logging():
    """Undo logging.basicConfig(force=True) calls made by the CLI."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
