"""Pipeline Reassembler — out-of-order fragment stream resequencer.

WHY: Upstream producers interleave fragments of many independent logical
channels ("pipelines") on a single line-oriented stream, in any order.
Consumers need each pipeline's content back in sequence, with malformed
or out-of-policy fragments dropped instead of crashing the run.

HOW: Three-stage pipeline — parse (record parser), reassemble (core
registry and per-channel state machine), format (pluggable formatters).
Each stage is independently testable.

RULES:
- All formatters consume the same Reassembly IR
- Adding a new output format = one new formatter module, no core changes
- Input errors are diagnostics, never fatal to the run
"""

__version__ = "0.1.0"
