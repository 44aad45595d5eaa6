"""Core parsing, decoding, and reassembly modules.

WHY: The core package contains the stable heart of the reassembler —
the IR dataclasses, the record parser, the payload decoder, and the
registry that enforces the acceptance policy.

HOW: ir.py defines the data structures, parser.py and decoder.py turn
text into records and bytes, registry.py owns pipeline state, and
ingest.py drives a line source through all of them.

RULES:
- IR dataclasses are the contract — change with care
- Reassembly logic is format-agnostic — no formatter-specific logic here
"""
