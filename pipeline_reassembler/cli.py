"""Command-line interface for the Pipeline Reassembler.

WHY: Records usually arrive as a text file or on a pipe. The CLI wires
together the full pipeline (line source, record parsing, reassembly,
pluggable formatter output) behind a single command.

HOW: Uses argparse to accept an optional input file (stdin otherwise),
the sequencing policy, the output format, and an output path. Logging is
configured once on stderr so diagnostics never mix with the rendered
output on stdout.

RULES:
- Positional argument: input file path; omitted or "-" reads stdin
- Input ends at the first blank line or end of file
- --strict-sequencing/--no-strict-sequencing overrides PIPELINE_DISCARD_INVALID_NEXT_ID
- --format selects one formatter key (default: PIPELINE_OUTPUT_FORMAT or "text")
- --output writes to a file instead of stdout; an existing directory gets
  {input stem}{formatter suffix} (stem "stdin" when reading stdin)
- stdin and files are decoded as UTF-8 with replacement, never strictly
- A bad PIPELINE_DISCARD_INVALID_NEXT_ID value is an "Error:" exit 1, not a traceback
- Diagnostics and status output go to stderr (not stdout)
- Malformed input never changes the exit code; unreadable files exit 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from pipeline_reassembler.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_FORMAT,
    load_registry_config,
)
from pipeline_reassembler.core.ingest import IngestStats, ingest
from pipeline_reassembler.core.ir import RegistryConfig
from pipeline_reassembler.core.registry import Registry
from pipeline_reassembler.formatters import FORMATTERS

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def configure_logging(level: str) -> None:
    """Send log records to stderr in a compact one-line format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def _resolve_output_path(output: str, stem: str, suffix: str) -> Path:
    """Map --output to a file path.

    RULES:
    - An existing directory gets {stem}{suffix} inside it
    - Anything else is used as the file path as given
    """
    path = Path(output)
    if path.is_dir():
        return path / "{}{}".format(stem, suffix)
    return path


def _stdin_source() -> TextIO:
    """Return stdin, switched to UTF-8 with replacement where possible."""
    reconfigure = getattr(sys.stdin, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8", errors="replace")
    return sys.stdin


def _run(args: argparse.Namespace, config: RegistryConfig,
         source: TextIO, stem: str) -> None:
    """Ingest, render, and write output."""
    registry = Registry(config)
    stats: IngestStats = ingest(source, registry)
    logger.info(
        "Read %d line(s): %d accepted, %d discarded, %d unparsable, %d pipeline(s)",
        stats.lines_read, stats.accepted, stats.discarded,
        stats.parse_failures, len(registry),
    )

    formatter = FORMATTERS[args.format]()
    reassembly = registry.render()
    logger.info("Rendered %d fragment(s) across %d pipeline(s)",
                reassembly.fragment_count, len(reassembly.pipelines))
    output = formatter.format(reassembly)

    if args.output:
        out_path = _resolve_output_path(args.output, stem, output.suffix)
        out_path.write_text(output.content, encoding="utf-8")
        _status("Saved {} output to {}".format(formatter.name, out_path))
    else:
        sys.stdout.write(output.content)
        sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="pipeline_reassembler",
        description="Reassemble interleaved, out-of-order pipeline fragments "
                    "and print each pipeline in sequence.",
    )

    parser.add_argument(
        "input_file",
        nargs="?",
        default="-",
        help="Path to the record file (default: read stdin).",
    )

    parser.add_argument(
        "--strict-sequencing",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Discard fragments whose id differs from the pipeline's expected "
             "next id (default: from PIPELINE_DISCARD_INVALID_NEXT_ID, else off).",
    )

    parser.add_argument(
        "--format",
        default=DEFAULT_OUTPUT_FORMAT,
        choices=sorted(FORMATTERS.keys()),
        help="Output format (default: %(default)s).",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="File or existing directory to write the output to (default: stdout).",
    )

    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Diagnostic verbosity on stderr (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.format not in FORMATTERS:
        parser.error("unknown output format {!r}".format(args.format))
    configure_logging(args.log_level)

    if args.strict_sequencing is not None:
        config = RegistryConfig(discard_invalid_next_id=args.strict_sequencing)
    else:
        try:
            config = load_registry_config()
        except ValueError as e:
            print("Error: {}".format(e), file=sys.stderr)
            sys.exit(1)

    try:
        if args.input_file == "-":
            _run(args, config, _stdin_source(), "stdin")
        else:
            input_path = Path(args.input_file)
            if not input_path.is_file():
                print("Error: File not found: {}".format(input_path), file=sys.stderr)
                sys.exit(1)
            with open(input_path, encoding="utf-8", errors="replace") as source:
                _run(args, config, source, input_path.stem)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
