"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the
formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["text"]()``.

RULES:
- Keys are short lowercase identifiers (used in the --format flag)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipeline_reassembler.formatters.json_report import JSONReportFormatter
from pipeline_reassembler.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from pipeline_reassembler.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "text": PlainTextFormatter,
    "json": JSONReportFormatter,
}
