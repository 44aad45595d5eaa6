"""Plain text formatter: one ``Pipeline:<id>`` block per pipeline.

WHY: This is the canonical output downstream consumers diff against.
It must stay byte-for-byte stable.

HOW: Iterates pipelines in the order the IR holds them (ascending id)
and writes a header line followed by one tab-indented line per
fragment.

RULES:
- Header: "Pipeline:<channel_id>"
- Fragment line: "\\t<fragment_id>| <body as text>"
- Bodies are UTF-8 decoded; invalid bytes become U+FFFD
- Every line ends with "\\n"; a pipeline with no fragments prints only its header
- Bodies are printed verbatim; a body containing "\\n" spans several lines
- The json format keeps such bodies intact in its hex field
"""

from __future__ import annotations

from typing import List

from pipeline_reassembler.core.ir import Reassembly, RenderedPipeline
from pipeline_reassembler.formatters.base import BaseFormatter, FormatterOutput


def _pipeline_lines(pipeline: RenderedPipeline) -> List[str]:
    lines = ["Pipeline:{}".format(pipeline.channel_id)]
    for fragment in pipeline.fragments:
        lines.append("\t{}| {}".format(fragment.fragment_id, fragment.text))
    return lines


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the tab-indented pipeline listing."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, reassembly: Reassembly) -> FormatterOutput:
        lines: List[str] = []
        for pipeline in reassembly.pipelines:
            lines.extend(_pipeline_lines(pipeline))

        content = "\n".join(lines)
        if content:
            content += "\n"

        return FormatterOutput(
            suffix="-pipelines.txt",
            content=content,
            media_type="text/plain",
        )
