"""JSON report formatter with schema validation.

WHY: Tooling that post-processes reassembled pipelines wants structured
data, including the raw bytes of fragments that are not valid UTF-8 and
each pipeline's final sequencing state.

HOW: Builds a plain dict from the Reassembly IR, validates it against
the bundled reassembly_schema.json with jsonschema, then serializes it
with two-space indentation.

RULES:
- Top level: {"pipelines": [...]} in ascending pipeline id order
- Each pipeline: id, closed, next_id (null when closed or unset), fragments
- Each fragment: id, text (UTF-8, replacement on error), hex (lowercase)
- Schema validation is mandatory — raises on invalid output
- Output suffix is "-pipelines.json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from pipeline_reassembler.core.ir import Reassembly, RenderedPipeline
from pipeline_reassembler.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "reassembly_schema.json"


def _load_schema() -> Dict[str, Any]:
    """Load the report JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def _pipeline_to_dict(pipeline: RenderedPipeline) -> Dict[str, Any]:
    return {
        "id": pipeline.channel_id,
        "closed": pipeline.closed,
        "next_id": pipeline.next_id,
        "fragments": [
            {
                "id": fragment.fragment_id,
                "text": fragment.text,
                "hex": fragment.body.hex(),
            }
            for fragment in pipeline.fragments
        ],
    }


class JSONReportFormatter(BaseFormatter):
    """Formatter that produces a schema-validated JSON report."""

    @property
    def name(self) -> str:
        return "JSON Report"

    def format(self, reassembly: Reassembly) -> FormatterOutput:
        """Convert the Reassembly IR into a JSON report.

        Raises:
            jsonschema.ValidationError: If the generated document does not
                conform to reassembly_schema.json.
        """
        pipelines: List[Dict[str, Any]] = [
            _pipeline_to_dict(p) for p in reassembly.pipelines
        ]
        output: Dict[str, Any] = {"pipelines": pipelines}

        jsonschema.validate(instance=output, schema=_get_schema())

        return FormatterOutput(
            suffix="-pipelines.json",
            content=json.dumps(output, indent=2, ensure_ascii=False) + "\n",
            media_type="application/json",
        )
