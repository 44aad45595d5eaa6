"""Abstract base formatter and output container.

WHY: Every output format consumes the same Reassembly IR but produces
different content. This base class enforces a consistent interface so
the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a single FormatterOutput
- ``suffix`` starts with a dot or hyphen, e.g. ``".txt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pipeline_reassembler.core.ir import Reassembly


@dataclass
class FormatterOutput:
    """One rendered output.

    Attributes:
        suffix: File suffix used when the output is saved next to the input.
        content: The rendered text.
        media_type: MIME type for the content, e.g. ``"text/plain"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, reassembly: Reassembly) -> FormatterOutput:
        """Convert the Reassembly IR into output content.

        Args:
            reassembly: Every pipeline with its fragments in ascending order.

        Returns:
            The rendered FormatterOutput.
        """
