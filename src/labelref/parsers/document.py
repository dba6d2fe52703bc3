"""
Document snapshot with offset addressing.

All scanners in labelref work on an immutable text snapshot. Offsets are
0-based character offsets into the text; positions add a 1-based line and a
0-based column for display.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..utils.file_utils import read_text


@dataclass(frozen=True)
class Position:
    """A location in a document."""
    offset: int
    line: int                 # 1-based
    column: int               # 0-based

    def to_dict(self) -> Dict[str, Any]:
        return {"offset": self.offset, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class Range:
    """Half-open character range [start, end)."""
    start: int
    end: int

    def __contains__(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end}


class Document:
    """Read-only view of document text."""

    def __init__(self, text: str, path: Optional[str] = None):
        self._text = text
        self.path = path
        self._line_starts: Optional[List[int]] = None

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "Document":
        return cls(read_text(filepath), path=str(filepath))

    @classmethod
    def coerce(cls, document: Union["Document", str]) -> "Document":
        """Accept either a Document or raw text."""
        if isinstance(document, Document):
            return document
        return cls(document)

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        source = self.path or "<memory>"
        return f"Document({source}, {len(self._text)} chars)"

    # -----------------------------------------------------------------------
    # Line addressing
    # -----------------------------------------------------------------------

    @property
    def line_starts(self) -> List[int]:
        if self._line_starts is None:
            starts = [0]
            pos = self._text.find("\n")
            while pos != -1:
                starts.append(pos + 1)
                pos = self._text.find("\n", pos + 1)
            self._line_starts = starts
        return self._line_starts

    def line_index(self, offset: int) -> int:
        """0-based index of the line containing offset."""
        offset = max(0, min(offset, len(self._text)))
        return bisect.bisect_right(self.line_starts, offset) - 1

    def position(self, offset: int) -> Position:
        idx = self.line_index(offset)
        return Position(offset=offset, line=idx + 1, column=offset - self.line_starts[idx])

    def line_span(self, line_idx: int) -> Range:
        """Range of a line's text, excluding its newline."""
        starts = self.line_starts
        start = starts[line_idx]
        if line_idx + 1 < len(starts):
            end = starts[line_idx + 1] - 1
        else:
            end = len(self._text)
        return Range(start, end)

    def context_window(self, offset: int, before: int = 1, after: int = 2) -> str:
        """Lines from `before` lines above to `after` lines below the offset's line."""
        idx = self.line_index(offset)
        first = max(0, idx - before)
        last = min(len(self.line_starts) - 1, idx + after)
        return self._text[self.line_span(first).start:self.line_span(last).end]
