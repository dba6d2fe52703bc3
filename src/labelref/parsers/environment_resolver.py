"""
Structural Environment Resolver

Finds the innermost block that encloses a label declaration. Two block
styles are recognized:

  - LaTeX environments:   \\begin{equation} ... \\end{equation}
  - Org blocks:           #+begin_src ... #+end_src

The search walks backward over open markers and, for each one, looks
forward for its matching close marker. A block only encloses the label if
that close marker comes after the label; otherwise the label sits past the
block (e.g. between two sibling blocks) and the search continues further
back.

When the text scan finds nothing, a pluggable StructureQuery is asked
whether the label names a block directly (``#+name: eq1`` above
``\\begin{equation}``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .document import Document
from .label_indexer import Label, LabelIndex


RE_BLOCK_OPEN = re.compile(
    r'\\begin\{(?P<latex>[^}\n]+)\}|^[ \t]*#\+begin_(?P<org>[\w-]+)',
    re.IGNORECASE | re.MULTILINE,
)

# Affiliated keywords that may sit between #+name: and the block it names
RE_AFFILIATED = re.compile(
    r'^[ \t]*#\+(?:name|caption|header|plot|results|attr_[\w-]+)(?:\[[^\]\n]*\])?:',
    re.IGNORECASE,
)

RE_LINE_BLOCK_OPEN = re.compile(
    r'^[ \t]*(?:\\begin\{(?P<latex>[^}\n]+)\}|#\+begin_(?P<org>[\w-]+))',
    re.IGNORECASE,
)


@dataclass(frozen=True)
class EnclosingEnvironment:
    """Nearest block containing a point."""
    kind: str                        # e.g. "equation", "align*", "src"
    open_offset: Optional[int] = None
    close_offset: Optional[int] = None
    source: str = "text"             # "text" scan or "structure" query

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "open_offset": self.open_offset,
            "close_offset": self.close_offset,
            "source": self.source,
        }


# ---------------------------------------------------------------------------
# Structural queries
# ---------------------------------------------------------------------------

class StructureQuery:
    """Answers whether a label names a structural node of a known block type."""

    def block_kind(self, name: str, document: Document) -> Optional[str]:
        raise NotImplementedError


class NullStructureQuery(StructureQuery):
    """Raw-text only: no structural information available."""

    def block_kind(self, name: str, document: Document) -> Optional[str]:
        return None


class OrgStructureQuery(StructureQuery):
    """Reads #+name: keywords and the block that follows them."""

    def block_kind(self, name: str, document: Document) -> Optional[str]:
        name_re = re.compile(
            r'^[ \t]*#\+name:[ \t]*' + re.escape(name) + r'[ \t]*$',
            re.IGNORECASE | re.MULTILINE,
        )
        m = name_re.search(document.text)
        if m is None:
            return None

        lines = document.text[m.end():].split("\n")
        # lines[0] is the remainder of the #+name: line itself
        for line in lines[1:]:
            if RE_AFFILIATED.match(line):
                continue
            block = RE_LINE_BLOCK_OPEN.match(line)
            if block is None:
                return None
            if block.group("latex"):
                return block.group("latex")
            return block.group("org").lower()
        return None


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class EnvironmentResolver:
    """
    Resolve the enclosing environment of a label declaration.
    """

    def __init__(self, structure_query: Optional[StructureQuery] = None):
        self.structure_query = structure_query or NullStructureQuery()

    def enclosing_environment(
        self, document: Union[Document, str], offset: int
    ) -> Optional[EnclosingEnvironment]:
        """Innermost block whose open precedes and whose close follows `offset`."""
        document = Document.coerce(document)
        text = document.text
        opens = list(RE_BLOCK_OPEN.finditer(text, 0, offset))

        for open_match in reversed(opens):
            close = self._find_close(text, open_match)
            if close is not None and close > offset:
                return EnclosingEnvironment(
                    kind=self._kind(open_match),
                    open_offset=open_match.start(),
                    close_offset=close,
                )
        return None

    def environment_for_label(
        self,
        label: Union[Label, str],
        index: LabelIndex,
    ) -> Optional[EnclosingEnvironment]:
        """Enclosing environment of an indexed label.

        A `#+name:` keyword names the block that follows it rather than one
        around it, so for such labels (and for names missing from the index)
        the structure query is asked before the text scan. Other labels are
        scanned first and fall back to the structure query.
        """
        if isinstance(label, Label):
            name = label.name
        else:
            name = label
            label = index.get(name)

        structure_first = label is None or label.rule == "name"
        if structure_first:
            env = self._structure_environment(name, index.document)
            if env is not None or label is None:
                return env

        env = self.enclosing_environment(index.document, label.name_offset)
        if env is not None or structure_first:
            return env
        return self._structure_environment(name, index.document)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _structure_environment(self, name: str, document: Document) -> Optional[EnclosingEnvironment]:
        kind = self.structure_query.block_kind(name, document)
        if kind:
            return EnclosingEnvironment(kind=kind, source="structure")
        return None

    @staticmethod
    def _kind(open_match: "re.Match[str]") -> str:
        if open_match.group("latex") is not None:
            return open_match.group("latex")
        return open_match.group("org").lower()

    def _find_close(self, text: str, open_match: "re.Match[str]") -> Optional[int]:
        """Offset of the close marker matching `open_match`, honoring nesting."""
        pair = self._pair_pattern(open_match)
        depth = 1
        for m in pair.finditer(text, open_match.end()):
            if m.group("open") is not None:
                depth += 1
                continue
            depth -= 1
            if depth == 0:
                return m.start()
        return None

    @staticmethod
    def _pair_pattern(open_match: "re.Match[str]") -> "re.Pattern[str]":
        latex = open_match.group("latex")
        if latex is not None:
            name = re.escape(latex)
            return re.compile(
                r'(?P<open>\\begin\{' + name + r'\})|(?P<close>\\end\{' + name + r'\})'
            )
        name = re.escape(open_match.group("org"))
        return re.compile(
            r'(?P<open>^[ \t]*#\+begin_' + name + r'(?![\w-]))'
            r'|(?P<close>^[ \t]*#\+end_' + name + r'(?![\w-]))',
            re.IGNORECASE | re.MULTILINE,
        )
