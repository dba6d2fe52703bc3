"""
Label Indexer

Scans a document once with the unioned recognizer set and returns the
ordered, deduplicated index of declared labels. The index is never cached:
every call re-derives it from the text it is given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from .document import Document, Position
from .label_patterns import LabelMatch, LabelPatternRegistry


@dataclass(frozen=True)
class Label:
    """A declared label."""
    name: str
    position: Position        # start of the declaration
    name_offset: int          # start of the name inside the declaration
    rule: str                 # recognizer that matched
    context: str = ""         # surrounding lines, display only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position.to_dict(),
            "name_offset": self.name_offset,
            "rule": self.rule,
            "context": self.context[:300],
        }


@dataclass(eq=False)
class LabelIndex:
    """Ordered labels of one document snapshot, first declaration wins."""
    document: Document
    labels: List[Label] = field(default_factory=list)
    duplicates: List[Label] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_name: Dict[str, Label] = {label.name: label for label in self.labels}

    @property
    def names(self) -> List[str]:
        return [label.name for label in self.labels]

    def get(self, name: str) -> Optional[Label]:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Label]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.document.path,
            "num_labels": len(self.labels),
            "labels": [label.to_dict() for label in self.labels],
            "duplicates": [label.to_dict() for label in self.duplicates],
        }


class LabelIndexer:
    """
    Build a LabelIndex from document text.
    """

    def __init__(
        self,
        registry: Optional[LabelPatternRegistry] = None,
        context_before: int = 1,
        context_after: int = 2,
    ):
        self.registry = registry or LabelPatternRegistry()
        self.context_before = context_before
        self.context_after = context_after

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def build_index(self, document: Union[Document, str]) -> LabelIndex:
        """Scan the whole document and deduplicate by name."""
        document = Document.coerce(document)
        labels: List[Label] = []
        duplicates: List[Label] = []
        seen = set()

        for match in self.registry.iter_matches(document.text):
            label = self._make_label(document, match)
            if label.name in seen:
                duplicates.append(label)
                continue
            seen.add(label.name)
            labels.append(label)

        return LabelIndex(document=document, labels=labels, duplicates=duplicates)

    def label_at(self, document: Union[Document, str], offset: int) -> Optional[Label]:
        """Label whose declaration spans `offset`, if any."""
        document = Document.coerce(document)
        for match in self.registry.iter_matches(document.text):
            if match.start > offset:
                break
            if match.start <= offset < match.end:
                return self._make_label(document, match)
        return None

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _make_label(self, document: Document, match: LabelMatch) -> Label:
        return Label(
            name=match.name,
            position=document.position(match.start),
            name_offset=match.name_start,
            rule=match.rule,
            context=document.context_window(
                match.start, self.context_before, self.context_after
            ),
        )
