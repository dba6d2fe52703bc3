"""
Reference markers: ``ref:fig1``, ``[[cref:a,b]]``, ``[[eqref:eq1][Eq. 1]]``.

Markers are parsed on demand from the current text and never stored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..errors import MalformedMarkerError
from ..parsers.document import Document, Range
from ..parsers.label_patterns import LABEL_CHARS, is_valid_label_name
from .reference_types import BUILTIN_REFERENCE_TYPES


# Closing brackets a plain path may end in, and the opener each must balance
_CLOSERS = {")": "(", "}": "{"}
RE_PATH_END = re.compile(r"[\w/]")


def trim_plain_path(path: str) -> str:
    """Drop trailing sentence punctuation from a plain marker path.

    A final ``)`` or ``}`` is kept only when it closes a bracket opened
    inside the path, so ``(see ref:fig1)`` yields ``fig1`` while
    ``ref:f(x)`` keeps ``f(x)``.
    """
    while path:
        last = path[-1]
        if last in _CLOSERS:
            if path.count(_CLOSERS[last]) >= path.count(last):
                break
        elif RE_PATH_END.match(last):
            break
        path = path[:-1]
    return path


@dataclass(frozen=True)
class ReferenceMarker:
    """A reference to one or more labels."""
    type_tag: str
    label_path: Tuple[str, ...]
    source_range: Optional[Range] = None
    bracketed: bool = False
    description: Optional[str] = None

    @classmethod
    def from_path(
        cls,
        type_tag: str,
        path: str,
        source_range: Optional[Range] = None,
        bracketed: bool = False,
        description: Optional[str] = None,
        strict: bool = False,
    ) -> "ReferenceMarker":
        """Split a comma-separated path, keeping names verbatim and in order."""
        names = tuple(path.split(","))
        if strict:
            for name in names:
                if not name:
                    raise MalformedMarkerError(name, "empty label name")
                if not is_valid_label_name(name):
                    raise MalformedMarkerError(name, "characters outside the label set")
        return cls(
            type_tag=type_tag,
            label_path=names,
            source_range=source_range,
            bracketed=bracketed,
            description=description,
        )

    @property
    def path(self) -> str:
        return ",".join(self.label_path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_tag,
            "labels": list(self.label_path),
            "range": self.source_range.to_dict() if self.source_range else None,
            "bracketed": self.bracketed,
            "description": self.description,
        }

    def __str__(self) -> str:
        link = f"{self.type_tag}:{self.path}"
        return f"[[{link}]]" if self.bracketed else link


class MarkerParser:
    """Find reference markers of the registered flavors in document text."""

    def __init__(self, tags: Optional[Iterable[str]] = None):
        if tags is None:
            tags = [d.tag for d in BUILTIN_REFERENCE_TYPES]
        # Longest first so "crefrange" wins over "cref"
        self.tags = sorted(set(tags), key=len, reverse=True)
        type_alt = "|".join(re.escape(t) for t in self.tags)
        self._pattern = re.compile(
            # [[type:path]] or [[type:path][description]]
            r'\[\[(?P<btype>' + type_alt + r'):(?P<bpath>[^\]\n]*)\]'
            r'(?:\[(?P<desc>[^\]\n]*)\])?\]'
            # plain type:path, not inside a word, a URL or a LaTeX command
            r'|(?<![\w\\/:])(?P<ptype>' + type_alt + r'):'
            r'(?P<ppath>[' + LABEL_CHARS + r',]*[\w/)}])'
        )

    def find_markers(self, document: Union[Document, str]) -> List[ReferenceMarker]:
        document = Document.coerce(document)
        markers: List[ReferenceMarker] = []
        for m in self._pattern.finditer(document.text):
            if m.group("btype") is not None:
                markers.append(ReferenceMarker.from_path(
                    m.group("btype"),
                    m.group("bpath"),
                    source_range=Range(m.start(), m.end()),
                    bracketed=True,
                    description=m.group("desc"),
                ))
            else:
                path = trim_plain_path(m.group("ppath"))
                if not path:
                    continue
                markers.append(ReferenceMarker.from_path(
                    m.group("ptype"),
                    path,
                    source_range=Range(m.start(), m.start("ppath") + len(path)),
                ))
        return markers

    def marker_at(self, document: Union[Document, str], offset: int) -> Optional[ReferenceMarker]:
        """Marker whose text spans `offset`, if any."""
        for marker in self.find_markers(document):
            if offset in marker.source_range:
                return marker
        return None
