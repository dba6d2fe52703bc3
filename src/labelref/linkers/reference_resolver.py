"""
Reference Resolver / Navigator

Resolution re-scans the document for the first declaration of a name
(compared case-insensitively) instead of consulting a cached index, so a
navigation target always reflects the current text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from ..errors import AmbiguousSelectionError, LabelNotFoundError
from ..parsers.document import Document, Position
from ..parsers.label_patterns import LabelPatternRegistry
from .reference_markers import ReferenceMarker


@dataclass(frozen=True)
class LabelCandidate:
    """One name of a multi-label reference, offered for disambiguation."""
    name: str
    exists: bool
    position: Optional[Position] = None


@dataclass(frozen=True)
class NavigationTarget:
    name: str
    position: Position
    source: Optional[str] = None


# Receives the candidates, returns the chosen name or None to cancel
Chooser = Callable[[List[LabelCandidate]], Optional[str]]


class ReferenceResolver:
    """Locate label declarations and build navigation targets."""

    def __init__(self, registry: Optional[LabelPatternRegistry] = None):
        self.registry = registry or LabelPatternRegistry()

    def resolve(self, name: str, document: Union[Document, str]) -> Optional[Position]:
        """Position of the first declared name matching `name`, ignoring case."""
        document = Document.coerce(document)
        wanted = name.casefold()
        for match in self.registry.iter_matches(document.text):
            if match.name.casefold() == wanted:
                return document.position(match.name_start)
        return None

    def candidates(
        self, path: Sequence[str], document: Union[Document, str]
    ) -> List[LabelCandidate]:
        document = Document.coerce(document)
        result = []
        for name in path:
            position = self.resolve(name, document)
            result.append(LabelCandidate(name=name, exists=position is not None, position=position))
        return result

    def navigate(
        self,
        target: Union[str, ReferenceMarker, Sequence[str]],
        document: Union[Document, str],
        chooser: Optional[Chooser] = None,
    ) -> NavigationTarget:
        """
        Navigation target for a label name or a reference path.

        A single label resolves directly. Several labels are handed to
        `chooser`; without one the selection is left to the caller through
        AmbiguousSelectionError.

        Raises:
            LabelNotFoundError: the selected label is not declared
            AmbiguousSelectionError: several labels and no choice was made
        """
        document = Document.coerce(document)
        if isinstance(target, str):
            path = [target]
        elif isinstance(target, ReferenceMarker):
            path = list(target.label_path)
        else:
            path = list(target)

        if not path:
            raise LabelNotFoundError("", document.path)

        if len(path) == 1:
            name = path[0]
        else:
            options = self.candidates(path, document)
            name = chooser(options) if chooser is not None else None
            if name is None:
                raise AmbiguousSelectionError(options)

        position = self.resolve(name, document)
        if position is None:
            raise LabelNotFoundError(name, document.path)
        return NavigationTarget(name=name, position=position, source=document.path)
