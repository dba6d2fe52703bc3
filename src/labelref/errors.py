"""
Exception classes for labelref.

Every failure here is local to one query: a missing label, an ambiguous
multi-label reference or a malformed label name never invalidates the rest
of a document check.
"""

from typing import Any, List, Optional


class LabelRefError(Exception):
    """Base exception for all labelref errors."""

    pass


class LabelNotFoundError(LabelRefError):
    """Raised when navigation is requested for a label that is not declared.

    Attributes:
        name: The label name that was looked up
        source: Document path the lookup ran against (None for in-memory text)
    """

    def __init__(self, name: str, source: Optional[str] = None) -> None:
        self.name = name
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Label '{self.name}' not found"
        if self.source:
            msg += f" in {self.source}"
        return msg


class AmbiguousSelectionError(LabelRefError):
    """Raised when a reference names several labels and no chooser was given.

    Attributes:
        candidates: List of LabelCandidate objects, one per name in the path
    """

    def __init__(self, candidates: List[Any]) -> None:
        self.candidates = candidates
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Reference names {len(self.candidates)} labels\n\n"
        for i, candidate in enumerate(self.candidates):
            state = "declared" if candidate.exists else "not declared"
            msg += f"{i + 1}. {candidate.name} ({state})\n"
        msg += "\nPass a chooser to pick one of them."
        return msg


class MalformedMarkerError(LabelRefError):
    """Raised when a reference path is empty or holds an invalid label name.

    Attributes:
        name: The offending entry (may be empty)
        reason: Short description of what is wrong with it
    """

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Malformed label {self.name!r}: {self.reason}")


class UnknownReferenceTypeError(LabelRefError):
    """Raised when a reference type tag is not registered."""

    def __init__(self, tag: str, known: Optional[List[str]] = None) -> None:
        self.tag = tag
        self.known = known or []
        msg = f"Unknown reference type '{tag}'"
        if self.known:
            msg += f" (known: {', '.join(self.known)})"
        super().__init__(msg)


class ConfigError(LabelRefError):
    """Raised when configuration values are inconsistent."""

    pass
