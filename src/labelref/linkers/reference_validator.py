"""
Reference Validator

Checks each label of a marker against an index independently, so a marker
like ``cref:good,bad`` reports ``good`` as valid and ``bad`` as invalid
rather than failing as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..parsers.document import Position
from ..parsers.label_indexer import LabelIndex
from ..parsers.label_patterns import is_valid_label_name
from .reference_markers import ReferenceMarker


class ValidityStatus(Enum):
    """Outcome for one label of a reference."""
    VALID = "valid"
    INVALID = "invalid"       # well-formed but not declared
    MALFORMED = "malformed"   # empty or outside the label character set


@dataclass(frozen=True)
class LabelValidity:
    name: str
    status: ValidityStatus
    index: int                # position within the marker's path
    position: Optional[Position] = None

    @property
    def is_valid(self) -> bool:
        return self.status is ValidityStatus.VALID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "index": self.index,
            "position": self.position.to_dict() if self.position else None,
        }


class ReferenceValidator:
    """Per-label validation of reference markers."""

    def validate(
        self,
        marker: Union[ReferenceMarker, Sequence[str]],
        index: LabelIndex,
    ) -> List[LabelValidity]:
        path = marker.label_path if isinstance(marker, ReferenceMarker) else tuple(marker)
        if not path:
            return [LabelValidity(name="", status=ValidityStatus.MALFORMED, index=0)]
        return [self._check(name, i, index) for i, name in enumerate(path)]

    def invalid_labels(
        self,
        marker: Union[ReferenceMarker, Sequence[str]],
        index: LabelIndex,
    ) -> List[LabelValidity]:
        return [v for v in self.validate(marker, index) if not v.is_valid]

    @staticmethod
    def _check(name: str, i: int, index: LabelIndex) -> LabelValidity:
        label = index.get(name)
        if label is not None:
            return LabelValidity(
                name=name, status=ValidityStatus.VALID, index=i, position=label.position
            )
        # Targets may legitimately hold spaces, so membership is checked first
        if not is_valid_label_name(name):
            return LabelValidity(name=name, status=ValidityStatus.MALFORMED, index=i)
        return LabelValidity(name=name, status=ValidityStatus.INVALID, index=i)
