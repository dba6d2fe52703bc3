"""Parser modules for label discovery."""

from .document import Document, Position, Range
from .label_patterns import LabelPatternRegistry, LabelRule, LabelMatch, is_valid_label_name
from .label_indexer import Label, LabelIndex, LabelIndexer
from .environment_resolver import (
    EnclosingEnvironment,
    EnvironmentResolver,
    StructureQuery,
    NullStructureQuery,
    OrgStructureQuery,
)

__all__ = [
    "Document",
    "Position",
    "Range",
    "LabelPatternRegistry",
    "LabelRule",
    "LabelMatch",
    "is_valid_label_name",
    "Label",
    "LabelIndex",
    "LabelIndexer",
    "EnclosingEnvironment",
    "EnvironmentResolver",
    "StructureQuery",
    "NullStructureQuery",
    "OrgStructureQuery",
]
