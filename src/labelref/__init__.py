"""Cross-reference label indexing and checking for Org documents."""

from .parsers.document import Document, Position
from .parsers.label_indexer import Label, LabelIndex
from .linkers.reference_markers import ReferenceMarker
from .pipeline import (
    ReferenceCheckPipeline,
    build_index,
    infer_type,
    validate,
    resolve,
    list_type_tags,
    run_check,
)

__version__ = "0.1.0"

__all__ = [
    "Document",
    "Position",
    "Label",
    "LabelIndex",
    "ReferenceMarker",
    "ReferenceCheckPipeline",
    "build_index",
    "infer_type",
    "validate",
    "resolve",
    "list_type_tags",
    "run_check",
]
