# Reference linking modules
from .reference_types import (
    ReferenceTypeDescriptor,
    ReferenceTypeRegistry,
    EquationLabelPredicate,
    BUILTIN_REFERENCE_TYPES,
)
from .reference_markers import ReferenceMarker, MarkerParser
from .reference_validator import ReferenceValidator, LabelValidity, ValidityStatus
from .reference_resolver import ReferenceResolver, LabelCandidate, NavigationTarget

__all__ = [
    "ReferenceTypeDescriptor",
    "ReferenceTypeRegistry",
    "EquationLabelPredicate",
    "BUILTIN_REFERENCE_TYPES",
    "ReferenceMarker",
    "MarkerParser",
    "ReferenceValidator",
    "LabelValidity",
    "ValidityStatus",
    "ReferenceResolver",
    "LabelCandidate",
    "NavigationTarget",
]
