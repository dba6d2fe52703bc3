"""
Reference Type Registry

The closed set of reference flavors and the table used to infer a default
flavor for a label. Inference rules are ``(predicate, tag)`` pairs evaluated
in order; the first predicate that holds picks the tag, otherwise the
configured default applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..errors import ConfigError, UnknownReferenceTypeError
from ..parsers.environment_resolver import EnvironmentResolver
from ..parsers.label_indexer import Label, LabelIndex
from ..utils.config import DEFAULT_EQUATION_ENVIRONMENTS


@dataclass(frozen=True)
class ReferenceTypeDescriptor:
    """One reference flavor."""
    tag: str
    description: str
    is_range_flavor: bool = False
    accepts_multiple: bool = False

    @property
    def min_labels(self) -> int:
        return 2 if self.is_range_flavor else 1

    @property
    def max_labels(self) -> Optional[int]:
        if self.is_range_flavor:
            return 2
        return None if self.accepts_multiple else 1

    def check_arity(self, count: int) -> bool:
        """True if a path of `count` labels suits this flavor."""
        if count < self.min_labels:
            return False
        return self.max_labels is None or count <= self.max_labels

    def format_path(self, labels: Sequence[str]) -> str:
        return ",".join(labels)

    def format_marker(self, labels: Sequence[str], bracketed: bool = True) -> str:
        link = f"{self.tag}:{self.format_path(labels)}"
        return f"[[{link}]]" if bracketed else link


BUILTIN_REFERENCE_TYPES: Tuple[ReferenceTypeDescriptor, ...] = (
    ReferenceTypeDescriptor("ref", "A regular cross-reference to a label"),
    ReferenceTypeDescriptor("pageref", "A reference to the page number of a label"),
    ReferenceTypeDescriptor("nameref", "A reference to the name of a section or caption"),
    ReferenceTypeDescriptor("eqref", "A reference to an equation"),
    ReferenceTypeDescriptor("autoref", "A reference with an automatic prefix"),
    ReferenceTypeDescriptor(
        "cref", "A condensed reference to one or more labels", accepts_multiple=True
    ),
    ReferenceTypeDescriptor(
        "Cref", "A capitalized condensed reference to one or more labels", accepts_multiple=True
    ),
    ReferenceTypeDescriptor("crefrange", "A range of references", is_range_flavor=True),
    ReferenceTypeDescriptor(
        "Crefrange", "A capitalized range of references", is_range_flavor=True
    ),
)


Predicate = Callable[[str, LabelIndex], bool]
InferenceRule = Tuple[Predicate, str]


class EquationLabelPredicate:
    """Holds when a label's enclosing environment is equation-like."""

    def __init__(
        self,
        environment_resolver: Optional[EnvironmentResolver] = None,
        environments: Optional[Iterable[str]] = None,
    ):
        self.environment_resolver = environment_resolver or EnvironmentResolver()
        self.environments = frozenset(
            DEFAULT_EQUATION_ENVIRONMENTS if environments is None else environments
        )

    def __call__(self, name: str, index: LabelIndex) -> bool:
        env = self.environment_resolver.environment_for_label(name, index)
        return env is not None and env.kind in self.environments


class ReferenceTypeRegistry:
    """Static table of reference flavors plus the inference rules."""

    def __init__(
        self,
        descriptors: Sequence[ReferenceTypeDescriptor] = BUILTIN_REFERENCE_TYPES,
        default_type: str = "ref",
        inference_rules: Optional[Sequence[InferenceRule]] = None,
        environment_resolver: Optional[EnvironmentResolver] = None,
        equation_environments: Optional[Iterable[str]] = None,
    ):
        self._descriptors: Dict[str, ReferenceTypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.tag in self._descriptors:
                raise ConfigError(f"Reference type '{descriptor.tag}' registered twice")
            self._descriptors[descriptor.tag] = descriptor

        if default_type not in self._descriptors:
            raise ConfigError(
                f"Default reference type '{default_type}' is not one of {self.tags()}"
            )
        self.default_type = default_type

        if inference_rules is None:
            inference_rules = [
                (EquationLabelPredicate(environment_resolver, equation_environments), "eqref"),
            ]
        for _, tag in inference_rules:
            if tag not in self._descriptors:
                raise ConfigError(f"Inference rule proposes unknown type '{tag}'")
        self.inference_rules: List[InferenceRule] = list(inference_rules)

    # -----------------------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------------------

    def tags(self) -> List[str]:
        return list(self._descriptors)

    def list_tags(self) -> List[Tuple[str, str]]:
        """(tag, description) pairs for selection UIs, in registration order."""
        return [(d.tag, d.description) for d in self._descriptors.values()]

    def get(self, tag: str) -> ReferenceTypeDescriptor:
        try:
            return self._descriptors[tag]
        except KeyError:
            raise UnknownReferenceTypeError(tag, self.tags()) from None

    def describe(self, tag: str) -> str:
        return self.get(tag).description

    def __contains__(self, tag: object) -> bool:
        return tag in self._descriptors

    # -----------------------------------------------------------------------
    # Inference
    # -----------------------------------------------------------------------

    def infer(self, label: Union[Label, str], index: LabelIndex) -> str:
        """Default flavor for a label: first matching rule, else the default."""
        name = label.name if isinstance(label, Label) else label
        for predicate, tag in self.inference_rules:
            if predicate(name, index):
                return tag
        return self.default_type
