"""
Label Pattern Registry

Recognizers for every syntax that declares a label in an Org document:

  - :CUSTOM_ID: / :ID: properties of a heading
  - #+name: keywords above a block
  - \\label{...} in raw LaTeX
  - <<target>> anchors
  - label:NAME links
  - label=NAME inside \\lstset{...} or \\begin{lstlisting}[...] options

All recognizers share one label character class and are unioned into a
single regex, so a document is scanned once regardless of the number of
rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence


# Word characters plus the punctuation Org allows in label names
LABEL_CHARS = r"\w\-.:?!`'/*@+|(){}<>&^$#%~"
LABEL_NAME = f"[{LABEL_CHARS}]+"

# Targets may contain inner spaces but never brackets, newlines or
# whitespace at either end.
_TARGET_BORDER = r"[^<>\n\r \t]"
TARGET_NAME = f"{_TARGET_BORDER}[^<>\\n\\r]*{_TARGET_BORDER}|{_TARGET_BORDER}"

RE_VALID_LABEL = re.compile(LABEL_NAME)

_PLACEHOLDER = "{label}"


@dataclass(frozen=True)
class LabelRule:
    """One declaration syntax.

    `template` contains the placeholder ``{label}`` exactly once; it is
    replaced by a capture group around `name_pattern`.
    """
    name: str
    template: str
    description: str = ""
    name_pattern: str = LABEL_NAME

    def expand(self, group: str) -> str:
        return self.template.replace(_PLACEHOLDER, f"(?P<{group}>{self.name_pattern})")

    def compile(self) -> "re.Pattern[str]":
        return re.compile(self.expand("label"), _FLAGS)


@dataclass(frozen=True)
class LabelMatch:
    """A single recognizer hit."""
    name: str
    start: int                # start of the whole declaration
    end: int
    name_start: int           # start of the captured name
    rule: str


_FLAGS = re.IGNORECASE | re.MULTILINE

DEFAULT_RULES: List[LabelRule] = [
    LabelRule(
        "custom_id",
        r"^[ \t]*:CUSTOM_ID:[ \t]+{label}",
        "CUSTOM_ID property of a heading",
    ),
    LabelRule(
        "id",
        r"^[ \t]*:ID:[ \t]+{label}",
        "ID property of a heading",
    ),
    LabelRule(
        "name",
        r"^[ \t]*#\+name:[ \t]*{label}",
        "#+name: keyword",
    ),
    LabelRule(
        "latex_label",
        r"\\label\{{label}\}",
        "LaTeX \\label{} command",
    ),
    LabelRule(
        "target",
        r"<<{label}>>",
        "<<target>> anchor",
        name_pattern=TARGET_NAME,
    ),
    LabelRule(
        "label_link",
        r"(?<![\w\\])label:{label}",
        "label: link",
    ),
    LabelRule(
        "listing_option",
        r"\\(?:lstset\{|begin\{lstlisting\}\[)[^\n]*?\blabel=[ \t]*{label}(?=[,}\]])",
        "label= option of a listing",
    ),
]


def is_valid_label_name(name: str) -> bool:
    """True if `name` is non-empty and uses only label characters."""
    return bool(name) and RE_VALID_LABEL.fullmatch(name) is not None


class LabelPatternRegistry:
    """Ordered set of recognizer rules scanned as one union regex."""

    def __init__(self, rules: Optional[Sequence[LabelRule]] = None):
        self.rules: List[LabelRule] = list(DEFAULT_RULES if rules is None else rules)
        names = [r.name for r in self.rules]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate recognizer names: {names}")
        self._union: Optional["re.Pattern[str]"] = None
        self._groups = {f"r{i}": rule for i, rule in enumerate(self.rules)}

    @property
    def rule_names(self) -> List[str]:
        return [r.name for r in self.rules]

    @property
    def union(self) -> "re.Pattern[str]":
        if self._union is None:
            alternatives = [
                f"(?P<{group}>{rule.expand(group + '_label')})"
                for group, rule in self._groups.items()
            ]
            # A pattern that never matches keeps an empty registry scannable
            self._union = re.compile("|".join(alternatives) or r"(?!)", _FLAGS)
        return self._union

    def iter_matches(self, text: str) -> Iterator[LabelMatch]:
        """Yield every declaration in document order.

        finditer resumes after the end of each full match, never after the
        captured name, so the scan always advances.
        """
        if not self.rules:
            return
        for m in self.union.finditer(text):
            group = m.lastgroup
            rule = self._groups.get(group)
            if rule is None:
                continue
            label_group = group + "_label"
            yield LabelMatch(
                name=m.group(label_group),
                start=m.start(),
                end=m.end(),
                name_start=m.start(label_group),
                rule=rule.name,
            )
