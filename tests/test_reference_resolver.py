"""
Tests for label resolution and navigation.
"""

import pytest

from labelref.errors import AmbiguousSelectionError, LabelNotFoundError
from labelref.linkers.reference_markers import ReferenceMarker
from labelref.linkers.reference_resolver import ReferenceResolver
from labelref.parsers.document import Document


TWO_DECLARATIONS = "<<sec1>>\nSome text.\n* Heading\n:PROPERTIES:\n:CUSTOM_ID: sec1\n:END:\n"


def test_resolve_returns_earliest_declaration():
    position = ReferenceResolver().resolve("sec1", TWO_DECLARATIONS)
    assert position.offset == 2
    assert position.line == 1


def test_resolve_is_case_insensitive():
    text = "intro\n#+name: fig1\n"
    position = ReferenceResolver().resolve("FIG1", text)
    assert position.offset == text.index("fig1")
    assert position.line == 2
    assert position.column == len("#+name: ")


def test_resolve_missing_and_empty_document():
    resolver = ReferenceResolver()
    assert resolver.resolve("nope", TWO_DECLARATIONS) is None
    assert resolver.resolve("anything", "") is None


def test_resolve_is_idempotent():
    document = Document(TWO_DECLARATIONS)
    resolver = ReferenceResolver()
    assert resolver.resolve("sec1", document) == resolver.resolve("sec1", document)


def test_navigate_single_label():
    target = ReferenceResolver().navigate("sec1", Document(TWO_DECLARATIONS, path="a.org"))
    assert target.name == "sec1"
    assert target.position.offset == 2
    assert target.source == "a.org"


def test_navigate_missing_label():
    with pytest.raises(LabelNotFoundError) as excinfo:
        ReferenceResolver().navigate("missing", Document("", path="empty.org"))
    assert excinfo.value.name == "missing"
    assert "empty.org" in str(excinfo.value)


def test_navigate_marker_with_one_label():
    marker = ReferenceMarker.from_path("ref", "sec1")
    assert ReferenceResolver().navigate(marker, TWO_DECLARATIONS).position.offset == 2


def test_navigate_several_labels_without_chooser():
    marker = ReferenceMarker.from_path("cref", "sec1,sec2")
    with pytest.raises(AmbiguousSelectionError) as excinfo:
        ReferenceResolver().navigate(marker, TWO_DECLARATIONS)
    candidates = excinfo.value.candidates
    assert [c.name for c in candidates] == ["sec1", "sec2"]
    assert [c.exists for c in candidates] == [True, False]


def test_navigate_with_chooser():
    text = "<<a>>\n<<b>>\n"
    seen = []

    def chooser(candidates):
        seen.extend(c.name for c in candidates)
        return "b"

    target = ReferenceResolver().navigate(["a", "b"], text, chooser=chooser)
    assert seen == ["a", "b"]
    assert target.name == "b"
    assert target.position.line == 2


def test_chooser_cancel_and_missing_choice():
    resolver = ReferenceResolver()
    with pytest.raises(AmbiguousSelectionError):
        resolver.navigate(["a", "b"], "<<a>>", chooser=lambda candidates: None)
    with pytest.raises(LabelNotFoundError):
        resolver.navigate(["a", "b"], "<<a>>", chooser=lambda candidates: "b")
