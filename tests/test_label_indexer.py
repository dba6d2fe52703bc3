"""
Tests for LabelIndexer: ordering, deduplication and context windows.
"""

from labelref.parsers.document import Document
from labelref.parsers.label_indexer import LabelIndexer


def test_empty_document_gives_empty_index():
    index = LabelIndexer().build_index("")
    assert len(index) == 0
    assert index.names == []
    assert index.duplicates == []


def test_document_without_labels():
    index = LabelIndexer().build_index("* Heading\nJust prose, see ref:nothing.\n")
    assert index.names == []


def test_all_syntaxes_are_indexed_in_order(mixed_doc):
    index = LabelIndexer().build_index(mixed_doc)
    assert index.names == ["sec-intro", "first target", "lbl-link", "fig1", "code1"]
    assert [label.rule for label in index] == [
        "custom_id", "target", "label_link", "name", "listing_option"
    ]


def test_build_index_is_idempotent(mixed_doc):
    indexer = LabelIndexer()
    document = Document(mixed_doc)
    assert indexer.build_index(document).labels == indexer.build_index(document).labels


def test_duplicate_declaration_keeps_first_occurrence():
    text = "#+name: fig1\n[[file:a.png]]\n\nlater label:fig1 again\n"
    index = LabelIndexer().build_index(text)

    assert index.names == ["fig1"]
    label = index.get("fig1")
    assert label.rule == "name"
    assert label.position.line == 1
    assert label.context.startswith("#+name: fig1")

    assert len(index.duplicates) == 1
    assert index.duplicates[0].rule == "label_link"
    assert index.duplicates[0].position.line == 4


def test_context_is_line_before_through_two_after():
    text = "one\ntwo\n#+name: x\nfour\nfive\nsix\n"
    label = LabelIndexer().build_index(text).get("x")
    assert label.context == "two\n#+name: x\nfour\nfive"


def test_context_is_clipped_at_document_edges():
    label = LabelIndexer().build_index("<<top>>\nnext").get("top")
    assert label.context == "<<top>>\nnext"


def test_context_size_is_configurable():
    text = "one\ntwo\n#+name: x\nfour\nfive\n"
    label = LabelIndexer(context_before=0, context_after=0).build_index(text).get("x")
    assert label.context == "#+name: x"


def test_positions_and_name_offsets():
    text = "intro\n  \\label{eq1}\n"
    label = LabelIndexer().build_index(text).get("eq1")
    assert label.position.offset == text.index("\\label")
    assert label.position.line == 2
    assert label.position.column == 2
    assert label.name_offset == text.index("eq1")


def test_index_membership_is_exact():
    index = LabelIndexer().build_index("<<Sec1>>")
    assert "Sec1" in index
    assert "sec1" not in index
    assert index.get("missing") is None


def test_label_at():
    text = "prose\n#+name: fig1\nmore prose\n"
    indexer = LabelIndexer()
    assert indexer.label_at(text, text.index("fig1") + 1).name == "fig1"
    assert indexer.label_at(text, text.index("#+name")).name == "fig1"
    assert indexer.label_at(text, 0) is None
    assert indexer.label_at(text, text.index("more")) is None


def test_index_serializes(mixed_doc):
    data = LabelIndexer().build_index(Document(mixed_doc, path="doc.org")).to_dict()
    assert data["source"] == "doc.org"
    assert data["num_labels"] == 5
    assert data["labels"][0]["name"] == "sec-intro"
