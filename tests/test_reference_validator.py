"""
Tests for per-label reference validation.
"""

from labelref.linkers.reference_markers import ReferenceMarker
from labelref.linkers.reference_validator import ReferenceValidator, ValidityStatus
from labelref.parsers.label_indexer import LabelIndexer


def statuses(results):
    return [r.status for r in results]


def test_mixed_valid_and_invalid_labels():
    index = LabelIndexer().build_index("<<good>>\n")
    marker = ReferenceMarker.from_path("cref", "good,bad")
    results = ReferenceValidator().validate(marker, index)

    assert statuses(results) == [ValidityStatus.VALID, ValidityStatus.INVALID]
    assert [r.index for r in results] == [0, 1]
    assert results[0].position.offset == 0
    assert results[1].position is None


def test_plain_sequence_path():
    index = LabelIndexer().build_index("#+name: a\n")
    results = ReferenceValidator().validate(["a"], index)
    assert results[0].is_valid


def test_malformed_entries_do_not_stop_evaluation():
    index = LabelIndexer().build_index("<<a>> <<c>>")
    results = ReferenceValidator().validate(ReferenceMarker.from_path("cref", "a,,c,b d"), index)
    assert statuses(results) == [
        ValidityStatus.VALID,
        ValidityStatus.MALFORMED,
        ValidityStatus.VALID,
        ValidityStatus.MALFORMED,
    ]


def test_empty_path_is_malformed():
    index = LabelIndexer().build_index("")
    (result,) = ReferenceValidator().validate([], index)
    assert result.status is ValidityStatus.MALFORMED


def test_declared_target_with_spaces_is_valid():
    index = LabelIndexer().build_index("<<first target>>")
    (result,) = ReferenceValidator().validate(["first target"], index)
    assert result.is_valid


def test_membership_is_case_sensitive():
    index = LabelIndexer().build_index("<<Fig1>>")
    (result,) = ReferenceValidator().validate(["fig1"], index)
    assert result.status is ValidityStatus.INVALID


def test_invalid_labels_helper():
    index = LabelIndexer().build_index("<<a>>")
    bad = ReferenceValidator().invalid_labels(["a", "b", "c"], index)
    assert [v.name for v in bad] == ["b", "c"]
    assert bad[0].to_dict() == {"name": "b", "status": "invalid", "index": 1, "position": None}
