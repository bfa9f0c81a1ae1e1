import pytest

from essay_review.core.errors import InvalidCorrection
from essay_review.services.anchors import (
    Anchor,
    Correction,
    anchor_selection,
    highlight_segments,
    locate_quote,
    ordered_for_rendering,
)

CONTENT = "The cat sat. The cat ran away."


def test_create_with_selection():
    c = Correction.create(CONTENT, "grammar", "Fix this", "cat sat", 4, 11)
    assert (c.text_start_index, c.text_end_index) == (4, 11)
    assert c.to_dict() == {
        "category": "grammar",
        "selectedText": "cat sat",
        "textStartIndex": 4,
        "textEndIndex": 11,
        "comment": "Fix this",
    }


def test_create_without_selection_defaults_to_zero():
    c = Correction.create(CONTENT, "structure", "Add a conclusion", text_start_index=5, text_end_index=9)
    assert c.selected_text == ""
    assert (c.text_start_index, c.text_end_index) == (0, 0)


def test_create_derives_end_from_selection():
    c = Correction.create(CONTENT, "style", "Vague", "ran away", 21)
    assert c.text_end_index == 29


def test_create_without_offsets_anchors_first_occurrence():
    c = Correction.create(CONTENT, "grammar", "Which cat?", "cat")
    assert (c.text_start_index, c.text_end_index) == (4, 7)
    assert CONTENT[c.text_start_index:c.text_end_index] == c.selected_text


def test_create_keeps_explicit_later_occurrence():
    c = Correction.create(CONTENT, "grammar", "Second cat", "cat", 17)
    assert (c.text_start_index, c.text_end_index) == (17, 20)


@pytest.mark.parametrize(
    "category, comment, selected, start, end",
    [
        ("spelling", "bad category", "The", 0, 3),
        ("grammar", "   ", "The", 0, 3),
        ("grammar", "out of range", "tail", len(CONTENT), len(CONTENT) + 4),
        ("grammar", "reversed", "The", 5, 2),
        ("grammar", "wrong span", "The", 4, 7),
        ("grammar", "span longer than selection", "The", 0, 7),
        ("grammar", "not in content", "dog", None, None),
        ("grammar", "end does not match", "cat", None, 9),
    ],
)
def test_create_rejects_invalid(category, comment, selected, start, end):
    with pytest.raises(InvalidCorrection):
        Correction.create(CONTENT, category, comment, selected, start, end)


def test_anchor_selection():
    assert anchor_selection(CONTENT, "ran away") == Anchor(21, 29)
    assert anchor_selection(CONTENT, "The", 13) == Anchor(13, 16)
    with pytest.raises(InvalidCorrection):
        anchor_selection(CONTENT, "The", 14)


def test_locate_quote_uses_first_occurrence():
    anchor = locate_quote(CONTENT, "The cat")
    assert (anchor.start, anchor.end) == (0, 7)
    assert CONTENT[anchor.start:anchor.end] == "The cat"


def test_locate_quote_missing_or_empty():
    assert locate_quote(CONTENT, "dog") is None
    assert locate_quote(CONTENT, "") is None


def test_rendering_order_is_stable_on_ties():
    a = Correction("grammar", "a", "The", 0, 3)
    b = Correction("style", "b", "The cat", 0, 7)
    c = Correction("clarity", "c", "sat", 8, 11)
    assert ordered_for_rendering([c, a, b]) == [a, b, c]


def test_highlight_segments_first_applied_wins():
    first = Correction("grammar", "first", "The cat", 0, 7)
    overlapping = Correction("style", "overlap", "cat sat", 4, 11)
    later = Correction("clarity", "later", "ran", 21, 24)

    segments = highlight_segments(CONTENT, [later, overlapping, first])

    assert "".join(s.text for s in segments) == CONTENT
    highlighted = [s.correction for s in segments if s.correction is not None]
    assert highlighted == [first, later]


def test_highlight_segments_without_corrections():
    segments = highlight_segments(CONTENT, [Correction("content", "general note")])
    assert len(segments) == 1
    assert segments[0].text == CONTENT
    assert segments[0].correction is None
