import pytest
from offside import IndentConfig, TextBuffer, align_definition


@pytest.mark.e2e
def test_guards_then_right_hand_sides_line_up():
    buf = TextBuffer("f x | x > 0 = 1\n  | otherwise = 2\n")
    assert align_definition(buf, 0, "guard") == 1
    assert buf.text == "f x | x > 0 = 1\n    | otherwise = 2\n"

    assert align_definition(buf, 0, "rhs") == 1
    assert buf.text == "f x | x > 0     = 1\n    | otherwise = 2\n"

    # already aligned: nothing to do
    assert align_definition(buf, 0, "rhs") == 0


@pytest.mark.e2e
def test_rhs_of_sibling_clauses():
    buf = TextBuffer("f 0 = 1\nf nn = 2\n")
    assert align_definition(buf, buf.offset_of(1), "rhs") == 1
    assert buf.text == "f 0  = 1\nf nn = 2\n"


@pytest.mark.e2e
def test_other_definitions_are_untouched():
    text = "f 0 = 1\ng nn = 2\n"
    buf = TextBuffer(text)
    assert align_definition(buf, 0, "rhs") == 0
    assert buf.text == text


@pytest.mark.e2e
def test_minimum_rhs_column():
    buf = TextBuffer("f x = 1\n")
    cfg = IndentConfig(rhs_align_column=10)
    assert align_definition(buf, 0, "rhs", cfg) == 1
    assert buf.text == "f x       = 1\n"


@pytest.mark.e2e
def test_unknown_alignment_kind():
    with pytest.raises(ValueError):
        align_definition(TextBuffer("f = 1"), 0, "where")
