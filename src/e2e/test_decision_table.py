import pytest
from offside.buffer import TextBuffer
from offside.decision import Case, IndentInfo, find_case, line_indentation, no_otherwise, visibility_vector
from offside.errors import StructuralImpossible
from offside.models import ClauseParts, IndentCandidate, IndentConfig, IndentContext


def test_find_case_first_row_wins():
    assert find_case("101011") is Case.NAME_GUARD_RHS_AFTER
    assert find_case("111111") is Case.NAME_GUARD_RHS_AFTER
    assert find_case("110011") is Case.NAME_RHS_AFTER
    assert find_case("100000") is Case.NAME
    assert find_case("001011") is Case.GUARD_RHS_AFTER
    assert find_case("000010") is Case.RHS
    assert find_case("000000") is Case.IMPOSSIBLE
    assert find_case("010000") is None


def test_vector_honours_visibility_except_for_name():
    parts = ClauseParts(name=30, after_name=2, guard=4, after_guard=6, rhs_mark=12, after_rhs=14)
    assert visibility_vector(parts, 100) == "111111"
    assert visibility_vector(parts, 5) == "111000"
    assert visibility_vector(parts, 0) == "100000"
    assert visibility_vector(ClauseParts(rhs_mark=3), 10) == "000010"


def test_indent_info_never_repeats_a_pair():
    info = IndentInfo(TextBuffer("f x = 1"), 4)
    info.push_pos(0)
    info.push_pos(0, "f ")
    info.push_col(0)
    info.push_pos_offset(0)
    info.push_pos_offset(2, 2)
    assert info.as_list() == [
        IndentCandidate(0), IndentCandidate(0, "f "), IndentCandidate(4),
    ]


def test_otherwise_guard_detected():
    buf = TextBuffer("| otherwise = 1\n|  x = 2\n|\totherwise' = 3")
    assert not no_otherwise(buf, 0)
    assert no_otherwise(buf, 16)
    assert no_otherwise(buf, 25)


def _ctx(text: str) -> IndentContext:
    return IndentContext(TextBuffer(text), IndentConfig())


def test_all_absent_parts_are_a_structural_error():
    ctx = _ctx("")
    info = IndentInfo(ctx.buffer, 4)
    with pytest.raises(StructuralImpossible) as ei:
        line_indentation(ctx, info, "empty", ClauseParts(), 0, 0)
    assert ei.value.test == "000000"


def test_guard_line_falls_back_to_rhs_then_name():
    ctx = _ctx("data T = A")
    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "guard", ClauseParts(name=0, name_text="data", rhs_mark=7), 20, 20)
    assert info.as_list() == [IndentCandidate(7)]

    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "guard", ClauseParts(name=0, name_text="x"), 20, 20)
    assert info.as_list() == [IndentCandidate(4)]


def test_rhs_line_prefers_visible_marker():
    ctx = _ctx("f x | x > 0 = 1")
    parts = ClauseParts(name=0, name_text="f", after_name=2, guard=4, after_guard=6, rhs_mark=12, after_rhs=14)
    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "rhs", parts, 20, 20)
    assert info.as_list() == [IndentCandidate(12)]

    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "rhs", parts, 10, 20)
    assert info.as_list() == [IndentCandidate(8)]


def test_start_keyword_bypasses_table():
    ctx = _ctx("import Data.List")
    parts = ClauseParts(name=0, name_text="import", after_name=7)
    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "empty", parts, 16, 16)
    assert info.as_list() == [IndentCandidate(0)]

    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "other", parts, 16, 16)
    assert info.as_list() == [IndentCandidate(4)]


def test_type_signature_continuation_pushes_name_only():
    ctx = _ctx("f x = 1")
    ctx.first_lexeme = "::"
    parts = ClauseParts(name=0, name_text="f", after_name=2, rhs_mark=4, after_rhs=6)
    info = IndentInfo(ctx.buffer, 4)
    line_indentation(ctx, info, "ident", parts, 8, 8)
    assert info.as_list() == [IndentCandidate(0)]
