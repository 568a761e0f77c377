from offside import scan as S
from offside.buffer import TextBuffer
from offside.classify import classify


def test_line_comment_needs_a_bare_dash_run():
    assert S.line_comment_at("-- hi", 0)
    assert S.line_comment_at("x ---- hi", 2)
    assert not S.line_comment_at("x --> y", 2)
    assert not S.line_comment_at("x |-- y", 3)


def test_block_comments_nest():
    text = "{- a {- b -} c -} d"
    assert S.comment_stop(text, 0) == 17
    assert S.comment_stop("{- open", 0) == len("{- open") + 1


def test_scan_tracks_unclosed_brackets():
    assert S.scan("f (a, [b", 0, 8).innermost_open == 6
    text = 'x = "(" ++ ('
    assert S.scan(text, 0, len(text)).open_brackets == [11]


def test_char_literal_versus_prime():
    assert S.scan("f '(' x", 0, 7).open_brackets == []
    assert S.scan("f' (x", 0, 5).open_brackets == [3]


def test_scan_reports_open_string_and_comment():
    text = 'a = "abc\nb {- c'
    st = S.scan(text, 0, 7)
    assert st.string_start == 4
    st = S.scan(text, 9, len(text))
    assert st.comment_start == 11


def test_lexeme():
    assert S.lexeme("where x", 0) == "where"
    assert S.lexeme("-> y", 0) == "->"
    assert S.lexeme("( x", 0) == "("


def _kind(text: str, pos: int = 0, start: int = 0) -> str:
    return classify(TextBuffer(text), pos, start).type


def test_classify_line_types():
    assert _kind("   \nx") == "empty"
    assert _kind("foo x") == "ident"
    assert _kind("_ -> 0") == "ident"
    assert _kind("| x > 0") == "guard"
    assert _kind("|| y") == "other"
    assert _kind("= 1") == "rhs"
    assert _kind(":: Int") == "rhs"
    assert _kind("-> b") == "rhs"
    assert _kind("<- m") == "rhs"
    assert _kind("== y") == "other"
    assert _kind("=> a") == "other"
    assert _kind("42") == "other"


def test_classify_inside_comment():
    text = "{- abc\n x -}"
    assert _kind(text, 8, 0) == "comment"


def test_classify_records_marker_end():
    buf = TextBuffer("where  x")
    m = classify(buf, 0)
    assert (m.start, m.end, m.text) == (0, 7, "where")
    m = classify(TextBuffer("_foo' = 1"), 0)
    assert m.text == "_foo'"
