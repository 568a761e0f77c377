import pytest
from offside.buffer import TextBuffer
from offside.errors import ScanFailure


def test_columns_expand_tabs():
    buf = TextBuffer("\tx = 1\n  y", tab_width=8)
    assert buf.column_of(1) == 8
    assert buf.line_col(9) == (1, 2)
    assert buf.offset_of(1, 2) == 9
    assert buf.move_to_column(7, 40) == buf.line_end(7)


def test_forward_line_reports_shortfall():
    buf = TextBuffer("a\nb\nc")
    assert buf.forward_line(0, 2) == (4, 0)
    assert buf.forward_line(4, 1) == (4, 1)
    assert buf.forward_line(2, -5) == (0, 4)


def test_unknown_literate_mode_rejected():
    with pytest.raises(ValueError):
        TextBuffer("x", literate="rst")


def test_bird_marker_is_skipped_for_indentation():
    buf = TextBuffer("> f x = x\n>   y\n>\nprose", literate="bird")
    line2 = buf.offset_of(1)
    assert buf.indentation_point(line2) == line2 + 4
    assert buf.current_indentation(line2) == 4
    assert buf.is_blank_line(buf.offset_of(2))
    assert buf.is_code_line(line2)
    assert not buf.is_code_line(buf.offset_of(3))


def test_bird_set_line_indentation_keeps_marker():
    buf = TextBuffer("> f x = x\n>   y", literate="bird")
    line2 = buf.offset_of(1)
    ip = buf.set_line_indentation(line2, 2)
    assert buf.text == "> f x = x\n> y"
    assert ip == line2 + 2
    assert buf.version == 1


def test_plain_set_line_indentation_and_edits():
    buf = TextBuffer("f =\n\t  x")
    ip = buf.set_line_indentation(4, 3)
    assert buf.text == "f =\n   x"
    assert ip == 7
    buf.insert(ip, "y ")
    buf.delete(ip, 1)
    assert buf.text == "f =\n    x"


def test_latex_code_blocks():
    text = "Intro\n\\begin{code}\nf = 1\n\\end{code}\nOutro"
    buf = TextBuffer(text, literate="latex")
    code = buf.offset_of(2)
    assert buf.is_code_line(code)
    assert not buf.is_code_line(0)
    assert not buf.is_code_line(buf.offset_of(4))
    assert buf.literate_code_start(code) == code


def test_skip_comments_both_ways():
    text = "f = 1 -- one\n{- two -}\n  g"
    buf = TextBuffer(text)
    assert buf.skip_comments_forward(5) == text.index("g")
    assert buf.skip_comments_backward(text.index("g")) == 5


def test_forward_sexp_skips_groups_and_fails_at_edge():
    buf = TextBuffer("(a (b) c) d")
    assert buf.forward_sexp(0) == 9
    assert buf.forward_sexp(9) == 11
    with pytest.raises(ScanFailure):
        buf.forward_sexp(11)
    with pytest.raises(ScanFailure):
        TextBuffer("(a b").forward_sexp(0)


def test_from_file_detects_bird_scripts(tmp_path):
    p = tmp_path / "Main.lhs"
    p.write_text("> main = pure ()\n", encoding="utf-8")
    assert TextBuffer.from_file(p).literate == "bird"
    assert TextBuffer.from_file(p, literate="none").literate == "none"
