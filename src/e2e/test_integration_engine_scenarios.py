import pytest
from offside import Engine, IndentCandidate, IndentConfig, TextBuffer
from offside.errors import NestingTooDeep, UnsupportedOperation


def _cols(text: str, line: int, **kwargs) -> list[int]:
    return [c.column for c in _cands(text, line, **kwargs)]


def _cands(text: str, line: int, literate: str = "none", config: IndentConfig | None = None):
    buf = TextBuffer(text, literate=literate)
    eng = Engine(buf, config)
    return eng.compute_indent_candidates(buf.offset_of(line - 1)).candidates


@pytest.mark.e2e
def test_guard_line_aligns_with_first_guard():
    text = "f x | x > 0 = 1\n  | otherwise = 2"
    assert _cols(text, 2) == [4]


@pytest.mark.e2e
def test_blank_line_in_do_block_offers_every_level():
    text = "main = do\n  print 1\n  "
    # outermost first: definition column, its step, then the do-block column and its step
    assert _cols(text, 3) == [0, 4, 2, 6]


@pytest.mark.e2e
def test_blank_line_after_clause_offers_new_clause():
    cands = _cands("f x = 1\n", 2)
    assert cands == [IndentCandidate(0), IndentCandidate(0, "f "), IndentCandidate(6)]


@pytest.mark.e2e
def test_new_clause_of_another_function():
    assert _cols("f x = 1\ng", 2) == [0, 6]
    assert _cols("f x = 1\nf", 2) == [0]


@pytest.mark.e2e
def test_where_line_is_indented_one_step():
    assert _cols("f x = g x\n  where g = id", 2) == [4]


@pytest.mark.e2e
def test_data_constructors_line_up_under_equals():
    text = "data T = A\n  | B"
    assert _cols(text, 2) == [7]
    assert _cols("data T = A\n", 2) == [0, 7]


@pytest.mark.e2e
def test_keyword_on_its_own_line():
    assert _cols("f = g\n  where\n", 3) == [4]
    assert _cols("f x =\n  do\n", 3) == [4]


@pytest.mark.e2e
def test_hanging_of_uses_virtual_indentation():
    # `of` ends the line: the alternatives go two columns right of `case`
    assert _cols("f x = case x of\n", 2) == [8]


@pytest.mark.e2e
def test_bracket_content_column():
    assert _cols("foo = (bar,\n    baz)", 2) == [7]
    assert _cols("xs = [ 1\n     , 2\n     ]", 3) == [5]


@pytest.mark.e2e
def test_mismatched_punctuation_is_a_diagnostic():
    buf = TextBuffer("f = (a\n    ; b)")
    res = Engine(buf).compute_indent_candidates(buf.offset_of(1))
    assert res.candidates == [IndentCandidate(4)]
    assert len(res.diagnostics) == 1
    assert "Mismatched punctuation" in res.diagnostics[0]


@pytest.mark.e2e
def test_let_in_and_nested_case_of():
    assert _cols("r = let x = 1\n        y = 2\n    in x", 3) == [4]
    assert _cols("f = case case x of { A -> B }\n    of", 2) == [4]


@pytest.mark.e2e
def test_of_binds_to_the_innermost_open_case():
    text = "f = case a of\n  A -> case b\n    of"
    assert _cols(text, 3) == [7]


@pytest.mark.e2e
def test_type_signature_continuation_lines_up_with_the_name():
    assert _cols("f\n  :: Int -> Int", 2) == [0]
    assert _cols("f\n  ∷ Int → Int", 2) == [0]


@pytest.mark.e2e
def test_then_else_offset():
    text = "f x = if x\n  then 1\n  else 2"
    assert _cols(text, 3) == [6]
    assert _cols(text, 3, config=IndentConfig(then_else_offset=2)) == [8]


@pytest.mark.e2e
def test_string_gap_continuation():
    text = 'x = "abc\\\n    \\def"'
    assert _cols(text, 2) == [4]


@pytest.mark.e2e
def test_block_comment_text():
    assert _cols("{-  hello\ntext", 2) == [4]
    assert _cols("{- a\n-}", 2) == [1]


@pytest.mark.e2e
def test_comment_line_follows_code_below():
    text = "f = do\n  a\n  -- note\n  b\n"
    assert _cols(text, 3) == [2, 0]


@pytest.mark.e2e
def test_bird_script_defaults():
    cands = _cands("> f x = x\n>", 2, literate="bird")
    assert cands[0].column == 2
    assert _cols(">", 1, literate="bird") == [2]


@pytest.mark.e2e
def test_bird_prose_line_gets_nothing():
    assert _cands("prose\n> f = 1", 1, literate="bird") == []


@pytest.mark.e2e
def test_lone_blank_line_goes_to_top_column():
    assert _cols("   ", 1) == [0]
    assert _cols("", 1) == [0]


@pytest.mark.e2e
def test_nesting_cap():
    with pytest.raises(NestingTooDeep):
        _cands("f x = case x of\n", 2, config=IndentConfig(max_nesting_depth=0))


@pytest.mark.e2e
def test_region_indentation_is_refused():
    eng = Engine(TextBuffer("f = 1\n  g"))
    with pytest.raises(UnsupportedOperation):
        eng.indent_region(0, 9)
