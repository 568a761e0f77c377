import pytest
import offside
from offside import CycleController, Engine, TextBuffer


def _line(buf: TextBuffer, n: int) -> str:
    bol = buf.offset_of(n - 1)
    return buf.substr(bol, buf.line_end(bol))


@pytest.mark.e2e
def test_cycle_visits_each_candidate_once_per_round():
    buf = TextBuffer("main = do\n  print 1\n")
    ctl = CycleController(buf)
    pos = buf.offset_of(2)
    seen = []
    for _ in range(5):
        r = ctl.cycle_indent(pos)
        assert r.applied
        seen.append((r.index, _line(buf, 3)))
        pos = r.point
    assert seen == [(0, ""), (1, "    "), (2, "  "), (3, "      "), (0, "")]
    assert ctl.message == "Indent cycle (4)..."


@pytest.mark.e2e
def test_cycle_replaces_previously_inserted_text():
    buf = TextBuffer("f x = 1\n")
    ctl = CycleController(buf)
    pos = buf.offset_of(1)
    lines = []
    for _ in range(4):
        r = ctl.cycle_indent(pos)
        lines.append(_line(buf, 2))
        pos = r.point
    assert lines == ["", "f ", "      ", ""]


@pytest.mark.e2e
def test_other_command_restarts_the_cycle():
    buf = TextBuffer("main = do\n  print 1\n")
    ctl = CycleController(buf)
    r = ctl.cycle_indent(buf.offset_of(2))
    r = ctl.cycle_indent(r.point)
    assert r.index == 1
    ctl.note_command("self-insert")
    r = ctl.cycle_indent(r.point)
    assert r.index == 0 and _line(buf, 3) == ""


@pytest.mark.e2e
def test_sole_candidate_message_and_caret_kept_in_code():
    buf = TextBuffer("f x | x > 0 = 1\n| otherwise = 2")
    ctl = CycleController(buf)
    caret = buf.offset_of(1) + 2  # on "otherwise"
    r = ctl.cycle_indent(caret)
    assert _line(buf, 2) == "    | otherwise = 2"
    assert ctl.message == "Sole indentation"
    assert r.point == buf.offset_of(1) + 6


@pytest.mark.e2e
def test_applying_first_candidate_twice_changes_nothing():
    buf = TextBuffer("f x | x > 0 = 1\n| otherwise = 2")
    eng = Engine(buf)
    pos = buf.offset_of(1)
    eng.apply_candidate(pos, eng.compute_indent_candidates(pos).candidates, 0)
    once = buf.text
    eng.apply_candidate(pos, eng.compute_indent_candidates(pos).candidates, 0)
    assert buf.text == once


@pytest.mark.e2e
def test_module_level_cycle_keeps_one_controller_per_buffer():
    buf = TextBuffer("main = do\n  print 1\n")
    r1 = offside.cycle_indent(buf, buf.offset_of(2))
    r2 = offside.cycle_indent(buf, r1.point)
    assert (r1.index, r2.index) == (0, 1)
    assert offside.controller_for(buf) is offside.controller_for(buf)
    other = TextBuffer("main = do\n  print 1\n")
    assert offside.cycle_indent(other, other.offset_of(2)).index == 0


@pytest.mark.e2e
def test_literate_prose_is_left_alone():
    buf = TextBuffer("prose\n> f = 1", literate="bird")
    r = CycleController(buf).cycle_indent(0)
    assert not r.applied
    assert buf.text == "prose\n> f = 1"


@pytest.mark.e2e
def test_caret_follows_each_inserted_text():
    buf = TextBuffer("f x | x > 0 = 1\n")
    ctl = CycleController(buf)
    bol = buf.offset_of(1)
    pos = bol
    steps = []
    for _ in range(3):
        r = ctl.cycle_indent(pos)
        steps.append((_line(buf, 2), r.point - bol))
        pos = r.point
    assert steps == [("", 0), ("f ", 2), ("    | ", 6)]


@pytest.mark.e2e
def test_edit_between_presses_restarts_the_cycle():
    buf = TextBuffer("main = do\n  print 1\n")
    ctl = CycleController(buf)
    r = ctl.cycle_indent(buf.offset_of(2))
    r = ctl.cycle_indent(r.point)
    assert r.index == 1
    buf.set_text(buf.text + "\n")
    r = ctl.cycle_indent(r.point)
    assert r.index == 0 and _line(buf, 3) == ""
