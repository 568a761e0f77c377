# offside/decision.py
"""
Case table mapping a segmented clause to indentation candidates.

A clause is summarised by a six-character test vector, one character per
part (name, after-name, guard, after-guard, rhs marker, after-rhs). A part
counts as present only when it lies before the visibility boundary, the
point of the contour line that the next contour line already hides. The
name is exempt: it is always visible. The vector selects one of the
numbered cases below. Each line type (empty, ident, guard, rhs, other)
then prescribes which part columns to propose.
"""

from __future__ import annotations
import re
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple

from .buffer import TextBuffer
from .config import START_KEYWORDS
from .errors import StructuralImpossible
from .models import ClauseParts, IndentCandidate, IndentContext

# offset used after a bare guard / rhs marker
SMALL_OFFSET = 2

_OTHERWISE = re.compile(r"\|[ \t]*otherwise(?![\w'])")


class Case(IntEnum):
    NAME_GUARD_RHS_AFTER = 1
    NAME_GUARD_RHS = 2
    NAME_GUARD_AFTER = 3
    NAME_GUARD = 4
    NAME_RHS_AFTER = 5
    NAME_RHS = 6
    NAME_AFTER = 7
    NAME = 8
    GUARD_RHS_AFTER = 9
    GUARD_RHS = 10
    GUARD_AFTER = 11
    GUARD = 12
    RHS_AFTER = 13
    RHS = 14
    IMPOSSIBLE = 15


# /* ~~~ first matching row wins; '.' matches either bit ~~~ */
CASE_TABLE: Tuple[Tuple[Case, str], ...] = (
    (Case.NAME_GUARD_RHS_AFTER, "1.1.11"),
    (Case.NAME_GUARD_RHS, "1.1.10"),
    (Case.NAME_GUARD_AFTER, "1.1100"),
    (Case.NAME_GUARD, "1.1000"),
    (Case.NAME_RHS_AFTER, "1.0011"),
    (Case.NAME_RHS, "1.0010"),
    (Case.NAME_AFTER, "110000"),
    (Case.NAME, "100000"),
    (Case.GUARD_RHS_AFTER, "001.11"),
    (Case.GUARD_RHS, "001.10"),
    (Case.GUARD_AFTER, "001100"),
    (Case.GUARD, "001000"),
    (Case.RHS_AFTER, "000011"),
    (Case.RHS, "000010"),
    (Case.IMPOSSIBLE, "000000"),
)


def _row_matches(pattern: str, test: str) -> bool:
    return len(pattern) == len(test) and all(p in (".", t) for p, t in zip(pattern, test))


def find_case(test: str) -> Optional[Case]:
    """Row of the case table matching `test`, or None."""
    for case, pattern in CASE_TABLE:
        if _row_matches(pattern, test):
            return case
    return None


def visibility_vector(parts: ClauseParts, end_visible: int) -> str:
    def bit(pos: Optional[int]) -> str:
        return "1" if pos is not None and pos < end_visible else "0"

    return (
        ("1" if parts.name is not None else "0")
        + bit(parts.after_name)
        + bit(parts.guard)
        + bit(parts.after_guard)
        + bit(parts.rhs_mark)
        + bit(parts.after_rhs)
    )


class IndentInfo:
    """Ordered candidate list of one request; a (column, text) pair is kept once."""

    def __init__(self, buf: TextBuffer, step: int) -> None:
        self.buf = buf
        self.step = step
        self._items: List[IndentCandidate] = []

    def push_col(self, column: int, text: Optional[str] = None) -> None:
        cand = IndentCandidate(max(0, column), text)
        if cand not in self._items:
            self._items.append(cand)

    def push_pos(self, pos: int, text: Optional[str] = None) -> None:
        self.push_col(self.buf.column_of(pos), text)

    def push_pos_offset(self, pos: int, offset: Optional[int] = None) -> None:
        self.push_col(self.buf.column_of(pos) + (self.step if offset is None else offset))

    def extend(self, candidates) -> None:
        for c in candidates:
            self.push_col(c.column, c.insert_text)

    def __iter__(self) -> Iterator[IndentCandidate]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> List[IndentCandidate]:
        return list(self._items)


def no_otherwise(buf: TextBuffer, guard: int) -> bool:
    """False when the guard at `guard` is the catch-all `| otherwise`."""
    return _OTHERWISE.match(buf.text, guard) is None


def _lookup(line_type: str, parts: ClauseParts, end_visible: int) -> Case:
    test = visibility_vector(parts, end_visible)
    case = find_case(test)
    if case is None or case is Case.IMPOSSIBLE:
        raise StructuralImpossible(line_type, test)
    return case


def _start_keyword(info: IndentInfo, parts: ClauseParts, line_type: str) -> bool:
    if parts.name_text not in START_KEYWORDS:
        return False
    if line_type == "other":
        info.push_pos_offset(parts.name)
        return True
    info.push_pos(parts.name)
    if parts.name_text == "data":
        # constructors line up under `=` once it exists
        if parts.rhs_mark is not None:
            info.push_pos(parts.rhs_mark)
        else:
            info.push_pos_offset(parts.name)
    return True


# ------------- per line type -------------

def _empty(info: IndentInfo, buf: TextBuffer, p: ClauseParts, case: Case, last: bool) -> None:
    clause = f"{p.name_text} " if p.name_text else None

    def push_guard() -> None:
        if no_otherwise(buf, p.guard):
            info.push_pos(p.guard, "| ")

    if case is Case.NAME_GUARD_RHS_AFTER:
        info.push_pos(p.name)
        info.push_pos(p.name, clause)
        push_guard()
        info.push_pos(p.after_rhs)
    elif case is Case.NAME_GUARD_RHS:
        info.push_pos(p.name)
        info.push_pos(p.name, clause)
        push_guard()
        if last:
            info.push_pos_offset(p.guard)
    elif case is Case.NAME_GUARD_AFTER:
        info.push_pos(p.name)
        info.push_pos(p.after_guard)
        if last:
            info.push_pos_offset(p.name)
    elif case is Case.NAME_GUARD:
        info.push_pos(p.name)
        info.push_pos(p.guard)
        if last:
            info.push_pos_offset(p.guard, SMALL_OFFSET)
    elif case is Case.NAME_RHS_AFTER:
        info.push_pos(p.name)
        sign = buf.char_at(p.rhs_mark)
        if (p.after_name is not None and sign == "=") or sign in (":", "∷"):
            info.push_pos(p.name, clause)
        info.push_pos(p.after_rhs)
    elif case is Case.NAME_RHS:
        info.push_pos(p.name)
        info.push_pos(p.name, clause)
        if last:
            info.push_pos_offset(p.name)
    elif case in (Case.NAME_AFTER, Case.NAME):
        info.push_pos(p.name)
        info.push_pos_offset(p.name)
    elif case is Case.GUARD_RHS_AFTER:
        push_guard()
        info.push_pos(p.after_rhs)
    elif case is Case.GUARD_RHS:
        push_guard()
        if last:
            info.push_pos_offset(p.guard)
    elif case is Case.GUARD_AFTER:
        push_guard()
        info.push_pos(p.after_guard)
    elif case is Case.GUARD:
        push_guard()
        if last:
            info.push_pos_offset(p.guard, SMALL_OFFSET)
    elif case is Case.RHS_AFTER:
        info.push_pos(p.after_rhs)
    elif case is Case.RHS:
        if last:
            info.push_pos_offset(p.rhs_mark, SMALL_OFFSET)


def _ident(info: IndentInfo, p: ClauseParts, case: Case, last: bool, first: str) -> None:
    is_where = first == "where"
    diff_first = p.name_text is None or p.name_text != first

    if case is Case.NAME_GUARD_RHS_AFTER:
        if is_where:
            info.push_pos(p.guard)
        else:
            info.push_pos(p.name)
            if diff_first:
                info.push_pos(p.after_rhs)
    elif case is Case.NAME_GUARD_RHS:
        if is_where:
            info.push_pos(p.guard)
        else:
            info.push_pos(p.name)
            if last:
                info.push_pos_offset(p.guard)
    elif case is Case.NAME_GUARD_AFTER:
        if is_where:
            info.push_pos_offset(p.guard)
        else:
            info.push_pos(p.name)
            if diff_first:
                info.push_pos(p.after_guard)
    elif case is Case.NAME_GUARD:
        if is_where:
            info.push_pos(p.guard)
        else:
            info.push_pos(p.name)
            if last:
                info.push_pos_offset(p.guard, SMALL_OFFSET)
    elif case is Case.NAME_RHS_AFTER:
        if is_where:
            info.push_pos_offset(p.name)
        else:
            info.push_pos(p.name)
            if diff_first:
                info.push_pos(p.after_rhs)
    elif case is Case.NAME_RHS:
        if is_where:
            info.push_pos_offset(p.name)
        else:
            info.push_pos(p.name)
            if last:
                info.push_pos_offset(p.name)
    elif case is Case.NAME_AFTER:
        if is_where:
            info.push_pos_offset(p.name)
        else:
            info.push_pos(p.name)
            if last:
                info.push_pos(p.after_name)
    elif case is Case.NAME:
        if is_where:
            info.push_pos_offset(p.name)
        else:
            info.push_pos(p.name)
    elif case is Case.GUARD_RHS_AFTER:
        if is_where:
            info.push_pos_offset(p.guard)
        elif diff_first:
            info.push_pos(p.after_rhs)
    elif case is Case.GUARD_RHS:
        if is_where or last:
            info.push_pos_offset(p.guard)
    elif case is Case.GUARD_AFTER:
        if is_where:
            info.push_pos_offset(p.guard)
        elif diff_first:
            info.push_pos(p.after_guard)
    elif case is Case.GUARD:
        if is_where:
            info.push_pos_offset(p.guard)
        elif last:
            info.push_pos_offset(p.guard, SMALL_OFFSET)
    elif case is Case.RHS_AFTER:
        if is_where:
            info.push_pos_offset(p.rhs_mark)
        elif diff_first:
            info.push_pos(p.after_rhs)
    elif case is Case.RHS:
        if is_where:
            info.push_pos_offset(p.rhs_mark)
        elif last:
            info.push_pos_offset(p.rhs_mark, SMALL_OFFSET)


def _other(info: IndentInfo, p: ClauseParts, case: Case, last: bool) -> None:
    if case in (Case.NAME_GUARD_RHS_AFTER, Case.NAME_RHS_AFTER,
                Case.GUARD_RHS_AFTER, Case.RHS_AFTER):
        info.push_pos(p.after_rhs)
    elif case in (Case.NAME_GUARD_RHS, Case.GUARD_RHS):
        if last:
            info.push_pos_offset(p.guard)
        else:
            info.push_pos_offset(p.rhs_mark, SMALL_OFFSET)
    elif case in (Case.NAME_GUARD_AFTER, Case.GUARD_AFTER):
        info.push_pos(p.after_guard)
    elif case in (Case.NAME_GUARD, Case.GUARD):
        info.push_pos_offset(p.guard, SMALL_OFFSET)
    elif case in (Case.NAME_RHS, Case.RHS):
        info.push_pos_offset(p.rhs_mark, SMALL_OFFSET)
    elif case is Case.NAME_AFTER:
        info.push_pos(p.after_name)
    elif case is Case.NAME:
        info.push_pos_offset(p.name)


def _guard(info: IndentInfo, buf: TextBuffer, p: ClauseParts, end_visible: int) -> None:
    if p.guard is not None and p.guard < end_visible and no_otherwise(buf, p.guard):
        info.push_pos(p.guard)
    elif p.rhs_mark is not None:
        # probably the `=` of a data declaration
        info.push_pos(p.rhs_mark)
    elif p.name is not None:
        info.push_pos_offset(p.name)


def _rhs(info: IndentInfo, p: ClauseParts, end_visible: int) -> None:
    if p.rhs_mark is not None and p.rhs_mark < end_visible:
        info.push_pos(p.rhs_mark)
    elif p.guard is not None and p.guard < end_visible:
        info.push_pos_offset(p.guard)
    elif p.name is not None:
        info.push_pos_offset(p.name)


def line_indentation(
    ctx: IndentContext,
    info: IndentInfo,
    line_type: str,
    parts: ClauseParts,
    end_visible: int,
    end: int,
) -> None:
    """
    Push the candidates that one contour line contributes for a line of
    type `line_type`. `end` is the start of the line being indented; the
    contour line is the last one when its visibility reaches `end`.
    """
    buf = ctx.buffer
    last = end_visible >= end

    if line_type in ("ident", "rhs") and ctx.first_lexeme in ("::", "∷"):
        # continuation of a type signature
        if parts.name is not None:
            info.push_pos(parts.name)
        return
    if line_type == "guard":
        _guard(info, buf, parts, end_visible)
        return
    if line_type == "rhs":
        _rhs(info, parts, end_visible)
        return

    kind = line_type if line_type in ("empty", "ident") else "other"
    if _start_keyword(info, parts, kind):
        return

    case = _lookup(kind, parts, end_visible)
    if kind == "empty":
        _empty(info, buf, parts, case, last)
    elif kind == "ident":
        _ident(info, parts, case, last, ctx.first_lexeme)
    else:
        _other(info, parts, case, last)
