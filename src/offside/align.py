# offside/align.py
"""
Align the guards or the right-hand sides of one definition.

The definition is the run of top-level clauses sharing the name of the
clause under the cursor. Its clause heads and guard lines are padded with
spaces so that their `|` (or `=`/`->`) markers share one column: the
rightmost marker, or `rhs_align_column` when that is further right.
"""

from __future__ import annotations
import logging
from typing import Iterator, List, Optional

from .buffer import TextBuffer
from .classify import classify
from .models import IndentConfig
from .segment import segment

log = logging.getLogger(__name__)


def _line_starts(buf: TextBuffer) -> Iterator[int]:
    bol = 0
    while True:
        yield bol
        bol, short = buf.forward_line(bol, 1)
        if short:
            return


def _clauses(buf: TextBuffer, top_col: int) -> List[List[int]]:
    """Top-level clauses as lists of indentation points, continuation lines included."""
    clauses: List[List[int]] = []
    for bol in _line_starts(buf):
        if not buf.is_code_line(bol) or buf.is_blank_line(bol):
            continue
        ip = buf.indentation_point(bol)
        if buf.comment_starts_at(ip) or buf.comment_span_containing(0, ip) is not None:
            continue
        if buf.column_of(ip) <= top_col or not clauses:
            clauses.append([ip])
        else:
            clauses[-1].append(ip)
    return clauses


def _name(buf: TextBuffer, ip: int) -> Optional[str]:
    return segment(buf, ip, buf.line_end(ip)).name_text


def align_definition(buf: TextBuffer, pos: int, kind: str, config: Optional[IndentConfig] = None) -> int:
    """Pad the definition around pos so its `kind` markers line up; returns the number of lines changed."""
    if kind not in ("guard", "rhs"):
        raise ValueError(f"kind must be 'guard' or 'rhs', not {kind!r}")
    config = config or IndentConfig(literate=buf.literate, tab_width=buf.tab_width)
    top_col = 1 + config.bird_default_offset if buf.bird else 0

    clauses = _clauses(buf, top_col)
    here = [i for i, c in enumerate(clauses) if buf.line_start(c[0]) <= pos]
    if not here:
        return 0
    lo = hi = here[-1]
    name = _name(buf, clauses[lo][0])
    if name is not None:
        while lo > 0 and _name(buf, clauses[lo - 1][0]) == name:
            lo -= 1
        while hi + 1 < len(clauses) and _name(buf, clauses[hi + 1][0]) == name:
            hi += 1

    marks: List[int] = []
    sign = None
    for clause in clauses[lo:hi + 1]:
        for ip in clause:
            if ip != clause[0] and classify(buf, ip).type != "guard":
                continue
            parts = segment(buf, ip, buf.line_end(ip))
            mark = parts.guard if kind == "guard" else parts.rhs_mark
            if mark is None:
                continue
            text = buf.lexeme_at(mark)
            if sign is None:
                sign = text
            if text == sign:
                marks.append(mark)

    if not marks:
        return 0
    target = max(buf.column_of(m) for m in marks)
    if kind == "rhs":
        target = max(target, config.rhs_align_column)

    changed = 0
    for mark in sorted(marks, reverse=True):
        pad = target - buf.column_of(mark)
        if pad > 0:
            buf.insert(mark, " " * pad)
            changed += 1
    log.info("aligned %d %s marker(s) at column %d", changed, kind, target)
    return changed
