from __future__ import annotations
from typing import Optional

from .buffer import TextBuffer
from .classify import classify
from .errors import ScanFailure
from .models import ClauseParts
from .scan import CLOSE_CHARS


def next_symbol(buf: TextBuffer, pos: int, end: int) -> int:
    """
    Move past the expression at pos (a bracketed group counts as one) and
    the blanks after it. Raises ScanFailure when the move runs off the buffer.
    """
    i = pos
    while i < end and buf.char_at(i) in CLOSE_CHARS:
        i += 1
    if i < end:
        i = buf.forward_sexp(i)
        i = buf.skip_blanks_forward(i, end)
    return min(i, end)


def _next_symbol_safe(buf: TextBuffer, pos: int, end: int) -> int:
    try:
        return next_symbol(buf, pos, end)
    except ScanFailure:
        return end


def segment(buf: TextBuffer, start: int, end: int, def_start: Optional[int] = None) -> ClauseParts:
    """
    Split the text in [start, end) into the parts of one value/type definition:

        name [after_name ...] [| guard after_guard ...] [= after_rhs ...]

    Only the first position of each part is recorded. `def_start` is where
    comment detection starts scanning (defaults to `start`).
    """
    origin = start if def_start is None else def_start
    name = name_text = after_name = None
    guard = after_guard = rhs_mark = after_rhs = None

    i = start
    m = classify(buf, i, origin, end)
    kind = m.type
    if kind in ("ident", "other"):
        if kind == "ident":
            name, name_text = m.start, m.text
            i = min(m.end, end)
        else:
            while i < end and buf.char_at(i) in " \t":
                i += 1
            name = i
            i = _next_symbol_safe(buf, i, end)
        while i < end:
            m = classify(buf, i, origin, end)
            kind = m.type
            if kind not in ("ident", "other"):
                break
            if after_name is None:
                after_name = i
            i = _next_symbol_safe(buf, i, end)

    if i < end and kind == "guard":
        guard = m.start
        i = min(m.end, end)
        while i < end:
            m = classify(buf, i, origin, end)
            kind = m.type
            if kind == "rhs":
                break
            if after_guard is None:
                after_guard = i
            i = _next_symbol_safe(buf, i, end)

    if i < end and kind == "rhs":
        rhs_mark = m.start
        i = min(m.end, end)
        if i < end:
            after_rhs = i

    return ClauseParts(
        name=name,
        name_text=name_text,
        after_name=after_name,
        guard=guard,
        after_guard=after_guard,
        rhs_mark=rhs_mark,
        after_rhs=after_rhs,
    )
