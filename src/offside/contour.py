from __future__ import annotations
import logging
from typing import List

from .buffer import TextBuffer
from .models import IndentConfig

log = logging.getLogger(__name__)


def _is_comment_line(buf: TextBuffer, ip: int, origin: int) -> bool:
    return buf.comment_starts_at(ip) or buf.comment_span_containing(origin, ip) is not None


def start_of_def(buf: TextBuffer, pos: int, config: IndentConfig) -> int:
    """
    Position where the definition enclosing pos starts.

    A definition starts on a line indented to the top column (0, or the
    Bird default in a Bird script). Deeper lines and, unless disabled,
    blank lines are walked over; the walk never leaves the current
    literate code block. Leading comments are skipped.
    """
    code_start = buf.literate_code_start(pos)
    top_col = 1 + config.bird_default_offset if buf.bird else 0

    cur_bol = buf.line_start(pos)
    bol, short = buf.forward_line(cur_bol, -1)
    if short:
        bol = cur_bol
    while bol > code_start:
        blank = buf.is_blank_line(bol)
        deeper = buf.current_indentation(bol) > top_col
        if config.look_past_empty_lines:
            keep_going = deeper or blank
        else:
            keep_going = deeper and not blank
        if not keep_going:
            break
        prev, short = buf.forward_line(bol, -1)
        if short:
            break
        bol = prev
    if buf.is_blank_line(bol) and bol < cur_bol:
        bol, _ = buf.forward_line(bol, 1)

    origin = buf.indentation_point(bol)
    first = buf.skip_comments_forward(origin)
    return origin if first > pos else first


def trace_contour(buf: TextBuffer, start: int, end: int, config: IndentConfig) -> List[int]:
    """
    Line starts bounding the layout block that precedes end, outermost first.

    Walking backward from the code before `end`, a line is recorded when its
    indentation is strictly less than every line recorded so far (the bound
    starts at the column where that code ends). Blank and comment lines are
    passed over, or stop the walk when look_past_empty_lines is off.
    """
    if start >= end:
        return []
    pos = buf.skip_comments_backward(end, start)
    if pos <= start:
        return []
    cur_col = buf.column_of(pos)
    contour: List[int] = []
    bol = buf.line_start(pos)
    while cur_col > 0:
        if buf.literate != "none" and not buf.is_code_line(bol):
            break
        ip = buf.indentation_point(bol)
        if ip < start:
            break
        if buf.is_blank_line(bol):
            if not config.look_past_empty_lines:
                break
        elif not _is_comment_line(buf, ip, start):
            col = buf.column_of(ip)
            if col < cur_col:
                contour.insert(0, ip)
                cur_col = col
        prev, short = buf.forward_line(bol, -1)
        if short:
            break
        bol = prev
    log.debug("contour %s..%s -> %s", start, end, contour)
    return contour
