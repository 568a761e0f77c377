# offside/engine.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from . import config as CFG
from .buffer import TextBuffer
from .classify import classify
from .contour import start_of_def, trace_contour
from .decision import IndentInfo, line_indentation
from .errors import NestingTooDeep, ScanFailure, UnsupportedOperation
from .models import IndentCandidate, IndentConfig, IndentContext, IndentResult
from .resolvers import (
    CLOSING_KEYWORD,
    after_keyword_column,
    closing_keyword,
    comment_indent,
    inside_paren,
    keyword_before,
    string_indent,
)
from .segment import segment

log = logging.getLogger(__name__)


def layout_indent_info(ctx: IndentContext, start: int, contour: Sequence[int], end: int) -> List[IndentCandidate]:
    """
    Candidates contributed by each contour line, outermost first.

    Each contour line is segmented up to `end`; its parts count as visible
    only up to the column where the next contour line starts.
    """
    buf = ctx.buffer
    line = classify(buf, end, start)
    ctx.first_lexeme = buf.lexeme_at(end)
    info = IndentInfo(buf, ctx.config.indent_step)

    for i, p in enumerate(contour):
        if i + 1 < len(contour):
            end_visible = buf.move_to_column(p, buf.column_of(contour[i + 1]))
        else:
            end_visible = end
        parts = segment(buf, p, end, start)
        line_indentation(ctx, info, line.type, parts, end_visible, end)
    return info.as_list()


def indentation_info(ctx: IndentContext, start: int, end: int) -> List[IndentCandidate]:
    """All candidates for text starting at end, within the definition starting at start."""
    if ctx.depth > ctx.config.max_nesting_depth:
        raise NestingTooDeep(ctx.config.max_nesting_depth)
    buf = ctx.buffer

    open_ = buf.string_span_containing(start, end)
    if open_ is not None:
        return string_indent(ctx, open_, end)

    open_ = buf.comment_span_containing(start, end)
    if open_ is not None:
        return comment_indent(ctx, open_, end, start)

    if CLOSING_KEYWORD.match(buf.text, end):
        found = closing_keyword(ctx, end, start)
        if found:
            return found

    kw = keyword_before(ctx, start, end)
    if kw is not None:
        return [IndentCandidate(after_keyword_column(ctx, kw, start))]

    open_ = buf.match_balanced_open_before(start, end)
    if open_ is not None:
        return inside_paren(ctx, open_, end)

    contour = trace_contour(buf, start, end, ctx.config)
    if contour:
        return layout_indent_info(ctx, start, contour, end)

    col = buf.column_of(start)
    top_col = 1 + ctx.config.bird_default_offset if buf.bird else 0
    if buf.bird and col == 1:
        # a bare '>' line gets the default blank run
        col = top_col
    elif buf.line_start(start) == buf.line_start(end) and buf.is_blank_line(end):
        # blank line with nothing above it to line up with
        col = top_col
    return [IndentCandidate(col)]


class Engine:
    """
    Per-buffer entry point of the indentation engine.

    Public API (used by the cycle controller, CLI and Flask app):
      * compute_indent_candidates(pos): candidates for pos's line
      * apply_candidate(pos, candidates, index, last_inserted_length): edit the line
      * indent_region(start, end): refused, the engine works line by line

    Every request re-scans the text from the start of the enclosing
    definition; nothing is cached between requests.
    """

    def __init__(self, buffer: TextBuffer, config: Optional[IndentConfig] = None, *, verbose: bool = False) -> None:
        if verbose or CFG.VERBOSE:
            logging.basicConfig(level=logging.INFO)
        self.buffer = buffer
        self.config = config or IndentConfig(literate=buffer.literate, tab_width=buffer.tab_width)

    # ------------- queries -------------

    def compute_indent_candidates(self, pos: int) -> IndentResult:
        buf = self.buffer
        if buf.literate != "none" and not buf.is_code_line(pos):
            log.info("line %d is not code; nothing to indent", buf.line_col(pos)[0] + 1)
            return IndentResult([], [])

        ctx = IndentContext(buf, self.config)
        end = buf.indentation_point(pos)
        start = start_of_def(buf, end, self.config)
        try:
            candidates = indentation_info(ctx, start, end)
        except ScanFailure as exc:
            log.warning("scan stopped early (%s); falling back to the definition column", exc)
            candidates = [IndentCandidate(buf.column_of(start))]
        log.info("line %d: %d candidate(s)", buf.line_col(pos)[0] + 1, len(candidates))
        return IndentResult(candidates, list(ctx.diagnostics))

    # ------------- edits -------------

    def apply_candidate(
        self,
        pos: int,
        candidates: Sequence[IndentCandidate],
        index: int,
        last_inserted_length: int = 0,
    ) -> int:
        """
        Re-indent pos's line to candidates[index], drop the text inserted by
        the previous step and insert the candidate's own text. Returns the
        position right after the inserted text.
        """
        cand = candidates[index]
        buf = self.buffer
        ip = buf.set_line_indentation(pos, cand.column)
        if last_inserted_length:
            buf.delete(ip, last_inserted_length)
        if cand.insert_text:
            buf.insert(ip, cand.insert_text)
            return ip + len(cand.insert_text)
        return ip

    def indent_region(self, start: int, end: int) -> None:
        raise UnsupportedOperation(
            "region indentation is not supported; indent each line on its own"
        )
