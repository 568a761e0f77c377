# offside/resolvers.py
"""
Indentation of lines that the layout rule alone does not decide:

- text inside a string or comment, or a line starting with a comment;
- closing keywords (`in`, `of`, `then`, `else`) matched with their opener;
- a line following a block keyword (`where`, `do`, `of`, `{`, ...);
- a line inside an unclosed bracket.

Hanging keywords (a keyword ending a non-empty line) are measured from
their virtual indentation: the column the keyword would get on a line of
its own.
"""

from __future__ import annotations
import logging
import re
from typing import Callable, List, Optional, Tuple

from .contour import start_of_def, trace_contour
from .decision import IndentInfo
from .errors import ScanFailure
from .models import IndentCandidate, IndentContext
from .scan import CLOSE_CHARS, SYMBOL_CHARS, is_ident_char

log = logging.getLogger(__name__)

CLOSING_KEYWORD = re.compile(r"(?:in|of|then|else)(?![\w'])")

# /* ~~~ first letter of the closing keyword -> (opener, closer) ~~~ */
_PAIRS = {
    "i": ("let", "in"),
    "o": ("case", "of"),
    "t": ("if", "then"),
    "e": ("if", "else"),
}

_COMMENT_LEAD = re.compile(r"[-{]-[ \t]*")
_DASHES = re.compile(r"--?")

Predicate = Callable[[IndentContext, int, int], bool]


# ------------- hanging & virtual indentation -------------

def hanging(ctx: IndentContext, pos: int) -> bool:
    """True when the token at pos ends a line that does not start with it."""
    buf = ctx.buffer
    if buf.is_bol(pos):
        return False
    word = buf.lexeme_at(pos)
    if word in ctx.config.dont_hang:
        return False
    after = buf.skip_comments_forward(pos + max(len(word), 1))
    return after >= buf.line_end(pos)


def virtual_indentation(ctx: IndentContext, pos: int, start: Optional[int] = None) -> int:
    """
    Column the text at pos would get on a line of its own: the largest
    candidate not past its actual column, or that column when every
    candidate lies further right.
    """
    from .engine import indentation_info

    buf = ctx.buffer
    col = buf.column_of(pos)
    if buf.is_bol(pos):
        return col
    if start is None:
        start = start_of_def(buf, pos, ctx.config)
    sub = ctx.nested(inhibit_after_offset=hanging(ctx, pos))
    info = indentation_info(sub, start, pos)
    best = max((c.column for c in info if c.column <= col), default=-1)
    return best if best >= 0 else col


# ------------- block keywords -------------

def offset_after_info(ctx: IndentContext, pos: int) -> Optional[Tuple[Optional[int], Optional[int]]]:
    return ctx.config.after_keyword_offsets.get(ctx.buffer.lexeme_at(pos))


def keyword_before(ctx: IndentContext, start: int, end: int) -> Optional[int]:
    """Position of the block keyword that is the last code before end, if any."""
    buf = ctx.buffer
    text = buf.text
    p = buf.skip_comments_backward(end, start)
    if p <= start:
        return None
    q = p - 1
    if is_ident_char(text[q]):
        while q > start and is_ident_char(text[q - 1]):
            q -= 1
    if text[q:p] in ctx.config.after_keyword_offsets:
        return q
    return None


def after_keyword_column(
    ctx: IndentContext,
    pos: int,
    start: Optional[int] = None,
    offset_info: Optional[Tuple[Optional[int], Optional[int]]] = None,
    default: Optional[int] = None,
) -> int:
    """Column of a block opened by the keyword at pos."""
    buf = ctx.buffer
    if offset_info is None:
        offset_info = offset_after_info(ctx, pos)
    if default is None:
        default = ctx.config.indent_step
    if ctx.inhibit_after_offset:
        offset, hang = 0, None
    elif offset_info:
        offset, hang = offset_info
    else:
        offset = hang = None

    if not hanging(ctx, pos):
        return buf.column_of(pos) + (default if offset is None else offset)
    base = virtual_indentation(ctx, pos, start)
    for value in (hang, offset, default):
        if value is not None:
            return base + value
    return base


# ------------- closing keywords -------------

def filter_let_no_in(ctx: IndentContext, pos: int, in_pos: int) -> bool:
    """True when the `let` at pos is closed (by braces or layout) before in_pos."""
    buf = ctx.buffer
    if not buf.text.startswith("let", pos):
        return False
    try:
        i = buf.skip_comments_forward(pos + 3)
        if buf.char_at(i) == "{":
            return buf.skip_comments_forward(buf.forward_sexp(i)) < in_pos
    except ScanFailure:
        return False

    col = buf.column_of(i)
    bol = buf.line_start(i)
    while True:
        bol, short = buf.forward_line(bol, 1)
        if short:
            return False
        ip = buf.indentation_point(bol)
        if ip >= in_pos:
            return False
        if not buf.is_blank_line(bol) and buf.column_of(ip) < col:
            return True


def find_matching_start(
    ctx: IndentContext,
    regex: "re.Pattern[str]",
    limit: int,
    pos: int,
    pred: Optional[Predicate] = None,
) -> Optional[int]:
    """
    Search backward from pos for the opener matching the closer at pos.

    `regex` matches both words; group 1 is set when it hit another closer,
    which then needs an opener of its own first. Matches inside strings,
    comments or brackets opened after `limit` are ignored, as are those
    rejected by `pred`.
    """
    buf = ctx.buffer
    open_ = buf.match_balanced_open_before(limit, pos)
    if open_ is not None:
        limit = open_ + 1

    depth = 1
    for m in reversed(list(regex.finditer(buf.text, limit, pos))):
        p = m.start()
        if (
            buf.string_span_containing(limit, p) is not None
            or buf.comment_span_containing(limit, p) is not None
            or buf.match_balanced_open_before(limit, p) is not None
            or (pred is not None and pred(ctx, p, pos))
        ):
            continue
        depth += 1 if m.group(1) else -1
        if depth == 0:
            return p
    return None


def closing_keyword(ctx: IndentContext, pos: int, start: int) -> Optional[List[IndentCandidate]]:
    """Column of the opener matching the closing keyword at pos, or None."""
    buf = ctx.buffer
    if CLOSING_KEYWORD.match(buf.text, pos) is None:
        return None
    opener, closer = _PAIRS[buf.char_at(pos)]
    regex = re.compile(rf"(?<![\w'])(?:({closer})|{opener})(?![\w'])")
    pred = filter_let_no_in if closer == "in" else None

    open_ = find_matching_start(ctx, regex, start, pos, pred)
    if open_ is None:
        log.debug("no opener for %r at %s", closer, pos)
        return None
    if hanging(ctx, open_):
        col = virtual_indentation(ctx, open_, start)
    else:
        col = buf.column_of(open_)
    if closer in ("then", "else"):
        col += ctx.config.then_else_offset
    return [IndentCandidate(col)]


# ------------- brackets -------------

def inside_paren(ctx: IndentContext, open_: int, end: int) -> List[IndentCandidate]:
    """Candidates for the line at end, inside the bracket opened at open_."""
    from .engine import layout_indent_info

    buf = ctx.buffer
    ch = buf.char_at(end)
    opener = buf.char_at(open_)
    open_col = buf.column_of(open_)

    if ch and ch in CLOSE_CHARS + ",;":
        # a closer or separator can only belong to this bracket
        if (ch == ";" and opener == "(") or (ch == "," and opener == "{"):
            closer = ")" if opener == "(" else "}"
            note = f"Mismatched punctuation: `{ch}' in {opener}...{closer}"
            ctx.diagnostics.append(note)
            log.warning(note)
        col = virtual_indentation(ctx, open_) if hanging(ctx, open_) else open_col
        return [IndentCandidate(col)]

    if ch and ch in SYMBOL_CHARS:
        basic = open_col
    else:
        follow = buf.skip_comments_forward(open_ + 1, end)
        if follow >= end:
            basic = after_keyword_column(ctx, open_, default=1)
        else:
            basic = buf.column_of(follow)

    contour = trace_contour(buf, open_ + 1, end, ctx.config)
    if not contour:
        return [IndentCandidate(basic)]

    inner = layout_indent_info(ctx.nested(), open_ + 1, contour, end)
    info = IndentInfo(buf, ctx.config.indent_step)
    replaced = False
    for cand in inner:
        if cand.column == open_col and not replaced:
            info.push_col(basic)
            replaced = True
        else:
            info.push_col(cand.column, cand.insert_text)
    if not replaced:
        info.push_col(basic)
    return info.as_list()


# ------------- strings & comments -------------

def string_indent(ctx: IndentContext, open_: int, end: int) -> List[IndentCandidate]:
    # a leading backslash closes a string gap and sits under the quote
    buf = ctx.buffer
    return [IndentCandidate(buf.column_of(open_) + (0 if buf.char_at(end) == "\\" else 1))]


def _previous_comment(ctx: IndentContext, pos: int, start: int) -> Optional[int]:
    """Start of a comment ending right before pos with no blank line in between."""
    buf = ctx.buffer
    p = buf.skip_blanks_backward(pos, start)
    span = next((s for s in reversed(buf.scan(start, pos).comments) if s[0] < p <= s[1]), None)
    if span is None:
        return None
    bol, short = buf.forward_line(span[0], 2)
    return span[0] if short or bol > pos else None


def comment_indent(ctx: IndentContext, open_: int, end: int, start: int) -> List[IndentCandidate]:
    from .engine import indentation_info

    buf = ctx.buffer
    text = buf.text

    if open_ == end:
        # the line starts with a comment: follow the previous comment,
        # then the code after it, nearest first
        info = IndentInfo(buf, ctx.config.indent_step)
        if buf.char_at(end) != "{":
            prev = _previous_comment(ctx, end, start)
            if prev is not None:
                info.push_pos(prev)
        code = buf.skip_comments_forward(end)
        col = buf.column_of(code)
        found = indentation_info(ctx.nested(), start, code)
        info.extend(sorted(found, key=lambda c: abs(col - c.column)))
        return info.as_list()

    if text.startswith("-}", end):
        return [IndentCandidate(buf.column_of(open_) + 1)]

    m = _DASHES.match(text, end)
    offset = m.start() - m.end() if m else None
    bol, _ = buf.forward_line(end, -1)
    p = max(buf.indentation_point(bol), start)
    lead = _COMMENT_LEAD.match(text, p)
    if lead is None:
        return [IndentCandidate(buf.column_of(p))]
    if offset is not None:
        return [IndentCandidate(2 + offset + buf.column_of(p))]
    return [IndentCandidate(buf.column_of(lead.end()))]
