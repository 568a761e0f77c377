from __future__ import annotations
import re
from typing import Optional

from .buffer import TextBuffer
from .models import LineMatch

# /* ~~~ order matters: identifier, then guard, then rhs marker ~~~ */
_IDENT = re.compile(r"([^\W\d][\w']*)")
_GUARD = re.compile(r"(\|)(?=[^|])")
_RHS = re.compile(r"(=(?=[^>=])|::|∷|->|→|<-|←)")


def _finish(buf: TextBuffer, kind: str, m: re.Match, limit: Optional[int]) -> LineMatch:
    return LineMatch(kind, m.start(1), buf.skip_blanks_forward(m.end(1), limit), m.group(1))


def classify(buf: TextBuffer, pos: int, start: int = 0, limit: Optional[int] = None) -> LineMatch:
    """
    Classify what begins at pos.

    `start` bounds the comment check (scanning from the enclosing definition
    rather than the buffer start); `limit` bounds the blank skipping after
    a matched marker.
    """
    text = buf.text
    if buf.is_blank_line(pos):
        return LineMatch("empty", pos, pos)
    if buf.comment_span_containing(min(start, pos), pos) is not None:
        return LineMatch("comment", pos, pos)
    m = _IDENT.match(text, pos)
    if m:
        return _finish(buf, "ident", m, limit)
    m = _GUARD.match(text, pos)
    if m:
        return _finish(buf, "guard", m, limit)
    m = _RHS.match(text, pos)
    if m:
        return _finish(buf, "rhs", m, limit)
    return LineMatch("other", pos, pos)
