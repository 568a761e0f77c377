from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import ScanFailure

SYMBOL_CHARS = frozenset("!#$%&*+./<=>?@\\^|-~:∷→←⇒∀")
OPEN_CHARS = "([{"
CLOSE_CHARS = ")]}"

# /* ~~~ 'a', '\n', '\'', '\x41' ; a quote after an identifier char is a prime, not a literal ~~~ */
_CHAR_LIT = re.compile(r"'(?:[^'\\\n]|\\[^\n]+?)'")

_WORD_RUN = re.compile(r"[\w']+")
_SYMBOL_RUN = re.compile(r"[!#$%&*+./<=>?@\\^|~:∷→←⇒∀-]+")
_OTHER_LEXEME = re.compile(r"[!#$%&*+./<=>?@\\^|~:∷→←⇒∀-]*[(\[{]*[)\]}]*")


@dataclass(slots=True)
class ScanState:
    """
    Lexical state reached after scanning [start, end).

    open_brackets holds the positions of brackets still unclosed at `end`
    (innermost last); string_start / comment_start are set when `end`
    lies inside a string or comment; comments lists the (start, stop)
    spans of every comment completed inside the range.
    """
    open_brackets: List[int] = field(default_factory=list)
    string_start: Optional[int] = None
    comment_start: Optional[int] = None
    comments: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def innermost_open(self) -> Optional[int]:
        return self.open_brackets[-1] if self.open_brackets else None


def is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_'"


def line_comment_at(text: str, i: int, limit: Optional[int] = None) -> bool:
    """`--` starts a comment unless the dash run belongs to a longer operator such as `-->`."""
    limit = len(text) if limit is None else limit
    if not text.startswith("--", i, limit):
        return False
    if i > 0 and text[i - 1] in SYMBOL_CHARS and text[i - 1] != ">":
        return False
    j = i
    while j < len(text) and text[j] == "-":
        j += 1
    return j >= len(text) or text[j] not in SYMBOL_CHARS


def block_comment_at(text: str, i: int, limit: Optional[int] = None) -> bool:
    limit = len(text) if limit is None else limit
    return text.startswith("{-", i, limit)


def comment_starts_at(text: str, i: int, limit: Optional[int] = None) -> bool:
    return block_comment_at(text, i, limit) or line_comment_at(text, i, limit)


def comment_stop(text: str, i: int) -> int:
    """Position right after the comment opening at i; len(text) + 1 when unterminated."""
    n = len(text)
    if text.startswith("{-", i):
        depth = 0
        j = i
        while j < n:
            if text.startswith("{-", j):
                depth += 1
                j += 2
            elif text.startswith("-}", j):
                depth -= 1
                j += 2
                if depth == 0:
                    return j
            else:
                j += 1
        return n + 1
    nl = text.find("\n", i)
    return n + 1 if nl < 0 else nl + 1


def string_stop(text: str, i: int) -> int:
    """
    Position right after the string literal opening at i.
    A backslash escapes the next char (so string gaps span lines); a raw
    newline ends an unterminated literal there.
    """
    n = len(text)
    j = i + 1
    while j < n:
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == '"':
            return j + 1
        if ch == "\n":
            return j
        j += 1
    return n + 1


def _unit(text: str, i: int, limit: int, bird: bool) -> Tuple[str, int]:
    """Classify the lexical unit starting at i and return (kind, stop)."""
    ch = text[i]
    if bird and ch == ">" and (i == 0 or text[i - 1] == "\n"):
        return "marker", i + 1
    if comment_starts_at(text, i, limit):
        return "comment", comment_stop(text, i)
    if ch == '"':
        return "string", string_stop(text, i)
    if ch == "'" and (i == 0 or not is_ident_char(text[i - 1])):
        m = _CHAR_LIT.match(text, i)
        if m:
            return "char", m.end()
    if ch in OPEN_CHARS:
        return "open", i + 1
    if ch in CLOSE_CHARS:
        return "close", i + 1
    return "other", i + 1


def scan(text: str, start: int, end: int, *, bird: bool = False) -> ScanState:
    """Balanced-structure/string/comment oracle over text[start:end]."""
    state = ScanState()
    i = start
    while i < end:
        kind, stop = _unit(text, i, end, bird)
        if kind == "comment":
            if stop > end:
                state.comment_start = i
                break
            state.comments.append((i, stop))
        elif kind == "string":
            if stop > end:
                state.string_start = i
                break
        elif kind == "open":
            state.open_brackets.append(i)
        elif kind == "close":
            if state.open_brackets:
                state.open_brackets.pop()
        i = stop
    return state


def skip_group(text: str, i: int, *, bird: bool = False) -> int:
    """From an opening bracket at i, return the position after its matching close."""
    n = len(text)
    depth = 0
    while i < n:
        kind, stop = _unit(text, i, n, bird)
        if stop > n:
            raise ScanFailure(f"unterminated {kind} at {i}")
        if kind == "open":
            depth += 1
        elif kind == "close":
            depth -= 1
            if depth == 0:
                return stop
        i = stop
    raise ScanFailure("unbalanced bracket")


def sexp_stop(text: str, i: int, *, bird: bool = False) -> int:
    """
    Return the end of the expression starting exactly at i: a bracketed
    group, a string or char literal, a word or a run of operator chars.
    """
    n = len(text)
    if i >= n:
        raise ScanFailure("end of buffer")
    ch = text[i]
    if ch in CLOSE_CHARS:
        raise ScanFailure("containing expression ends prematurely")
    if ch in OPEN_CHARS:
        return skip_group(text, i, bird=bird)
    kind, stop = _unit(text, i, n, bird)
    if kind in ("string", "char"):
        if stop > n:
            raise ScanFailure("unterminated string")
        return stop
    m = _WORD_RUN.match(text, i)
    if m:
        return m.end()
    m = _SYMBOL_RUN.match(text, i)
    if m:
        return m.end()
    return i + 1


def lexeme(text: str, i: int) -> str:
    """The lexeme at i: a word, or an operator run followed by brackets."""
    m = _WORD_RUN.match(text, i)
    if m:
        return m.group(0)
    return _OTHER_LEXEME.match(text, i).group(0)
