# offside/buffer.py
from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Tuple

from . import config as CFG
from . import scan as S
from .errors import ScanFailure


class TextBuffer:
    """
    Line/column view over a text, plus the few mutations indentation needs.

    Positions are plain offsets into `text`. Columns are display columns
    (tabs expanded to `tab_width`). In Bird-style literate mode the '>'
    marker sits in column 0 and every query about blankness, indentation
    or line starts looks past it.
    """

    def __init__(self, text: str = "", *, literate: str = CFG.LITERATE_MODE,
                 tab_width: int = CFG.TAB_WIDTH) -> None:
        if literate not in ("none", "bird", "latex"):
            raise ValueError(f"unknown literate mode: {literate!r}")
        self._text = text
        self.literate = literate
        self.tab_width = max(1, int(tab_width))
        self.version = 0

    @classmethod
    def from_file(cls, path: str | Path, **kwargs) -> "TextBuffer":
        p = Path(path)
        if "literate" not in kwargs and p.suffix == ".lhs":
            kwargs["literate"] = "bird"
        return cls(p.read_text(encoding="utf-8"), **kwargs)

    # ------------- plain access -------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def bird(self) -> bool:
        return self.literate == "bird"

    def __len__(self) -> int:
        return len(self._text)

    def char_at(self, pos: int) -> str:
        return self._text[pos] if 0 <= pos < len(self._text) else ""

    def substr(self, start: int, end: int) -> str:
        return self._text[start:end]

    # ------------- lines & columns -------------

    def line_start(self, pos: int) -> int:
        return self._text.rfind("\n", 0, pos) + 1

    def line_end(self, pos: int) -> int:
        nl = self._text.find("\n", pos)
        return len(self._text) if nl < 0 else nl

    def line_count(self) -> int:
        return self._text.count("\n") + 1

    def column_of(self, pos: int) -> int:
        col = 0
        for ch in self._text[self.line_start(pos):pos]:
            if ch == "\t":
                col = (col // self.tab_width + 1) * self.tab_width
            else:
                col += 1
        return col

    def line_col(self, pos: int) -> Tuple[int, int]:
        """0-based line number and display column of pos."""
        return self._text.count("\n", 0, pos), self.column_of(pos)

    def move_to_column(self, pos: int, column: int) -> int:
        """Position on pos's line at `column`, or the line end when the line is shorter."""
        i = self.line_start(pos)
        eol = self.line_end(pos)
        col = 0
        while i < eol and col < column:
            if self._text[i] == "\t":
                col = (col // self.tab_width + 1) * self.tab_width
            else:
                col += 1
            i += 1
        return i

    def offset_of(self, line: int, column: int = 0) -> int:
        """Position of (0-based line, column)."""
        if line < 0:
            raise IndexError(line)
        start = 0
        for _ in range(line):
            nl = self._text.find("\n", start)
            if nl < 0:
                raise IndexError(line)
            start = nl + 1
        return self.move_to_column(start, column)

    def forward_line(self, pos: int, n: int = 1) -> Tuple[int, int]:
        """
        Move n lines (negative = backward) and return (line start, shortfall).
        A non-zero shortfall means the buffer edge stopped the move.
        """
        bol = self.line_start(pos)
        remaining = abs(n)
        while remaining:
            if n > 0:
                nl = self._text.find("\n", bol)
                if nl < 0:
                    break
                bol = nl + 1
            else:
                if bol == 0:
                    break
                bol = self.line_start(bol - 1)
            remaining -= 1
        return bol, remaining

    # ------------- literate-aware queries -------------

    def _code_origin(self, bol: int) -> int:
        if self.bird and self.char_at(bol) == ">":
            return bol + 1
        return bol

    def indentation_point(self, pos: int) -> int:
        i = self._code_origin(self.line_start(pos))
        eol = self.line_end(pos)
        while i < eol and self._text[i] in " \t":
            i += 1
        return i

    def current_indentation(self, pos: int) -> int:
        return self.column_of(self.indentation_point(pos))

    def is_blank_line(self, pos: int) -> bool:
        return self.indentation_point(pos) == self.line_end(pos)

    def is_bol(self, pos: int) -> bool:
        """True when nothing but indentation (and a Bird marker) precedes pos on its line."""
        return pos <= self.indentation_point(pos)

    def is_code_line(self, pos: int) -> bool:
        if self.literate == "bird":
            return self.char_at(self.line_start(pos)) == ">"
        if self.literate == "latex":
            bol = self.line_start(pos)
            begin = self._text.rfind("\\begin{code}", 0, bol)
            end = self._text.rfind("\\end{code}", 0, bol)
            return begin >= 0 and begin > end
        return True

    def literate_code_start(self, pos: int) -> int:
        """Start of the code block holding pos (buffer start outside literate mode)."""
        bol = self.line_start(pos)
        if self.literate == "bird":
            while bol > 0:
                prev = self.line_start(bol - 1)
                if self.char_at(prev) != ">":
                    break
                bol = prev
            return bol
        if self.literate == "latex":
            begin = self._text.rfind("\\begin{code}", 0, bol)
            if begin >= 0:
                return min(self.line_end(begin) + 1, len(self._text))
        return 0

    # ------------- blanks & comments -------------

    def _is_marker(self, i: int) -> bool:
        return self.bird and self._text[i] == ">" and (i == 0 or self._text[i - 1] == "\n")

    def skip_blanks_forward(self, pos: int, limit: Optional[int] = None) -> int:
        limit = len(self._text) if limit is None else limit
        i = pos
        while i < limit and (self._text[i] in " \t\n" or self._is_marker(i)):
            i += 1
        return i

    def skip_blanks_backward(self, pos: int, limit: int = 0) -> int:
        i = pos
        while i > limit and (self._text[i - 1] in " \t\n" or self._is_marker(i - 1)):
            i -= 1
        return i

    def skip_comments_forward(self, pos: int, limit: Optional[int] = None) -> int:
        """Skip blanks and whole comments forward (never past `limit`)."""
        limit = len(self._text) if limit is None else limit
        i = pos
        while True:
            i = self.skip_blanks_forward(i, limit)
            if i < limit and S.comment_starts_at(self._text, i):
                i = min(S.comment_stop(self._text, i), limit)
                continue
            return i

    def skip_comments_backward(self, pos: int, limit: int = 0) -> int:
        """Skip blanks and whole comments backward (never before `limit`)."""
        state = self.scan(limit, pos)
        spans: List[Tuple[int, int]] = list(state.comments)
        if state.comment_start is not None:
            spans.append((state.comment_start, pos))
        i = pos
        while True:
            i = self.skip_blanks_backward(i, limit)
            span = next((s for s in reversed(spans) if s[0] < i <= s[1]), None)
            if span is None:
                return i
            i = span[0]

    # ------------- structure oracle -------------

    def scan(self, start: int, end: int) -> S.ScanState:
        return S.scan(self._text, start, end, bird=self.bird)

    def match_balanced_open_before(self, start: int, end: int) -> Optional[int]:
        """Innermost bracket opened in [start, end) and still unclosed at end."""
        return self.scan(start, end).innermost_open

    def string_span_containing(self, start: int, end: int) -> Optional[int]:
        return self.scan(start, end).string_start

    def comment_span_containing(self, start: int, end: int) -> Optional[int]:
        """Start of the comment holding end, or end itself when a comment opens there."""
        if start >= end:
            return end if S.comment_starts_at(self._text, end) else None
        state = self.scan(start, end)
        if state.comment_start is not None:
            return state.comment_start
        if state.string_start is None and S.comment_starts_at(self._text, end):
            return end
        return None

    def comment_starts_at(self, pos: int) -> bool:
        return S.comment_starts_at(self._text, pos)

    def forward_sexp(self, pos: int, limit: Optional[int] = None) -> int:
        """Skip blanks/comments, then one expression. Raises ScanFailure at the buffer edge."""
        i = self.skip_comments_forward(pos, limit)
        if i >= len(self._text):
            raise ScanFailure("end of buffer")
        return S.sexp_stop(self._text, i, bird=self.bird)

    def lexeme_at(self, pos: int) -> str:
        return S.lexeme(self._text, pos)

    # ------------- mutation -------------

    def replace_range(self, start: int, end: int, new: str) -> None:
        self._text = self._text[:start] + new + self._text[end:]
        self.version += 1

    def insert(self, pos: int, text: str) -> None:
        self.replace_range(pos, pos, text)

    def delete(self, pos: int, count: int) -> None:
        self.replace_range(pos, min(len(self._text), pos + count), "")

    def set_text(self, text: str) -> None:
        if text != self._text:
            self._text = text
            self.version += 1

    def set_line_indentation(self, pos: int, column: int) -> int:
        """
        Re-indent pos's line to `column` and return its new indentation point.
        A Bird marker is kept in column 0 and the rest of the indentation is spaces.
        """
        column = max(0, int(column))
        bol = self.line_start(pos)
        ip = self.indentation_point(pos)
        if self.bird and self.char_at(bol) == ">":
            lead = ">" + " " * max(column - 1, 0)
        else:
            lead = " " * column
        if self._text[bol:ip] != lead:
            self.replace_range(bol, ip, lead)
        return bol + len(lead)
