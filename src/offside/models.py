# offside/models.py
"""
Data models for the indentation engine.

These classes structure the values that flow between the scanning
components; they carry no scanning logic themselves:

- IndentConfig: per-buffer settings, defaulting to the values in config.py.
- IndentCandidate: one proposed indentation (column + optional text to insert).
- LineMatch: what the line classifier recognised at a position.
- ClauseParts: the logical pieces of one definition found by the segmenter.
- IndentContext: the explicit state threaded through one request.
- CycleState / CycleResult: bookkeeping of the TAB cycle.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from . import config as CFG

if TYPE_CHECKING:  # pragma: no cover
    from .buffer import TextBuffer


@dataclass(frozen=True, slots=True)
class IndentConfig:
    """
    Settings of one buffer.

    Attributes
    ----------
    indent_step : int
        Offset used for a new layout level when a keyword table entry or a
        decision case does not prescribe its own.
    literate : str
        "none", "bird" or "latex".
    bird_default_offset : int
        Number of blanks after the '>' marker on a fresh Bird-style code line.
    look_past_empty_lines : bool
        When False, blank lines bound the enclosing definition and contour.
    then_else_offset : int
        Added to the `if` column when indenting a `then`/`else` line.
    after_keyword_offsets : Dict[str, Tuple[Optional[int], Optional[int]]]
        keyword -> (offset, hanging offset). Missing values fall back to
        the offset, then to indent_step.
    dont_hang : Tuple[str, ...]
        Lexemes never considered hanging.
    rhs_align_column : int
        Minimum column for aligned `=` signs (0 = widest one wins).
    tab_width : int
        Tab expansion used for column arithmetic.
    max_nesting_depth : int
        Recursion cap for bracket interiors and virtual indentation.
    """
    indent_step: int = CFG.INDENT_STEP
    literate: str = CFG.LITERATE_MODE
    bird_default_offset: int = CFG.BIRD_DEFAULT_OFFSET
    look_past_empty_lines: bool = CFG.LOOK_PAST_EMPTY_LINES
    then_else_offset: int = CFG.THEN_ELSE_OFFSET
    after_keyword_offsets: Dict[str, Tuple[Optional[int], Optional[int]]] = field(
        default_factory=lambda: dict(CFG.AFTER_KEYWORD_OFFSETS)
    )
    dont_hang: Tuple[str, ...] = CFG.DONT_HANG
    rhs_align_column: int = CFG.RHS_ALIGN_COLUMN
    tab_width: int = CFG.TAB_WIDTH
    max_nesting_depth: int = CFG.MAX_NESTING_DEPTH

    def with_overrides(self, **changes) -> "IndentConfig":
        """Return a copy with the non-None keyword arguments applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass(frozen=True, slots=True)
class IndentCandidate:
    """
    One indentation proposal.

    Attributes
    ----------
    column : int
        Target column of the line's first code character.
    insert_text : Optional[str]
        Text inserted right after the indentation when this candidate is
        applied (e.g. "f " to start another clause of `f`, or "| ").
    """
    column: int
    insert_text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LineMatch:
    type: str                 # empty | comment | ident | guard | rhs | other
    start: int
    end: int                  # end of the matched marker, after trailing blanks
    text: str = ""            # matched marker without trailing blanks


@dataclass(frozen=True, slots=True)
class ClauseParts:
    name: Optional[int] = None
    name_text: Optional[str] = None
    after_name: Optional[int] = None
    guard: Optional[int] = None
    after_guard: Optional[int] = None
    rhs_mark: Optional[int] = None
    after_rhs: Optional[int] = None


@dataclass(slots=True)
class IndentContext:
    """State of one indentation request, passed explicitly to every helper."""
    buffer: "TextBuffer"
    config: IndentConfig
    depth: int = 0
    first_lexeme: str = ""
    diagnostics: List[str] = field(default_factory=list)
    inhibit_after_offset: bool = False   # set while measuring a hanging keyword

    def nested(self, inhibit_after_offset: bool = False) -> "IndentContext":
        # diagnostics are shared with the parent request
        return IndentContext(self.buffer, self.config, self.depth + 1, "",
                             self.diagnostics, inhibit_after_offset)


@dataclass(frozen=True, slots=True)
class IndentResult:
    candidates: List[IndentCandidate]
    diagnostics: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CycleState:
    line_start: int
    candidates: List[IndentCandidate]
    cursor_index: int = 0
    last_inserted_length: int = 0
    version: int = 0          # buffer version right after the last step


@dataclass(frozen=True, slots=True)
class CycleResult:
    """
    Outcome of one TAB press.

    Attributes
    ----------
    candidates : List[IndentCandidate]
        The full candidate list of the current cycle.
    index : int
        Index of the candidate that was applied (-1 when nothing applied).
    point : int
        Caret position after the edit.
    diagnostics : List[str]
        Non-fatal notes collected while computing the candidates.
    """
    candidates: List[IndentCandidate]
    index: int
    point: int
    diagnostics: List[str] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return self.index >= 0
