from __future__ import annotations
import os

# Default column step for a new layout level
INDENT_STEP: int = 4

# Literate script style: "none", "bird" (lines prefixed by '>') or "latex"
LITERATE_MODE: str = "none"

# Bird scripts: blank run after the '>' marker on a fresh code line
BIRD_DEFAULT_OFFSET: int = 1

# Keep scanning backward across blank lines when looking for the enclosing definition
LOOK_PAST_EMPTY_LINES: bool = True

# Extra offset of then/else relative to their `if` (non-zero only for the legacy do-block style)
THEN_ELSE_OFFSET: int = 0

# Column used when aligning `=` signs of a definition (0 = ad hoc, the widest one)
RHS_ALIGN_COLUMN: int = 0

# Tabs expand to the next multiple of this when measuring columns
TAB_WIDTH: int = 8

# /* ~~~ keyword -> (offset, hanging offset); None falls back to INDENT_STEP ~~~ */
AFTER_KEYWORD_OFFSETS: dict[str, tuple[int | None, int | None]] = {
    "where": (2, 0),
    "of": (2, None),
    "do": (2, None),
    "mdo": (2, None),
    "rec": (2, None),
    "in": (2, 0),
    "{": (2, None),
    "if": (None, None),
    "then": (None, None),
    "else": (None, None),
    "let": (None, None),
}

# Lexemes that are never treated as hanging at end of line
DONT_HANG: tuple[str, ...] = ("(",)

# Words that open a top-level declaration and are completed on their own column
START_KEYWORDS: frozenset[str] = frozenset({
    "class", "data", "import", "infix", "infixl", "infixr",
    "instance", "module", "newtype", "primitive", "type",
})

# /* ~~~ safety cap for bracket / virtual-indentation recursion ~~~ */
MAX_NESTING_DEPTH: int = 32

# Progress logging (set OFFSIDE_VERBOSE=1 to enable)
VERBOSE = os.environ.get("OFFSIDE_VERBOSE") == "1"
