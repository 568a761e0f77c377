# offside/cycle.py
from __future__ import annotations

import logging
from typing import Optional

from .buffer import TextBuffer
from .engine import Engine
from .models import CycleResult, CycleState, IndentConfig

log = logging.getLogger(__name__)

CYCLE_COMMAND = "cycle-indent"


class CycleController:
    """
    TAB behaviour of one buffer.

    The first request on a line computes the candidate list and applies
    candidate 0. Repeating the same command on the same line applies the
    next candidate (wrapping around), replacing any text the previous step
    inserted. Any other command, reported through note_command(), a
    request on another line or an edit made to the buffer in between
    starts over.
    """

    def __init__(self, buffer: TextBuffer, config: Optional[IndentConfig] = None) -> None:
        self.buffer = buffer
        self.engine = Engine(buffer, config)
        self.state: Optional[CycleState] = None
        self.last_command: Optional[str] = None
        self.message = ""

    def note_command(self, command: str) -> None:
        """Record a host command that is not an indentation request."""
        self.last_command = command

    def cycle_indent(self, pos: int, command: str = CYCLE_COMMAND) -> CycleResult:
        buf = self.buffer
        if buf.literate != "none" and not buf.is_code_line(pos):
            self.last_command = command
            return CycleResult([], -1, pos)

        bol = buf.line_start(pos)
        ip = buf.indentation_point(pos)
        # caret inside the code: keep its distance from the code start
        caret = pos - ip if pos > ip else None

        repeat = (
            self.last_command == command
            and self.state is not None
            and self.state.line_start == bol
            and self.state.version == buf.version
        )
        self.last_command = command
        diagnostics = []
        if not repeat:
            result = self.engine.compute_indent_candidates(pos)
            self.state = CycleState(bol, result.candidates)
            diagnostics = result.diagnostics

        state = self.state
        if not state.candidates:
            self.message = "No indentation"
            return CycleResult([], -1, pos, diagnostics)

        index = state.cursor_index
        removed = state.last_inserted_length
        cand = state.candidates[index]
        point = self.engine.apply_candidate(bol, state.candidates, index, removed)
        inserted = len(cand.insert_text or "")

        state.cursor_index = (index + 1) % len(state.candidates)
        state.last_inserted_length = inserted
        state.version = buf.version

        if len(state.candidates) == 1:
            self.message = "Sole indentation"
        else:
            self.message = f"Indent cycle ({len(state.candidates)})..."
        log.info(self.message)

        if caret is not None and caret > removed:
            # caret was in the code past the old insertion: keep its offset
            point += caret - removed
        return CycleResult(list(state.candidates), index, point, diagnostics)
