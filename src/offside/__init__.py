"""Public API for the layout-rule indentation engine."""
from __future__ import annotations
from weakref import WeakKeyDictionary

from .align import align_definition
from .buffer import TextBuffer
from .cycle import CYCLE_COMMAND, CycleController
from .engine import Engine
from .errors import IndentError, NestingTooDeep, StructuralImpossible, UnsupportedOperation
from .models import CycleResult, IndentCandidate, IndentConfig, IndentResult

__all__ = [
    "CYCLE_COMMAND", "CycleController", "CycleResult", "Engine", "IndentCandidate",
    "IndentConfig", "IndentError", "IndentResult", "NestingTooDeep", "StructuralImpossible",
    "TextBuffer", "UnsupportedOperation", "align_definition", "compute_indent_candidates",
    "controller_for", "cycle_indent",
]

# one cycle controller per live buffer
_controllers: "WeakKeyDictionary[TextBuffer, CycleController]" = WeakKeyDictionary()


def controller_for(buffer: TextBuffer, config: IndentConfig | None = None) -> CycleController:
    ctl = _controllers.get(buffer)
    if ctl is None:
        ctl = CycleController(buffer, config)
        _controllers[buffer] = ctl
    return ctl


def compute_indent_candidates(buffer: TextBuffer, pos: int) -> list[IndentCandidate]:
    """Candidates for pos's line (list of IndentCandidate)."""
    return Engine(buffer).compute_indent_candidates(pos).candidates


def cycle_indent(buffer: TextBuffer, pos: int, command: str = CYCLE_COMMAND) -> CycleResult:
    """Apply the first/next candidate to pos's line, remembering the cycle per buffer."""
    return controller_for(buffer).cycle_indent(pos, command)
