from __future__ import annotations
import argparse, json, sys
from pathlib import Path

from . import config as CFG
from .align import align_definition
from .buffer import TextBuffer
from .cycle import CycleController
from .engine import Engine
from .errors import IndentError
from .models import IndentConfig


def _candidate_rows(candidates) -> list[dict]:
    return [{"column": c.column, "insert_text": c.insert_text} for c in candidates]


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Layout-rule indentation CLI (Engine-backed)")
    p.add_argument("file", help="Source file (.hs, or .lhs for Bird-style literate)")
    p.add_argument("--line", type=int, default=None, help="1-based line to indent")
    p.add_argument("--cycle", type=int, default=0, metavar="K", help="Simulate K TAB presses on the line")
    p.add_argument("--apply", type=int, default=None, metavar="I", help="Apply candidate I and print the file")
    p.add_argument("--align", choices=["guard", "rhs"], help="Align guards or rhs of the definition at --line")
    p.add_argument("--literate", choices=["none", "bird", "latex"], default=None, help="Literate style")
    p.add_argument("--indent-step", type=int, default=None)
    p.add_argument("--write", action="store_true", help="Save edits back to FILE")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--repl", action="store_true", help="Interactive loop: type line numbers")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)
    if args.line is None and not args.repl:
        p.error("--line is required unless --repl is given")

    kwargs = {} if args.literate is None else {"literate": args.literate}
    try:
        buf = TextBuffer.from_file(args.file, **kwargs)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    cfg = IndentConfig(literate=buf.literate, tab_width=buf.tab_width).with_overrides(
        indent_step=args.indent_step
    )
    eng = Engine(buf, cfg, verbose=args.verbose or CFG.VERBOSE)

    def line_pos(n: int) -> int:
        if not 1 <= n <= buf.line_count():
            raise IndexError(f"line {n} out of range (1..{buf.line_count()})")
        return buf.offset_of(n - 1)

    def show(n: int) -> None:
        res = eng.compute_indent_candidates(line_pos(n))
        if args.json:
            print(json.dumps({"line": n, "candidates": _candidate_rows(res.candidates),
                              "diagnostics": res.diagnostics}, ensure_ascii=False, indent=2))
            return
        if not res.candidates:
            print("(no candidates)"); return
        print("#  Column  Insert")
        for i, c in enumerate(res.candidates):
            print(f"{i:<2} {c.column:<7} {c.insert_text or ''!r}")
        for d in res.diagnostics:
            print(f"note: {d}")

    try:
        if args.line is not None:
            pos = line_pos(args.line)
            if args.align:
                align_definition(buf, pos, args.align, cfg)
            elif args.apply is not None:
                res = eng.compute_indent_candidates(pos)
                if not 0 <= args.apply < len(res.candidates):
                    p.error(f"--apply {args.apply}: only {len(res.candidates)} candidate(s)")
                eng.apply_candidate(pos, res.candidates, args.apply)
            elif args.cycle:
                ctl = CycleController(buf, cfg)
                steps = []
                for _ in range(args.cycle):
                    r = ctl.cycle_indent(line_pos(args.line))
                    bol = buf.offset_of(args.line - 1)
                    steps.append({"index": r.index, "line": buf.substr(bol, buf.line_end(bol))})
                if args.json:
                    print(json.dumps(steps, ensure_ascii=False, indent=2))
                else:
                    for s in steps:
                        print(f"[{s['index']}] {s['line']}")
            else:
                show(args.line)

            if args.align or args.apply is not None:
                if args.write:
                    Path(args.file).write_text(buf.text, encoding="utf-8")
                else:
                    sys.stdout.write(buf.text)

        if args.repl:
            print("Type a line number (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                try:
                    show(int(q))
                except (ValueError, IndexError) as exc:
                    print(f"error: {exc}")
        return 0
    except IndentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except IndexError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
