# app.py
# CustomTkinter editor for the offside indentation engine (dark theme).
# - Open a .hs / .lhs file (read on a background thread).
# - TAB cycles through the indentation candidates of the caret's line.
# - Alt+G / Alt+R align the guards / rhs of the definition under the caret.

from __future__ import annotations
import threading
from pathlib import Path
from typing import Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

from offside import CycleController, IndentConfig, IndentError, TextBuffer, align_definition


# -------------------- small helpers --------------------

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


def literate_for(path: str) -> str:
    return "bird" if Path(path).suffix == ".lhs" else "none"


# -------------------- main app --------------------

class OffsideApp(ctk.CTk):
    """Dark-themed editor whose TAB key is driven by the cycle controller."""

    def __init__(self) -> None:
        super().__init__()

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        self.title("Offside Editor")
        self.geometry("900x650")
        self.minsize(820, 560)

        # State
        self._path: Optional[str] = None
        self._loading_thread: Optional[threading.Thread] = None
        self._buffer = TextBuffer("")
        self._controller = CycleController(self._buffer)

        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_mono = ctk.CTkFont(family="Cascadia Mono, Menlo, Consolas, Courier New", size=13)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)  # editor
        self.grid_rowconfigure(3, weight=0)  # log

        self._build_header()
        self._build_file_bar()
        self._build_editor()
        self._build_log()

        self._set_status("Ready")
        self.protocol("WM_DELETE_WINDOW", self.destroy)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        ctk.CTkLabel(header, text="Offside Editor", font=self.font_title).grid(
            row=0, column=0, sticky="w", padx=12, pady=10
        )

    def _build_file_bar(self) -> None:
        bar = ctk.CTkFrame(self, corner_radius=10)
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(3, weight=1)

        ctk.CTkButton(bar, text="Open", command=self._choose_file).grid(row=0, column=0, padx=(12, 6), pady=10)
        ctk.CTkButton(bar, text="Save", command=self._save).grid(row=0, column=1, padx=(0, 6), pady=10)

        self.opt_literate = ctk.CTkOptionMenu(bar, values=["none", "bird", "latex"], command=self._on_literate)
        self.opt_literate.grid(row=0, column=2, padx=(0, 6), pady=10)

        self.lbl_source = ctk.CTkLabel(bar, text="(unsaved)", anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=3, sticky="ew", padx=6, pady=10)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate", determinate_speed=1.2)
        self.progress.grid(row=0, column=4, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(bar, text="Status: —", anchor="e")
        self.lbl_status.grid(row=0, column=5, sticky="e", padx=12, pady=10)

    def _build_editor(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=2, column=0, sticky="nsew", padx=12, pady=6)
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(0, weight=1)

        self.txt = ctk.CTkTextbox(frame, wrap="none", font=self.font_mono, undo=True)
        self.txt.grid(row=0, column=0, sticky="nsew", padx=8, pady=8)
        self.txt.bind("<Tab>", self._on_tab)
        self.txt.bind("<Alt-g>", lambda _ev: self._align("guard"))
        self.txt.bind("<Alt-r>", lambda _ev: self._align("rhs"))
        self.txt.bind("<Key>", self._on_other_key, add="+")
        self.txt.bind("<Button-1>", lambda _ev: self._controller.note_command("mouse"), add="+")

    def _build_log(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(frame, text="Event log", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        self.txt_log = ctk.CTkTextbox(frame, height=110, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self._log("Editor ready. Press TAB to cycle indentation.")

    # --------- files (threaded load) ---------

    def _choose_file(self) -> None:
        path = fd.askopenfilename(
            title="Open source file",
            filetypes=[("Haskell", "*.hs *.lhs"), ("All files", "*.*")]
        )
        if not path:
            return
        if self._loading_thread and self._loading_thread.is_alive():
            mb.showinfo("Loading", "A file is already loading. Please wait.")
            return
        self._set_status("Loading…")
        self.progress.start()
        self._loading_thread = threading.Thread(target=self._load_worker, args=(path,), daemon=True)
        self._loading_thread.start()

    def _load_worker(self, path: str) -> None:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.after(0, lambda: self._on_load_error(exc))
            return
        self.after(0, lambda: self._on_load_ok(path, text))

    def _on_load_ok(self, path: str, text: str) -> None:
        self.progress.stop()
        self._path = path
        self.lbl_source.configure(text=shorten_path(path))
        self.opt_literate.set(literate_for(path))
        self._reset_buffer(text, literate_for(path))
        self.txt.delete("1.0", "end")
        self.txt.insert("1.0", text)
        self._set_status(f"Loaded {self._buffer.line_count():,} lines.")
        self._log(f"Opened {path}")

    def _on_load_error(self, exc: Exception) -> None:
        self.progress.stop()
        self._set_status("Error while loading file.")
        self._log(f"ERROR: {exc!r}")
        mb.showerror("Load error", "Failed to open file.\nSee event log for details.")

    def _save(self) -> None:
        path = self._path or fd.asksaveasfilename(defaultextension=".hs")
        if not path:
            return
        try:
            Path(path).write_text(self.txt.get("1.0", "end-1c"), encoding="utf-8")
        except OSError as exc:
            self._log(f"ERROR: {exc!r}")
            mb.showerror("Save error", str(exc))
            return
        self._path = path
        self.lbl_source.configure(text=shorten_path(path))
        self._log(f"Saved {path}")

    def _on_literate(self, mode: str) -> None:
        self._reset_buffer(self.txt.get("1.0", "end-1c"), mode)
        self._log(f"Literate mode: {mode}")

    def _reset_buffer(self, text: str, literate: str) -> None:
        self._buffer = TextBuffer(text, literate=literate)
        self._controller = CycleController(self._buffer, IndentConfig(literate=literate))

    # --------- indentation ---------

    def _caret_pos(self) -> int:
        line, char = (int(x) for x in self.txt.index("insert").split("."))
        return self._buffer.offset_of(line - 1) + char

    def _sync_from_widget(self) -> None:
        self._buffer.set_text(self.txt.get("1.0", "end-1c"))

    def _show_line(self, line: int, point: int) -> None:
        buf = self._buffer
        bol = buf.offset_of(line - 1)
        self.txt.delete(f"{line}.0", f"{line}.end")
        self.txt.insert(f"{line}.0", buf.substr(bol, buf.line_end(bol)))
        self.txt.mark_set("insert", f"{line}.{point - bol}")

    def _on_tab(self, _ev=None) -> str:
        self._sync_from_widget()
        line = int(self.txt.index("insert").split(".")[0])
        try:
            res = self._controller.cycle_indent(self._caret_pos())
        except IndentError as exc:
            self._set_status("No indentation.")
            self._log(f"ERROR: {exc}")
            return "break"
        if res.applied:
            self._show_line(line, res.point)
        self._set_status(self._controller.message or "Not code")
        for note in res.diagnostics:
            self._log(note)
        return "break"

    def _on_other_key(self, ev) -> None:
        if ev.keysym != "Tab":
            self._controller.note_command(f"key:{ev.keysym}")

    def _align(self, kind: str) -> str:
        self._sync_from_widget()
        changed = align_definition(self._buffer, self._caret_pos(), kind)
        if changed:
            caret = self.txt.index("insert")
            self.txt.delete("1.0", "end")
            self.txt.insert("1.0", self._buffer.text)
            self.txt.mark_set("insert", caret)
        self._controller.note_command(f"align-{kind}")
        self._log(f"Aligned {changed} line(s) on {kind}.")
        return "break"

    # --------- misc UI helpers ---------

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")


if __name__ == "__main__":
    app = OffsideApp()
    app.mainloop()
