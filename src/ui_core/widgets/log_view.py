from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from ..theme import PALETTE

# Bracket tag -> text tag used for coloring
LEVEL_TAGS = {
    "[ERROR]": "error",
    "[WARN]": "warn",
    "[OK]": "ok",
    "[STEP]": "step",
}


class LogView(ttk.Frame):
    def __init__(self, parent, *, max_lines: int = 2000):
        super().__init__(parent)
        self._max_lines = max_lines
        self._line_count = 0

        self.text = tk.Text(self, height=12, wrap="none")
        self.text.configure(state="disabled")
        self.text.tag_configure("error", foreground=PALETTE["danger"])
        self.text.tag_configure("warn", foreground=PALETTE["warn"])
        self.text.tag_configure("ok", foreground=PALETTE["ok"])
        self.text.tag_configure("step", foreground=PALETTE["accent"])

        yscroll = ttk.Scrollbar(self, orient="vertical", command=self.text.yview)
        self.text.configure(yscrollcommand=yscroll.set)

        self.text.grid(row=0, column=0, sticky="nsew")
        yscroll.grid(row=0, column=1, sticky="ns")

        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

    def append_lines(self, lines: list[str]) -> None:
        if not lines:
            return

        self.text.configure(state="normal")
        for line in lines:
            self.text.insert("end", line + "\n", self._tag_for(line))
            self._line_count += 1

        # Trim oldest lines if too many
        if self._line_count > self._max_lines:
            trim = self._line_count - self._max_lines
            self.text.delete("1.0", f"{trim + 1}.0")
            self._line_count = self._max_lines

        self.text.see("end")
        self.text.configure(state="disabled")

    @staticmethod
    def _tag_for(line: str) -> tuple:
        for marker, tag in LEVEL_TAGS.items():
            if marker in line:
                return (tag,)
        return ()
