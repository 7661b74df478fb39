# src/ui_core/tabs/reset_tab.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox

from src.reset_core.constants import Messages
from src.reset_core.models import ResetPhase

from .base_tab import BaseTab


class ResetTab(BaseTab):
    TAB_ID = "reset"
    TAB_TITLE = "World Reset"
    ORDER = 10

    def __init__(self, controller, log_fn):
        super().__init__(controller, log_fn)

        self.var_phase = tk.StringVar(value=ResetPhase.IDLE.value)
        self.var_actor = tk.StringVar(value="--")
        self.var_plan = tk.StringVar(value="--")
        self.var_error = tk.StringVar(value="")
        self.var_cmd = tk.StringVar()

        self._btn_confirm = None

    def build(self, parent):
        self.frame = ttk.Frame(parent)

        outer = ttk.Frame(self.frame)
        outer.pack(fill="both", expand=True, padx=12, pady=12)
        outer.columnconfigure(0, weight=1)
        outer.columnconfigure(1, weight=1)

        # --- Warning + actions ---
        danger = ttk.LabelFrame(outer, text="Reset All Worlds")
        danger.grid(row=0, column=0, sticky="nsew", padx=(0, 12))
        danger.columnconfigure(0, weight=1)

        for row, text in enumerate((Messages.RESET_WARNING, Messages.RESET_CONFIRMATION)):
            ttk.Label(danger, text=text, style="Warning.TLabel", wraplength=380).grid(row=row, column=0, sticky="w", padx=10, pady=(8, 0))
        ttk.Label(
            danger,
            text="No backup is taken. The server stops, the old world is deleted and a new one is generated.",
            style="Dim.TLabel",
            wraplength=380,
        ).grid(row=2, column=0, sticky="w", padx=10, pady=8)

        self._btn_confirm = ttk.Button(danger, text="Reset World Now", style="Danger.TButton", command=self._confirm_reset)
        self._btn_confirm.grid(row=3, column=0, sticky="ew", padx=10, pady=(4, 12))

        # --- Status ---
        status = ttk.LabelFrame(outer, text="Reset Status")
        status.grid(row=0, column=1, sticky="nsew")
        status.columnconfigure(1, weight=1)

        rows = (("Phase:", self.var_phase), ("Started by:", self.var_actor), ("Worlds:", self.var_plan), ("Last error:", self.var_error))
        for row, (label, var) in enumerate(rows):
            ttk.Label(status, text=label, style="Dim.TLabel").grid(row=row, column=0, sticky="w", padx=10, pady=4)
            ttk.Label(status, textvariable=var, wraplength=300).grid(row=row, column=1, sticky="w", padx=10, pady=4)

        # --- Console ---
        cmd = ttk.LabelFrame(outer, text="Console Command (reset, reset confirm, or any server command)")
        cmd.grid(row=1, column=0, columnspan=2, sticky="ew", pady=(12, 0))
        cmd.columnconfigure(0, weight=1)

        cmd_entry = ttk.Entry(cmd, textvariable=self.var_cmd)
        cmd_entry.grid(row=0, column=0, sticky="ew", padx=8, pady=8)
        ttk.Button(cmd, text="Send", command=self._send_command).grid(row=0, column=1, padx=(0, 8), pady=8)
        cmd_entry.bind("<Return>", lambda _e: self._send_command())

        self._refresh_status()
        return self.frame

    # -------------------------
    # Tab lifecycle
    # -------------------------

    def on_show(self) -> None:
        self._refresh_status()

    def refresh(self) -> None:
        self._refresh_status()

    def _refresh_status(self) -> None:
        status = self.controller.reset_status()
        self.var_phase.set(status.phase.value)
        self.var_actor.set(status.actor or "--")
        if status.previous_world_id:
            self.var_plan.set(f"{status.previous_world_id} -> {status.new_world_id or '?'}")
        else:
            self.var_plan.set("--")
        self.var_error.set(status.last_error)

        if status.in_flight:
            self._btn_confirm.state(["disabled"])
        else:
            self._btn_confirm.state(["!disabled"])

    # -------------------------
    # Actions
    # -------------------------

    def _confirm_reset(self) -> None:
        ok = messagebox.askyesno(
            "Confirm world reset",
            f"{Messages.RESET_WARNING}\n{Messages.RESET_CONFIRMATION}\n\nReset now?",
            icon="warning",
        )
        if not ok:
            return
        self._run_line("reset confirm")

    def _send_command(self) -> None:
        line = self.var_cmd.get().strip()
        if not line:
            return
        self.var_cmd.set("")
        self._run_line(line)

    def _run_line(self, line: str) -> None:
        self.log(f"> {line}")

        def _send():
            for reply in self.controller.handle_console_line(line):
                self.log(reply)

        self.run_action("Command", _send)
        self._refresh_status()
