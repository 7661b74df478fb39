from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from ..theme import FONTS, PALETTE
from .base_tab import BaseTab


class DashboardTab(BaseTab):
    TAB_ID = "dashboard"
    TAB_TITLE = "Dashboard"
    ORDER = 0

    # Directory scans are not free; only redo them every N ticks.
    SCAN_EVERY_TICKS = 200

    def __init__(self, controller, log_fn):
        super().__init__(controller, log_fn)

        self.var_status = tk.StringVar(value="OFFLINE")
        self.var_level = tk.StringVar(value="--")
        self.var_worlds = tk.StringVar(value="--")
        self.var_old_worlds = tk.StringVar(value="--")
        self.var_jar = tk.StringVar(value="--")
        self.var_size = tk.StringVar(value="--")
        self.var_last_reset = tk.StringVar(value="Never")

        self.lbl_status = None
        self.btn_start = None
        self.btn_stop = None
        self._ticks = 0

    def build(self, parent):
        self.frame = ttk.Frame(parent)
        for col in range(3):
            self.frame.columnconfigure(col, weight=1)

        # --- PANEL 1: Server Health ---
        health = ttk.LabelFrame(self.frame, text="Server Health")
        health.grid(row=0, column=0, sticky="nsew", padx=12, pady=12)

        self.lbl_status = ttk.Label(health, textvariable=self.var_status, font=FONTS["status"], foreground=PALETTE["danger"])
        self.lbl_status.pack(pady=(15, 5))

        self.btn_start = ttk.Button(health, text="Start Server", command=self._do_start)
        self.btn_start.pack(fill="x", padx=20, pady=(10, 5))
        self.btn_stop = ttk.Button(health, text="Stop Server", command=self._do_stop)
        self.btn_stop.pack(fill="x", padx=20, pady=5)

        # --- PANEL 2: Worlds ---
        worlds = ttk.LabelFrame(self.frame, text="Worlds")
        worlds.grid(row=0, column=1, sticky="nsew", padx=0, pady=12)
        w_info = ttk.Frame(worlds)
        w_info.pack(fill="x", padx=10, pady=10)
        self._make_info_row(w_info, "Current level:", self.var_level, 0)
        self._make_info_row(w_info, "World folders:", self.var_worlds, 1)
        self._make_info_row(w_info, "From older resets:", self.var_old_worlds, 2)
        self._make_info_row(w_info, "Last reset:", self.var_last_reset, 3)

        # --- PANEL 3: Environment ---
        env = ttk.LabelFrame(self.frame, text="Environment")
        env.grid(row=0, column=2, sticky="nsew", padx=12, pady=12)
        e_info = ttk.Frame(env)
        e_info.pack(fill="x", padx=10, pady=10)
        self._make_info_row(e_info, "Server jar:", self.var_jar, 0)
        self._make_info_row(e_info, "Directory size:", self.var_size, 1)
        ttk.Label(env, text=str(self.controller.env.root_dir), style="Dim.TLabel", wraplength=260).pack(fill="x", padx=10)

        self._refresh_ui_state(scan=True)
        return self.frame

    def _make_info_row(self, parent, label, var, row):
        parent.columnconfigure(1, weight=1)
        ttk.Label(parent, text=label, style="Dim.TLabel").grid(row=row, column=0, sticky="w", pady=2)
        ttk.Label(parent, textvariable=var, font=FONTS["heading"]).grid(row=row, column=1, sticky="e", pady=2)

    # -------------------------
    # Lifecycle / Refresh
    # -------------------------
    def refresh(self):
        self._ticks += 1
        self._refresh_ui_state(scan=self._ticks % self.SCAN_EVERY_TICKS == 0)

    def on_show(self):
        self._refresh_ui_state(scan=True)

    def _refresh_ui_state(self, scan: bool = False):
        if self.controller.is_server_running():
            self.var_status.set("ONLINE")
            self.lbl_status.configure(foreground=PALETTE["ok"])
            self.btn_start.state(["disabled"])
            self.btn_stop.state(["!disabled"])
        else:
            self.var_status.set("OFFLINE")
            self.lbl_status.configure(foreground=PALETTE["danger"])
            self.btn_start.state(["!disabled"])
            self.btn_stop.state(["disabled"])

        self.var_last_reset.set(self.controller.settings.last_reset_at or "Never")

        if not scan:
            return
        stats = self.controller.get_world_stats()
        info = self.controller.get_environment_info()
        jar = self.controller.env.server_artifact
        self.var_level.set(self.controller.current_world_id())
        self.var_worlds.set(str(stats.total))
        self.var_old_worlds.set(str(stats.previous_resets))
        self.var_jar.set(jar.name if jar else "not found")
        self.var_size.set(f"{info.total_size_mb} MB")

    # -------------------------
    # Actions
    # -------------------------
    def _do_start(self):
        self.run_action("Start", self.controller.start_server)

    def _do_stop(self):
        self.run_action("Stop", self.controller.stop_server_graceful)
