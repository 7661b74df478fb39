# src/ui_core/ui_app.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
from pathlib import Path
from typing import Callable, Dict, List, Optional

from src.orchestration_core import AppController
from src.reset_core.constants import APP_NAME, APP_VERSION

from .theme import Theme
from .log_sink import LogSink
from .tk_scheduler import TkScheduler
from .widgets.log_view import LogView
from .tabs.base_tab import BaseTab
from .tabs.registry import get_tab_classes


class UiApp:
    """
    Tkinter host console:
      - owns the root window, the Notebook (tabs) and the LogView
      - owns the tick loop that pumps server output + logs + tab refresh
      - is the host the reset shuts down: the controller's one-shot
        shutdown timer runs on this window's event loop, and its exit hook
        closes this window

    Design rules:
      - Tabs call AppController for actions and state
      - Tabs write logs via log_fn (thread-safe)
      - UiApp is the only place that owns the tick loop
    """

    def __init__(self, app_dir: Path):
        self.app_dir = Path(app_dir).expanduser().resolve()

        self.root = tk.Tk()
        self.root.title(f"{APP_NAME} {APP_VERSION}")
        self.root.geometry("1000x650")

        # Logging (thread-safe)
        self._log_sink = LogSink()
        self.log_fn: Callable[[str], None] = self._log_sink.write

        self._scheduler = TkScheduler(self.root)

        self.controller = AppController(
            self.app_dir,
            self.log_fn,
            scheduler=self._scheduler,
            exit_fn=self._exit_for_reset,
        )

        Theme(self.root).apply()

        self.main: Optional[ttk.Frame] = None
        self.notebook: Optional[ttk.Notebook] = None
        self.log_view: Optional[LogView] = None

        self._tabs: List[BaseTab] = []
        self._tab_by_frame: Dict[str, BaseTab] = {}

        self._tick_ms = 150
        self._is_closing = False

        self._build_layout()
        self._build_tabs()

        if not self.controller.startup_check():
            self.log_fn("[WARN] Fix the server directory in the config file and restart the console.")
        self.controller.save_settings()

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._schedule_tick()

    # -------------------------
    # Layout + tabs
    # -------------------------

    def _build_layout(self) -> None:
        self.main = ttk.Frame(self.root)
        self.main.pack(fill="both", expand=True)

        self.main.columnconfigure(0, weight=1)
        self.main.rowconfigure(0, weight=3)
        self.main.rowconfigure(1, weight=2)

        self.notebook = ttk.Notebook(self.main)
        self.notebook.grid(row=0, column=0, sticky="nsew")

        self.log_view = LogView(self.main, max_lines=2500)
        self.log_view.grid(row=1, column=0, sticky="nsew")

        self.notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)

    def _build_tabs(self) -> None:
        assert self.notebook is not None

        for tab_cls in get_tab_classes():
            tab = tab_cls(self.controller, self.log_fn)
            frame = tab.build(self.notebook)
            self.notebook.add(frame, text=getattr(tab, "TAB_TITLE", "Tab"))
            self._tabs.append(tab)
            self._tab_by_frame[str(frame)] = tab

        self._fire_current_tab_on_show()

    # -------------------------
    # Events
    # -------------------------

    def _current_tab(self) -> Optional[BaseTab]:
        assert self.notebook is not None
        return self._tab_by_frame.get(self.notebook.select())

    def _on_tab_changed(self, _event=None) -> None:
        self._fire_current_tab_on_show()

    def _fire_current_tab_on_show(self) -> None:
        try:
            tab = self._current_tab()
            if tab:
                tab.on_show()
        except Exception as e:
            self.log_fn(f"[ERROR] Tab refresh failed: {e}")

    # -------------------------
    # Tick loop (pump)
    # -------------------------

    def _schedule_tick(self) -> None:
        if self._is_closing:
            return
        self.root.after(self._tick_ms, self._tick)

    def _tick(self) -> None:
        if self._is_closing:
            return

        # (0) Hand over work queued by other threads (host shutdown)
        self._scheduler.pump()

        # (1) Drain server output -> log sink
        for line in self.controller.poll_server_output(max_lines=200):
            self.log_fn(line)

        # (2) Drain buffered logs -> LogView
        assert self.log_view is not None
        self.log_view.append_lines(self._log_sink.drain(max_lines=500))

        # (3) Refresh visible tab
        try:
            tab = self._current_tab()
            if tab:
                tab.refresh()
        except Exception as e:
            self.log_fn(f"[ERROR] Tab refresh failed: {e}")

        self._schedule_tick()

    # -------------------------
    # Close behavior
    # -------------------------

    def _exit_for_reset(self) -> None:
        """Exit hook for the reset's scheduled shutdown. No questions asked."""
        self._is_closing = True
        self.root.destroy()

    def _on_close(self) -> None:
        if self._is_closing:
            return

        if self.controller.reset_status().in_flight:
            messagebox.showinfo("Reset in progress", "A world reset is in progress; the console will close by itself.")
            return

        if self.controller.is_server_running():
            choice = messagebox.askyesnocancel(
                "Server is running",
                "The server appears to still be running.\n\n"
                "Yes = Stop gracefully and exit\n"
                "No = Exit without stopping\n"
                "Cancel = Keep console open"
            )
            if choice is None:
                return
            if choice is True:
                self.controller.stop_server_graceful()

        self._is_closing = True
        self.root.destroy()

    # -------------------------
    # Public
    # -------------------------

    def run(self) -> None:
        self.root.mainloop()
