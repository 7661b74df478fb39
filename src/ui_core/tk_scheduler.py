from __future__ import annotations

import queue
import threading
import tkinter as tk
from typing import Callable, Tuple


class TkScheduler:
    """
    call_later() on the Tk event loop, so deferred work runs on the UI thread.

    Calls from other threads are queued and handed to root.after() by pump(),
    which UiApp runs on every tick.
    """

    def __init__(self, root: tk.Tk):
        self.root = root
        self._ui_thread = threading.current_thread()
        self._pending: "queue.Queue[Tuple[float, Callable[[], None]]]" = queue.Queue()

    def call_later(self, delay_seconds: float, fn: Callable[[], None]) -> None:
        if threading.current_thread() is not self._ui_thread:
            self._pending.put((delay_seconds, fn))
            return
        self.root.after(max(0, int(delay_seconds * 1000)), fn)

    def pump(self) -> None:
        while True:
            try:
                delay_seconds, fn = self._pending.get_nowait()
            except queue.Empty:
                return
            self.root.after(max(0, int(delay_seconds * 1000)), fn)
