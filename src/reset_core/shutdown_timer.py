from __future__ import annotations

import threading
from typing import Callable, Optional


class ThreadScheduler:
    """call_later() backed by a non-daemon threading.Timer."""

    def call_later(self, delay_seconds: float, fn: Callable[[], None]) -> None:
        t = threading.Timer(max(0.0, float(delay_seconds)), fn)
        t.daemon = False
        t.start()


class OneShotTimer:
    """
    Fires a callback once, after a delay, on the host's scheduler.

    Once armed it cannot be cancelled or re-armed; later arm() calls are
    refused.
    """

    def __init__(self, scheduler, log_fn: Callable[[str], None]):
        self._scheduler = scheduler
        self._log = log_fn
        self._lock = threading.Lock()
        self._armed = False
        self._fired = False
        self._delay: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def delay(self) -> Optional[float]:
        return self._delay

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> bool:
        with self._lock:
            if self._armed:
                self._log("[WARN] Shutdown timer already armed; ignoring second request.")
                return False
            self._armed = True
            self._delay = float(delay_seconds)

        def _fire():
            self._fired = True
            callback()

        self._scheduler.call_later(self._delay, _fire)
        self._log(f"[INFO] Shutdown scheduled in {self._delay:g} seconds")
        return True
