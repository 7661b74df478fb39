from __future__ import annotations

import threading
from copy import deepcopy
from datetime import datetime
from typing import Callable

from src.reset_core.models import ResetPhase, ResetStatus


class ResetStateStore:
    """
    Holds the live ResetStatus + provides thread-safe get/update.
    - The UI thread, console commands and timer threads may all touch it.
    - in_flight is the single reset slot: only one reset may hold it, and a
      reset that reached the shutdown never gives it back.
    """

    def __init__(self, initial: ResetStatus | None = None):
        self._lock = threading.RLock()
        self._state = initial if initial is not None else ResetStatus()

    def get(self) -> ResetStatus:
        with self._lock:
            return deepcopy(self._state)

    def update(self, fn: Callable[[ResetStatus], ResetStatus]) -> ResetStatus:
        """
        Apply fn to a mutable copy of state, store the result, return stored copy.
        """
        with self._lock:
            draft = deepcopy(self._state)
            updated = fn(draft)
            self._state = deepcopy(updated)
            return deepcopy(self._state)

    # -------------------------
    # In-flight slot
    # -------------------------

    def try_begin(self, actor: str) -> bool:
        with self._lock:
            if self._state.in_flight:
                return False
            self._state = ResetStatus(
                phase=ResetPhase.VALIDATING,
                in_flight=True,
                actor=actor,
                started_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                history=[ResetPhase.VALIDATING],
            )
            return True

    def advance(self, phase: ResetPhase, **changes) -> ResetStatus:
        def _apply(s: ResetStatus) -> ResetStatus:
            s.phase = phase
            s.history.append(phase)
            for key, value in changes.items():
                setattr(s, key, value)
            return s

        return self.update(_apply)

    def fail(self, error: str, *, release: bool) -> ResetStatus:
        phase = ResetPhase.FAILED if release else ResetPhase.EMERGENCY_SHUTDOWN
        return self.advance(phase, last_error=error, in_flight=not release)

    def is_in_flight(self) -> bool:
        with self._lock:
            return self._state.in_flight
