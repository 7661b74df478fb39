from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from src.orchestration_core import AppController
from src.orchestration_core.errors import OrchestrationError


class BaseTab(ABC):
    """
    Contract for console tabs.

    build(parent) -> returns frame
    on_show() -> called when the tab becomes the selected one
    refresh() -> called on every UiApp tick while the tab is visible
    """

    TAB_ID: str = "base"
    TAB_TITLE: str = "Base"
    ORDER: int = 100

    def __init__(self, controller: AppController, log_fn: Callable[[str], None]):
        self.controller = controller
        self.log = log_fn
        self.frame = None  # assigned by build()

    @abstractmethod
    def build(self, parent):
        raise NotImplementedError

    def on_show(self) -> None:
        return

    def refresh(self) -> None:
        return

    def run_action(self, label: str, fn: Callable[[], None]) -> bool:
        """Run a button action; known failures are warnings, anything else is an error line."""
        try:
            fn()
            return True
        except OrchestrationError as e:
            self.log(f"[WARN] {label}: {e}")
        except Exception as e:
            self.log(f"[ERROR] {label} failed: {e}")
        return False
