# src/ui_core/tabs/registry.py
from __future__ import annotations

from .base_tab import BaseTab
from .dashboard_tab import DashboardTab
from .reset_tab import ResetTab


def get_tab_classes() -> list[type[BaseTab]]:
    """Central place to register tabs."""
    tabs: list[type[BaseTab]] = [
        DashboardTab,
        ResetTab,
    ]
    return sorted(tabs, key=lambda t: getattr(t, "ORDER", 100))
