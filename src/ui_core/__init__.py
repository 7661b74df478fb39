from .ui_app import UiApp

__all__ = ["UiApp"]
