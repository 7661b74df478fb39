from .app_controller import AppController
from .commands import Actor, ResetCommand
from .reset_orchestrator import ResetOrchestrator, ResetOutcome
from .state_store import ResetStateStore

__all__ = [
    "AppController",
    "Actor",
    "ResetCommand",
    "ResetOrchestrator",
    "ResetOutcome",
    "ResetStateStore",
]
