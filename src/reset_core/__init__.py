from .constants import CONFIG_FILENAME
from .models import (
    ResetSettings,
    ServerEnvironment,
    WorldConfiguration,
    CleanupPlan,
    ResetPhase,
    ResetStatus,
)
from .config_store import ConfigStore
from .config_mutator import ConfigMutator
from .cleanup_planner import CleanupPlanner
from .script_materializer import RestartScriptMaterializer
from .detached_launcher import DetachedLauncher, restart_argv
from .shutdown_timer import OneShotTimer, ThreadScheduler
from .server_process import ServerProcess, server_command

__all__ = [
    "CONFIG_FILENAME",
    "ResetSettings",
    "ServerEnvironment",
    "WorldConfiguration",
    "CleanupPlan",
    "ResetPhase",
    "ResetStatus",
    "ConfigStore",
    "ConfigMutator",
    "CleanupPlanner",
    "RestartScriptMaterializer",
    "DetachedLauncher",
    "restart_argv",
    "OneShotTimer",
    "ThreadScheduler",
    "ServerProcess",
    "server_command",
]
