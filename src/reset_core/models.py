from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from . import constants as C


@dataclass
class ResetSettings:
    # Server paths
    server_dir: str = ""
    properties_filename: str = C.SERVER_PROPERTIES_FILE
    server_jar_name: str = ""  # empty = first *.jar in server_dir
    restart_script_name: str = C.RESTART_SCRIPT_NAME

    # Launch
    java_executable: str = C.JAVA_EXECUTABLE
    jvm_min_memory: str = C.JVM_MIN_MEMORY
    jvm_max_memory: str = C.JVM_MAX_MEMORY
    screen_session: str = C.SCREEN_SESSION_NAME
    script_shell: str = C.SCRIPT_SHELL

    # Timing (seconds)
    shutdown_delay_seconds: float = C.SERVER_SHUTDOWN_DELAY
    graceful_shutdown_timeout: int = C.GRACEFUL_SHUTDOWN_TIMEOUT
    force_kill_delay: int = C.FORCE_KILL_DELAY
    process_cleanup_delay: int = C.PROCESS_CLEANUP_DELAY
    verification_delay: int = C.VERIFICATION_DELAY

    admin_permission: str = C.ADMIN_PERMISSION

    # Timestamps
    last_reset_at: str = ""


@dataclass(frozen=True)
class ServerEnvironment:
    """
    Snapshot of the server layout taken once at start-up.

    Paths are resolved here so the restart script can embed them as literals.
    """

    root_dir: Path
    properties_path: Path
    server_artifact: Optional[Path] = None
    script_name: str = C.RESTART_SCRIPT_NAME

    @property
    def script_path(self) -> Path:
        return self.root_dir / self.script_name

    @property
    def logs_dir(self) -> Path:
        return self.root_dir / C.LOGS_DIR

    @property
    def output_log_path(self) -> Path:
        return self.logs_dir / C.OUTPUT_LOG_NAME

    @classmethod
    def detect(cls, settings: ResetSettings) -> "ServerEnvironment":
        root = Path(settings.server_dir or ".").expanduser().resolve()
        props = root / settings.properties_filename
        return cls(
            root_dir=root,
            properties_path=props,
            server_artifact=find_server_artifact(root, settings.server_jar_name),
            script_name=settings.restart_script_name,
        )


def find_server_artifact(root: Path, jar_name: str = "") -> Optional[Path]:
    if jar_name:
        jar = root / jar_name
        return jar if jar.is_file() else None
    try:
        jars = sorted(p for p in root.glob("*.jar") if p.is_file())
    except OSError:
        return None
    return jars[0] if jars else None


@dataclass(frozen=True)
class WorldConfiguration:
    seed: int
    world_id: str


@dataclass(frozen=True)
class CleanupPlan:
    previous_world_id: str
    new_world_id: str
    dimension_directories: Tuple[str, ...]
    orphan_directories: Tuple[str, ...]
    cache_files: Tuple[str, ...]
    cache_directories: Tuple[str, ...]
    world_data_patterns: Tuple[str, ...]

    @property
    def directory_count(self) -> int:
        return len(self.dimension_directories) + len(self.orphan_directories)


@dataclass(frozen=True)
class WorldStats:
    total: int = 0
    default_named: int = 0
    previous_resets: int = 0

    def __str__(self) -> str:
        return f"WorldStats(total={self.total}, default={self.default_named}, old={self.previous_resets})"


@dataclass(frozen=True)
class EnvironmentInfo:
    server_path: str
    total_files: int
    world_directories: int
    jar_files: int
    total_size_bytes: int

    @property
    def total_size_mb(self) -> int:
        return self.total_size_bytes // (1024 * 1024)

    def __str__(self) -> str:
        return (
            f"ServerEnvironment(path='{self.server_path}', files={self.total_files}, "
            f"worlds={self.world_directories}, jars={self.jar_files}, size={self.total_size_mb}MB)"
        )


class ResetPhase(str, Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    CONFIGURING_WORLD = "ConfiguringWorld"
    SCRIPT_GENERATED = "ScriptGenerated"
    SCRIPT_LAUNCHED = "ScriptLaunched"
    SHUTDOWN_SCHEDULED = "ShutdownScheduled"
    FAILED = "Failed"
    EMERGENCY_SHUTDOWN = "EmergencyShutdown"


@dataclass
class ResetStatus:
    phase: ResetPhase = ResetPhase.IDLE
    in_flight: bool = False
    actor: str = ""
    previous_world_id: str = ""
    new_world_id: str = ""
    script_path: str = ""
    launched_pid: int = 0
    last_error: str = ""
    started_at: str = ""
    history: list = field(default_factory=list)
