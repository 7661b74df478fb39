from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from src.reset_core import (
    CONFIG_FILENAME,
    CleanupPlanner,
    ConfigMutator,
    ConfigStore,
    DetachedLauncher,
    OneShotTimer,
    ResetSettings,
    ResetStatus,
    RestartScriptMaterializer,
    ServerEnvironment,
    ServerProcess,
    ThreadScheduler,
    restart_argv,
    server_command,
)
from src.reset_core.models import EnvironmentInfo, WorldStats

from .commands import Actor, ResetCommand
from .errors import NotRunningError, ResetInProgressError, ValidationError
from .reset_orchestrator import ResetOrchestrator, ResetOutcome
from .validators import validate_environment, validate_settings_for_start


class AppController:
    """
    UI-agnostic orchestration layer.

    Builds every component once and hands them to each other:
      - Settings (read once) + immutable ServerEnvironment snapshot
      - Hosted server process
      - Config mutator, cleanup planner, script materializer, detached launcher
      - One-shot shutdown timer on the host's scheduler
      - Reset orchestrator + `reset` command

    UI should:
      - pass its own scheduler and exit hook
      - route console lines through handle_console_line()
      - append logs via log_fn passed into controller
    """

    def __init__(
        self,
        app_dir: Path,
        log_fn: Callable[[str], None],
        *,
        config_filename: str = CONFIG_FILENAME,
        scheduler=None,
        exit_fn: Optional[Callable[[], None]] = None,
        launcher: Optional[DetachedLauncher] = None,
    ):
        self._log = log_fn
        self._app_dir = Path(app_dir).expanduser().resolve()
        self._config_path = self._app_dir / config_filename
        self._config = ConfigStore(self._config_path)

        self.settings: ResetSettings = self._load_settings()
        self.env = ServerEnvironment.detect(self.settings)

        self._server = ServerProcess(self._log, stop_timeout=self.settings.graceful_shutdown_timeout)
        self._planner = CleanupPlanner(self.env.root_dir, self._log)
        self._mutator = ConfigMutator(self.env.properties_path, self._log)
        self._materializer = RestartScriptMaterializer(self.env, self._planner, self.settings, self._log)
        self._launcher = launcher or DetachedLauncher(self._log)
        self._scheduler = scheduler or ThreadScheduler()
        self._timer = OneShotTimer(self._scheduler, self._log)
        self._exit_fn = exit_fn
        self._shutdown_thread: Optional[threading.Thread] = None

        self._orchestrator = ResetOrchestrator(
            self.env,
            self._mutator,
            self._materializer,
            self._launcher,
            self._timer,
            self.shutdown_host,
            self._log,
            launch_argv=restart_argv(self.env, self.settings),
            shutdown_delay=self.settings.shutdown_delay_seconds,
        )
        self.reset_command = ResetCommand(
            self.request_reset,
            self._log,
            broadcast_fn=self.broadcast,
            permission=self.settings.admin_permission,
        )
        self.console_actor = Actor("CONSOLE", frozenset({"*"}))

    # -------------------------
    # Settings
    # -------------------------

    def _load_settings(self) -> ResetSettings:
        settings = self._config.load()
        if not settings.server_dir:
            settings = replace(settings, server_dir=str(self._app_dir))
        if self._config_path.exists():
            self._log(f"[INFO] Config loaded from {self._config_path}")
        else:
            self._log("[INFO] No config file found. Using defaults.")
        return settings

    def save_settings(self) -> None:
        try:
            self._config.save(self.settings)
            self._log(f"[INFO] Config saved to {self._config_path}")
        except OSError as e:
            self._log(f"[ERROR] Failed to save config: {e}")

    # -------------------------
    # Start-up checks
    # -------------------------

    def startup_check(self) -> bool:
        self._log("[INFO] Validating server environment...")
        try:
            warnings = validate_environment(self.env)
        except ValidationError as e:
            self._log(f"[ERROR] {e}")
            self._log("[WARN] World reset is unavailable until the environment is fixed.")
            return False

        for w in warnings:
            self._log(f"[WARN] {w}")
        self._log("[OK] Server environment validated successfully")

        self._log(f"[INFO] {self.get_environment_info()}")
        self._log(f"[INFO] {self.get_world_stats()}")
        self._log(f"[INFO] Current level name: {self.current_world_id()}")
        return True

    def get_environment_info(self) -> EnvironmentInfo:
        root = self.env.root_dir
        try:
            entries = list(root.iterdir())
        except OSError:
            entries = []

        world_dirs = jars = size = 0
        for entry in entries:
            try:
                if entry.is_dir() and "world" in entry.name:
                    world_dirs += 1
                if entry.name.endswith(".jar"):
                    jars += 1
                size += entry.stat().st_size
            except OSError:
                continue

        return EnvironmentInfo(str(root), len(entries), world_dirs, jars, size)

    def get_world_stats(self) -> WorldStats:
        return self._planner.get_world_stats()

    def current_world_id(self) -> str:
        return self._mutator.read_current_world_id()

    # -------------------------
    # Server Lifecycle
    # -------------------------

    def start_server(self) -> None:
        if self._orchestrator.store.is_in_flight():
            # The restart script owns the next start.
            raise ResetInProgressError("A world reset is in progress; the restart script will start the server.")

        validate_settings_for_start(self.env)

        if self._server.is_running():
            raise ValidationError("Server is already running.")

        s = self.settings
        argv = server_command(s.java_executable, self.env.server_artifact, s.jvm_min_memory, s.jvm_max_memory)
        self._server.start(argv, self.env.root_dir)

    def stop_server_graceful(self) -> None:
        if not self._server.is_running():
            return
        self._server.stop_graceful()

    def kill_server(self) -> None:
        if not self._server.is_running():
            return
        self._server.kill()

    def is_server_running(self) -> bool:
        return self._server.is_running()

    def poll_server_output(self, max_lines: int = 100) -> List[str]:
        return self._server.read_output_lines(max_lines)

    def send_server_command(self, cmd: str) -> None:
        if not self._server.is_running():
            raise NotRunningError("Cannot send command; server is not running.")
        self._server.write_stdin(cmd)

    def broadcast(self, message: str) -> None:
        if self._server.is_running():
            self._server.write_stdin(f"say {message}")
        self._log(f"[BROADCAST] {message}")

    # -------------------------
    # World Reset
    # -------------------------

    def request_reset(self, actor: str) -> ResetOutcome:
        outcome = self._orchestrator.request_reset(actor)
        if outcome.accepted:
            now_str = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.settings = replace(self.settings, last_reset_at=now_str)
            self.save_settings()
        return outcome

    def reset_status(self) -> ResetStatus:
        return self._orchestrator.store.get()

    def handle_console_line(self, line: str) -> List[str]:
        """
        `reset ...` is handled here; anything else goes to the server console.
        """
        if not line.strip():
            return []
        replies = self.reset_command.dispatch(self.console_actor, line)
        if replies is not None:
            return replies
        self.send_server_command(line.strip())
        return []

    def shutdown_host(self) -> None:
        """
        Stop the hosted server, then call the exit hook.

        Called on the host's scheduler thread (the Tk loop in the console), so
        the graceful stop runs on a worker and the exit hook is handed back to
        the scheduler once it is done.
        """
        self._log("[SYS] Host shutdown requested.")
        if not self._server.is_running():
            self._exit_host()
            return

        self._log(f"[SYS] Waiting up to {self.settings.graceful_shutdown_timeout:g}s for the server to stop...")

        def _stop_then_exit():
            try:
                self.stop_server_graceful()
            finally:
                self._scheduler.call_later(0, self._exit_host)

        self._shutdown_thread = threading.Thread(target=_stop_then_exit, name="host-shutdown")
        self._shutdown_thread.start()

    def _exit_host(self) -> None:
        if self._exit_fn is not None:
            self._exit_fn()
