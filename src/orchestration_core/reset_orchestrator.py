from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from src.reset_core import (
    ConfigMutator,
    DetachedLauncher,
    OneShotTimer,
    ResetPhase,
    RestartScriptMaterializer,
    ServerEnvironment,
    WorldConfiguration,
)

from .errors import (
    ConfigurationError,
    LaunchError,
    ResetError,
    ScriptGenerationError,
    ValidationError,
)
from .state_store import ResetStateStore
from .validators import validate_environment

TOTAL_STEPS = 4


@dataclass(frozen=True)
class ResetOutcome:
    accepted: bool
    reason: str = ""
    phase: ResetPhase = ResetPhase.IDLE
    configuration: Optional[WorldConfiguration] = None

    @classmethod
    def accept(cls, configuration: WorldConfiguration) -> "ResetOutcome":
        return cls(True, "", ResetPhase.SHUTDOWN_SCHEDULED, configuration)

    @classmethod
    def deny(cls, reason: str, phase: ResetPhase) -> "ResetOutcome":
        return cls(False, reason, phase, None)


class ResetOrchestrator:
    """
    Runs one world reset from validation up to the armed shutdown.

    Single forward path:
      Validating -> ConfiguringWorld -> ScriptGenerated -> ScriptLaunched -> ShutdownScheduled

    After the shutdown is armed this object has nothing left to do; the
    detached restart script owns deletion and restart. A failure before the
    launch releases the reset slot. A failed launch still shuts the host down,
    since the configuration has already been rewritten.
    """

    def __init__(
        self,
        environment: ServerEnvironment,
        mutator: ConfigMutator,
        materializer: RestartScriptMaterializer,
        launcher: DetachedLauncher,
        timer: OneShotTimer,
        shutdown_fn: Callable[[], None],
        log_fn: Callable[[str], None],
        *,
        launch_argv: Sequence[str],
        shutdown_delay: float,
        store: Optional[ResetStateStore] = None,
    ):
        self.env = environment
        self._mutator = mutator
        self._materializer = materializer
        self._launcher = launcher
        self._timer = timer
        self._shutdown_fn = shutdown_fn
        self._log = log_fn
        self._launch_argv = list(launch_argv)
        self._shutdown_delay = shutdown_delay
        self.store = store or ResetStateStore()

    def request_reset(self, actor: str) -> ResetOutcome:
        if not self.store.try_begin(actor):
            status = self.store.get()
            reason = f"A world reset is already in progress (started by {status.actor})."
            self._log(f"[WARN] Reset requested by {actor} refused: {reason}")
            return ResetOutcome.deny(reason, status.phase)

        self._log("[INFO] === WORLD RESET STARTED ===")
        self._log(f"[INFO] World reset initiated by: {actor}")

        try:
            config = self._run()
        except LaunchError as e:
            self._log(f"[ERROR] {e}")
            self._log("[WARN] Attempting emergency shutdown without script...")
            self.store.fail(str(e), release=False)
            self._timer.arm(0, self._shutdown)
            return ResetOutcome.deny(str(e), ResetPhase.EMERGENCY_SHUTDOWN)
        except (ValidationError, ResetError) as e:
            failed_in = self.store.get().phase
            self._log(f"[ERROR] World reset aborted during {failed_in.value}: {e}")
            self.store.fail(str(e), release=True)
            return ResetOutcome.deny(str(e), failed_in)
        except Exception as e:
            self.store.fail(f"Unexpected error: {e}", release=True)
            raise

        self._log("[OK] World reset process initiated successfully")
        self._log("[INFO] === WORLD RESET COMPLETED ===")
        return ResetOutcome.accept(config)

    # -------------------------
    # Steps
    # -------------------------

    def _run(self) -> WorldConfiguration:
        for warning in validate_environment(self.env):
            self._log(f"[WARN] {warning}")

        previous = self._mutator.read_current_world_id()
        self._log(f"[INFO] Current level name: {previous}")

        self.store.advance(ResetPhase.CONFIGURING_WORLD, previous_world_id=previous)
        self._step(1, "Writing new world seed and level name...")
        try:
            config = self._mutator.apply_new_configuration(previous)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to update world configuration: {e}") from e

        self.store.advance(ResetPhase.SCRIPT_GENERATED, new_world_id=config.world_id)
        self._step(2, "Generating restart script...")
        if not self._materializer.generate_restart_script(previous, config.world_id):
            # server.properties already points at the new world; the next attempt rewrites it again.
            raise ScriptGenerationError("Failed to generate restart script")

        self.store.advance(ResetPhase.SCRIPT_LAUNCHED, script_path=str(self._materializer.script_path))
        self._step(3, "Executing restart script independently...")
        try:
            process = self._launcher.launch(self._launch_argv, self.env.root_dir, self.env.output_log_path)
        except OSError as e:
            raise LaunchError(f"Failed to execute restart script: {e}") from e

        self.store.advance(ResetPhase.SHUTDOWN_SCHEDULED, launched_pid=process.pid)
        self._step(4, "Shutting down server to complete reset...")
        self._timer.arm(self._shutdown_delay, self._shutdown)
        return config

    def _step(self, number: int, text: str) -> None:
        self._log(f"[STEP] {number}/{TOTAL_STEPS}: {text}")

    def _shutdown(self) -> None:
        self._log("[INFO] Executing scheduled server shutdown for world reset...")
        self._shutdown_fn()
