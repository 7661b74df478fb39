import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .models import ResetSettings, ServerEnvironment


def restart_argv(env: ServerEnvironment, settings: ResetSettings) -> List[str]:
    return ["nohup", settings.script_shell, f"./{env.script_name}"]


class DetachedLauncher:
    """
    Starts a child that outlives this process.

    The child gets its own session (so signals aimed at our process group
    never reach it), stdin from /dev/null and stdout/stderr appended to a log
    file. We never wait on it.
    """

    def __init__(self, log_fn: Callable[[str], None]):
        self._log = log_fn
        self.last_process: Optional[subprocess.Popen] = None

    def launch(self, argv: Sequence[str], cwd: Path, log_path: Path) -> subprocess.Popen:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        self._log(f"[SYS] Launching detached: {' '.join(argv)} (cwd={cwd})")
        with open(log_path, "ab") as out:
            process = subprocess.Popen(
                list(argv),
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=subprocess.STDOUT,
                start_new_session=True,
                close_fds=True,
            )

        self.last_process = process
        self._log(f"[OK] Detached process started (pid {process.pid}); output -> {log_path}")
        return process
