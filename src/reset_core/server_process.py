import os
import queue
import subprocess
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence


def server_command(java: str, jar: Path, min_memory: str, max_memory: str) -> List[str]:
    # The absolute jar path is what the restart script's wait loop matches on.
    return [java, f"-Xms{min_memory}", f"-Xmx{max_memory}", "-jar", str(Path(jar).resolve()), "nogui"]


class ServerProcess:
    STOP_COMMAND = "stop"

    def __init__(self, log_fn: Callable[[str], None], *, stop_timeout: float = 15):
        self._log = log_fn
        self._process: Optional[subprocess.Popen] = None
        self._out_queue: queue.Queue = queue.Queue()
        self._stop_threads = False
        self.stop_timeout = stop_timeout

    def start(self, argv: Sequence[str], cwd: Path) -> None:
        if self.is_running():
            return

        cmd = list(argv)
        self._log(f"[SYS] Launching: {' '.join(cmd)}")

        kwargs = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        try:
            self._process = subprocess.Popen(
                cmd,
                cwd=str(cwd),
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,  # Line buffered
                **kwargs,
            )

            self._stop_threads = False
            t = threading.Thread(target=self._monitor_output, daemon=True)
            t.start()

        except OSError as e:
            self._log(f"[ERROR] Failed to launch server: {e}")
            raise

    def stop_graceful(self) -> None:
        if not self.is_running():
            return

        self._log("[SYS] Sending stop command...")
        self.write_stdin(self.STOP_COMMAND)

        try:
            self._process.wait(timeout=self.stop_timeout)
            self._log("[SYS] Server stopped gracefully.")
        except subprocess.TimeoutExpired:
            self._log("[WARN] Server did not stop; forcing kill.")
            self.kill()

    def kill(self) -> None:
        if self._process:
            self._process.kill()
            self._process = None
            self._log("[SYS] Server process killed.")

    def is_running(self) -> bool:
        if self._process is None:
            return False
        return self._process.poll() is None

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    def write_stdin(self, cmd: str) -> None:
        if self.is_running() and self._process.stdin:
            try:
                self._process.stdin.write(cmd + "\n")
                self._process.stdin.flush()
            except OSError as e:
                self._log(f"[ERROR] Write failed: {e}")

    def read_output_lines(self, max_lines: int = 100) -> List[str]:
        """Drains the output queue up to max_lines."""
        lines = []
        try:
            while len(lines) < max_lines:
                lines.append(self._out_queue.get_nowait())
        except queue.Empty:
            pass
        return lines

    def _monitor_output(self):
        """Background thread to capture stdout."""
        process = self._process
        if not process or not process.stdout:
            return

        try:
            for line in iter(process.stdout.readline, ""):
                if self._stop_threads:
                    break
                if line:
                    self._out_queue.put(line.strip())
        except (OSError, ValueError):
            # Pipe closed underneath us during kill
            pass
        finally:
            process.stdout.close()
