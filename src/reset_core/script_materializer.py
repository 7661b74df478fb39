import os
import re
import shlex
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from . import constants as C
from .cleanup_planner import CleanupPlanner
from .models import CleanupPlan, ResetSettings, ServerEnvironment

_ERE_SPECIAL = set("\\.[]()*+?{}|^$")
_SAFE_PATTERN = re.compile(r"^[A-Za-z0-9._*?-]+$")

# Shell helpers shared by every generated script.
_HELPERS = r"""log() {
    printf '[%s] %s\n' "$(date '+%Y-%m-%d %H:%M:%S')" "$*"
}

remove_path() {
    if [ -e "$1" ] || [ -L "$1" ]; then
        if rm -rf -- "$1"; then
            log "[OK] Removed $1"
        else
            log "[WARN] Could not remove $1"
        fi
    else
        log "[SKIP] Not present: $1"
    fi
}

prune_logs() {
    # Empties a log directory but keeps world reset logs, including this one.
    [ -d "$1" ] || { log "[SKIP] Not present: $1"; return 0; }
    for entry in "$1"/* "$1"/.[!.]*; do
        [ -e "$entry" ] || [ -L "$entry" ] || continue
        case "${entry##*/}" in
            RESET_LOG_PREFIX*) log "[KEEP] $entry" ;;
            *) remove_path "$entry" ;;
        esac
    done
}

server_running() {
    pgrep -f -- "$PROCESS_PATTERN" >/dev/null 2>&1
}
"""


def ere_escape(text: str) -> str:
    """Escape text for use as a literal inside a POSIX extended regex."""
    return "".join("\\" + ch if ch in _ERE_SPECIAL else ch for ch in text)


def q(value) -> str:
    return shlex.quote(str(value))


class RestartScriptMaterializer:
    """
    Renders a cleanup plan into the restart script and writes it to disk.

    The script runs after this process is gone, so every path, pattern and
    launch argument is embedded as a literal at generation time.
    """

    def __init__(
        self,
        environment: ServerEnvironment,
        planner: CleanupPlanner,
        settings: ResetSettings,
        log_fn: Callable[[str], None],
        *,
        now_fn: Optional[Callable[[], datetime]] = None,
    ):
        self.env = environment
        self._planner = planner
        self._settings = settings
        self._log = log_fn
        self._now = now_fn or datetime.now

    @property
    def script_path(self) -> Path:
        return self.env.script_path

    def process_pattern(self) -> str:
        """Regex matching only this server's own java process."""
        anchor = self.env.server_artifact or self.env.root_dir
        return ere_escape(str(anchor))

    def launch_command(self) -> List[str]:
        s = self._settings
        jar = str(self.env.server_artifact) if self.env.server_artifact else ""
        return [s.java_executable, f"-Xms{s.jvm_min_memory}", f"-Xmx{s.jvm_max_memory}", "-jar", jar, "nogui"]

    # -------------------------
    # Render
    # -------------------------

    def render(self, plan: CleanupPlan) -> str:
        for pattern in plan.world_data_patterns:
            if not _SAFE_PATTERN.match(pattern):
                raise ValueError(f"Unsafe world data pattern: {pattern!r}")

        parts = [
            self._render_header(plan),
            _HELPERS.replace("RESET_LOG_PREFIX", C.WORLD_RESET_LOG_PREFIX),
            self._render_wait(),
            self._render_cleanup(plan),
            self._render_restart(),
        ]
        return "\n".join(parts)

    def _render_header(self, plan: CleanupPlan) -> str:
        s = self._settings
        stamp = self._now().strftime("%Y-%m-%d %H:%M:%S")
        orphans = ", ".join(plan.orphan_directories) or "none"
        return "\n".join([
            "#!/bin/sh",
            f"# {C.APP_NAME} {C.APP_VERSION} restart script, generated {stamp}.",
            "# Rewritten on every reset; edits will be lost.",
            f"# Previous world: {plan.previous_world_id}",
            f"# New world: {plan.new_world_id or 'unknown'}",
            f"# Leftover worlds: {orphans}",
            "",
            f"SERVER_DIR={q(self.env.root_dir)}",
            f"SERVER_JAR={q(self.env.server_artifact or '')}",
            f"PROCESS_PATTERN={q(self.process_pattern())}",
            f"SCREEN_SESSION={q(s.screen_session)}",
            f"JAVA_BIN={q(s.java_executable)}",
            f"JVM_MIN={q(s.jvm_min_memory)}",
            f"JVM_MAX={q(s.jvm_max_memory)}",
            f"WAIT_TIMEOUT={int(s.graceful_shutdown_timeout)}",
            f"FORCE_KILL_DELAY={int(s.force_kill_delay)}",
            f"CLEANUP_DELAY={int(s.process_cleanup_delay)}",
            f"VERIFY_DELAY={int(s.verification_delay)}",
            "",
        ])

    def _render_wait(self) -> str:
        return """log "=== WORLD RESET STARTED ==="
cd "$SERVER_DIR" || { log "[ERROR] Cannot enter $SERVER_DIR"; exit 1; }

log "[STEP] 1/4 Waiting for the server process to exit"
waited=0
while server_running; do
    if [ "$waited" -ge "$WAIT_TIMEOUT" ]; then
        log "[WARN] Server still running after ${WAIT_TIMEOUT}s, terminating it"
        pkill -TERM -f -- "$PROCESS_PATTERN" >/dev/null 2>&1
        sleep "$FORCE_KILL_DELAY"
        if server_running; then
            log "[WARN] Server ignored TERM, killing it"
            pkill -KILL -f -- "$PROCESS_PATTERN" >/dev/null 2>&1
        fi
        break
    fi
    sleep 1
    waited=$((waited + 1))
done
log "[OK] Server process gone after ${waited}s"
sleep "$CLEANUP_DELAY"
"""

    def _render_cleanup(self, plan: CleanupPlan) -> str:
        lines = ['log "[STEP] 2/4 Removing world directories"']
        for name in plan.dimension_directories:
            lines.append(f"remove_path {q(name)}")

        lines.append(f'log "[INFO] Removing {len(plan.orphan_directories)} leftover world directories"')
        for name in plan.orphan_directories:
            lines.append(f"remove_path {q(name)}")

        lines.append("")
        lines.append('log "[STEP] 3/4 Removing caches and world data files"')
        for name in plan.cache_files:
            lines.append(f"remove_path {q(name)}")
        for name in plan.cache_directories:
            if name == C.LOGS_DIR:
                lines.append(f"prune_logs {q(name)}")
            else:
                lines.append(f"remove_path {q(name)}")
        if plan.world_data_patterns:
            patterns = " ".join(plan.world_data_patterns)
            lines.append(f'for path in {patterns}; do remove_path "$path"; done')
        lines.append("")
        return "\n".join(lines)

    def _render_restart(self) -> str:
        return """log "[STEP] 4/4 Starting server in screen session '$SCREEN_SESSION'"
if [ -z "$SERVER_JAR" ] || [ ! -f "$SERVER_JAR" ]; then
    log "[ERROR] Server jar not found: '$SERVER_JAR'"
    exit 1
fi
if ! screen -dmS "$SCREEN_SESSION" "$JAVA_BIN" "-Xms$JVM_MIN" "-Xmx$JVM_MAX" -jar "$SERVER_JAR" nogui; then
    log "[ERROR] Failed to start the server"
    exit 1
fi
sleep "$VERIFY_DELAY"
if screen -list | grep -F ".$SCREEN_SESSION" >/dev/null 2>&1; then
    log "[OK] Server started in screen session '$SCREEN_SESSION'"
else
    log "[ERROR] Screen session '$SCREEN_SESSION' is not running after start"
    exit 1
fi
log "=== WORLD RESET COMPLETED ==="
"""

    # -------------------------
    # Write
    # -------------------------

    def generate_restart_script(self, previous_world_id: str, new_world_id: str = "") -> bool:
        target = self.script_path
        try:
            plan = self._planner.build_plan(previous_world_id, new_world_id)
            self._write_executable(target, self.render(plan))
        except (OSError, ValueError) as e:
            self._log(f"[ERROR] Failed to write restart script {target}: {e}")
            self._discard_stale(target)
            return False

        self._log(
            f"[OK] Restart script written: {target} "
            f"({plan.directory_count} world directories, {len(plan.orphan_directories)} leftovers)"
        )
        return True

    def _write_executable(self, target: Path, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.chmod(tmp_name, 0o755)
            os.replace(tmp_name, target)
        except OSError:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _discard_stale(self, target: Path) -> None:
        # A script from an earlier reset must not be launched with this reset's intent.
        if not target.is_file():
            return
        try:
            target.unlink()
            self._log(f"[WARN] Removed stale restart script {target}")
            return
        except OSError as e:
            self._log(f"[WARN] Could not remove stale restart script {target}: {e}")

        # Read-only directory: the file stays, but it must not stay runnable.
        try:
            os.chmod(target, 0o644)
            self._log(f"[WARN] Cleared execute permission on stale restart script {target}")
        except OSError as e:
            self._log(f"[ERROR] Stale restart script {target} is still executable: {e}")
