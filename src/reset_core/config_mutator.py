import os
import random
import shutil
import tempfile
import time
from pathlib import Path
from typing import Callable, Collection, List, Optional

import psutil

from . import constants as C
from .models import WorldConfiguration


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def _to_signed_64(value: int) -> int:
    return value - (1 << 64) if value >= (1 << 63) else value


class ConfigMutator:
    """
    Reads and rewrites server.properties for a world reset.

    Only the level-seed and level-name lines are touched. Every other line,
    including its line ending, is written back exactly as it was read.
    """

    def __init__(
        self,
        properties_path: Path,
        log_fn: Callable[[str], None],
        *,
        clock_ms: Optional[Callable[[], int]] = None,
    ):
        self.properties_path = Path(properties_path)
        self._log = log_fn
        self._clock_ms = clock_ms or _wall_clock_ms

    # -------------------------
    # Read
    # -------------------------

    def read_current_world_id(self) -> str:
        prefix = f"{C.LEVEL_NAME_KEY}="
        try:
            lines = self._read_lines()
        except (OSError, ValueError) as e:
            self._log(f"[ERROR] Could not read {self.properties_path.name}: {e}. Using '{C.DEFAULT_WORLD_NAME}'.")
            return C.DEFAULT_WORLD_NAME

        for line in lines:
            if line.startswith(prefix):
                value = line[len(prefix):].rstrip("\r\n")
                if value:
                    return value
                break

        self._log(f"[WARN] No {C.LEVEL_NAME_KEY} found in {self.properties_path.name}, using '{C.DEFAULT_WORLD_NAME}'.")
        return C.DEFAULT_WORLD_NAME

    # -------------------------
    # Generate
    # -------------------------

    def generate_seed(self) -> int:
        # Several independent sources so rapid repeated resets don't correlate.
        entropy = (
            time.perf_counter_ns()
            + self._clock_ms()
            + int(random.random() * 1_000_000)
            + int(random.random() * 1_000_000)
            + psutil.virtual_memory().available
        )
        return _to_signed_64(random.Random(entropy).getrandbits(64))

    def generate_world_id(self, reserved: Collection[str] = ()) -> str:
        suffix = self._clock_ms() % C.WORLD_ID_MODULUS
        for _ in range(C.WORLD_ID_MODULUS):
            candidate = f"{C.WORLD_NAME_PREFIX}{suffix}"
            dimensions = (candidate, candidate + C.NETHER_SUFFIX, candidate + C.END_SUFFIX)
            if not any(name in reserved for name in dimensions):
                return candidate
            suffix = (suffix + 1) % C.WORLD_ID_MODULUS
        raise OSError("No free world identifier left in the suffix space")

    def generate_configuration(self, reserved: Collection[str] = ()) -> WorldConfiguration:
        return WorldConfiguration(seed=self.generate_seed(), world_id=self.generate_world_id(reserved))

    # -------------------------
    # Apply
    # -------------------------

    def apply_new_configuration(self, previous_world_id: Optional[str] = None) -> WorldConfiguration:
        """
        Generate a fresh seed + world id and write them into the properties file.

        Raises OSError if the file cannot be read or replaced; the file on disk
        is left untouched in that case.
        """
        lines = self._read_lines()

        reserved = set(self._existing_root_entries())
        if previous_world_id:
            reserved.add(previous_world_id)
        config = self.generate_configuration(reserved)

        updated = self._rewrite_lines(lines, config)
        self._write_atomic("".join(updated))

        self._log(f"[OK] Updated {self.properties_path.name}: seed={config.seed}, level-name={config.world_id}")
        return config

    def _rewrite_lines(self, lines: List[str], config: WorldConfiguration) -> List[str]:
        values = {
            C.LEVEL_SEED_KEY: str(config.seed),
            C.LEVEL_NAME_KEY: config.world_id,
        }
        seen = set()
        out: List[str] = []

        for line in lines:
            body = line.rstrip("\r\n")
            ending = line[len(body):]
            key = body.split("=", 1)[0] if "=" in body else None
            if key in values:
                out.append(f"{key}={values[key]}{ending}")
                seen.add(key)
            else:
                out.append(line)

        missing = [k for k in (C.LEVEL_SEED_KEY, C.LEVEL_NAME_KEY) if k not in seen]
        if missing and out and not out[-1].endswith(("\n", "\r")):
            out[-1] = out[-1] + "\n"
        for key in missing:
            out.append(f"{key}={values[key]}\n")
            self._log(f"[INFO] Added missing {key} to {self.properties_path.name}")

        return out

    def _read_lines(self) -> List[str]:
        with open(self.properties_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read().splitlines(keepends=True)

    def _write_atomic(self, text: str) -> None:
        target = self.properties_path
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(text)
            shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
        except OSError:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _existing_root_entries(self) -> List[str]:
        try:
            return [p.name for p in self.properties_path.parent.iterdir()]
        except OSError:
            return []
