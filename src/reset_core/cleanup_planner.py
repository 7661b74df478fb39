from pathlib import Path
from typing import Callable, Iterable, List, Set

from . import constants as C
from .models import CleanupPlan, WorldStats


class CleanupPlanner:
    """
    Works out which paths under the server root a reset has to remove.

    Pure planning: nothing here deletes anything. Orphans are found by the
    world-name prefix rather than a manifest, so any directory that happens to
    start with the prefix is a candidate.
    """

    def __init__(self, server_dir: Path, log_fn: Callable[[str], None]):
        self.server_dir = Path(server_dir)
        self._log = log_fn

    @staticmethod
    def plan_dimension_directories(world_id: str) -> List[str]:
        return [world_id, world_id + C.NETHER_SUFFIX, world_id + C.END_SUFFIX]

    def plan_orphans(self, current_world_id: str) -> Set[str]:
        keep = set(self.plan_dimension_directories(current_world_id))
        orphans: Set[str] = set()

        try:
            entries = list(self.server_dir.iterdir())
        except OSError as e:
            self._log(f"[WARN] Could not list server directory contents: {e}")
            return orphans

        for entry in entries:
            name = entry.name
            if name.startswith(C.WORLD_NAME_PREFIX) and name not in keep and entry.is_dir():
                orphans.add(name)

        self._log(f"[INFO] Found {len(orphans)} old world directories to clean up")
        return orphans

    @staticmethod
    def get_cache_files() -> List[str]:
        return list(C.CACHE_FILES)

    @staticmethod
    def get_cache_directories() -> List[str]:
        return list(C.CACHE_DIRECTORIES)

    @staticmethod
    def get_world_data_patterns() -> List[str]:
        return list(C.WORLD_DATA_PATTERNS)

    def build_plan(self, previous_world_id: str, new_world_id: str = "") -> CleanupPlan:
        dimensions = self.plan_dimension_directories(previous_world_id)
        orphans = self.plan_orphans(previous_world_id)
        if new_world_id:
            orphans -= set(self.plan_dimension_directories(new_world_id))

        return CleanupPlan(
            previous_world_id=previous_world_id,
            new_world_id=new_world_id,
            dimension_directories=tuple(dimensions),
            orphan_directories=tuple(sorted(orphans)),
            cache_files=tuple(self.get_cache_files()),
            cache_directories=tuple(self.get_cache_directories()),
            world_data_patterns=tuple(self.get_world_data_patterns()),
        )

    # -------------------------
    # Inspection helpers
    # -------------------------

    def validate_world_directories(self, names: Iterable[str]) -> List[str]:
        """Return the subset of names that currently exist as directories."""
        return [n for n in names if (self.server_dir / n).is_dir()]

    @staticmethod
    def is_world_directory(name: str) -> bool:
        return name.startswith(C.WORLD_NAME_PREFIX) or name in C.DEFAULT_WORLD_NAMES

    def get_world_stats(self) -> WorldStats:
        try:
            entries = list(self.server_dir.iterdir())
        except OSError:
            return WorldStats()

        total = default_named = 0
        for entry in entries:
            if entry.is_dir() and self.is_world_directory(entry.name):
                total += 1
                if entry.name in C.DEFAULT_WORLD_NAMES:
                    default_named += 1

        return WorldStats(total=total, default_named=default_named, previous_resets=total - default_named)
