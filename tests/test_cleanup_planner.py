import pytest

from src.reset_core import CleanupPlanner


@pytest.mark.parametrize("world_id", ["world", "world_54321", "world_0", "custom"])
def test_dimension_directories(world_id):
    assert CleanupPlanner.plan_dimension_directories(world_id) == [
        world_id,
        world_id + "_nether",
        world_id + "_the_end",
    ]


def test_orphans_exclude_current_world(tmp_path, log):
    for name in ("world_100", "world_200", "world_300", "world_200_nether", "world_200_the_end"):
        (tmp_path / name).mkdir()

    planner = CleanupPlanner(tmp_path, log)
    assert planner.plan_orphans("world_200") == {"world_100", "world_300"}


def test_orphans_ignore_files_and_other_prefixes(tmp_path, log):
    (tmp_path / "world_1").mkdir()
    (tmp_path / "world_notes.txt").write_text("x")
    (tmp_path / "plugins").mkdir()
    (tmp_path / "myworld_2").mkdir()

    assert CleanupPlanner(tmp_path, log).plan_orphans("world_9") == {"world_1"}


def test_orphans_default_world_keeps_its_dimensions(tmp_path, log):
    for name in ("world", "world_nether", "world_the_end", "world_777"):
        (tmp_path / name).mkdir()

    assert CleanupPlanner(tmp_path, log).plan_orphans("world") == {"world_777"}


def test_unlistable_root_gives_empty_orphans(tmp_path, log):
    planner = CleanupPlanner(tmp_path / "does-not-exist", log)
    assert planner.plan_orphans("world_1") == set()
    assert log.has("[WARN]")


def test_static_lists_are_fresh_copies():
    files = CleanupPlanner.get_cache_files()
    files.append("oops")
    assert "oops" not in CleanupPlanner.get_cache_files()
    assert "usercache.json" in files
    assert CleanupPlanner.get_cache_directories() == ["cache", "logs", "versions", ".paper-remapped"]
    assert CleanupPlanner.get_world_data_patterns() == ["level.dat*", "uid.dat"]


def test_build_plan_never_targets_new_world(tmp_path, log):
    for name in ("world_1", "world_2", "world_3", "world_3_nether"):
        (tmp_path / name).mkdir()

    plan = CleanupPlanner(tmp_path, log).build_plan("world_1", "world_3")

    assert plan.dimension_directories == ("world_1", "world_1_nether", "world_1_the_end")
    assert plan.orphan_directories == ("world_2",)
    assert plan.directory_count == 4


def test_validate_world_directories(tmp_path, log):
    (tmp_path / "world_5").mkdir()
    planner = CleanupPlanner(tmp_path, log)
    assert planner.validate_world_directories(["world_5", "world_5_nether"]) == ["world_5"]


def test_world_stats(tmp_path, log):
    for name in ("world", "world_nether", "world_12", "world_12_nether", "plugins"):
        (tmp_path / name).mkdir()

    stats = CleanupPlanner(tmp_path, log).get_world_stats()
    assert (stats.total, stats.default_named, stats.previous_resets) == (4, 2, 2)
