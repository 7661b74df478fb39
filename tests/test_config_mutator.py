import re

import pytest

from src.reset_core import ConfigMutator
from src.reset_core import config_mutator as mutator_module

from .conftest import PROPERTIES


def _lines(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read().splitlines(keepends=True)


def test_read_current_world_id(server_dir, log):
    m = ConfigMutator(server_dir / "server.properties", log)
    assert m.read_current_world_id() == "world_54321"
    # no mutation in between -> same answer
    assert m.read_current_world_id() == "world_54321"


def test_read_defaults_when_key_missing(tmp_path, log):
    props = tmp_path / "server.properties"
    props.write_text("motd=hello\n", encoding="utf-8")

    assert ConfigMutator(props, log).read_current_world_id() == "world"
    assert log.has("[WARN]")


def test_read_defaults_when_unreadable(tmp_path, log):
    m = ConfigMutator(tmp_path / "missing.properties", log)
    assert m.read_current_world_id() == "world"
    assert log.has("[ERROR]")


def test_apply_round_trip_keeps_unrelated_lines(server_dir, log):
    props = server_dir / "server.properties"
    before = _lines(props)
    m = ConfigMutator(props, log)

    config = m.apply_new_configuration("world_54321")
    after = _lines(props)

    assert len(after) == len(before)
    assert f"level-seed={config.seed}\n" in after
    assert f"level-name={config.world_id}\n" in after
    assert m.read_current_world_id() == config.world_id
    assert config.world_id != "world_54321"
    assert re.fullmatch(r"world_\d{1,5}", config.world_id)

    for old, new in zip(before, after):
        if not old.startswith(("level-seed=", "level-name=")):
            assert old == new


def test_apply_preserves_crlf_and_order(tmp_path, log):
    props = tmp_path / "server.properties"
    props.write_bytes(b"a=1\r\nlevel-name=world\r\nb=2\r\n")

    config = ConfigMutator(props, log).apply_new_configuration("world")
    raw = props.read_bytes()

    assert raw.startswith(b"a=1\r\nlevel-name=" + config.world_id.encode() + b"\r\nb=2\r\n")
    assert raw.endswith(f"level-seed={config.seed}\n".encode())


def test_apply_appends_missing_keys(tmp_path, log):
    props = tmp_path / "server.properties"
    props.write_text("motd=hi", encoding="utf-8")  # no trailing newline

    config = ConfigMutator(props, log).apply_new_configuration()
    assert _lines(props) == [
        "motd=hi\n",
        f"level-seed={config.seed}\n",
        f"level-name={config.world_id}\n",
    ]


def test_seed_is_signed_64_bit(server_dir, log):
    m = ConfigMutator(server_dir / "server.properties", log)
    for _ in range(50):
        seed = m.generate_seed()
        assert -(1 << 63) <= seed < (1 << 63)


def test_seeds_differ_within_same_millisecond(server_dir, log):
    m = ConfigMutator(server_dir / "server.properties", log, clock_ms=lambda: 1_700_000_012_345)

    seeds = {m.generate_seed() for _ in range(50)}
    ids = {m.generate_world_id() for _ in range(50)}

    assert len(seeds) == 50
    # the id suffix only depends on the clock, so it collides
    assert ids == {"world_12345"}


def test_world_id_steps_past_reserved_names(server_dir, log):
    m = ConfigMutator(server_dir / "server.properties", log, clock_ms=lambda: 54321)

    assert m.generate_world_id() == "world_54321"
    assert m.generate_world_id({"world_54321"}) == "world_54322"
    assert m.generate_world_id({"world_54322_nether", "world_54321"}) == "world_54323"


def test_world_id_wraps_suffix_space(server_dir, log):
    m = ConfigMutator(server_dir / "server.properties", log, clock_ms=lambda: 99999)
    assert m.generate_world_id({"world_99999"}) == "world_0"


def test_apply_never_reuses_previous_world(server_dir, log):
    # clock lands exactly on the previous world's suffix
    m = ConfigMutator(server_dir / "server.properties", log, clock_ms=lambda: 54321)
    config = m.apply_new_configuration("world_54321")
    assert config.world_id == "world_54322"


def test_apply_failure_leaves_file_untouched(server_dir, log, monkeypatch):
    props = server_dir / "server.properties"

    def boom(src, dst):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(mutator_module.os, "replace", boom)

    with pytest.raises(OSError):
        ConfigMutator(props, log).apply_new_configuration("world_54321")

    assert props.read_text(encoding="utf-8") == PROPERTIES
    assert not [p for p in server_dir.iterdir() if p.name.endswith(".tmp")]


def test_apply_fails_when_file_missing(tmp_path, log):
    with pytest.raises(OSError):
        ConfigMutator(tmp_path / "server.properties", log).apply_new_configuration()


def test_non_utf8_properties_are_read(tmp_path, log):
    props = tmp_path / "server.properties"
    props.write_bytes(b"motd=Caf\xe9 server\nlevel-name=world_777\n")

    assert ConfigMutator(props, log).read_current_world_id() == "world_777"
    assert not log.has("[ERROR]")


def test_non_utf8_lines_round_trip_byte_for_byte(tmp_path, log):
    props = tmp_path / "server.properties"
    props.write_bytes(b"motd=Caf\xe9 server\r\nlevel-name=world_777\r\nlevel-seed=1\r\n")

    config = ConfigMutator(props, log).apply_new_configuration("world_777")

    assert props.read_bytes() == (
        b"motd=Caf\xe9 server\r\n"
        + f"level-name={config.world_id}\r\n".encode()
        + f"level-seed={config.seed}\r\n".encode()
    )


def test_decode_failure_falls_back_to_default(server_dir, log, monkeypatch):
    def bad_read(self):
        raise UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte")

    monkeypatch.setattr(ConfigMutator, "_read_lines", bad_read)

    assert ConfigMutator(server_dir / "server.properties", log).read_current_world_id() == "world"
    assert log.has("[ERROR]")
