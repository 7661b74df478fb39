"""Shared fixtures: a throwaway server directory plus log and scheduler doubles."""

import pytest

from src.reset_core import ResetSettings, ServerEnvironment

PROPERTIES = (
    "#Minecraft server properties\n"
    "enable-command-block=false\n"
    "level-seed=12345\n"
    "gamemode=survival\n"
    "level-name=world_54321\n"
    "motd=A Minecraft Server\n"
)


class LogCollector:
    def __init__(self):
        self.lines = []

    def __call__(self, text):
        self.lines.append(text)

    def has(self, fragment):
        return any(fragment in line for line in self.lines)


class ManualScheduler:
    """Records call_later() requests; run_all() fires them like a host tick would."""

    def __init__(self):
        self.calls = []

    def call_later(self, delay_seconds, fn):
        self.calls.append((delay_seconds, fn))

    def run_all(self):
        pending, self.calls = self.calls, []
        for _, fn in pending:
            fn()


@pytest.fixture
def log():
    return LogCollector()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def server_dir(tmp_path):
    root = tmp_path / "server"
    root.mkdir()
    (root / "server.properties").write_text(PROPERTIES, encoding="utf-8")
    (root / "paper-1.21.8.jar").write_bytes(b"PK\x03\x04")
    for name in ("world_54321", "world_54321_nether", "world_54321_the_end"):
        (root / name).mkdir()
        (root / name / "level.dat").write_bytes(b"\x00")
    return root


@pytest.fixture
def settings(server_dir):
    return ResetSettings(server_dir=str(server_dir), shutdown_delay_seconds=3)


@pytest.fixture
def env(settings):
    return ServerEnvironment.detect(settings)
