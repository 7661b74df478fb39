import pytest

from src.orchestration_core import Actor, ResetCommand, ResetOutcome
from src.reset_core import ResetPhase, WorldConfiguration
from src.reset_core.constants import Messages

ADMIN = Actor("Steve", frozenset({"worldresetter.admin"}))
GUEST = Actor("Alex")


class FakeReset:
    def __init__(self, outcome):
        self.outcome = outcome
        self.actors = []

    def __call__(self, actor):
        self.actors.append(actor)
        return self.outcome


@pytest.fixture
def accepted():
    return FakeReset(ResetOutcome.accept(WorldConfiguration(seed=1, world_id="world_1")))


def test_bare_reset_only_warns(accepted, log):
    cmd = ResetCommand(accepted, log)

    assert cmd.handle(ADMIN, []) == [Messages.RESET_WARNING, Messages.RESET_CONFIRMATION, Messages.RESET_COMMAND_HINT]
    assert accepted.actors == []


@pytest.mark.parametrize("word", ["confirm", "CONFIRM", "Confirm"])
def test_confirm_runs_reset_and_broadcasts(accepted, log, word):
    said = []
    cmd = ResetCommand(accepted, log, broadcast_fn=said.append)

    replies = cmd.handle(ADMIN, [word])

    assert accepted.actors == ["Steve"]
    assert replies == [Messages.RESET_INITIATED, Messages.RESET_BROADCAST, Messages.REJOIN_MESSAGE]
    assert said == replies


def test_denied_reset_reports_reason(log):
    reset = FakeReset(ResetOutcome.deny("A world reset is already in progress (started by Alex).", ResetPhase.SHUTDOWN_SCHEDULED))
    said = []
    cmd = ResetCommand(reset, log, broadcast_fn=said.append)

    replies = cmd.handle(ADMIN, ["confirm"])

    assert replies == ["World reset failed: A world reset is already in progress (started by Alex)."]
    assert said == []


@pytest.mark.parametrize("args", [["now"], ["confirm", "now"], ["yes"]])
def test_other_arguments_are_usage_errors(accepted, log, args):
    assert ResetCommand(accepted, log).handle(ADMIN, args) == [Messages.INVALID_ARGUMENTS]
    assert accepted.actors == []


def test_permission_checked_first(accepted, log):
    cmd = ResetCommand(accepted, log)

    assert cmd.handle(GUEST, ["confirm"]) == [Messages.NO_PERMISSION]
    assert accepted.actors == []
    assert log.has("without permission")


def test_wildcard_permission():
    assert Actor("CONSOLE", frozenset({"*"})).has_permission("anything")
    assert not GUEST.has_permission("worldresetter.admin")


def test_dispatch(accepted, log):
    cmd = ResetCommand(accepted, log)

    assert cmd.dispatch(ADMIN, "list") is None
    assert cmd.dispatch(ADMIN, "resetall") is None
    assert cmd.dispatch(ADMIN, "/reset") == cmd.handle(ADMIN, [])
    assert cmd.dispatch(ADMIN, "  reset   confirm ")[0] == Messages.RESET_INITIATED
