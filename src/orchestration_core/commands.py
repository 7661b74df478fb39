from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence

from src.reset_core.constants import ADMIN_PERMISSION, Messages

from .reset_orchestrator import ResetOutcome


@dataclass(frozen=True)
class Actor:
    name: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def has_permission(self, permission: str) -> bool:
        return "*" in self.permissions or permission in self.permissions


class ResetCommand:
    """
    The `reset` command surface.

      reset          -> warning text only
      reset confirm  -> runs the reset
      anything else  -> usage error

    Returns the lines to show the caller.
    """

    NAME = "reset"
    CONFIRM = "confirm"

    def __init__(
        self,
        request_reset: Callable[[str], ResetOutcome],
        log_fn: Callable[[str], None],
        *,
        broadcast_fn: Optional[Callable[[str], None]] = None,
        permission: str = ADMIN_PERMISSION,
    ):
        self._request_reset = request_reset
        self._log = log_fn
        self._broadcast = broadcast_fn
        self.permission = permission

    def handle(self, actor: Actor, args: Sequence[str]) -> List[str]:
        if not actor.has_permission(self.permission):
            self._log(f"[WARN] User {actor.name} attempted reset without permission")
            return [Messages.NO_PERMISSION]

        if not args:
            self._log(f"[INFO] World reset warning displayed to {actor.name}")
            return [Messages.RESET_WARNING, Messages.RESET_CONFIRMATION, Messages.RESET_COMMAND_HINT]

        if len(args) == 1 and args[0].lower() == self.CONFIRM:
            return self._confirm(actor)

        return [Messages.INVALID_ARGUMENTS]

    def dispatch(self, actor: Actor, line: str) -> Optional[List[str]]:
        """Handle a raw console line; None if it isn't a reset command."""
        parts = line.strip().lstrip("/").split()
        if not parts or parts[0].lower() != self.NAME:
            return None
        return self.handle(actor, parts[1:])

    def _confirm(self, actor: Actor) -> List[str]:
        outcome = self._request_reset(actor.name)
        if not outcome.accepted:
            return [Messages.RESET_FAILED.format(reason=outcome.reason)]

        announcement = [Messages.RESET_INITIATED, Messages.RESET_BROADCAST, Messages.REJOIN_MESSAGE]
        if self._broadcast:
            for msg in announcement:
                self._broadcast(msg)
            self._log("[INFO] World reset messages broadcast to all players")
        return announcement
