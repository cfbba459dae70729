"""
Shared data types for the board.

Enums and small result types used by the pm, workflow and command modules.
Kept here to avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Stage(Enum):
    """Every position a story can occupy.

    Values match the FSM state strings in workflow/fsm.py.
    """

    HIDDEN = "hidden"  # In the catalog, not yet on the board
    BACKLOG = "backlog"
    PRIORITIZED = "prioritized"
    ANALYZED_IN_PROGRESS = "analyzed-in-progress"
    ANALYZED_DONE = "analyzed-done"
    DEVELOPED_IN_PROGRESS = "developed-in-progress"
    DEVELOPED_DONE = "developed-done"
    TESTING = "testing"
    DEPLOYED = "deployed"


# Stages shown as board columns, left to right
BOARD_STAGES = [s for s in Stage if s is not Stage.HIDDEN]


class ResourceKind(Enum):
    ANALYST = "analyst"
    DEVELOPER = "developer"
    TESTER = "tester"


class Mode(Enum):
    """How the engine treats commands.

    SANDBOX lifts transition and WIP rules for scenario setup and finishes
    all in-progress work at the end of a round.
    """

    NORMAL = "normal"
    SANDBOX = "sandbox"


# In-progress stage -> the resource kind that works on it
EXPECTED_KIND = {
    Stage.ANALYZED_IN_PROGRESS: ResourceKind.ANALYST,
    Stage.DEVELOPED_IN_PROGRESS: ResourceKind.DEVELOPER,
    Stage.TESTING: ResourceKind.TESTER,
}

# In-progress stage -> Story attribute holding its remaining effort
EFFORT_FIELD = {
    Stage.ANALYZED_IN_PROGRESS: "analysis_effort",
    Stage.DEVELOPED_IN_PROGRESS: "dev_effort",
    Stage.TESTING: "test_effort",
}

# In-progress stage -> where the story goes once its effort hits zero
COMPLETES_TO = {
    Stage.ANALYZED_IN_PROGRESS: Stage.ANALYZED_DONE,
    Stage.DEVELOPED_IN_PROGRESS: Stage.DEVELOPED_DONE,
    Stage.TESTING: Stage.DEPLOYED,
}


def parse_stage(value: str | None) -> Stage | None:
    """Parse a stage string ("analyzed-done", "ANALYZED_DONE", "analyzed_done").

    Returns None if the stage is unknown.
    """
    if value is None:
        return None
    normalized = value.strip().lower().replace("_", "-")
    for stage in Stage:
        if stage.value == normalized:
            return stage
    return None


class Rejection(Enum):
    """Why a command was not accepted."""

    NOT_FOUND = "not_found"
    WIP_LIMIT = "wip_limit"
    ILLEGAL_TRANSITION = "illegal_transition"
    KIND_MISMATCH = "kind_mismatch"


@dataclass
class CommandResult:
    """Outcome of a player command.

    Truthy when accepted, so callers that only need the flag can write
    `if game.attempt_move(...)`.
    """
    accepted: bool
    reason: Optional[Rejection] = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def ok(cls, detail: str = "") -> "CommandResult":
        return cls(accepted=True, detail=detail)

    @classmethod
    def rejected(cls, reason: Rejection, detail: str = "") -> "CommandResult":
        return cls(accepted=False, reason=reason, detail=detail)
