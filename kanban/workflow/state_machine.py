"""Stage transitions addressed by destination.

Thin wrapper around the FSM in fsm.py. Callers name the stage they want a
story in; this module finds the trigger for (current, target), fires it and
turns every refusal into InvalidTransition.

Usage:
    from kanban.workflow.state_machine import transition

    transition(story, Stage.PRIORITIZED, reason="player move")
"""

import logging

from transitions import MachineError

from kanban.lib.types import Stage
from kanban.workflow.fsm import TRIGGER_FOR, StoryFSM

logger = logging.getLogger(__name__)


class InvalidTransition(Exception):
    """Raised when a story cannot move to the requested stage."""

    def __init__(self, from_state: str, to_state: Stage, story_id=None, guard: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.story_id = story_id
        self.guard = guard
        super().__init__(
            f"Invalid transition: {from_state} -> {to_state.value}"
            + (f" (story: {story_id})" if story_id is not None else "")
            + (f" [guard: {guard}]" if guard else "")
        )


def transition(story, to_stage: Stage, reason: str = "", force: bool = False) -> None:
    """Move a story to a new stage with validation.

    Args:
        story: Story to move
        to_stage: Target stage
        reason: Optional reason for the transition (for logging)
        force: If True, skip validation (sandbox mode)

    Raises:
        InvalidTransition: If no transition leads there or its guard fails
    """
    reason_str = f" ({reason})" if reason else ""

    fsm = StoryFSM(story)
    current_state = fsm.state

    if force:
        # Forced transition - bypass the table, write directly
        logger.info(f"[STATE] story {story.id}: {current_state} -> {to_stage.value}{reason_str} (forced)")
        fsm.machine.set_state(to_stage.value)
        fsm.save_stage()
        return

    trigger = TRIGGER_FOR.get((current_state, to_stage.value))
    if trigger is None:
        raise InvalidTransition(current_state, to_stage, story.id)

    try:
        moved = getattr(fsm, trigger)()
    except MachineError as e:
        raise InvalidTransition(current_state, to_stage, story.id) from e

    # transitions returns False when a condition blocks the trigger
    if not moved:
        raise InvalidTransition(current_state, to_stage, story.id, guard=trigger)

    logger.debug(f"[STATE] story {story.id}: now {to_stage.value}{reason_str}")


def next_stage(stage: Stage) -> Stage | None:
    """The stage a story normally moves to from stage, or None if terminal."""
    for source, dest in TRIGGER_FOR:
        if source == stage.value:
            return Stage(dest)
    return None
