"""Story stage machine using transitions library.

One machine describes the legal path of a story across the board:

    hidden -> backlog -> prioritized -> analyzed-in-progress -> analyzed-done
           -> developed-in-progress -> developed-done -> testing -> deployed

Guards on the transitions carry the per-story preconditions (a day spent in
prioritized, phase effort used up). WIP limits are not the machine's concern;
they live in engine.py because they depend on the whole board.

Usage:
    from kanban.workflow.fsm import StoryFSM

    fsm = StoryFSM(story)
    fsm.prioritize()      # backlog -> prioritized
    fsm.start_analysis()  # False until the story waited a day
"""

import logging
from transitions import Machine

from kanban.lib.types import Stage

logger = logging.getLogger(__name__)


# State values must match Stage enum
STATES = [
    "hidden",
    "backlog",
    "prioritized",
    "analyzed-in-progress",
    "analyzed-done",
    "developed-in-progress",
    "developed-done",
    "testing",
    "deployed",
]

# Each trigger becomes a method on the FSM
TRANSITIONS = [
    # Dealt from the catalog by the registry, never a player move
    {"trigger": "reveal", "source": "hidden", "dest": "backlog"},

    {"trigger": "prioritize", "source": "backlog", "dest": "prioritized",
     "after": "reset_days"},
    {"trigger": "start_analysis", "source": "prioritized", "dest": "analyzed-in-progress",
     "conditions": "has_waited_a_day"},
    {"trigger": "finish_analysis", "source": "analyzed-in-progress", "dest": "analyzed-done",
     "conditions": "analysis_complete"},
    {"trigger": "start_development", "source": "analyzed-done", "dest": "developed-in-progress"},
    {"trigger": "finish_development", "source": "developed-in-progress", "dest": "developed-done",
     "conditions": "development_complete"},
    {"trigger": "start_testing", "source": "developed-done", "dest": "testing"},
    {"trigger": "deploy", "source": "testing", "dest": "deployed",
     "conditions": "testing_complete"},
]


def _build_trigger_lookup() -> dict[tuple[str, str], str]:
    """Build lookup from (source, dest) -> trigger name."""
    lookup: dict[tuple[str, str], str] = {}
    for t in TRANSITIONS:
        lookup.setdefault((t["source"], t["dest"]), t["trigger"])
    return lookup


TRIGGER_FOR = _build_trigger_lookup()


class StoryFSM:
    """State machine for one story's stage.

    Wraps the transitions library with story-specific logic:
    - Starts from the story's current stage
    - Writes the new stage back onto the story after each transition
    - Logs all transitions
    """

    def __init__(self, story):
        self.story = story

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=story.stage.value,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",
        )

    # Guards

    def has_waited_a_day(self, event) -> bool:
        return self.story.days_in_stage >= 1

    def analysis_complete(self, event) -> bool:
        return self.story.analysis_effort == 0

    def development_complete(self, event) -> bool:
        return self.story.dev_effort == 0

    def testing_complete(self, event) -> bool:
        return self.story.test_effort == 0

    def reset_days(self, event) -> None:
        self.story.days_in_stage = 0

    def save_stage(self) -> None:
        """Copy the machine state onto the story."""
        self.story.stage = Stage(self.state)

    def on_state_change(self, event) -> None:
        """Callback after any state transition."""
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        self.save_stage()
        logger.info(f"[FSM] story {self.story.id}: {from_state} -> {to_state} ({trigger})")
