"""Round simulator: one simulated working day.

complete_round() runs the day in a fixed order:

1. Work. In normal mode every allocated resource delivers a random amount of
   effort to its story; effort from a resource of the wrong kind is wasted.
   A story whose in-progress effort reaches zero moves to the next stage.
   In sandbox mode all in-progress work is simply finished.
2. Reclaim. Stories that finished a phase hand their resources back.
3. Profit. Every deployed story pays its price, every round.
4. Clock. The day advances and the backlog is topped up.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from kanban.lib.types import COMPLETES_TO, EFFORT_FIELD, EXPECTED_KIND, Mode, Stage
from kanban.pm.models import GameClock, Story
from kanban.pm.stories import StoryRegistry
from kanban.workflow.engine import TransitionEngine
from kanban.workflow.state_machine import transition

logger = logging.getLogger(__name__)


@dataclass
class EffortEntry:
    """Effort one resource delivered to one story."""
    story_id: int
    resource_id: str
    amount: int
    applied: bool  # False when the resource's kind didn't match the stage


@dataclass
class RoundReport:
    """What happened during one completed round."""
    day: int  # The day that was completed
    mode: Mode
    effort_applied: list[EffortEntry] = field(default_factory=list)
    advanced: list[tuple[int, Stage, Stage]] = field(default_factory=list)
    reclaimed: list[str] = field(default_factory=list)
    profit: int = 0
    total_profit: int = 0
    revealed: list[int] = field(default_factory=list)

    @property
    def wasted_effort(self) -> int:
        return sum(e.amount for e in self.effort_applied if not e.applied)


class RoundSimulator:
    """Advances the game by one day."""

    def __init__(
        self,
        registry: StoryRegistry,
        engine: TransitionEngine,
        rng: Optional[random.Random] = None,
        effort_range: tuple[int, int] = (4, 8),
        backlog_target: int = 5,
    ):
        self.registry = registry
        self.engine = engine
        self.rng = rng if rng is not None else random.Random()
        self.effort_range = effort_range
        self.backlog_target = backlog_target

    def draw_effort(self) -> int:
        """Effort one resource delivers today, uniform over effort_range inclusive."""
        low, high = self.effort_range
        return self.rng.randint(low, high)

    def complete_round(self, clock: GameClock, mode: Mode = Mode.NORMAL) -> Optional[RoundReport]:
        """Simulate one day.

        Returns None without touching anything once the game is over.
        """
        if clock.is_over:
            logger.info(f"[ROUND] Game over at day {clock.current_day}, round ignored")
            return None

        report = RoundReport(day=clock.current_day, mode=mode)
        logger.info(f"[ROUND] Starting day {clock.current_day} ({mode.value})")

        if mode is Mode.SANDBOX:
            finished = [s for s in self.registry.active_stories() if self._finish_now(s, report)]
        else:
            finished = [s for s in self.registry.active_stories() if self._work_story(s, report)]

        for story in finished:
            report.reclaimed.extend(self.engine.reclaim(story))

        # Recurring: deployed stories pay every round they stay deployed
        report.profit = sum(s.price for s in self.registry.deployed_stories())
        clock.total_profit += report.profit
        report.total_profit = clock.total_profit

        clock.current_day += 1
        report.revealed = [s.id for s in self.registry.replenish_backlog(self.backlog_target)]

        logger.info(
            f"[ROUND] Day {report.day} done: +${report.profit} (total ${clock.total_profit}), "
            f"{len(report.advanced)} advanced, {len(report.reclaimed)} resources reclaimed"
        )
        return report

    def _advance(self, story: Story, report: RoundReport) -> None:
        from_stage = story.stage
        to_stage = COMPLETES_TO[from_stage]
        transition(story, to_stage, reason="phase complete")
        report.advanced.append((story.id, from_stage, to_stage))

    def _finish_now(self, story: Story, report: RoundReport) -> bool:
        """Sandbox: finish the current phase regardless of effort."""
        effort_field = EFFORT_FIELD.get(story.stage)
        if effort_field is None:
            return False
        setattr(story, effort_field, 0)
        self._advance(story, report)
        return True

    def _work_story(self, story: Story, report: RoundReport) -> bool:
        """Normal day for one story. Returns True if it finished a phase."""
        if story.stage is Stage.PRIORITIZED:
            story.days_in_stage += 1

        effort_field = EFFORT_FIELD.get(story.stage)
        expected_kind = EXPECTED_KIND.get(story.stage)

        for resource in story.allocated_resources:
            amount = self.draw_effort()
            applied = effort_field is not None and resource.kind is expected_kind
            if applied:
                remaining = max(0, getattr(story, effort_field) - amount)
                setattr(story, effort_field, remaining)
                logger.debug(
                    f"[ROUND] {resource.id} delivered {amount} to story {story.id}, {remaining} left"
                )
            else:
                logger.debug(
                    f"[ROUND] {resource.id} wasted {amount} on story {story.id} ({story.stage.value})"
                )
            report.effort_applied.append(EffortEntry(story.id, resource.id, amount, applied))

        if effort_field is not None and getattr(story, effort_field) == 0:
            self._advance(story, report)
            return True
        return False
