"""Game: the command surface of the board.

Builds the registry, pool, engine and simulator from a GameConfig, injects
them into one another and serializes every command behind a single lock.
A front-end issues commands (move, allocate, return, round, sandbox) and
reads state back through the query methods or snapshot().
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from kanban.lib.config import GameConfig
from kanban.lib.locking import DEFAULT_TIMEOUT, board_lock, new_board_lock
from kanban.lib.types import CommandResult, Mode, Stage
from kanban.pm.catalog import build_stories, load_catalog
from kanban.pm.models import GameClock, Resource, Story
from kanban.pm.resources import ResourcePool
from kanban.pm.stories import StoryRegistry
from kanban.workflow.engine import TransitionEngine, default_wip_groups
from kanban.workflow.rounds import RoundReport, RoundSimulator

logger = logging.getLogger(__name__)


@dataclass
class StorySnapshot:
    """Everything a renderer needs to draw one card."""
    id: int
    description: str
    price: int
    stage: Stage
    analysis: tuple[int, int]  # (remaining, original)
    dev: tuple[int, int]
    test: tuple[int, int]
    days_in_stage: int
    resources: list[str] = field(default_factory=list)


@dataclass
class BoardSnapshot:
    """Read-only copy of the board after a command."""
    day: int
    max_days: int
    total_profit: int
    game_over: bool
    sandbox: bool
    stories: list[StorySnapshot]
    available_resources: list[str]
    wip: dict[str, tuple[int, int]]

    def column(self, stage: Stage) -> list[StorySnapshot]:
        return [s for s in self.stories if s.stage is stage]


def _snapshot_story(story: Story) -> StorySnapshot:
    return StorySnapshot(
        id=story.id,
        description=story.description,
        price=story.price,
        stage=story.stage,
        analysis=story.progress("analysis"),
        dev=story.progress("dev"),
        test=story.progress("test"),
        days_in_stage=story.days_in_stage,
        resources=[r.id for r in story.allocated_resources],
    )


class Game:
    """One play-through of the board."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog: Optional[list[dict]] = None,
        rng: Optional[random.Random] = None,
        lock_timeout: float = DEFAULT_TIMEOUT,
    ):
        self.config = config or GameConfig()
        entries = catalog if catalog is not None else load_catalog(self.config.catalog_path)

        self.registry = StoryRegistry(build_stories(entries))
        self.pool = ResourcePool.create(self.config.resources_per_kind)
        self.engine = TransitionEngine(
            self.registry,
            self.pool,
            default_wip_groups(
                prioritized=self.config.wip_prioritized,
                analysis=self.config.wip_analysis,
                development=self.config.wip_development,
                testing=self.config.wip_testing,
            ),
        )
        self.simulator = RoundSimulator(
            self.registry,
            self.engine,
            rng=rng if rng is not None else random.Random(self.config.seed),
            effort_range=self.config.effort_range,
            backlog_target=self.config.backlog_target,
        )
        self.clock = GameClock(
            current_day=self.config.start_day,
            max_days=self.config.max_days,
        )
        self.mode = Mode.NORMAL
        self.history: list[RoundReport] = []
        self._lock = new_board_lock()
        self._lock_timeout = lock_timeout

        self.registry.reveal_initial(self.config.initial_backlog)
        logger.info(
            f"New game: {len(entries)} stories, {self.pool.available_count()} resources, "
            f"day {self.clock.current_day}/{self.clock.max_days}"
        )

    def _locked(self):
        return board_lock(self._lock, self._lock_timeout)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def attempt_move(self, story_id: int, target: Stage) -> CommandResult:
        with self._locked():
            return self.engine.attempt_move(story_id, target, self.mode)

    def attempt_allocate(self, resource_id: str, story_id: int) -> CommandResult:
        with self._locked():
            return self.engine.attempt_allocate(resource_id, story_id)

    def return_resource_to_pool(self, resource_id: str) -> CommandResult:
        with self._locked():
            return self.engine.return_to_pool(resource_id)

    def complete_round(self) -> Optional[RoundReport]:
        """Run one day. Returns None once the game is over."""
        with self._locked():
            report = self.simulator.complete_round(self.clock, self.mode)
            if report is not None:
                self.history.append(report)
            return report

    def toggle_sandbox_mode(self) -> bool:
        """Flip sandbox mode. Returns True if sandbox is now on."""
        with self._locked():
            self.mode = Mode.NORMAL if self.mode is Mode.SANDBOX else Mode.SANDBOX
            logger.info(f"Sandbox mode {'ON' if self.sandbox else 'OFF'}")
            return self.sandbox

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def sandbox(self) -> bool:
        return self.mode is Mode.SANDBOX

    def get_story(self, story_id: int) -> Optional[Story]:
        with self._locked():
            return self.registry.find_by_id(story_id)

    def list_active_stories(self) -> list[Story]:
        with self._locked():
            return self.registry.active_stories()

    def list_available_resources(self) -> list[Resource]:
        with self._locked():
            return self.pool.available()

    def get_day_counter(self) -> int:
        return self.clock.current_day

    def get_total_profit(self) -> int:
        return self.clock.total_profit

    def is_game_over(self) -> bool:
        return self.clock.is_over

    def wip_counts(self) -> dict[str, tuple[int, int]]:
        with self._locked():
            return self.engine.wip_counts()

    def snapshot(self) -> BoardSnapshot:
        with self._locked():
            return BoardSnapshot(
                day=self.clock.current_day,
                max_days=self.clock.max_days,
                total_profit=self.clock.total_profit,
                game_over=self.clock.is_over,
                sandbox=self.sandbox,
                stories=[_snapshot_story(s) for s in self.registry.active_stories()],
                available_resources=[r.id for r in self.pool.available()],
                wip=self.engine.wip_counts(),
            )
