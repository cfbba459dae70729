"""Transition engine: the rules a player move has to pass.

A move goes through two gates, in order:

1. Capacity. The target stage (or stage group) must have room under its WIP
   limit. Analysis and development are limited as pairs: in-progress and
   done share one limit. A story already inside the group is exempt.
   Deployment has no limit but requires finished testing.
2. Transition table. The FSM (fsm.py) must have a transition from the
   current stage to the target and its guard must pass.

Sandbox mode skips both gates. Resource allocation follows a separate rule:
a resource can only work on a story whose current stage matches its kind.

All entry points return a CommandResult and never raise for a refused move.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from kanban.lib.types import (
    BOARD_STAGES,
    EXPECTED_KIND,
    CommandResult,
    Mode,
    Rejection,
    Stage,
)
from kanban.pm.models import Resource, Story
from kanban.pm.resources import ResourcePool
from kanban.pm.stories import StoryRegistry
from kanban.workflow.state_machine import InvalidTransition, transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WipGroup:
    """Stages that share one WIP limit."""
    name: str
    stages: tuple[Stage, ...]
    limit: int

    def __contains__(self, stage: Stage) -> bool:
        return stage in self.stages


def default_wip_groups(
    prioritized: int = 3,
    analysis: int = 4,
    development: int = 3,
    testing: int = 3,
) -> tuple[WipGroup, ...]:
    return (
        WipGroup("prioritized", (Stage.PRIORITIZED,), prioritized),
        WipGroup("analysis", (Stage.ANALYZED_IN_PROGRESS, Stage.ANALYZED_DONE), analysis),
        WipGroup("development", (Stage.DEVELOPED_IN_PROGRESS, Stage.DEVELOPED_DONE), development),
        WipGroup("testing", (Stage.TESTING,), testing),
    )


class TransitionEngine:
    """Validates and applies stage moves and resource allocations."""

    def __init__(
        self,
        registry: StoryRegistry,
        pool: ResourcePool,
        wip_groups: Optional[tuple[WipGroup, ...]] = None,
    ):
        self.registry = registry
        self.pool = pool
        self.wip_groups = wip_groups if wip_groups is not None else default_wip_groups()

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    def group_for(self, stage: Stage) -> Optional[WipGroup]:
        for group in self.wip_groups:
            if stage in group:
                return group
        return None

    def has_capacity(self, story: Story, target: Stage) -> bool:
        """Check the WIP rule for moving story into target."""
        if target is Stage.DEPLOYED:
            return story.stage is Stage.TESTING and story.test_effort == 0

        group = self.group_for(target)
        if group is None:
            return True
        if story.stage in group:
            return True
        return self.registry.count_in(*group.stages) < group.limit

    def wip_counts(self) -> dict[str, tuple[int, int]]:
        """Group name -> (stories in group, limit)."""
        return {
            group.name: (self.registry.count_in(*group.stages), group.limit)
            for group in self.wip_groups
        }

    # ------------------------------------------------------------------
    # Stage moves
    # ------------------------------------------------------------------

    def attempt_move(self, story_id: int, target: Stage, mode: Mode = Mode.NORMAL) -> CommandResult:
        """Try to move a story to target.

        No side effects unless the result is accepted.
        """
        story = self.registry.find_by_id(story_id)
        if story is None:
            return CommandResult.rejected(Rejection.NOT_FOUND, f"Story {story_id} is not on the board")

        if target not in BOARD_STAGES:
            return CommandResult.rejected(
                Rejection.ILLEGAL_TRANSITION, f"{target.value} is not a board stage"
            )

        if mode is Mode.SANDBOX:
            transition(story, target, reason="sandbox", force=True)
            return CommandResult.ok(f"Story {story_id} set to {target.value}")

        if not self.has_capacity(story, target):
            logger.info(f"[MOVE] Blocked story {story_id} -> {target.value}: WIP limit")
            return CommandResult.rejected(
                Rejection.WIP_LIMIT, f"No room in {target.value} for story {story_id}"
            )

        from_stage = story.stage
        try:
            transition(story, target, reason="player move")
        except InvalidTransition as e:
            logger.info(f"[MOVE] Refused story {story_id}: {e}")
            return CommandResult.rejected(Rejection.ILLEGAL_TRANSITION, str(e))

        logger.info(f"[MOVE] Story {story_id}: {from_stage.value} -> {target.value}")
        return CommandResult.ok(f"Story {story_id} moved to {target.value}")

    # ------------------------------------------------------------------
    # Resource allocation
    # ------------------------------------------------------------------

    @staticmethod
    def can_work_on(resource: Resource, story: Story) -> bool:
        """A resource can only be attached to a story in its kind's stage."""
        return EXPECTED_KIND.get(story.stage) is resource.kind

    def attempt_allocate(self, resource_id: str, story_id: int) -> CommandResult:
        """Attach a resource to a story, taking it from the pool or another story.

        A transfer between stories removes the resource from the origin in
        the same step, so it is never seen in two places or in none.
        """
        target = self.registry.find_by_id(story_id)
        if target is None:
            return CommandResult.rejected(Rejection.NOT_FOUND, f"Story {story_id} is not on the board")

        resource = self.pool.get(resource_id)
        if resource is None:
            return CommandResult.rejected(Rejection.NOT_FOUND, f"Unknown resource {resource_id}")

        if target.has_resource(resource_id):
            return CommandResult.ok(f"{resource_id} already on story {story_id}")

        if not self.can_work_on(resource, target):
            logger.info(
                f"[ALLOC] Cannot put {resource_id} ({resource.kind.value}) on story {story_id} "
                f"({target.stage.value})"
            )
            return CommandResult.rejected(
                Rejection.KIND_MISMATCH,
                f"A {resource.kind.value} cannot work on a story in {target.stage.value}",
            )

        origin = self.registry.holder_of(resource_id)
        if origin is not None:
            origin.remove_resource(resource_id)
            logger.info(f"[ALLOC] {resource_id}: story {origin.id} -> story {story_id}")
        else:
            self.pool.allocate(resource_id)
            logger.info(f"[ALLOC] {resource_id}: pool -> story {story_id}")

        target.allocated_resources.append(resource)
        return CommandResult.ok(f"{resource_id} allocated to story {story_id}")

    def return_to_pool(self, resource_id: str) -> CommandResult:
        """Send a resource back to the pool. Idempotent."""
        resource = self.pool.get(resource_id)
        if resource is None:
            return CommandResult.rejected(Rejection.NOT_FOUND, f"Unknown resource {resource_id}")

        origin = self.registry.holder_of(resource_id)
        if origin is not None:
            origin.remove_resource(resource_id)
            logger.info(f"[ALLOC] {resource_id}: story {origin.id} -> pool")

        self.pool.release(resource)
        return CommandResult.ok(f"{resource_id} is in the pool")

    def reclaim(self, story: Story) -> list[str]:
        """Return every resource on story to the pool. Returns their ids."""
        reclaimed = []
        for resource in story.allocated_resources:
            self.pool.release(resource)
            reclaimed.append(resource.id)
        story.allocated_resources.clear()
        if reclaimed:
            logger.info(f"[POOL] Reclaimed {reclaimed} from story {story.id}")
        return reclaimed
