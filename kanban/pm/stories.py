"""
Story registry.

Owns every story in the catalog. Stories start hidden and are revealed into
the backlog in catalog order; once revealed a story stays on the board
("active") for the rest of the game.
"""

import logging
from typing import Optional

from kanban.lib.types import Stage
from kanban.pm.models import Story
from kanban.workflow.state_machine import transition

logger = logging.getLogger(__name__)


class StoryRegistry:
    """Catalog of stories plus the ordered list of those on the board."""

    def __init__(self, stories: list[Story]):
        ids = [s.id for s in stories]
        if len(ids) != len(set(ids)):
            raise ValueError("Story ids must be unique")

        self._catalog: list[Story] = list(stories)
        # Stories handed in already on the board count as revealed, in catalog order
        self._active: list[Story] = [s for s in stories if s.stage is not Stage.HIDDEN]

    def _reveal(self, story: Story) -> None:
        transition(story, Stage.BACKLOG, reason="revealed")
        self._active.append(story)

    def reveal_initial(self, n: int) -> list[Story]:
        """Promote the first n hidden catalog stories to the backlog."""
        revealed = self.hidden_stories()[:n]
        for story in revealed:
            self._reveal(story)
        logger.info(f"[BACKLOG] Dealt {len(revealed)} initial stories")
        return revealed

    def replenish_backlog(self, target: int) -> list[Story]:
        """Top the backlog up to target from the hidden stories, in catalog order.

        Stops early when the catalog runs out. Returns the revealed stories.
        """
        current = self.count_in(Stage.BACKLOG)
        needed = target - current
        if needed <= 0:
            return []

        revealed = self.hidden_stories()[:needed]
        for story in revealed:
            self._reveal(story)

        logger.info(
            f"[BACKLOG] backlog had {current}, needed {needed}, revealed {len(revealed)}"
            + (f": {[s.id for s in revealed]}" if revealed else "")
        )
        return revealed

    def find_by_id(self, story_id: int) -> Optional[Story]:
        """Find a story on the board. Hidden stories are not found."""
        for story in self._active:
            if story.id == story_id:
                return story
        return None

    def active_stories(self) -> list[Story]:
        """Stories on the board, in the order they were revealed."""
        return list(self._active)

    def hidden_stories(self) -> list[Story]:
        """Catalog stories not yet revealed, in catalog order."""
        active_ids = {s.id for s in self._active}
        return [s for s in self._catalog if s.id not in active_ids]

    def stories_in(self, *stages: Stage) -> list[Story]:
        return [s for s in self._active if s.stage in stages]

    def count_in(self, *stages: Stage) -> int:
        return len(self.stories_in(*stages))

    def deployed_stories(self) -> list[Story]:
        return self.stories_in(Stage.DEPLOYED)

    def holder_of(self, resource_id: str) -> Optional[Story]:
        """The story a resource is allocated to, or None if it is in the pool."""
        for story in self._active:
            if story.has_resource(resource_id):
                return story
        return None
