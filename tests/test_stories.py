"""Tests for kanban.pm.stories and kanban.pm.models modules."""

import pytest

from kanban.lib.types import ResourceKind, Stage
from kanban.pm.catalog import DEFAULT_CATALOG, build_stories
from kanban.pm.models import GameClock, Resource, Story
from kanban.pm.stories import StoryRegistry


@pytest.fixture
def registry():
    return StoryRegistry(build_stories(DEFAULT_CATALOG))


class TestStoryModel:
    """Tests for Story dataclass helpers."""

    def test_original_effort_snapshot(self):
        story = Story(1, "Login", 150, 8, 18, 10)
        story.analysis_effort = 3
        assert story.progress("analysis") == (3, 8)
        assert story.progress("dev") == (18, 18)

    def test_progress_unknown_phase(self):
        with pytest.raises(ValueError, match="Unknown phase"):
            Story(1, "Login", 150, 8, 18, 10).progress("design")

    def test_current_phase(self):
        story = Story(1, "Login", 150, 8, 18, 10, stage=Stage.DEVELOPED_IN_PROGRESS)
        assert story.current_phase == "dev"
        assert story.remaining_effort == 18
        story.stage = Stage.DEVELOPED_DONE
        assert story.current_phase is None
        assert story.remaining_effort is None

    def test_is_ready_to_advance(self):
        story = Story(1, "Login", 150, 8, 18, 10, stage=Stage.PRIORITIZED)
        assert not story.is_ready_to_advance
        story.days_in_stage = 1
        assert story.is_ready_to_advance

    def test_remove_resource(self):
        analyst = Resource("analyst_1", ResourceKind.ANALYST)
        story = Story(1, "Login", 150, 8, 18, 10, allocated_resources=[analyst])
        assert story.has_resource("analyst_1")
        assert story.remove_resource("analyst_1") == analyst
        assert story.remove_resource("analyst_1") is None
        assert story.allocated_resources == []

    def test_clock_is_over(self):
        assert not GameClock(current_day=34, max_days=35).is_over
        assert GameClock(current_day=35, max_days=35).is_over


class TestReveal:
    """Tests for reveal_initial() and replenish_backlog()."""

    def test_catalog_starts_hidden(self, registry):
        assert len(registry.hidden_stories()) == 20
        assert registry.active_stories() == []
        assert all(s.stage is Stage.HIDDEN for s in registry.hidden_stories())

    def test_reveal_initial_in_catalog_order(self, registry):
        revealed = registry.reveal_initial(5)
        assert [s.id for s in revealed] == [1, 2, 3, 4, 5]
        assert all(s.stage is Stage.BACKLOG for s in revealed)
        assert len(registry.hidden_stories()) == 15

    def test_replenish_tops_up_to_target(self, registry):
        registry.reveal_initial(5)
        registry.find_by_id(1).stage = Stage.PRIORITIZED
        registry.find_by_id(2).stage = Stage.PRIORITIZED

        revealed = registry.replenish_backlog(5)

        assert [s.id for s in revealed] == [6, 7]
        assert registry.count_in(Stage.BACKLOG) == 5

    def test_replenish_noop_when_full(self, registry):
        registry.reveal_initial(5)
        assert registry.replenish_backlog(5) == []
        assert len(registry.active_stories()) == 5

    def test_replenish_stops_when_catalog_runs_out(self):
        registry = StoryRegistry(build_stories(DEFAULT_CATALOG[:3]))
        registry.reveal_initial(2)
        registry.find_by_id(1).stage = Stage.PRIORITIZED
        registry.find_by_id(2).stage = Stage.PRIORITIZED

        revealed = registry.replenish_backlog(5)

        assert [s.id for s in revealed] == [3]
        assert registry.hidden_stories() == []

    def test_revealed_stories_stay_active(self, registry):
        """A story moved back to hidden by hand is not revealed twice."""
        registry.reveal_initial(1)
        registry.find_by_id(1).stage = Stage.HIDDEN
        registry.replenish_backlog(1)
        assert [s.id for s in registry.active_stories()].count(1) == 1


class TestLookup:
    """Tests for find_by_id() and stage queries."""

    def test_find_by_id_only_active(self, registry):
        registry.reveal_initial(5)
        assert registry.find_by_id(3).id == 3
        assert registry.find_by_id(6) is None
        assert registry.find_by_id(999) is None

    def test_deployed_stories(self, registry):
        registry.reveal_initial(5)
        registry.find_by_id(2).stage = Stage.DEPLOYED
        assert [s.id for s in registry.deployed_stories()] == [2]

    def test_holder_of(self, registry):
        registry.reveal_initial(2)
        tester = Resource("tester_7", ResourceKind.TESTER)
        registry.find_by_id(2).allocated_resources.append(tester)
        assert registry.holder_of("tester_7").id == 2
        assert registry.holder_of("tester_8") is None

    def test_duplicate_ids_rejected(self):
        stories = build_stories(DEFAULT_CATALOG[:2]) + build_stories(DEFAULT_CATALOG[:1])
        with pytest.raises(ValueError, match="unique"):
            StoryRegistry(stories)

    def test_preplaced_stories_count_as_active(self):
        stories = build_stories(DEFAULT_CATALOG[:3])
        stories[1].stage = Stage.TESTING
        registry = StoryRegistry(stories)
        assert [s.id for s in registry.active_stories()] == [2]
        assert [s.id for s in registry.hidden_stories()] == [1, 3]
