"""Tests for kanban.workflow.fsm module."""

import logging

import pytest

from kanban.lib.types import Stage
from kanban.pm.models import Story
from kanban.workflow.fsm import (
    StoryFSM,
    STATES,
    TRANSITIONS,
    TRIGGER_FOR,
)


def make_story(stage=Stage.BACKLOG, **overrides):
    fields = dict(id=1, description="Login", price=100,
                  analysis_effort=8, dev_effort=10, test_effort=6)
    fields.update(overrides)
    story = Story(**fields)
    story.stage = stage
    return story


class TestFSMStates:
    """Tests for FSM state definitions."""

    def test_states_match_stage_enum(self):
        """Every Stage value should be an FSM state and vice versa."""
        assert set(STATES) == {s.value for s in Stage}

    def test_linear_path(self):
        """Each state except deployed should have exactly one way forward."""
        sources = [t["source"] for t in TRANSITIONS]
        assert len(sources) == len(set(sources))
        assert "deployed" not in sources

    def test_trigger_lookup(self):
        """TRIGGER_FOR should map (source, dest) pairs to trigger names."""
        assert TRIGGER_FOR[("backlog", "prioritized")] == "prioritize"
        assert TRIGGER_FOR[("testing", "deployed")] == "deploy"
        assert ("backlog", "testing") not in TRIGGER_FOR


class TestFSMBasic:
    """Basic FSM functionality tests."""

    def test_initial_state_from_story(self):
        """FSM should start from the story's current stage."""
        fsm = StoryFSM(make_story(Stage.TESTING))
        assert fsm.state == "testing"

    def test_transition_writes_stage_back(self):
        """A successful trigger should update story.stage."""
        story = make_story(Stage.BACKLOG)
        fsm = StoryFSM(story)
        assert fsm.prioritize() is True
        assert story.stage is Stage.PRIORITIZED

    def test_prioritize_resets_days(self):
        """Entering prioritized should reset days_in_stage."""
        story = make_story(Stage.BACKLOG, days_in_stage=4)
        StoryFSM(story).prioritize()
        assert story.days_in_stage == 0

    def test_no_auto_transitions(self):
        """Machine should not generate to_<state> helpers."""
        fsm = StoryFSM(make_story())
        assert not hasattr(fsm, "to_deployed")

    def test_state_change_logged(self, caplog):
        """Each stage change should be logged with its trigger."""
        caplog.set_level(logging.INFO)
        StoryFSM(make_story(Stage.ANALYZED_DONE)).start_development()
        assert "[FSM] story 1: analyzed-done -> developed-in-progress (start_development)" in caplog.text


class TestFSMGuards:
    """Tests for per-story transition guards."""

    def test_start_analysis_needs_a_day(self):
        """A story prioritized today cannot start analysis."""
        story = make_story(Stage.PRIORITIZED, days_in_stage=0)
        fsm = StoryFSM(story)
        assert fsm.start_analysis() is False
        assert story.stage is Stage.PRIORITIZED

    def test_start_analysis_after_a_day(self):
        story = make_story(Stage.PRIORITIZED, days_in_stage=1)
        assert StoryFSM(story).start_analysis() is True
        assert story.stage is Stage.ANALYZED_IN_PROGRESS

    @pytest.mark.parametrize("stage,trigger,field", [
        (Stage.ANALYZED_IN_PROGRESS, "finish_analysis", "analysis_effort"),
        (Stage.DEVELOPED_IN_PROGRESS, "finish_development", "dev_effort"),
        (Stage.TESTING, "deploy", "test_effort"),
    ])
    def test_finish_needs_zero_effort(self, stage, trigger, field):
        """Leaving an in-progress stage requires its effort to be used up."""
        story = make_story(stage)
        fsm = StoryFSM(story)
        assert getattr(fsm, trigger)() is False
        assert story.stage is stage

        setattr(story, field, 0)
        assert getattr(fsm, trigger)() is True
        assert story.stage is not stage
