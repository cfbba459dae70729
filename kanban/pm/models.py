"""
Data models for the board.
"""

from dataclasses import dataclass, field
from typing import Optional

from kanban.lib.types import EFFORT_FIELD, ResourceKind, Stage

# Phase name -> Story attribute holding its remaining effort
PHASES = {
    "analysis": "analysis_effort",
    "dev": "dev_effort",
    "test": "test_effort",
}


@dataclass(frozen=True)
class Resource:
    """One unit of typed labor. Lives in the pool or on exactly one story."""
    id: str                                    # analyst_1, developer_4, ...
    kind: ResourceKind


@dataclass(frozen=True)
class Effort:
    """Effort snapshot taken when a story is created."""
    analysis: int
    dev: int
    test: int


@dataclass
class Story:
    """A work item moving across the board.

    Effort fields only ever decrease, and only while the story sits in the
    matching in-progress stage.
    """
    id: int
    description: str
    price: int
    analysis_effort: int
    dev_effort: int
    test_effort: int
    stage: Stage = Stage.HIDDEN
    allocated_resources: list[Resource] = field(default_factory=list)
    days_in_stage: int = 0                     # Only counted while prioritized
    original: Effort = field(init=False)

    def __post_init__(self):
        self.original = Effort(
            analysis=self.analysis_effort,
            dev=self.dev_effort,
            test=self.test_effort,
        )

    @property
    def current_phase(self) -> Optional[str]:
        """Phase name ("analysis", "dev", "test") being worked, or None."""
        effort_field = EFFORT_FIELD.get(self.stage)
        if effort_field is None:
            return None
        for phase, attr in PHASES.items():
            if attr == effort_field:
                return phase
        return None

    @property
    def remaining_effort(self) -> Optional[int]:
        """Remaining effort of the in-progress phase, or None outside one."""
        effort_field = EFFORT_FIELD.get(self.stage)
        return getattr(self, effort_field) if effort_field else None

    @property
    def is_ready_to_advance(self) -> bool:
        """Prioritized stories must wait a full day before analysis starts."""
        return self.stage is Stage.PRIORITIZED and self.days_in_stage >= 1

    def progress(self, phase: str) -> tuple[int, int]:
        """Return (remaining, original) effort for a phase."""
        if phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase}")
        return getattr(self, PHASES[phase]), getattr(self.original, phase)

    def has_resource(self, resource_id: str) -> bool:
        return any(r.id == resource_id for r in self.allocated_resources)

    def remove_resource(self, resource_id: str) -> Optional[Resource]:
        """Detach a resource from this story. Returns it, or None if absent."""
        for i, resource in enumerate(self.allocated_resources):
            if resource.id == resource_id:
                return self.allocated_resources.pop(i)
        return None


@dataclass
class GameClock:
    """Day counter and profit accumulator."""
    current_day: int = 1
    max_days: int = 35
    total_profit: int = 0

    @property
    def is_over(self) -> bool:
        return self.current_day >= self.max_days
