from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from pydantic import BaseModel, Field, field_validator


@dataclass(frozen=True)
class WizardStep:
    id: str
    title: str
    description: str


DEFAULT_STEPS: tuple[WizardStep, ...] = (
    WizardStep(id="upload", title="Upload Resume", description="Select your resume file to get started"),
    WizardStep(id="processing", title="AI Analysis", description="Our AI is analyzing your resume"),
    WizardStep(id="results", title="View Results", description="Review your parsed resume data"),
    WizardStep(id="interview", title="AI Interview", description="Face the brutal AI interviewer"),
    WizardStep(id="feedback", title="Resources", description="Access feedback and tools"),
)


class WizardState(BaseModel):
    current_step: int = Field(default=0, ge=0)
    completed_steps: list[int] = Field(default_factory=list)
    step_data: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("completed_steps")
    @classmethod
    def _unique_completed_steps(cls, value: list[int]) -> list[int]:
        if any(index < 0 for index in value):
            raise ValueError("completed_steps must not contain negative indices")
        return list(dict.fromkeys(value))


class Wizard:
    """Linear step tracker.

    Every action returns a new ``WizardState``; the input state is left
    untouched so callers can keep history if they want it.
    """

    def __init__(self, steps: Sequence[WizardStep] = DEFAULT_STEPS):
        if not steps:
            raise ValueError("A wizard needs at least one step.")
        self.steps = tuple(steps)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def _copy(self, state: WizardState) -> WizardState:
        return state.model_copy(deep=True)

    def _with_completed(self, completed: list[int], index: int) -> list[int]:
        if index in completed:
            return list(completed)
        return [*completed, index]

    def next_step(self, state: WizardState) -> WizardState:
        new_state = self._copy(state)
        if state.current_step < self.total_steps - 1:
            new_state.completed_steps = self._with_completed(state.completed_steps, state.current_step)
            new_state.current_step = state.current_step + 1
        return new_state

    def prev_step(self, state: WizardState) -> WizardState:
        new_state = self._copy(state)
        if state.current_step > 0:
            new_state.current_step = state.current_step - 1
        return new_state

    def go_to_step(self, state: WizardState, step_index: int) -> WizardState:
        new_state = self._copy(state)
        if 0 <= step_index < self.total_steps:
            new_state.current_step = step_index
        return new_state

    def complete_step(self, state: WizardState, step_index: int | None = None) -> WizardState:
        index = state.current_step if step_index is None else step_index
        new_state = self._copy(state)
        new_state.completed_steps = self._with_completed(state.completed_steps, index)
        return new_state

    def update_step_data(self, state: WizardState, step_id: str, data: dict[str, Any]) -> WizardState:
        new_state = self._copy(state)
        merged = dict(new_state.step_data.get(step_id, {}))
        merged.update(data)
        new_state.step_data[step_id] = merged
        return new_state

    def is_step_completed(self, state: WizardState, step_index: int) -> bool:
        return step_index in state.completed_steps

    def can_go_to_step(self, state: WizardState, step_index: int) -> bool:
        return step_index <= state.current_step or (
            step_index == state.current_step + 1 and self.is_step_completed(state, state.current_step)
        )

    def is_first_step(self, state: WizardState) -> bool:
        return state.current_step == 0

    def is_last_step(self, state: WizardState) -> bool:
        return state.current_step == self.total_steps - 1

    def all_steps_completed(self, state: WizardState) -> bool:
        completed = {index for index in state.completed_steps if 0 <= index < self.total_steps}
        return len(completed) == self.total_steps

    def current_step_info(self, state: WizardState) -> WizardStep | None:
        if 0 <= state.current_step < self.total_steps:
            return self.steps[state.current_step]
        return None

    def current_step_data(self, state: WizardState) -> dict[str, Any]:
        info = self.current_step_info(state)
        if info is None:
            return {}
        return state.step_data.get(info.id, {})

    def progress(self, state: WizardState) -> float:
        if self.total_steps == 1:
            return 100.0
        return state.current_step / (self.total_steps - 1) * 100

    def describe(self, state: WizardState) -> dict[str, Any]:
        info = self.current_step_info(state)
        return {
            "state": state.model_dump(),
            "current_step_info": None if info is None else asdict(info),
            "current_step_data": self.current_step_data(state),
            "total_steps": self.total_steps,
            "progress": self.progress(state),
            "is_first_step": self.is_first_step(state),
            "is_last_step": self.is_last_step(state),
            "all_steps_completed": self.all_steps_completed(state),
            "can_go_to_next": self.can_go_to_step(state, state.current_step + 1),
        }
