from dataclasses import asdict
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.wizard.state import Wizard, WizardState

router = APIRouter()
wizard = Wizard()

WizardAction = Literal["next", "prev", "go-to", "complete", "update-data"]


class WizardActionRequest(BaseModel):
    state: WizardState = Field(default_factory=WizardState)
    step_index: int | None = None
    step_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


@router.get("/wizard/steps")
async def wizard_steps():
    return {"steps": [asdict(step) for step in wizard.steps]}


@router.post("/wizard/{action}")
async def wizard_action(action: WizardAction, payload: WizardActionRequest):
    state = payload.state
    if state.current_step >= wizard.total_steps:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="current_step is out of range.")
    if any(index >= wizard.total_steps for index in state.completed_steps):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="completed_steps is out of range.")

    if action == "next":
        new_state = wizard.next_step(state)
    elif action == "prev":
        new_state = wizard.prev_step(state)
    elif action == "go-to":
        if payload.step_index is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="step_index is required.")
        new_state = wizard.go_to_step(state, payload.step_index)
    elif action == "complete":
        if payload.step_index is not None and not 0 <= payload.step_index < wizard.total_steps:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="step_index is out of range.")
        new_state = wizard.complete_step(state, payload.step_index)
    else:
        step_id = payload.step_id or wizard.current_step_info(state).id
        if step_id not in {step.id for step in wizard.steps}:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown step '{step_id}'.")
        new_state = wizard.update_step_data(state, step_id, payload.data)

    return wizard.describe(new_state)
