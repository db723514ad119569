from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.deps import AccountDep, ModelDep, StoreDep, store_errors
from app.schemas.simulation import (
    SimulationCreated,
    SimulationRequest,
    TemplateRead,
    TemplateSummary,
)
from app.services.model_client import ModelInvocationError
from app.services.simulation_service import run_simulation
from app.services.simulation_templates import TEMPLATES, apply_template, list_templates


router = APIRouter()


@router.post("", response_model=SimulationCreated)
async def simulate(
    account: AccountDep,
    store: StoreDep,
    model_client: ModelDep,
    payload: SimulationRequest,
) -> SimulationCreated:
    """Run a simulation for the submitted form and store the result.

    Returns the new record id. 401 without a session, 422 when required
    fields are missing, 500 when the model or the store fails.
    """

    try:
        with store_errors("save"):
            simulation = await run_simulation(
                payload.form_fields(), account, store, model_client
            )
    except ModelInvocationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Simulation failed", "details": str(exc)},
        )
    return SimulationCreated(id=simulation.id)


@router.get("/templates", response_model=list[TemplateSummary])
async def get_templates() -> list[TemplateSummary]:
    """List built-in simulation templates and the form sections each fills."""

    return [
        TemplateSummary(key=t.key, label=t.label, sections=t.sections)
        for t in list_templates()
    ]


@router.get("/templates/{key}", response_model=TemplateRead)
async def get_template(key: str) -> TemplateRead:
    """Return the full pre-filled form record for template ``key``."""

    try:
        fields = apply_template(key)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Template not found"
        )
    template = TEMPLATES[key]
    return TemplateRead(
        key=template.key, label=template.label, sections=template.sections, fields=fields
    )
