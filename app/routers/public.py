from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from app.deps import StoreDep, store_errors
from app.models.simulation import Simulation
from app.schemas.result_view import SimulationView
from app.schemas.simulation import (
    PublicSimulationList,
    SimulationListItem,
    SimulationRead,
)
from app.services.result_view_service import build_simulation_view


router = APIRouter()


@router.get("", response_model=PublicSimulationList)
async def list_public_simulations(
    store: StoreDep,
    q: Annotated[str | None, Query(max_length=200)] = None,
    material_type: Annotated[str | None, Query(max_length=100)] = None,
) -> PublicSimulationList:
    """Knowledge hub listing: shared simulations, newest first.

    Args:
        q: Case-insensitive match on title, goal or material/mineral type.
        material_type: Exact material (or mineral) type to keep.
    """

    with store_errors("list"):
        rows = await store.list_public(q=q, material_type=material_type)
        material_types = await store.public_material_types()
    return PublicSimulationList(
        items=[SimulationListItem.model_validate(row) for row in rows],
        material_types=material_types,
    )


@router.get("/{simulation_id}", response_model=SimulationRead)
async def get_public_simulation(store: StoreDep, simulation_id: UUID) -> Simulation:
    """Return a shared simulation. 404 unless it is public, whoever asks."""

    with store_errors("load"):
        return await store.get_public(simulation_id)


@router.get("/{simulation_id}/view", response_model=SimulationView)
async def get_public_simulation_view(
    store: StoreDep, simulation_id: UUID
) -> SimulationView:
    with store_errors("load"):
        simulation = await store.get_public(simulation_id)
    return build_simulation_view(simulation)
