from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.deps import AccountDep, StoreDep, store_errors
from app.models.simulation import Simulation
from app.schemas.result_view import SimulationView
from app.schemas.simulation import (
    SimulationDeleted,
    SimulationListItem,
    SimulationRead,
    SimulationStats,
    SimulationUpdated,
    VisibilityUpdate,
)
from app.services.result_view_service import build_simulation_view


router = APIRouter()


@router.get("", response_model=list[SimulationListItem])
async def list_my_simulations(
    account: AccountDep,
    store: StoreDep,
    q: Annotated[str | None, Query(max_length=200)] = None,
    status_filter: Annotated[
        Literal["all", "public", "private"], Query(alias="status")
    ] = "all",
) -> list[Simulation]:
    """Return the caller's simulations, newest first.

    Args:
        q: Case-insensitive match on title, goal or material/mineral type.
        status_filter: ``public``, ``private`` (false or unset) or ``all``.
    """

    with store_errors("list"):
        return await store.list_owned(account.id, q=q, status=status_filter)


@router.get("/stats", response_model=SimulationStats)
async def simulation_stats(account: AccountDep, store: StoreDep) -> SimulationStats:
    """Dashboard counters for the caller's simulations."""

    with store_errors("count"):
        total, public = await store.owner_stats(account.id)
    return SimulationStats(total=total, public=public, private=total - public)


@router.get("/{simulation_id}", response_model=SimulationRead)
async def get_simulation(
    account: AccountDep, store: StoreDep, simulation_id: UUID
) -> Simulation:
    """Return one of the caller's simulations. 404 if missing or not owned."""

    with store_errors("load"):
        return await store.get_owned(simulation_id, account.id)


@router.get("/{simulation_id}/view", response_model=SimulationView)
async def get_simulation_view(
    account: AccountDep, store: StoreDep, simulation_id: UUID
) -> SimulationView:
    """Return the render plan for one of the caller's simulations."""

    with store_errors("load"):
        simulation = await store.get_owned(simulation_id, account.id)
    return build_simulation_view(simulation)


@router.patch("/{simulation_id}", response_model=SimulationUpdated)
async def update_visibility(
    account: AccountDep,
    store: StoreDep,
    simulation_id: UUID,
    payload: VisibilityUpdate,
) -> SimulationUpdated:
    """Set ``is_public`` on a simulation the caller owns.

    400 if ``is_public`` is not a boolean, 403 if another account owns the
    record, 404 if no record has this id.
    """

    if not isinstance(payload.is_public, bool):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid is_public value"
        )
    with store_errors("update"):
        simulation = await store.update_visibility(
            simulation_id, account.id, payload.is_public
        )
    return SimulationUpdated(data=SimulationRead.model_validate(simulation))


@router.delete("/{simulation_id}", response_model=SimulationDeleted)
async def delete_simulation(
    account: AccountDep, store: StoreDep, simulation_id: UUID
) -> SimulationDeleted:
    """Delete a simulation the caller owns. 403 if not owned, 404 if missing."""

    with store_errors("delete"):
        await store.delete_owned(simulation_id, account.id)
    return SimulationDeleted()
