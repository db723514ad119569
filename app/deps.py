from __future__ import annotations

from contextlib import contextmanager
from typing import Annotated, Iterator, TypeAlias

from fastapi import Depends, HTTPException, status

from app.schemas.auth import Account
from app.services.model_client import ModelClient, get_model_client
from app.services.security import get_current_account
from app.services.simulation_store import (
    RecordStore,
    SimulationForbiddenError,
    SimulationNotFoundError,
    SimulationStoreError,
    get_record_store,
)

AccountDep: TypeAlias = Annotated[Account, Depends(get_current_account)]
StoreDep: TypeAlias = Annotated[RecordStore, Depends(get_record_store)]
ModelDep: TypeAlias = Annotated[ModelClient, Depends(get_model_client)]


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate record store exceptions into HTTP errors.

    Args:
        action: Verb used in the 500 message (e.g. ``"update"``).
    """

    try:
        yield
    except SimulationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Simulation not found"
        )
    except SimulationForbiddenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: You do not own this simulation",
        )
    except SimulationStoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action} simulation",
        )
