from __future__ import annotations

import random
from typing import Any, Mapping

from fastapi import HTTPException, status

from app.core.logging import logger
from app.models.simulation import Simulation
from app.schemas.auth import Account
from app.services.model_client import ModelClient
from app.services.prompt_builder import SYSTEM_PROMPTS, build_prompt
from app.services.result_normalizer import normalize_ai_result
from app.services.simulation_fields import (
    SchemaVariant,
    is_populated,
    missing_required,
    normalize_input,
    submitted_variant,
)
from app.services.simulation_store import RecordStore


DEFAULT_TITLE = "Untitled Simulation"
TITLE_MAX_CHARS = 100


def default_title(fields: Mapping[str, Any]) -> str:
    """Supplied title, else the first 100 characters of the goal, else a placeholder."""

    title = fields.get("title")
    if is_populated(title):
        return str(title).strip()
    goal = fields.get("goal")
    if is_populated(goal):
        return str(goal).strip()[:TITLE_MAX_CHARS]
    return DEFAULT_TITLE


def build_input_data(fields: Mapping[str, Any], variant: SchemaVariant) -> dict[str, Any]:
    """Stored copy of the submission: every variant field, unsupplied ones as None.

    The mining form posts its title as a form field, so it is kept there too.
    """

    extra = ("title",) if variant is SchemaVariant.MINING else ()
    return normalize_input(fields, variant, extra=extra)


async def run_simulation(
    fields: Mapping[str, Any],
    account: Account,
    store: RecordStore,
    model_client: ModelClient,
    rng: random.Random | None = None,
) -> Simulation:
    """Run one simulation end to end and persist it.

    Args:
        fields: Submitted flat form record.
        account: Signed-in account; becomes the record owner.
        store: Record store to insert into.
        model_client: Model invoker.
        rng: Jitter source for fallback results.

    Returns:
        The inserted `Simulation`.
    """

    variant = submitted_variant(fields)
    missing = missing_required(fields, variant)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "Missing required fields", "details": missing},
        )

    input_data = build_input_data(fields, variant)
    prompt = build_prompt(fields, variant)
    logger.debug("Assembled %s prompt for account %s", variant.value, account.id)

    text = await model_client.complete(prompt, SYSTEM_PROMPTS[variant])
    ai_result = normalize_ai_result(text, variant, input_data=input_data, rng=rng)

    simulation = await store.insert(
        user_id=account.id,
        title=default_title(fields),
        input_data=input_data,
        ai_result=ai_result,
        is_public=False,
    )
    logger.info(
        "Stored %s simulation %s for account %s", variant.value, simulation.id, account.id
    )
    return simulation
