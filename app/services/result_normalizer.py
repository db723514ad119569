from __future__ import annotations

"""Turn raw model text into the ``ai_result`` mapping stored with a simulation.

Valid JSON objects pass through untouched. Anything else (prose, truncated
JSON, provider error text, a JSON array) is replaced by a synthetic result of
the documented shape so every view has data to draw. The synthetic series are
straight-line interpolations with bounded jitter taken from an injectable
``random.Random``.
"""

import json
import math
import random
from typing import Any, Mapping

from app.core.logging import logger
from app.services.simulation_fields import SchemaVariant


FALLBACK_SUMMARY = (
    "The model did not return a structured report. Values below are indicative "
    "placeholders derived from the submitted parameters."
)
FALLBACK_METHOD = "See report"

MATERIALS_POINTS = 5
MINING_POINTS = 8

MATERIALS_CONFIDENCE = 0.8
MINING_CONFIDENCE = 0.75
MINING_TARGET_RECOVERY = 85.0

# Plausible bounds for values anchoring the mining fallback series.
HORIZON_HOURS = (1.0, 100_000.0)
PH_RANGE = (0.0, 14.0)
EH_RANGE_MV = (-2000.0, 2000.0)
RATIO_RANGE = (0.0, 1000.0)
ACTIVATION_ENERGY_RANGE = (0.0, 1000.0)


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _anchor(value: float | None, default: float, bounds: tuple[float, float]) -> float:
    """Submitted number clamped to ``bounds``, or ``default`` when absent (0 counts)."""

    if value is None:
        return default
    return _clamp(value, *bounds)


def _series(
    start: float,
    end: float,
    points: int,
    jitter: float,
    rng: random.Random,
) -> list[float]:
    """Linear ramp from ``start`` to ``end`` with uniform noise in ``[-jitter, jitter]``."""

    step = (end - start) / (points - 1)
    return [start + step * i + rng.uniform(-jitter, jitter) for i in range(points)]


def _materials_fallback(summary: str, rng: random.Random) -> dict[str, Any]:
    temperatures = [100.0 * (i + 1) for i in range(MATERIALS_POINTS)]
    efficiency = _series(0.5, 0.92, MATERIALS_POINTS, 0.02, rng)
    hardness = _series(30.0, 50.0, MATERIALS_POINTS, 1.0, rng)
    strength = _series(400.0, 600.0, MATERIALS_POINTS, 10.0, rng)
    conductivity = _series(50.0, 90.0, MATERIALS_POINTS, 2.0, rng)

    return {
        "processSummary": summary,
        "recommendedMethod": FALLBACK_METHOD,
        "temperatureData": [
            {"temperature": t, "efficiency": round(_clamp(e, 0.0, 1.0), 3)}
            for t, e in zip(temperatures, efficiency)
        ],
        "materialPropertiesData": [
            {
                "temperature": t,
                "hardness": round(h, 1),
                "strength": round(s, 1),
                "conductivity": round(c, 1),
            }
            for t, h, s, c in zip(temperatures, hardness, strength, conductivity)
        ],
        "confidenceScore": MATERIALS_CONFIDENCE,
        "predictions": {},
    }


def _mining_fallback(
    summary: str, input_data: Mapping[str, Any], rng: random.Random
) -> dict[str, Any]:
    horizon = _as_float(input_data.get("residenceTime"))
    if horizon is None or horizon <= 0:
        horizon = 72.0
    horizon = _clamp(horizon, *HORIZON_HOURS)
    times = [round(horizon * i / (MINING_POINTS - 1), 2) for i in range(MINING_POINTS)]

    recovery: list[float] = []
    for value in _series(0.0, MINING_TARGET_RECOVERY, MINING_POINTS, 2.0, rng):
        # Cumulative recovery never drops.
        floor = recovery[-1] if recovery else 0.0
        recovery.append(max(floor, _clamp(value, 0.0, 100.0)))

    ph_start = _anchor(_as_float(input_data.get("pH")), 1.8, PH_RANGE)
    eh_start = _anchor(_as_float(input_data.get("eh")), 550.0, EH_RANGE_MV)
    fe3 = _as_float(input_data.get("fe3Concentration"))
    fe2 = _as_float(input_data.get("fe2Concentration"))
    # An overflowing ratio clamps to the upper bound.
    submitted_ratio = fe3 / fe2 if fe3 is not None and fe2 else None
    ratio_start = _anchor(submitted_ratio, 2.5, RATIO_RANGE)

    ph = _series(ph_start, ph_start - 0.3, MINING_POINTS, 0.05, rng)
    eh = _series(eh_start, eh_start + 50.0, MINING_POINTS, 5.0, rng)
    ratio = _series(ratio_start, ratio_start * 1.3, MINING_POINTS, 0.05, rng)

    # First-order fit through the final recovery point.
    rate_constant = -math.log(1.0 - MINING_TARGET_RECOVERY / 100.0) / horizon
    activation_energy = _anchor(
        _as_float(input_data.get("activationEnergy")), 65.0, ACTIVATION_ENERGY_RANGE
    )

    return {
        "processSummary": summary,
        "recommendedMethod": FALLBACK_METHOD,
        "recoveryData": [
            {"time": t, "recovery": round(r, 2)} for t, r in zip(times, recovery)
        ],
        "chemistryProfiles": {
            "pH": [{"time": t, "pH": round(max(v, 0.0), 2)} for t, v in zip(times, ph)],
            "eh": [{"time": t, "eh": round(v, 1)} for t, v in zip(times, eh)],
            "fe3Fe2Ratio": [
                {"time": t, "ratio": round(max(v, 0.0), 2)} for t, v in zip(times, ratio)
            ],
        },
        "kineticsAnalysis": {
            "rateConstant": round(rate_constant, 4),
            "reactionOrder": 1.0,
            "activationEnergy": activation_energy,
            "halfLife": round(math.log(2) / rate_constant, 1),
        },
        "confidenceScore": MINING_CONFIDENCE,
        "predictions": {},
    }


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(literal: str) -> float:
    number = float(literal)
    if not math.isfinite(number):
        raise ValueError(f"{literal} is out of range")
    return number


def build_fallback_result(
    text: str,
    variant: SchemaVariant,
    *,
    input_data: Mapping[str, Any] | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Synthesize a well-shaped result for ``variant``.

    Args:
        text: Raw model output; kept as the summary when it is not blank.
        variant: Output contract to match.
        input_data: Submitted fields used to anchor the mining chemistry series.
        rng: Jitter source. A fresh unseeded generator when omitted.

    Returns:
        Result mapping with non-empty series and ``confidenceScore`` in [0, 1].
    """

    rng = rng or random.Random()
    summary = text.strip() or FALLBACK_SUMMARY
    if variant is SchemaVariant.MINING:
        return _mining_fallback(summary, input_data or {}, rng)
    return _materials_fallback(summary, rng)


def normalize_ai_result(
    text: str,
    variant: SchemaVariant,
    *,
    input_data: Mapping[str, Any] | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Parse model text strictly as a JSON object or fall back to a synthetic result.

    A parsed object is returned as-is; no keys are added, removed or repaired.
    Non-finite numbers (`NaN`, `Infinity`, overflowing literals) are not JSON
    and count as a parse failure.
    """

    try:
        parsed = json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except (ValueError, TypeError):
        logger.warning(
            "Model output for %s simulation is not valid JSON; using fallback result",
            variant.value,
        )
        return build_fallback_result(text or "", variant, input_data=input_data, rng=rng)

    if not isinstance(parsed, dict):
        logger.warning(
            "Model output for %s simulation is JSON %s, not an object; using fallback result",
            variant.value,
            type(parsed).__name__,
        )
        return build_fallback_result(text, variant, input_data=input_data, rng=rng)

    return parsed
