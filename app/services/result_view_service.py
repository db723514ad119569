from __future__ import annotations

"""Decide, per stored simulation, which input groups and result panels a page draws.

Every optional ``ai_result`` key maps to exactly one panel when it holds data
and to nothing when it is absent or empty. Chemistry profiles count as three
keys (``chemistryProfiles.pH``, ``.eh``, ``.fe3Fe2Ratio``).
"""

import math
from typing import Any, Callable, Mapping

from app.models.simulation import Simulation
from app.schemas.result_view import (
    ChartSeries,
    InputSection,
    InputValue,
    PanelKind,
    ResultPanel,
    SimulationView,
)
from app.services.simulation_fields import SchemaVariant, infer_variant, iter_populated


MINING_RESULT_KEYS = ("recoveryData", "chemistryProfiles")

KINETICS_LABELS = {
    "rateConstant": "Rate Constant (h^-1)",
    "reactionOrder": "Reaction Order",
    "activationEnergy": "Activation Energy (kJ/mol)",
    "halfLife": "Half-life (hours)",
}

MATERIAL_PROPERTIES = {
    "hardness": "Hardness",
    "strength": "Strength",
    "conductivity": "Conductivity",
}

CHEMISTRY_PROFILES = (
    ("pH", "pH", "pH vs Time"),
    ("eh", "eh", "Redox Potential (Eh) vs Time"),
    ("fe3Fe2Ratio", "ratio", "Fe3+/Fe2+ Ratio vs Time"),
)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _rows(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _first_row_has(rows: list[dict[str, Any]], key: str) -> bool:
    return bool(rows) and rows[0].get(key) is not None


def result_variant(record: Simulation) -> SchemaVariant:
    """Form variant of a stored record; mining output keys also imply mining."""

    input_data = record.input_data or {}
    ai_result = record.ai_result or {}
    if infer_variant(input_data) is SchemaVariant.MINING:
        return SchemaVariant.MINING
    if any(ai_result.get(key) for key in MINING_RESULT_KEYS):
        return SchemaVariant.MINING
    return SchemaVariant.MATERIALS


def confidence_level(score: float) -> str:
    if score > 0.7:
        return "high"
    if score > 0.5:
        return "medium"
    return "low"


def _text_panel(key: str, title: str) -> Callable[[Mapping[str, Any]], list[ResultPanel]]:
    def build(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
        value = ai_result.get(key)
        if not _non_empty_text(value):
            return []
        return [ResultPanel(key=key, kind=PanelKind.TEXT, title=title, text=value)]

    return build


def _confidence_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    score = ai_result.get("confidenceScore")
    if not _is_number(score):
        return []
    clamped = max(0.0, min(1.0, float(score)))
    return [
        ResultPanel(
            key="confidenceScore",
            kind=PanelKind.METRIC,
            title="Confidence Score",
            value=clamped,
            level=confidence_level(clamped),
        )
    ]


def _kinetics_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    kinetics = ai_result.get("kineticsAnalysis")
    if not isinstance(kinetics, dict):
        return []
    metrics = {
        name: float(kinetics[name])
        for name in KINETICS_LABELS
        if _is_number(kinetics.get(name))
    }
    if not metrics:
        return []
    return [
        ResultPanel(
            key="kineticsAnalysis",
            kind=PanelKind.METRICS,
            title="Kinetics Analysis",
            metrics=metrics,
        )
    ]


def _recovery_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    rows = _rows(ai_result.get("recoveryData"))
    if not rows:
        return []
    series = [ChartSeries(key="recovery", label="Recovery (%)")]
    if _first_row_has(rows, "grade"):
        series.append(ChartSeries(key="grade", label="Grade"))
    return [
        ResultPanel(
            key="recoveryData",
            kind=PanelKind.CHART,
            title="Metal Recovery vs Time",
            x_key="time",
            series=series,
            data=rows,
        )
    ]


def _temperature_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    rows = _rows(ai_result.get("temperatureData"))
    if not rows:
        return []
    return [
        ResultPanel(
            key="temperatureData",
            kind=PanelKind.CHART,
            title="Efficiency vs Temperature",
            x_key="temperature",
            series=[ChartSeries(key="efficiency", label="Efficiency")],
            data=rows,
        )
    ]


def _chemistry_panels(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    profiles = ai_result.get("chemistryProfiles")
    if not isinstance(profiles, dict):
        return []
    panels: list[ResultPanel] = []
    for name, y_key, title in CHEMISTRY_PROFILES:
        rows = _rows(profiles.get(name))
        if not rows:
            continue
        panels.append(
            ResultPanel(
                key=f"chemistryProfiles.{name}",
                kind=PanelKind.CHART,
                title=title,
                x_key="time",
                series=[ChartSeries(key=y_key, label=name)],
                data=rows,
            )
        )
    return panels


def _material_properties_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    rows = _rows(ai_result.get("materialPropertiesData"))
    series = [
        ChartSeries(key=key, label=label)
        for key, label in MATERIAL_PROPERTIES.items()
        if _first_row_has(rows, key)
    ]
    if not series:
        return []
    return [
        ResultPanel(
            key="materialPropertiesData",
            kind=PanelKind.CHART,
            title="Material Properties vs Temperature",
            x_key="temperature",
            series=series,
            data=rows,
        )
    ]


def _predictions_panel(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    predictions = ai_result.get("predictions")
    if not predictions or not isinstance(predictions, (dict, list)):
        return []
    return [
        ResultPanel(
            key="predictions",
            kind=PanelKind.DETAILS,
            title="Predictions & Optimization",
            data=predictions,
        )
    ]


PANEL_BUILDERS: tuple[Callable[[Mapping[str, Any]], list[ResultPanel]], ...] = (
    _confidence_panel,
    _text_panel("processSummary", "Process Summary"),
    _text_panel("recommendedMethod", "Recommended Method"),
    _kinetics_panel,
    _recovery_panel,
    _temperature_panel,
    _chemistry_panels,
    _material_properties_panel,
    _predictions_panel,
)


def build_panels(ai_result: Mapping[str, Any]) -> list[ResultPanel]:
    return [panel for builder in PANEL_BUILDERS for panel in builder(ai_result)]


def build_input_sections(
    input_data: Mapping[str, Any], variant: SchemaVariant
) -> list[InputSection]:
    return [
        InputSection(
            heading=section.heading,
            values=[
                InputValue(field=spec.name, label=spec.label, value=value, unit=spec.unit)
                for spec, value in present
            ],
        )
        for section, present in iter_populated(input_data, variant)
    ]


def build_simulation_view(record: Simulation) -> SimulationView:
    """Build the render plan for one stored simulation.

    Args:
        record: Stored simulation (owned or public).

    Returns:
        `SimulationView` listing populated input sections and result panels.
    """

    input_data = record.input_data or {}
    return SimulationView(
        id=record.id,
        title=record.title,
        variant=result_variant(record),
        is_public=record.is_public is True,
        created_at=record.created_at,
        # Inputs are grouped by the form that produced them.
        input_sections=build_input_sections(input_data, infer_variant(input_data)),
        panels=build_panels(record.ai_result or {}),
    )
