"""Pydantic schemas describing what a result page draws for one simulation."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from app.services.simulation_fields import SchemaVariant


class PanelKind(StrEnum):
    TEXT = "text"
    METRIC = "metric"
    METRICS = "metrics"
    CHART = "chart"
    DETAILS = "details"


class InputValue(BaseModel):
    field: str
    label: str
    value: Any
    unit: str | None = None


class InputSection(BaseModel):
    heading: str
    values: list[InputValue]


class ChartSeries(BaseModel):
    key: str
    label: str


class ResultPanel(BaseModel):
    """One rendered block, tied to the ``ai_result`` key it came from.

    Args:
        key: Dotted path of the source key (e.g. ``chemistryProfiles.pH``).
        kind: How the block is drawn.
        title: Block heading.
        text: Body for text panels.
        value: Scalar for metric panels.
        level: Qualitative band for metric panels.
        metrics: Named numbers for metrics panels.
        x_key: Data key plotted on the x axis for charts.
        series: Plotted y series for charts.
        data: Chart rows or structured details.
    """

    key: str
    kind: PanelKind
    title: str
    text: str | None = None
    value: float | None = None
    level: str | None = None
    metrics: dict[str, float] | None = None
    x_key: str | None = None
    series: list[ChartSeries] | None = None
    data: Any = None


class SimulationView(BaseModel):
    id: UUID
    title: str | None = None
    variant: SchemaVariant
    is_public: bool
    created_at: datetime
    input_sections: list[InputSection]
    panels: list[ResultPanel]
