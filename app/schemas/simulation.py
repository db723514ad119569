from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, model_validator


_SCALARS = (str, int, float)


class SimulationRequest(BaseModel):
    """Flat form record posted by either simulation form.

    Only ``title`` is declared; every other key is a form field kept as an
    extra. Values must be strings, numbers or null.
    """

    title: str | None = None

    model_config = {"extra": "allow"}

    @model_validator(mode="after")
    def _check_scalar_values(self) -> "SimulationRequest":
        for key, value in (self.model_extra or {}).items():
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, _SCALARS)
            ):
                raise ValueError(f"Field '{key}' must be a string, number or null")
        return self

    def form_fields(self) -> dict[str, Any]:
        """Return all submitted fields, ``title`` included."""

        fields = dict(self.model_extra or {})
        fields["title"] = self.title
        return fields


class SimulationCreated(BaseModel):
    id: UUID


class VisibilityUpdate(BaseModel):
    # Validated in the router so a non-boolean yields 400 rather than 422.
    is_public: Any = None


class SimulationRead(BaseModel):
    id: UUID
    user_id: str
    title: str | None = None
    input_data: dict[str, Any]
    ai_result: dict[str, Any]
    is_public: bool | None = None
    created_at: datetime
    tags: list[str] | None = None

    model_config = {"from_attributes": True}


class SimulationListItem(BaseModel):
    """Card-sized projection of a simulation used by list views."""

    id: UUID
    user_id: str
    title: str | None = None
    input_data: dict[str, Any]
    is_public: bool | None = None
    created_at: datetime
    tags: list[str] | None = None

    model_config = {"from_attributes": True}


class SimulationUpdated(BaseModel):
    success: Literal[True] = True
    data: SimulationRead


class SimulationDeleted(BaseModel):
    success: Literal[True] = True
    message: str = "Simulation deleted successfully"


class SimulationStats(BaseModel):
    total: int
    public: int
    private: int


class PublicSimulationList(BaseModel):
    items: list[SimulationListItem]
    material_types: list[str]


class TemplateSummary(BaseModel):
    key: str
    label: str
    sections: list[str]


class TemplateRead(BaseModel):
    key: str
    label: str
    sections: list[str]
    fields: dict[str, str]
