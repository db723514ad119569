from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base, CreatedAtMixin


class Simulation(CreatedAtMixin, Base):
    """One persisted simulation: the submitted form and the model's result.

    Attributes:
        user_id: Owning account id from the hosted auth service. Immutable.
        title: Display title.
        input_data: Flat field record; unsupplied fields are stored as null.
        ai_result: Normalized model output.
        is_public: Visibility flag. ``None`` and ``False`` both mean private.
        tags: Optional labels shown in the knowledge hub.
    """

    __tablename__ = "simulations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    input_data: Mapped[dict[str, Any]] = mapped_column(JSON)
    ai_result: Mapped[dict[str, Any]] = mapped_column(JSON)
    is_public: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, default=False, server_default="false", index=True
    )
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
