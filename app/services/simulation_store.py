from __future__ import annotations

from typing import Any, Literal, Protocol, Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.simulation import Simulation
from db.session import get_db


VisibilityFilter = Literal["all", "public", "private"]


class SimulationNotFoundError(LookupError):
    """No row matches the id (or no public row matches it)."""


class SimulationForbiddenError(PermissionError):
    """The row exists but belongs to another account."""


class SimulationStoreError(RuntimeError):
    """The backing store failed."""


class RecordStore(Protocol):
    """Capabilities the simulation lifecycle needs from the table store."""

    async def insert(
        self,
        *,
        user_id: str,
        title: str,
        input_data: dict[str, Any],
        ai_result: dict[str, Any],
        is_public: bool = False,
        tags: list[str] | None = None,
    ) -> Simulation: ...

    async def get_owned(self, simulation_id: UUID, user_id: str) -> Simulation: ...

    async def get_public(self, simulation_id: UUID) -> Simulation: ...

    async def update_visibility(
        self, simulation_id: UUID, user_id: str, is_public: bool
    ) -> Simulation: ...

    async def delete_owned(self, simulation_id: UUID, user_id: str) -> None: ...

    async def list_owned(
        self, user_id: str, *, q: str | None = None, status: VisibilityFilter = "all"
    ) -> list[Simulation]: ...

    async def list_public(
        self, *, q: str | None = None, material_type: str | None = None
    ) -> list[Simulation]: ...

    async def public_material_types(self) -> list[str]: ...

    async def owner_stats(self, user_id: str) -> tuple[int, int]: ...


def _material_expr():
    return func.coalesce(
        Simulation.input_data["materialType"].as_string(),
        Simulation.input_data["mineralType"].as_string(),
    )


def _search_clause(q: str):
    like = f"%{q}%"
    return or_(
        Simulation.title.ilike(like),
        Simulation.input_data["goal"].as_string().ilike(like),
        _material_expr().ilike(like),
    )


def _is_public_clause():
    return Simulation.is_public.is_(True)


def _is_private_clause():
    # NULL and FALSE both mean private
    return or_(Simulation.is_public.is_(False), Simulation.is_public.is_(None))


class SqlSimulationStore:
    """`RecordStore` backed by the ``simulations`` table via SQLAlchemy.

    Owner-scoped statements always filter on both ``id`` and ``user_id``;
    public reads always filter on ``is_public IS TRUE`` and re-check the
    loaded row.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s simulation", action, exc_info=True)
            raise SimulationStoreError(f"Failed to {action} simulation") from exc

    async def _execute(self, stmt, action: str):  # type: ignore[no-untyped-def]
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s simulation", action, exc_info=True)
            raise SimulationStoreError(f"Failed to {action} simulation") from exc

    async def _refresh(self, simulation: Simulation, action: str) -> None:
        try:
            await self.db.refresh(simulation)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s simulation", action, exc_info=True)
            raise SimulationStoreError(f"Failed to {action} simulation") from exc

    async def _raise_missing_or_forbidden(self, simulation_id: UUID, user_id: str) -> None:
        """Explain why an owner-scoped statement matched nothing."""

        result = await self._execute(
            select(Simulation.user_id).where(Simulation.id == simulation_id), "load"
        )
        owner = result.scalar_one_or_none()
        if owner is None:
            raise SimulationNotFoundError(str(simulation_id))
        logger.info(
            "Account %s denied access to simulation %s owned by another account",
            user_id,
            simulation_id,
        )
        raise SimulationForbiddenError(str(simulation_id))

    async def insert(
        self,
        *,
        user_id: str,
        title: str,
        input_data: dict[str, Any],
        ai_result: dict[str, Any],
        is_public: bool = False,
        tags: list[str] | None = None,
    ) -> Simulation:
        simulation = Simulation(
            user_id=user_id,
            title=title,
            input_data=input_data,
            ai_result=ai_result,
            is_public=is_public,
            tags=tags,
        )
        self.db.add(simulation)
        await self._commit("save")
        await self._refresh(simulation, "save")
        return simulation

    async def get_owned(self, simulation_id: UUID, user_id: str) -> Simulation:
        stmt: Select[tuple[Simulation]] = select(Simulation).where(
            Simulation.id == simulation_id, Simulation.user_id == user_id
        )
        simulation = (await self._execute(stmt, "load")).scalar_one_or_none()
        if simulation is None:
            raise SimulationNotFoundError(str(simulation_id))
        return simulation

    async def get_public(self, simulation_id: UUID) -> Simulation:
        stmt: Select[tuple[Simulation]] = select(Simulation).where(
            Simulation.id == simulation_id, _is_public_clause()
        )
        simulation = (await self._execute(stmt, "load")).scalar_one_or_none()
        if simulation is None or simulation.is_public is not True:
            raise SimulationNotFoundError(str(simulation_id))
        return simulation

    async def update_visibility(
        self, simulation_id: UUID, user_id: str, is_public: bool
    ) -> Simulation:
        stmt = (
            update(Simulation)
            .where(Simulation.id == simulation_id, Simulation.user_id == user_id)
            .values(is_public=is_public)
            .returning(Simulation)
        )
        simulation = (await self._execute(stmt, "update")).scalar_one_or_none()
        if simulation is None:
            await self.db.rollback()
            await self._raise_missing_or_forbidden(simulation_id, user_id)
        await self._commit("update")
        return simulation

    async def delete_owned(self, simulation_id: UUID, user_id: str) -> None:
        stmt = (
            delete(Simulation)
            .where(Simulation.id == simulation_id, Simulation.user_id == user_id)
            .returning(Simulation.id)
        )
        deleted = (await self._execute(stmt, "delete")).scalar_one_or_none()
        if deleted is None:
            await self.db.rollback()
            await self._raise_missing_or_forbidden(simulation_id, user_id)
        await self._commit("delete")

    async def list_owned(
        self, user_id: str, *, q: str | None = None, status: VisibilityFilter = "all"
    ) -> list[Simulation]:
        stmt: Select[tuple[Simulation]] = (
            select(Simulation)
            .where(Simulation.user_id == user_id)
            .order_by(Simulation.created_at.desc())
        )
        if q:
            stmt = stmt.where(_search_clause(q))
        if status == "public":
            stmt = stmt.where(_is_public_clause())
        elif status == "private":
            stmt = stmt.where(_is_private_clause())
        rows: Sequence[Simulation] = (await self._execute(stmt, "list")).scalars().all()
        return list(rows)

    async def list_public(
        self, *, q: str | None = None, material_type: str | None = None
    ) -> list[Simulation]:
        stmt: Select[tuple[Simulation]] = (
            select(Simulation)
            .where(_is_public_clause())
            .order_by(Simulation.created_at.desc())
        )
        if q:
            stmt = stmt.where(_search_clause(q))
        if material_type:
            stmt = stmt.where(_material_expr() == material_type)
        rows: Sequence[Simulation] = (await self._execute(stmt, "list")).scalars().all()
        return [row for row in rows if row.is_public is True]

    async def public_material_types(self) -> list[str]:
        material = _material_expr()
        stmt = (
            select(material)
            .where(_is_public_clause(), material.is_not(None))
            .distinct()
            .order_by(material)
        )
        return [value for value in (await self._execute(stmt, "list")).scalars().all()]

    async def owner_stats(self, user_id: str) -> tuple[int, int]:
        """Return ``(total, public)`` counts for the account's simulations."""

        stmt = select(
            func.count(Simulation.id),
            func.count(Simulation.id).filter(_is_public_clause()),
        ).where(Simulation.user_id == user_id)
        total, public = (await self._execute(stmt, "count")).one()
        return int(total), int(public)


def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """FastAPI dependency returning the SQL-backed store for this request."""

    return SqlSimulationStore(db)
