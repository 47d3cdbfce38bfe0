"""Plan store: persist and read back generated study plans.

The only write is ``save``; plans are never updated or deleted here.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from studyplan.schemas import GenerationResult, PlanRequest
from studyplan.database.models import StudyPlan
from studyplan.database.session import Database


logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """The plan store could not be read or written."""


class PlanStore:
    """Study plan persistence backed by a SQLModel table."""

    def __init__(self, database: Database):
        self.database = database

    async def save(self, request: PlanRequest, result: GenerationResult) -> str:
        """Persist one plan and return its id."""
        record = StudyPlan(
            subject=request.subject,
            level=request.level,
            duration=request.duration,
            goals=request.goals,
            plan=result.plan,
            model_used=result.model_used,
            is_ai_generated=result.is_ai_generated,
        )
        try:
            async with self.database.session() as db:
                db.add(record)
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to save study plan: {e}") from e

        logger.info(f"Saved study plan {record.id} ({record.model_used})")
        return record.id

    async def list_recent(self, limit: int = 50) -> list[StudyPlan]:
        """Most recent plans, newest first."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    select(StudyPlan)
                    .order_by(StudyPlan.created_at.desc())
                    .limit(limit)
                )
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to fetch study plans: {e}") from e

    async def get_by_id(self, plan_id: str) -> StudyPlan | None:
        """One plan by id, or None if it does not exist."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    select(StudyPlan).where(StudyPlan.id == plan_id)
                )
                return result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to fetch study plan {plan_id}: {e}") from e
