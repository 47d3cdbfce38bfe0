"""SQLModel database tables.

Tables:
- StudyPlan: one row per completed plan request (AI or template plan)
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Text
from sqlmodel import Field, SQLModel


def new_plan_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# StudyPlan Model
# =============================================================================

class StudyPlan(SQLModel, table=True):
    """A generated study plan. Written once, never updated."""

    __tablename__ = "study_plans"
    __table_args__ = (
        Index("ix_study_plans_created", "created_at"),
    )

    id: str = Field(default_factory=new_plan_id, primary_key=True, description="Opaque plan id")

    # Request
    subject: str = Field(description="Subject to study")
    level: str = Field(description="Academic level")
    duration: str = Field(description="Free text duration")
    goals: str = Field(sa_column=Column(Text), description="Learning goals")

    # Result
    plan: str = Field(sa_column=Column(Text), description="Chosen plan text")
    model_used: str = Field(index=True, description="Provider id, or 'fallback'")
    is_ai_generated: bool = Field(default=True)

    # Timestamp
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
