"""Pydantic schemas for the service I/O contracts.

These schemas define the contracts between:
- API endpoints and clients
- The generation workflow and model providers
- Database serialization
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from studyplan.config import Settings


FALLBACK_PROVIDER = "fallback"


# =============================================================================
# Enums
# =============================================================================

class AttemptOutcome(str, Enum):
    """Outcome of a single provider attempt."""
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


# =============================================================================
# Input Schemas
# =============================================================================

class PlanRequest(BaseModel):
    """A validated study plan request."""
    subject: str = Field(..., min_length=1, description="Subject to study")
    level: str = Field(..., min_length=1, description="Academic level, e.g. Beginner")
    duration: str = Field(..., min_length=1, description="Free text duration, e.g. '6 weeks'")
    goals: str = Field(..., min_length=1, description="Learning goals")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "subject": "Biology",
                "level": "Beginner",
                "duration": "4 weeks",
                "goals": "Pass the final exam",
            }
        }
    )


class PlanRequestBody(BaseModel):
    """Raw request body for POST /generate-plan.

    Fields are optional here so that missing values can be reported with a
    400 instead of FastAPI's default 422.
    """
    subject: str | None = None
    level: str | None = None
    duration: str | None = None
    goals: str | None = None

    def missing_fields(self) -> list[str]:
        return [name for name in ("subject", "level", "duration", "goals") if not getattr(self, name)]

    def to_plan_request(self) -> PlanRequest:
        return PlanRequest(
            subject=self.subject,
            level=self.level,
            duration=self.duration,
            goals=self.goals,
        )


# =============================================================================
# Generation Schemas
# =============================================================================

class GenerationParams(BaseModel):
    """Sampling parameters sent with every generation call.

    Unset fields are left out of the provider payload.
    """
    max_new_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0)
    top_p: float | None = Field(default=None, gt=0.0, le=1.0)
    repetition_penalty: float | None = Field(default=None, gt=0.0)
    do_sample: bool | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> GenerationParams:
        return cls(
            max_new_tokens=settings.max_new_tokens,
            temperature=settings.temperature,
            top_p=settings.top_p,
            repetition_penalty=settings.repetition_penalty,
            do_sample=settings.do_sample,
        )


class GenerationAttempt(BaseModel):
    """Result of trying one provider. Never persisted."""
    provider: str
    outcome: AttemptOutcome
    text: str | None = Field(default=None, description="Accepted text (success only)")
    reason: str | None = Field(default=None, description="Why the output was unusable (rejected only)")
    error: str | None = Field(default=None, description="Provider error message (failed only)")


class GenerationResult(BaseModel):
    """Final output of the generation workflow."""
    model_config = ConfigDict(protected_namespaces=())

    plan: str
    model_used: str = Field(..., description="Provider id, or 'fallback'")
    is_ai_generated: bool
    attempts: list[GenerationAttempt] = Field(default_factory=list)


# =============================================================================
# API Response Schemas
# =============================================================================

class CamelModel(BaseModel):
    """Base for response models serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class GeneratePlanResponse(CamelModel):
    """API response for POST /generate-plan."""
    success: bool = True
    plan: str
    plan_id: str | None = None
    model_used: str
    is_ai_generated: bool
    warning: str | None = None
    message: str | None = None


class StoredPlanResponse(CamelModel):
    """A persisted study plan as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    subject: str
    level: str
    duration: str
    goals: str
    plan: str
    model_used: str
    is_ai_generated: bool
    created_at: datetime | None = None


class StoredPlanListResponse(CamelModel):
    """API response for GET /study-plans."""
    success: bool = True
    plans: list[StoredPlanResponse]


class StoredPlanDetailResponse(CamelModel):
    """API response for GET /study-plan/{id}."""
    success: bool = True
    plan: StoredPlanResponse


class ModelStatusResponse(CamelModel):
    """API response for GET /check-models."""
    timestamp: datetime
    model_status: dict[str, str]


class HealthResponse(BaseModel):
    """API response for GET /health."""
    status: str = "healthy"
    timestamp: datetime
    server: str
    version: str
