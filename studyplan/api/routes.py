"""FastAPI routes for the study plan API.

Endpoints:
- POST /generate-plan     - Generate (and store) a study plan
- GET  /study-plans       - Most recent stored plans
- GET  /study-plan/{id}   - One stored plan
- GET  /check-models      - Probe every configured model provider
- GET  /health            - Liveness
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from studyplan.config import Settings
from studyplan.schemas import (
    GeneratePlanResponse,
    HealthResponse,
    ModelStatusResponse,
    PlanRequest,
    PlanRequestBody,
    StoredPlanDetailResponse,
    StoredPlanListResponse,
    StoredPlanResponse,
)
from studyplan.agent.workflow import PlanOrchestrator
from studyplan.database.store import PlanStore, StoreError
from studyplan.llm.router import ProviderClient


logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_FIELDS_ERROR = "Missing required fields: subject, level, duration, and goals are all required"
FALLBACK_MESSAGE = "AI services are currently unavailable. A template study plan has been generated for you."
AI_PLAN_NOT_SAVED = "Plan generated successfully but not saved to database"
FALLBACK_PLAN_NOT_SAVED = "Plan not saved to database due to connection issues"


# =============================================================================
# Dependencies
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_orchestrator(request: Request) -> PlanOrchestrator:
    return request.app.state.orchestrator


def get_store(request: Request) -> PlanStore:
    return request.app.state.store


def get_provider_client(request: Request) -> ProviderClient:
    return request.app.state.provider_client


# =============================================================================
# Plan Generation
# =============================================================================

async def complete_plan(
    orchestrator: PlanOrchestrator,
    store: PlanStore,
    plan_request: PlanRequest,
) -> GeneratePlanResponse:
    """Generate a plan and store it.

    A failed save leaves the plan in the response with a warning instead of
    a plan id.
    """
    result = await orchestrator.generate(plan_request)

    response = GeneratePlanResponse(
        plan=result.plan,
        model_used=result.model_used,
        is_ai_generated=result.is_ai_generated,
        message=None if result.is_ai_generated else FALLBACK_MESSAGE,
    )

    try:
        response.plan_id = await store.save(plan_request, result)
    except StoreError as e:
        logger.error(f"Database save error for {result.model_used} plan: {e}")
        response.warning = AI_PLAN_NOT_SAVED if result.is_ai_generated else FALLBACK_PLAN_NOT_SAVED

    return response


@router.post("/generate-plan", response_model=GeneratePlanResponse, response_model_exclude_none=True)
async def generate_plan(
    body: PlanRequestBody,
    orchestrator: PlanOrchestrator = Depends(get_orchestrator),
    store: PlanStore = Depends(get_store),
):
    """Generate a study plan from the first usable model, or the template plan."""
    if body.missing_fields():
        return JSONResponse(status_code=400, content={"success": False, "error": MISSING_FIELDS_ERROR})

    plan_request = body.to_plan_request()

    # Runs to completion, store write included, even if the client disconnects
    return await asyncio.shield(complete_plan(orchestrator, store, plan_request))


# =============================================================================
# Stored Plans
# =============================================================================

@router.get("/study-plans", response_model=StoredPlanListResponse)
async def list_study_plans(
    store: PlanStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Most recent study plans, newest first."""
    try:
        plans = await store.list_recent(settings.recent_plans_limit)
    except StoreError as e:
        logger.error(f"Error fetching study plans: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to fetch study plans", "details": str(e)},
        )

    return StoredPlanListResponse(plans=[StoredPlanResponse.model_validate(p) for p in plans])


@router.get("/study-plan/{plan_id}", response_model=StoredPlanDetailResponse)
async def get_study_plan(
    plan_id: str,
    store: PlanStore = Depends(get_store),
):
    """Get one study plan by id."""
    try:
        plan = await store.get_by_id(plan_id)
    except StoreError as e:
        logger.error(f"Error fetching study plan {plan_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to fetch study plan", "details": str(e)},
        )

    if plan is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Study plan not found"})

    return StoredPlanDetailResponse(plan=StoredPlanResponse.model_validate(plan))


# =============================================================================
# Status
# =============================================================================

@router.get("/check-models", response_model=ModelStatusResponse)
async def check_models(
    client: ProviderClient = Depends(get_provider_client),
    settings: Settings = Depends(get_app_settings),
) -> ModelStatusResponse:
    """Probe every configured provider with a trivial input."""
    model_status: dict[str, str] = {}
    for provider in settings.providers:
        model_status[provider] = await client.probe(provider)

    return ModelStatusResponse(timestamp=datetime.now(timezone.utc), model_status=model_status)


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        server=settings.app_name,
        version=settings.app_version,
    )
