"""Pytest configuration and fixtures for study plan tests"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from studyplan.config import Settings
from studyplan.schemas import GenerationParams, GenerationResult, PlanRequest
from studyplan.database.models import StudyPlan
from studyplan.database.store import StoreError
from studyplan.llm.base import ProviderError


PROVIDERS = ["model-a", "model-b", "model-c"]

LONG_PLAN = " ".join(["Week 1: cells and membranes."] * 10)


class FakeProviderClient:
    """Stands in for ProviderClient.

    ``responses`` maps provider id -> text, None, or an exception to raise.
    Providers not in the map raise ProviderError.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self.prompts: list[str] = []
        self.closed = False

    async def attempt(self, provider_id: str, prompt: str, params: GenerationParams) -> str | None:
        self.calls.append(provider_id)
        self.prompts.append(prompt)
        response = self.responses.get(provider_id, ProviderError(f"{provider_id} unavailable"))
        if isinstance(response, Exception):
            raise response
        return response

    async def probe(self, provider_id: str) -> str:
        response = self.responses.get(provider_id, ProviderError(f"{provider_id} unavailable"))
        if isinstance(response, Exception):
            return f"Unavailable: {response}"
        return "Available"

    async def close(self) -> None:
        self.closed = True


class FakeStore:
    """In-memory PlanStore replacement."""

    def __init__(self, fail_save: bool = False, fail_reads: bool = False):
        self.fail_save = fail_save
        self.fail_reads = fail_reads
        self.saved: list[tuple[PlanRequest, GenerationResult]] = []
        self.plans: dict[str, StudyPlan] = {}

    async def save(self, request: PlanRequest, result: GenerationResult) -> str:
        if self.fail_save:
            raise StoreError("database unreachable")
        self.saved.append((request, result))
        plan_id = f"plan-{len(self.saved)}"
        self.plans[plan_id] = StudyPlan(
            id=plan_id,
            subject=request.subject,
            level=request.level,
            duration=request.duration,
            goals=request.goals,
            plan=result.plan,
            model_used=result.model_used,
            is_ai_generated=result.is_ai_generated,
            created_at=datetime(2026, 1, len(self.saved), 12, 0, 0, tzinfo=timezone.utc),
        )
        return plan_id

    async def list_recent(self, limit: int = 50) -> list[StudyPlan]:
        if self.fail_reads:
            raise StoreError("database unreachable")
        plans = sorted(self.plans.values(), key=lambda p: p.created_at, reverse=True)
        return plans[:limit]

    async def get_by_id(self, plan_id: str) -> StudyPlan | None:
        if self.fail_reads:
            raise StoreError("database unreachable")
        return self.plans.get(plan_id)


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and .env files"""
    return Settings(
        _env_file=None,
        providers=list(PROVIDERS),
        hf_api_key="test-key",
        chat_api_key="test-key",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'plans.db'}",
    )


@pytest.fixture
def plan_request():
    return PlanRequest(subject="Biology", level="Beginner", duration="4 weeks", goals="Pass exam")


@pytest.fixture
def plan_body():
    return {"subject": "Biology", "level": "Beginner", "duration": "4 weeks", "goals": "Pass exam"}
