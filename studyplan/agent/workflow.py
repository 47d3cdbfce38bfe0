"""LangGraph workflow for study plan generation.

Graph structure:
START → build_prompt → attempt_provider ─(accepted)──→ END
                                ↑    │
                                └────┘ (next provider)
                                     │
                                (exhausted) → render_fallback → END

Providers are tried one at a time in the configured order. Each gets exactly
one call; the first acceptable response wins and no later provider is called.
When every provider fails or is rejected, the template plan is used instead.
"""

from __future__ import annotations

import logging
from typing import Literal, TypedDict

from langgraph.graph import StateGraph, END

from studyplan.config import Settings, get_settings
from studyplan.schemas import (
    FALLBACK_PROVIDER,
    AttemptOutcome,
    GenerationAttempt,
    GenerationParams,
    GenerationResult,
    PlanRequest,
)
from studyplan.llm.router import ProviderClient
from studyplan.agent.fallback import render_fallback_plan
from studyplan.agent.prompts import format_plan_prompt, strip_prompt_echo


logger = logging.getLogger(__name__)

NO_TEXT_ERROR = "No generated text in response"


# =============================================================================
# State Definition
# =============================================================================

class PlanState(TypedDict):
    """State for one generation run.

    Attributes:
        request: The validated plan request
        prompt: Prompt shared by every provider attempt
        providers: Provider ids in priority order
        min_length: Minimum accepted text length after echo removal
        index: Position of the next provider to try
        attempts: Attempts made so far, in order
        plan: Chosen plan text, None until accepted or fallback
        model_used: Provider id that produced the plan, or 'fallback'
        is_ai_generated: False only for the template plan
    """
    request: PlanRequest
    prompt: str
    providers: list[str]
    min_length: int
    index: int
    attempts: list[GenerationAttempt]
    plan: str | None
    model_used: str | None
    is_ai_generated: bool


def initial_state(request: PlanRequest, providers: list[str], min_length: int) -> PlanState:
    """Create initial workflow state."""
    return PlanState(
        request=request,
        prompt="",
        providers=list(providers),
        min_length=min_length,
        index=0,
        attempts=[],
        plan=None,
        model_used=None,
        is_ai_generated=False,
    )


# =============================================================================
# Orchestrator
# =============================================================================

class PlanOrchestrator:
    """Drives provider attempts in order and falls back to the template plan.

    Stateless between calls; one instance is shared by all requests.
    """

    def __init__(
        self,
        client: ProviderClient,
        settings: Settings | None = None,
        providers: list[str] | None = None,
        params: GenerationParams | None = None,
        min_acceptable_length: int | None = None,
    ):
        settings = settings or get_settings()
        self.client = client
        self.providers = list(providers if providers is not None else settings.providers)
        self.params = params or GenerationParams.from_settings(settings)
        self.min_acceptable_length = (
            min_acceptable_length if min_acceptable_length is not None else settings.min_acceptable_length
        )
        self._graph = self._build_workflow().compile()

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    async def _prompt_node(self, state: PlanState) -> dict:
        return {"prompt": format_plan_prompt(state["request"])}

    async def _attempt_node(self, state: PlanState) -> dict:
        provider = state["providers"][state["index"]]
        attempt = await self.attempt_provider(provider, state["prompt"], state["min_length"])

        update: dict = {
            "index": state["index"] + 1,
            "attempts": [*state["attempts"], attempt],
        }
        if attempt.outcome == AttemptOutcome.SUCCESS:
            update.update(plan=attempt.text, model_used=provider, is_ai_generated=True)
        return update

    async def _fallback_node(self, state: PlanState) -> dict:
        logger.warning("All AI models failed, using fallback plan")
        request = state["request"]
        plan = render_fallback_plan(request.subject, request.level, request.duration, request.goals)
        return {"plan": plan, "model_used": FALLBACK_PROVIDER, "is_ai_generated": False}

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    @staticmethod
    def _route_after_prompt(state: PlanState) -> Literal["attempt", "fallback"]:
        return "attempt" if state["providers"] else "fallback"

    @staticmethod
    def _route_after_attempt(state: PlanState) -> Literal["done", "attempt", "fallback"]:
        if state["plan"] is not None:
            return "done"
        if state["index"] < len(state["providers"]):
            return "attempt"
        return "fallback"

    def _build_workflow(self) -> StateGraph:
        """Build the LangGraph workflow."""
        workflow = StateGraph(PlanState)

        workflow.add_node("build_prompt", self._prompt_node)
        workflow.add_node("attempt_provider", self._attempt_node)
        workflow.add_node("render_fallback", self._fallback_node)

        workflow.set_entry_point("build_prompt")

        workflow.add_conditional_edges(
            "build_prompt",
            self._route_after_prompt,
            {
                "attempt": "attempt_provider",
                "fallback": "render_fallback",
            },
        )
        workflow.add_conditional_edges(
            "attempt_provider",
            self._route_after_attempt,
            {
                "done": END,
                "attempt": "attempt_provider",
                "fallback": "render_fallback",
            },
        )
        workflow.add_edge("render_fallback", END)

        return workflow

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def attempt_provider(self, provider: str, prompt: str, min_length: int) -> GenerationAttempt:
        """Make one call to one provider and classify the outcome.

        Provider errors are never raised from here; they become a failed attempt.
        """
        logger.info(f"Attempting to use model: {provider}")

        try:
            text = await self.client.attempt(provider, prompt, self.params)
        except Exception as e:
            logger.error(f"Error with model {provider}: {e}")
            return GenerationAttempt(provider=provider, outcome=AttemptOutcome.FAILED, error=str(e))

        if not text:
            logger.warning(f"No generated text from {provider}")
            return GenerationAttempt(provider=provider, outcome=AttemptOutcome.FAILED, error=NO_TEXT_ERROR)

        text = strip_prompt_echo(text, prompt)

        if len(text) < min_length:
            logger.info(f"Response too short from {provider}, trying next model")
            return GenerationAttempt(
                provider=provider,
                outcome=AttemptOutcome.REJECTED,
                reason=f"Response too short ({len(text)} < {min_length} characters)",
            )

        logger.info(f"Successfully got response from {provider}")
        return GenerationAttempt(provider=provider, outcome=AttemptOutcome.SUCCESS, text=text)

    async def generate(
        self,
        request: PlanRequest,
        providers: list[str] | None = None,
        min_acceptable_length: int | None = None,
    ) -> GenerationResult:
        """Generate a study plan.

        Args:
            request: The validated plan request
            providers: Override of the provider priority list
            min_acceptable_length: Override of the acceptance threshold

        Returns:
            GenerationResult with the chosen plan, the provider that produced
            it ('fallback' for the template) and the attempts made
        """
        providers = self.providers if providers is None else providers
        min_length = self.min_acceptable_length if min_acceptable_length is None else min_acceptable_length

        state = initial_state(request, providers, min_length)

        # prompt + one step per provider + fallback
        config = {"recursion_limit": len(providers) + 5}
        final = await self._graph.ainvoke(state, config=config)

        return GenerationResult(
            plan=final["plan"],
            model_used=final["model_used"],
            is_ai_generated=final["is_ai_generated"],
            attempts=final["attempts"],
        )
