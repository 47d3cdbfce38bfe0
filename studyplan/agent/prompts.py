"""Prompt template for study plan generation.

The same prompt is sent to every provider for a given request.
"""

from __future__ import annotations

from studyplan.schemas import PlanRequest


# =============================================================================
# Plan Prompt
# =============================================================================

PLAN_PROMPT = """Create a comprehensive, personalized study plan with the following specifications:

Subject: {subject}
Academic Level: {level}
Study Duration: {duration}
Learning Goals: {goals}

Please structure the response with:
1. Study plan overview with phases
2. Weekly breakdown with specific topics
3. Daily study schedule recommendations
4. Key milestones and checkpoints
5. Assessment methods and progress tracking
6. Recommended resources and materials
7. Tips for effective learning

Make the plan detailed, practical, and tailored to the specified level and duration."""


def format_plan_prompt(request: PlanRequest) -> str:
    """Format the study plan prompt for one request."""
    return PLAN_PROMPT.format(
        subject=request.subject,
        level=request.level,
        duration=request.duration,
        goals=request.goals,
    )


def strip_prompt_echo(text: str, prompt: str) -> str:
    """Remove an echoed prompt from generated text.

    Only the first occurrence is removed, and whitespace is trimmed only when
    an echo was found. Text without an echo is returned unchanged.
    """
    if prompt and prompt in text:
        return text.replace(prompt, "", 1).strip()
    return text
