"""Template study plan used when no model produces a usable response.

Pure and deterministic: the same four inputs always render the same text.
"""

from __future__ import annotations

import math
import re
import sys


DEFAULT_WEEKS = 4

_FIRST_INTEGER = re.compile(r"[0-9]+")


def parse_duration_weeks(duration: str) -> int:
    """First run of ASCII digits in ``duration``.

    4 when there is none, when it is 0, or when it is too large to compute
    phase boundaries with.
    """
    match = _FIRST_INTEGER.search(duration or "")
    if not match:
        return DEFAULT_WEEKS
    try:
        weeks = int(match.group())
    except ValueError:
        # over the int string conversion limit
        return DEFAULT_WEEKS
    if weeks > sys.float_info.max:
        return DEFAULT_WEEKS
    return weeks or DEFAULT_WEEKS


def render_fallback_plan(subject: str, level: str, duration: str, goals: str) -> str:
    """Render the template plan.

    Phase boundaries are derived from the week count W:
    - Phase 1: weeks 1-2 (week 1 only when W <= 2)
    - Phase 2: week 3 to ceil(0.7 W) (week 2 only when W <= 2)
    - Phase 3: ceil(0.7 W) + 1 to W - 1, which can be empty or backwards
      for small W
    - Phase 4: final week
    """
    weeks = parse_duration_weeks(duration)
    core_end = math.ceil(weeks * 0.7)

    phase1_weeks = "1-2" if weeks > 2 else "1"
    phase2_weeks = f"3-{core_end}" if weeks > 2 else "2"
    phase3_weeks = f"{core_end + 1}-{weeks - 1}"

    milestones = ["Week 1: Master foundational concepts", "Week 2: Complete core topic modules"]
    if weeks > 2:
        milestones.append("Week 3: Apply knowledge to practical scenarios")
    if weeks > 3:
        milestones.append("Week 4: Integrate advanced concepts")
    milestones.append("Final Week: Achieve mastery and meet stated goals")
    milestone_lines = "\n".join(milestones)

    return f"""Study Plan for {subject} ({level} Level)
Duration: {duration}
Goals: {goals}

=== STUDY PLAN OVERVIEW ===

Phase 1: Foundation (Week {phase1_weeks})
- Review fundamental concepts and terminology
- Gather study materials and resources
- Establish daily study routine (1-2 hours)
- Complete basic exercises and assessments

Phase 2: Core Learning (Week {phase2_weeks})
- Deep dive into main topics and concepts
- Practice problem-solving techniques
- Create summary notes and mind maps
- Regular self-assessment and progress tracking

Phase 3: Advanced Application (Week {phase3_weeks})
- Explore complex topics and real-world applications
- Work on challenging problems and case studies
- Connect concepts across different areas
- Prepare for practical implementation

Phase 4: Review & Mastery (Final Week)
- Comprehensive review of all materials
- Practice tests and mock examinations
- Identify and address knowledge gaps
- Final preparation and confidence building

=== DAILY STUDY STRUCTURE ===

Morning Session (30-45 minutes):
- Review previous day's material
- Preview new concepts for the day

Main Study Session (60-90 minutes):
- Focus on new topic learning
- Complete practice exercises
- Take detailed notes

Evening Review (15-30 minutes):
- Summarize key learnings
- Plan next day's study goals
- Update progress tracker

=== WEEKLY MILESTONES ===

{milestone_lines}

=== STUDY TIPS ===

- Use active learning techniques (summarizing, teaching others)
- Take regular breaks using the Pomodoro technique
- Create a distraction-free study environment
- Join study groups or find accountability partners
- Regularly assess progress and adjust plan as needed

Note: This is a template plan generated when AI services are unavailable. For a more personalized and detailed study plan, please try again later when our AI service is restored."""
