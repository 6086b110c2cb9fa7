"""Insight narration: one observational sentence per recurring theme."""

import logging

from second_brain.providers.base import LLMProvider
from second_brain.types import Period

logger = logging.getLogger(__name__)

MAX_SAMPLE_TITLES = 5

INSIGHT_PROMPT = """You are analyzing a user's personal knowledge base. Generate a single, concise, insightful observation about this pattern:

Theme: "{theme}"
Number of notes: {count}
Time period: {period_label}
Sample note titles:
{titles}

Write ONE sentence that is observational and insightful. Examples:
- "You've written 12 notes about AI agents in the past week; this topic is clearly on your mind."
- "Your interest in machine learning has grown steadily over the past month with 8 related notes."

Return ONLY the insight sentence, nothing else."""


def build_insight_prompt(theme: str, count: int, sample_titles: list[str], period: Period) -> str:
    """Render the narration prompt; only the first five titles are used."""
    titles = "\n".join(f'- "{title}"' for title in sample_titles[:MAX_SAMPLE_TITLES])
    return INSIGHT_PROMPT.format(
        theme=theme,
        count=count,
        period_label=period.label,
        titles=titles,
    )


def fallback_insight(theme: str, count: int, period: Period) -> str:
    """Deterministic sentence used whenever the LLM cannot narrate."""
    return f'You\'ve written {count} notes about "{theme}" {period.phrase}.'


class InsightNarrator:
    """Turns a theme group into a sentence using an LLM provider.

    Narration never fails: provider errors and empty responses degrade to
    fallback_insight() so a run always completes.
    """

    def __init__(self, llm: LLMProvider):
        self.llm = llm

    def narrate(self, theme: str, count: int, sample_titles: list[str], period: Period) -> str:
        prompt = build_insight_prompt(theme, count, sample_titles, period)
        try:
            text = self.llm.generate(prompt).strip()
        except Exception as e:
            logger.warning(f"Insight generation failed for theme '{theme}' ({period.value}): {e}")
            return fallback_insight(theme, count, period)

        if not text:
            logger.warning(f"Empty insight from {self.llm.get_name()} for theme '{theme}'")
            return fallback_insight(theme, count, period)
        return text
