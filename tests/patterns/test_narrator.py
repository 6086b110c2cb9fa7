"""Tests for insight narration and its templated fallback"""

from second_brain.patterns.narrator import InsightNarrator, build_insight_prompt, fallback_insight
from second_brain.types import Period


class TestFallbackInsight:

    def test_phrases_per_period(self):
        assert fallback_insight("rust", 3, Period.LAST_7_DAYS) == \
            'You\'ve written 3 notes about "rust" in the past week.'
        assert fallback_insight("rust", 3, Period.LAST_30_DAYS) == \
            'You\'ve written 3 notes about "rust" in the past month.'
        assert fallback_insight("rust", 3, Period.ALL_TIME) == \
            'You\'ve written 3 notes about "rust" across all your notes.'

    def test_deterministic(self):
        assert fallback_insight("ai", 7, Period.ALL_TIME) == fallback_insight("ai", 7, Period.ALL_TIME)


class TestBuildInsightPrompt:

    def test_contains_theme_count_and_period_label(self):
        prompt = build_insight_prompt("rust", 4, ["a"], Period.LAST_30_DAYS)

        assert 'Theme: "rust"' in prompt
        assert "Number of notes: 4" in prompt
        assert "Time period: the past month" in prompt
        assert "Return ONLY the insight sentence" in prompt

    def test_uses_at_most_five_titles(self):
        titles = [f"title {i}" for i in range(8)]

        prompt = build_insight_prompt("rust", 8, titles, Period.ALL_TIME)

        assert '- "title 4"' in prompt
        assert '- "title 5"' not in prompt
        assert "Time period: all time" in prompt


class TestInsightNarrator:

    def test_returns_trimmed_llm_text(self, mock_llm_provider):
        mock_llm_provider.generate.return_value = "  Rust is on your mind.\n"

        text = InsightNarrator(mock_llm_provider).narrate("rust", 2, ["a", "b"], Period.LAST_7_DAYS)

        assert text == "Rust is on your mind."
        prompt = mock_llm_provider.generate.call_args[0][0]
        assert 'Theme: "rust"' in prompt

    def test_provider_error_falls_back(self, failing_llm_provider):
        text = InsightNarrator(failing_llm_provider).narrate("rust", 2, ["a"], Period.LAST_7_DAYS)

        assert text == fallback_insight("rust", 2, Period.LAST_7_DAYS)

    def test_any_exception_falls_back(self, mock_llm_provider):
        mock_llm_provider.generate.side_effect = TimeoutError("read timeout")

        text = InsightNarrator(mock_llm_provider).narrate("go", 5, [], Period.ALL_TIME)

        assert text == fallback_insight("go", 5, Period.ALL_TIME)

    def test_empty_response_falls_back(self, mock_llm_provider):
        mock_llm_provider.generate.return_value = "   "

        text = InsightNarrator(mock_llm_provider).narrate("go", 2, [], Period.LAST_30_DAYS)

        assert text == fallback_insight("go", 2, Period.LAST_30_DAYS)
