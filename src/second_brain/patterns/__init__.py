"""Pattern observer - recurring themes, insights and the weekly timeline"""

from .grouping import group_by_tags, normalize_tag
from .narrator import InsightNarrator, build_insight_prompt, fallback_insight
from .observer import AnalysisInProgressError, PatternObserver
from .queries import HydratedInsight, LatestInsights, PatternQueries
from .timeline import build_timeline

__all__ = [
    'AnalysisInProgressError',
    'HydratedInsight',
    'InsightNarrator',
    'LatestInsights',
    'PatternObserver',
    'PatternQueries',
    'build_insight_prompt',
    'build_timeline',
    'fallback_insight',
    'group_by_tags',
    'normalize_tag',
]
