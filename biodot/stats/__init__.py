"""Statistical collaborators for dot-plot summaries."""

from biodot.stats.correction import correct_group_summary
from biodot.stats.summarize import summarize_by_group

__all__ = [
    "summarize_by_group",
    "correct_group_summary",
]
