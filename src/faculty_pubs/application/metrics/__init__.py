"""Bibliometric aggregation and benchmarks."""

from .benchmarks import (
    BENCHMARKS,
    BenchmarkComparison,
    Rank,
    Track,
    compare_to_benchmark,
    get_benchmark,
)
from .bibliometrics import (
    BibliometricSummary,
    ProfileSummary,
    impact_index,
    summarize,
    summarize_profile,
    weighted_citation_rate_sum,
)

__all__ = [
    "BENCHMARKS",
    "BenchmarkComparison",
    "BibliometricSummary",
    "ProfileSummary",
    "Rank",
    "Track",
    "compare_to_benchmark",
    "get_benchmark",
    "impact_index",
    "summarize",
    "summarize_profile",
    "weighted_citation_rate_sum",
]
