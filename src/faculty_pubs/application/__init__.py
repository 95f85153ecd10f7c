"""
Application Layer - Use Cases and Business Logic Orchestration

Contains:
- matching: Author name matching heuristics
- resolution: Cross-provider identity resolution
- metrics: Impact index, citation-rate sum, benchmarks
- classification: Publication type classification
- search: Fan-out, result assembly, engine entry point
"""

from .classification import KeywordClassifier, classify_by_keywords
from .matching import matches, matches_any
from .metrics import compare_to_benchmark, impact_index, summarize_profile, weighted_citation_rate_sum
from .resolution import IdentityResolver, ResolutionStats, merge_key
from .search import FanOutOrchestrator, PublicationEngine, ResolutionResult, assemble_result

__all__ = [
    # Classification
    "KeywordClassifier",
    "classify_by_keywords",
    # Matching
    "matches",
    "matches_any",
    # Metrics
    "compare_to_benchmark",
    "impact_index",
    "summarize_profile",
    "weighted_citation_rate_sum",
    # Resolution
    "IdentityResolver",
    "ResolutionStats",
    "merge_key",
    # Search
    "FanOutOrchestrator",
    "PublicationEngine",
    "ResolutionResult",
    "assemble_result",
]
