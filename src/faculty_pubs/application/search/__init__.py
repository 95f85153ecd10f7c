"""
Publication search use cases.

Key Components:
- FanOutOrchestrator: Concurrent all-settled provider queries
- PublicationEngine: Fan-out, resolution, enrichment and metrics
- assemble_result: Publications plus partial-failure diagnostics
"""

from .engine import CitationRateLookup, PublicationEngine
from .orchestrator import GENERIC_FAILURE_MESSAGE, FanOutOrchestrator, FanOutResult
from .result_assembly import NO_RESULTS_MESSAGE, ResolutionResult, assemble_result

__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "NO_RESULTS_MESSAGE",
    "CitationRateLookup",
    "FanOutOrchestrator",
    "FanOutResult",
    "PublicationEngine",
    "ResolutionResult",
    "assemble_result",
]
