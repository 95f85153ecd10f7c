"""
Result Assembly

Combines merged publications with provider diagnostics into the response
returned to callers. Partial success is a normal outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faculty_pubs.application.metrics.bibliometrics import BibliometricSummary
    from faculty_pubs.application.resolution.identity_resolver import ResolutionStats
    from faculty_pubs.domain.entities.publication import MergedPublication

NO_RESULTS_MESSAGE = "No results found for the given filters."


@dataclass
class ResolutionResult:
    """Publications, diagnostics, and optional metrics for one request."""

    publications: list[MergedPublication] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    metrics: BibliometricSummary | None = None
    stats: ResolutionStats | None = None

    @property
    def is_partial(self) -> bool:
        return bool(self.publications) and bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "publications": [publication.to_dict() for publication in self.publications],
            "errors": list(self.errors),
        }
        if self.metrics is not None:
            result["metrics"] = self.metrics.to_dict()
        if self.stats is not None:
            result["stats"] = self.stats.to_dict()
        return result


def assemble_result(publications: Sequence[MergedPublication], errors: Sequence[str]) -> ResolutionResult:
    """
    Build the response.

    - no publications, some errors: errors only, no synthetic message
    - no publications, no errors: one informational "no results" message
    - otherwise: publications plus whatever errors occurred
    """
    if not publications and not errors:
        return ResolutionResult(publications=[], errors=[NO_RESULTS_MESSAGE])
    return ResolutionResult(publications=list(publications), errors=list(errors))
