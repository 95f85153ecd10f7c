"""
Bibliometrics over resolved publication sets.

Functions:
    impact_index: h-style index over citation counts
    weighted_citation_rate_sum: running total of relative citation ratios
    summarize_profile: count, total citations and latest publication date
    summarize: all of the above bundled as a BibliometricSummary
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faculty_pubs.domain.entities.publication import MergedPublication

NO_PUBLICATION_DATE = "N/A"


@dataclass(frozen=True)
class ProfileSummary:
    """Headline numbers for one faculty profile."""

    publication_count: int
    total_citations: int
    latest_publication: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "publication_count": self.publication_count,
            "total_citations": self.total_citations,
            "latest_publication": self.latest_publication,
        }


@dataclass(frozen=True)
class BibliometricSummary:
    """Metrics computed over one resolution result."""

    impact_index: int
    weighted_citation_rate_sum: float
    profile: ProfileSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "impact_index": self.impact_index,
            "weighted_citation_rate_sum": self.weighted_citation_rate_sum,
            **self.profile.to_dict(),
        }


def impact_index(publications: Sequence[MergedPublication]) -> int:
    """
    Largest rank i such that the i-th most cited publication has >= i citations.

    Sorting is stable, so tied counts keep their input order. The scan stops
    at the first rank that fails.

    Example:
        counts [34, 57, 12] -> 3
        counts [57, 34, 1]  -> 2
    """
    ranked = sorted(publications, key=lambda pub: pub.citation_count, reverse=True)
    index = 0
    for rank, publication in enumerate(ranked, start=1):
        if publication.citation_count >= rank:
            index = rank
        else:
            break
    return index


def weighted_citation_rate_sum(publications: Sequence[MergedPublication]) -> float:
    """Sum of relative citation ratios, counting missing values as zero."""
    return sum((pub.relative_citation_ratio or 0.0 for pub in publications), 0.0)


def summarize_profile(publications: Sequence[MergedPublication]) -> ProfileSummary:
    """Count, total citations and most recent date (string order, "N/A" when none)."""
    dates = sorted((pub.publication_date for pub in publications if pub.publication_date), reverse=True)
    return ProfileSummary(
        publication_count=len(publications),
        total_citations=sum(pub.citation_count for pub in publications),
        latest_publication=dates[0] if dates else NO_PUBLICATION_DATE,
    )


def summarize(publications: Sequence[MergedPublication]) -> BibliometricSummary:
    return BibliometricSummary(
        impact_index=impact_index(publications),
        weighted_citation_rate_sum=weighted_citation_rate_sum(publications),
        profile=summarize_profile(publications),
    )
