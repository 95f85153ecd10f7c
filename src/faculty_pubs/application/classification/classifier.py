"""
Publication type classification.

Any object with an async ``classify(abstract) -> PublicationType`` method can
serve as a classifier. Implementations must never raise: on any failure they
fall back to :func:`classify_by_keywords`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from faculty_pubs.domain.entities.publication import PublicationType

REVIEW_KEYWORDS: tuple[str, ...] = (
    "systematic review",
    "meta-analysis",
    "scoping review",
)


def classify_by_keywords(abstract: str | None) -> PublicationType:
    """Review if the abstract mentions a review keyword, else Primary Research."""
    normalized = (abstract or "").lower()
    if any(keyword in normalized for keyword in REVIEW_KEYWORDS):
        return PublicationType.REVIEW
    return PublicationType.PRIMARY_RESEARCH


@runtime_checkable
class Classifier(Protocol):
    async def classify(self, abstract: str) -> PublicationType: ...


class KeywordClassifier:
    """Deterministic classifier used when no model deployment is configured."""

    async def classify(self, abstract: str) -> PublicationType:
        return classify_by_keywords(abstract)
