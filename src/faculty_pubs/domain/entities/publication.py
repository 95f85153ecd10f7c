"""
Publication Entities - Provider records and canonical merged publications

This module defines the two shapes the reconciliation engine works with:

    - SourceRecord: one provider's normalized view of a publication,
      produced by a provider adapter and consumed once by the resolver.
    - MergedPublication: the canonical, deduplicated record spanning one or
      more providers, produced by the resolver.

Architecture:
    Plain dataclasses, consistent with the rest of the domain layer.
    Provider-specific payload shapes never reach this module; adapters
    translate them before constructing a SourceRecord.

Example:
    >>> record = SourceRecord(
    ...     provider=ProviderId.PUBMED,
    ...     title="Telehealth Adoption in Rural Maternal Care",
    ...     doi="10.1089/tmj.2024.0001",
    ... )
    >>> record.doi
    '10.1089/tmj.2024.0001'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNTITLED_PUBLICATION = "Untitled publication"
DOI_RESOLVER_BASE = "https://doi.org/"


class ProviderId(Enum):
    """The three bibliographic providers, valued by their display names."""

    PUBMED = "PubMed"
    SCOPUS = "Scopus"
    WEB_OF_SCIENCE = "Web of Science"


class PublicationType(Enum):
    """Labels produced by the abstract classifier."""

    PRIMARY_RESEARCH = "Primary Research"
    REVIEW = "Review"


@dataclass
class SourceRecord:
    """
    One provider's normalized view of a single publication.

    ``authors`` is a single display string (comma-joined by the adapters),
    ``publication_date`` is free-form (year only or ISO date), and
    ``source_id`` is the provider-native identifier (PMID, Scopus EID,
    Web of Science UID) when the provider returned one.
    ``relative_citation_ratio`` is set only when the record arrives already
    enriched; the resolver adopts it if the merged publication has none.
    """

    provider: ProviderId
    title: str = UNTITLED_PUBLICATION
    authors: str = ""
    journal: str = ""
    publication_date: str = ""
    citation_count: int = 0
    doi: str | None = None
    provider_url: str | None = None
    abstract: str = ""
    classification: PublicationType = PublicationType.PRIMARY_RESEARCH
    source_id: str | None = None
    relative_citation_ratio: float | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            self.title = UNTITLED_PUBLICATION
        if self.citation_count < 0:
            self.citation_count = 0


@dataclass
class MergedPublication:
    """
    Canonical publication after cross-provider resolution.

    Invariants:
        - ``sources`` is never empty and holds each provider at most once,
          in the order the providers contributed.
        - ``source_urls`` holds at most one deep link per provider.
        - ``doi`` is the first non-empty DOI seen for this identity.
    """

    title: str
    source: ProviderId
    sources: list[ProviderId]
    authors: str = ""
    journal: str = ""
    publication_date: str = ""
    citation_count: int = 0
    doi: str | None = None
    url: str | None = None
    abstract: str = ""
    classification: PublicationType = PublicationType.PRIMARY_RESEARCH
    source_urls: dict[ProviderId, str] = field(default_factory=dict)
    relative_citation_ratio: float | None = None
    pmid: str | None = None

    @property
    def doi_url(self) -> str | None:
        if self.doi:
            return f"{DOI_RESOLVER_BASE}{self.doi}"
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "title": self.title,
            "authors": self.authors,
            "journal": self.journal,
            "date": self.publication_date,
            "citation_count": self.citation_count,
            "doi": self.doi,
            "url": self.url,
            "pmid": self.pmid,
            "abstract": self.abstract,
            "publication_type": self.classification.value,
            "source": self.source.value,
            "sources": [provider.value for provider in self.sources],
            "source_urls": {provider.value: link for provider, link in self.source_urls.items()},
            "relative_citation_ratio": self.relative_citation_ratio,
        }
