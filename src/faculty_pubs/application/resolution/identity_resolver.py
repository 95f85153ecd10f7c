"""
Identity Resolver - Cross-provider deduplication and merge

Folds per-provider SourceRecord lists into canonical MergedPublication
records. Two records are the same publication when they share a merge key:

    - ``doi:<normalized doi>`` when the record carries a non-empty DOI
    - ``title:<normalized title>`` otherwise

Records with neither are dropped and only show up in ResolutionStats.

Merge rules:
    - sources and source_urls are unioned
    - citation_count takes the maximum
    - doi, relative_citation_ratio and pmid are kept if already set, else adopted
      from the incoming record
    - url is the DOI link when a DOI is known, else the first non-empty URL
    - display source follows DISPLAY_PRIORITY among contributing providers
    - every other field is first-writer-wins

The resolver holds no state between calls; ``merge`` is a pure function of
its input and the fixed FOLD_ORDER.

Example:
    >>> resolver = IdentityResolver()
    >>> publications = resolver.merge({
    ...     ProviderId.PUBMED: pubmed_records,
    ...     ProviderId.SCOPUS: scopus_records,
    ... })
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from faculty_pubs.domain.entities.publication import (
    UNTITLED_PUBLICATION,
    MergedPublication,
    ProviderId,
    SourceRecord,
)
from faculty_pubs.shared.text import normalize_text_for_matching

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

FOLD_ORDER: tuple[ProviderId, ...] = (
    ProviderId.PUBMED,
    ProviderId.SCOPUS,
    ProviderId.WEB_OF_SCIENCE,
)

# Highest first. Only affects MergedPublication.source.
DISPLAY_PRIORITY: tuple[ProviderId, ...] = (
    ProviderId.WEB_OF_SCIENCE,
    ProviderId.PUBMED,
    ProviderId.SCOPUS,
)

_DOI_PREFIXES = (
    "https://doi.org/",
    "http://doi.org/",
    "https://dx.doi.org/",
    "http://dx.doi.org/",
    "doi:",
)
_YEAR = re.compile(r"\b(\d{4})\b")


# =============================================================================
# Merge key
# =============================================================================


def normalize_doi(doi: str | None) -> str | None:
    """Trim, lowercase and strip resolver prefixes. Empty results become None."""
    if not doi:
        return None
    value = doi.strip().lower()
    for prefix in _DOI_PREFIXES:
        value = value.removeprefix(prefix)
    value = value.strip()
    return value or None


def normalize_title(title: str | None) -> str | None:
    """
    Casefold, strip accents and collapse non-word runs (any script's letters
    and digits are kept). The untitled sentinel maps to None.
    """
    if not title or title.strip() == UNTITLED_PUBLICATION:
        return None
    return normalize_text_for_matching(title) or None


def merge_key(record: SourceRecord, *, include_year: bool = False) -> str | None:
    """
    Compute the identity key for a record, or None if it cannot be identified.

    Args:
        record: Provider record
        include_year: Append the publication year to title keys
    """
    doi = normalize_doi(record.doi)
    if doi:
        return f"doi:{doi}"

    title = normalize_title(record.title)
    if not title:
        return None
    if include_year:
        match = _YEAR.search(record.publication_date or "")
        return f"title:{title}|{match.group(1) if match else ''}"
    return f"title:{title}"


# =============================================================================
# Stats
# =============================================================================


@dataclass
class ResolutionStats:
    """Counters from one resolution pass."""

    total_input: int = 0
    unique_publications: int = 0
    merged_records: int = 0
    dropped: int = 0
    by_provider: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_input": self.total_input,
            "unique_publications": self.unique_publications,
            "merged_records": self.merged_records,
            "dropped": self.dropped,
            "by_provider": self.by_provider,
        }


# =============================================================================
# Resolver
# =============================================================================


class IdentityResolver:
    """
    Merges provider record lists into canonical publications.

    Args:
        include_year_in_title_key: Key title-only records on title plus
            publication year instead of title alone. Off by default.
    """

    def __init__(self, *, include_year_in_title_key: bool = False) -> None:
        self._include_year = include_year_in_title_key

    def merge(self, lists_by_provider: Mapping[ProviderId, Sequence[SourceRecord]]) -> list[MergedPublication]:
        """Merge provider lists in FOLD_ORDER, returning publications in first-seen order."""
        publications, _ = self.merge_with_stats(lists_by_provider)
        return publications

    def merge_with_stats(
        self,
        lists_by_provider: Mapping[ProviderId, Sequence[SourceRecord]],
    ) -> tuple[list[MergedPublication], ResolutionStats]:
        """Same as :meth:`merge`, also returning the pass counters."""
        stats = ResolutionStats()
        by_key: dict[str, MergedPublication] = {}

        for provider in FOLD_ORDER:
            records = lists_by_provider.get(provider) or ()
            stats.by_provider[provider.value] = len(records)
            for record in records:
                stats.total_input += 1
                key = merge_key(record, include_year=self._include_year)
                if key is None:
                    stats.dropped += 1
                    continue

                existing = by_key.get(key)
                if existing is None:
                    by_key[key] = self._create(record)
                else:
                    self._fold(existing, record)
                    stats.merged_records += 1

        publications = list(by_key.values())
        stats.unique_publications = len(publications)
        logger.debug(
            f"Resolved {stats.total_input} records into {stats.unique_publications} publications "
            f"({stats.merged_records} merged, {stats.dropped} dropped)"
        )
        return publications, stats

    @staticmethod
    def _create(record: SourceRecord) -> MergedPublication:
        source_urls: dict[ProviderId, str] = {}
        if record.provider_url:
            source_urls[record.provider] = record.provider_url

        publication = MergedPublication(
            title=record.title,
            source=record.provider,
            sources=[record.provider],
            authors=record.authors,
            journal=record.journal,
            publication_date=record.publication_date,
            citation_count=record.citation_count,
            doi=normalize_doi(record.doi),
            abstract=record.abstract,
            classification=record.classification,
            source_urls=source_urls,
            relative_citation_ratio=record.relative_citation_ratio,
            pmid=record.source_id if record.provider is ProviderId.PUBMED else None,
        )
        publication.url = publication.doi_url or record.provider_url
        return publication

    @staticmethod
    def _fold(canonical: MergedPublication, record: SourceRecord) -> None:
        if record.provider not in canonical.sources:
            canonical.sources.append(record.provider)
        if record.provider_url:
            canonical.source_urls[record.provider] = record.provider_url

        if not canonical.doi:
            canonical.doi = normalize_doi(record.doi)
        canonical.url = canonical.doi_url or canonical.url or record.provider_url

        canonical.citation_count = max(canonical.citation_count, record.citation_count)

        if canonical.relative_citation_ratio is None:
            canonical.relative_citation_ratio = record.relative_citation_ratio

        if canonical.pmid is None and record.provider is ProviderId.PUBMED:
            canonical.pmid = record.source_id

        canonical.source = next(provider for provider in DISPLAY_PRIORITY if provider in canonical.sources)
