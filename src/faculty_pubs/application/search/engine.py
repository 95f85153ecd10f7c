"""
Publication Engine - Entry point for publication reconciliation

Pipeline for one request:

    1. Fan out to every provider adapter (all-settled)
    2. Merge provider records into canonical publications
    3. Attach relative citation ratios to PubMed-attributable publications
    4. Compute bibliometrics over the enriched set
    5. Assemble publications, provider errors and metrics

Usage:
    engine = PublicationEngine(FanOutOrchestrator(adapters), enrichment=ICiteClient())
    result = await engine.resolve_publications(["Jordan Lee"], start_date="2020-01-01")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from faculty_pubs.application.metrics.bibliometrics import summarize
from faculty_pubs.application.resolution.identity_resolver import IdentityResolver
from faculty_pubs.domain.entities.publication import ProviderId
from faculty_pubs.shared.exceptions import FacultyPubsError, InvalidParameterError

from .result_assembly import ResolutionResult, assemble_result

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from faculty_pubs.domain.entities.publication import MergedPublication

    from .orchestrator import FanOutOrchestrator

logger = logging.getLogger(__name__)


class CitationRateLookup(Protocol):
    async def lookup(self, identifiers: Iterable[str | None]) -> dict[str, float]: ...


class PublicationEngine:
    """
    Orchestrates fan-out, resolution, enrichment and metrics.

    Args:
        orchestrator: Fan-out over the provider adapters
        resolver: Identity resolver (default: DOI-then-title keys)
        enrichment: Optional relative citation ratio lookup
    """

    def __init__(
        self,
        orchestrator: FanOutOrchestrator,
        resolver: IdentityResolver | None = None,
        enrichment: CitationRateLookup | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._resolver = resolver or IdentityResolver()
        self._enrichment = enrichment

    async def resolve_publications(
        self,
        author_names: Sequence[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> ResolutionResult:
        """
        Resolve publications for the given authors across all providers.

        Raises:
            InvalidParameterError: author_names is a bare string instead of a sequence
        """
        if isinstance(author_names, str):
            raise InvalidParameterError("author_names", author_names, "a list of names")

        fan_out = await self._orchestrator.collect(author_names, start_date, end_date)
        publications, stats = self._resolver.merge_with_stats(fan_out.records_by_provider)

        await self._enrich(publications)

        result = assemble_result(publications, fan_out.errors)
        result.metrics = summarize(result.publications)
        result.stats = stats
        logger.info(
            f"Resolved {len(result.publications)} publications for {len(author_names)} author(s), "
            f"{len(fan_out.errors)} provider error(s)"
        )
        return result

    async def _enrich(self, publications: list[MergedPublication]) -> None:
        if self._enrichment is None:
            return

        targets = [pub for pub in publications if pub.pmid and ProviderId.PUBMED in pub.sources]
        if not targets:
            return

        try:
            rates = await self._enrichment.lookup([pub.pmid for pub in targets])
        except FacultyPubsError as e:
            logger.warning(f"Citation rate enrichment failed: {e}")
            return

        for publication in targets:
            rate = rates.get(publication.pmid or "")
            if rate is not None and publication.relative_citation_ratio is None:
                publication.relative_citation_ratio = rate

    async def close(self) -> None:
        """Close adapter and enrichment HTTP clients."""
        for owner in [*self._orchestrator.adapters, self._enrichment]:
            close = getattr(owner, "close", None)
            if close is not None:
                await close()
