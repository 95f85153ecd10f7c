"""
Scopus Adapter - Elsevier Scopus Search API

Scopus author search is a loose ``AUTH(<name>)`` text query, so each
target name is queried separately and its results are post-filtered with
the name matcher against that name. Results are also filtered by the
requested date range locally; records whose date cannot be parsed are kept.

API Documentation: https://dev.elsevier.com/documentation/ScopusSearchAPI.wadl
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from faculty_pubs.application.classification.classifier import KeywordClassifier
from faculty_pubs.application.matching.name_matcher import matches_any
from faculty_pubs.domain.entities.publication import UNTITLED_PUBLICATION, ProviderId, SourceRecord
from faculty_pubs.shared.async_utils import gather_settled
from faculty_pubs.shared.exceptions import ConfigurationError, ErrorContext
from faculty_pubs.shared.settings import ScopusSettings

from .base import as_int, as_list, classify_records, clean_names, first_text, parse_date, text_of
from .base_client import BaseAPIClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from faculty_pubs.application.classification.classifier import Classifier

logger = logging.getLogger(__name__)

NO_AUTHORS = "N/A"
UNKNOWN_JOURNAL = "Unknown journal"
UNKNOWN_DATE = "Unknown date"


def build_author_query(name: str) -> str:
    return f"AUTH({name})"


def is_within_date_range(publication_date: str, start_date: str | None, end_date: str | None) -> bool:
    """Inclusive range check. Unparseable record dates pass; unparseable bounds are ignored."""
    if not start_date and not end_date:
        return True
    published = parse_date(publication_date)
    if published is None:
        return True
    start = parse_date(start_date)
    if start is not None and published < start:
        return False
    end = parse_date(end_date)
    return not (end is not None and published > end)


class ScopusAdapter(BaseAPIClient):
    """
    Scopus provider adapter.

    Example:
        adapter = ScopusAdapter(ScopusSettings(api_key="...", base_url="https://api.elsevier.com/content/search/scopus"))
        records = await adapter.query(["Jordan Lee"])
    """

    _service_name = "Scopus"
    provider = ProviderId.SCOPUS

    def __init__(
        self,
        settings: ScopusSettings | None = None,
        classifier: Classifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ScopusSettings()
        self._classifier = classifier or KeywordClassifier()
        super().__init__(
            base_url=self._settings.base_url or "",
            timeout=self._settings.timeout,
            min_interval=0.2,
            headers={
                "Accept": "application/json",
                "X-ELS-APIKey": self._settings.api_key or "",
            },
            transport=transport,
        )

    async def query(
        self,
        author_names: Sequence[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[SourceRecord]:
        if not self._settings.is_configured:
            raise ConfigurationError(
                "Scopus API key or base URL is missing.",
                context=ErrorContext(provider=self.provider.value, suggestion="Set SCOPUS_API_KEY and SCOPUS_BASE_URL"),
            )

        names = clean_names(author_names)
        if not names:
            return []

        outcomes = await gather_settled(*(self._search_author(name) for name in names))

        records: list[SourceRecord] = []
        seen_ids: set[str] = set()
        failures: list[BaseException] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                failures.append(outcome)
                continue
            for record in outcome:
                if record.source_id and record.source_id in seen_ids:
                    continue
                if record.source_id:
                    seen_ids.add(record.source_id)
                if is_within_date_range(record.publication_date, start_date, end_date):
                    records.append(record)

        # Any per-name failure fails the provider, matching a single upstream call.
        if failures:
            raise failures[0]

        logger.info(f"Scopus returned {len(records)} matching records for {len(names)} author(s)")
        return await classify_records(records, self._classifier)

    async def _search_author(self, name: str) -> list[SourceRecord]:
        payload = await self._make_request(
            "",
            params={
                "query": build_author_query(name),
                "view": "COMPLETE",
                "count": self._settings.max_results,
            },
        )
        entries = self._extract_entries(payload)

        records = []
        for entry in entries:
            author_names = self._extract_author_names(entry)
            if not matches_any(author_names, [name]):
                continue
            records.append(self._parse_entry(entry, author_names))

        logger.debug(f"Scopus: {len(records)}/{len(entries)} entries matched author '{name}'")
        return records

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    @staticmethod
    def _extract_entries(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            return []
        results = payload.get("search-results")
        if not isinstance(results, dict):
            return []
        # An empty result set comes back as a single {"error": "Result set was empty"} entry.
        return [entry for entry in as_list(results.get("entry")) if isinstance(entry, dict) and "error" not in entry]

    @staticmethod
    def _extract_author_names(entry: dict[str, Any]) -> list[str]:
        names: list[str] = []
        for author in as_list(entry.get("author")):
            if not isinstance(author, dict):
                continue
            given = text_of(author.get("given-name"))
            surname = text_of(author.get("surname"))
            if given and surname:
                names.append(f"{given} {surname}")
            else:
                authname = first_text([author.get("authname"), surname])
                if authname:
                    names.append(authname)
        if not names:
            creator = text_of(entry.get("dc:creator"))
            if creator:
                names.append(creator)
        return names

    @staticmethod
    def _extract_link(entry: dict[str, Any]) -> str | None:
        for link in as_list(entry.get("link")):
            if isinstance(link, dict) and link.get("@ref") == "scopus":
                return text_of(link.get("@href"))
        return None

    def _parse_entry(self, entry: dict[str, Any], author_names: list[str]) -> SourceRecord:
        return SourceRecord(
            provider=self.provider,
            title=text_of(entry.get("dc:title")) or UNTITLED_PUBLICATION,
            authors=", ".join(author_names) or NO_AUTHORS,
            journal=text_of(entry.get("prism:publicationName")) or UNKNOWN_JOURNAL,
            publication_date=first_text([entry.get("prism:coverDate"), entry.get("prism:coverDisplayDate")])
            or UNKNOWN_DATE,
            citation_count=as_int(entry.get("citedby-count")),
            doi=text_of(entry.get("prism:doi")),
            provider_url=self._extract_link(entry),
            abstract=text_of(entry.get("dc:description")) or "",
            source_id=first_text([entry.get("eid"), entry.get("dc:identifier")]),
        )
