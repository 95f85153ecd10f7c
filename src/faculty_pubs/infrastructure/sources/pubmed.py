"""
PubMed Adapter - Author search via NCBI Entrez

Builds an OR-joined ``"<name>"[Author]`` term, runs esearch (optionally
bounded by publication date) and then efetch for full records, so abstracts
and DOIs are available for classification and identity resolution.

Entrez calls are blocking, so they run in a worker thread with a per-call
timeout, NCBI's rate limit, and tenacity retries for transient failures.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any
from urllib.error import HTTPError, URLError

from Bio import Entrez
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from faculty_pubs.application.classification.classifier import KeywordClassifier
from faculty_pubs.domain.entities.publication import UNTITLED_PUBLICATION, ProviderId, SourceRecord
from faculty_pubs.shared.exceptions import ErrorContext, NetworkError, ServiceUnavailableError
from faculty_pubs.shared.settings import PubMedSettings

from .base import classify_records, clean_names

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faculty_pubs.application.classification.classifier import Classifier

logger = logging.getLogger(__name__)

PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"
NO_AUTHORS = "N/A"
UNKNOWN_JOURNAL = "Unknown journal"
UNKNOWN_DATE = "Unknown date"

MAX_RETRIES = 3
RETRY_DELAY = 2  # seconds

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}  # fmt: skip

_RETRYABLE_MESSAGES = [
    "backend failed",
    "temporarily unavailable",
    "service unavailable",
    "rate limit",
    "too many requests",
    "server error",
]

# Global rate limiter state (NCBI limits are per client, not per adapter)
_last_request_time = 0.0
_rate_lock = asyncio.Lock()


def _is_retryable_ncbi(error: BaseException) -> bool:
    """Check if an NCBI error is retryable."""
    if isinstance(error, HTTPError):
        return error.code == 429 or error.code >= 500
    error_str = str(error).lower()
    return any(msg in error_str for msg in _RETRYABLE_MESSAGES)


async def _rate_limit(min_interval: float) -> None:
    """Ensure minimum interval between Entrez requests."""
    global _last_request_time
    async with _rate_lock:
        elapsed = time.time() - _last_request_time
        if elapsed < min_interval:
            await asyncio.sleep(min_interval - elapsed)
        _last_request_time = time.time()


def build_author_term(author_names: Sequence[str]) -> str:
    """``"Jordan Lee"[Author] OR "Priya Shah"[Author]``"""
    return " OR ".join(f'"{name}"[Author]' for name in author_names)


def to_entrez_date(value: str | None) -> str | None:
    """Entrez expects YYYY/MM/DD (or YYYY, YYYY/MM)."""
    if not value or not value.strip():
        return None
    return value.strip().replace("-", "/")


class PubMedAdapter:
    """
    PubMed provider adapter.

    Example:
        adapter = PubMedAdapter(PubMedSettings(email="me@example.edu"))
        records = await adapter.query(["Jordan Lee"], start_date="2020-01-01")
    """

    provider = ProviderId.PUBMED

    def __init__(
        self,
        settings: PubMedSettings | None = None,
        classifier: Classifier | None = None,
    ) -> None:
        self._settings = settings or PubMedSettings()
        self._classifier = classifier or KeywordClassifier()

        Entrez.email = self._settings.email  # type: ignore[assignment]
        if self._settings.api_key:
            Entrez.api_key = self._settings.api_key  # type: ignore[assignment]
            self._min_interval = 0.1  # 10 requests/second with API key
        else:
            self._min_interval = 0.34  # ~3 requests/second without API key

    async def query(
        self,
        author_names: Sequence[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[SourceRecord]:
        names = clean_names(author_names)
        if not names:
            return []

        term = build_author_term(names)
        try:
            ids = await self._search_ids(term, to_entrez_date(start_date), to_entrez_date(end_date))
            if not ids:
                return []
            papers = await self._fetch_articles(ids)
        except TimeoutError as e:
            raise NetworkError(
                f"request timed out after {self._settings.timeout:.0f}s",
                context=ErrorContext(provider=self.provider.value, operation="query"),
            ) from e
        except HTTPError as e:
            raise ServiceUnavailableError(
                f"request failed with status {e.code}",
                service=self.provider.value,
                status_code=e.code,
            ) from e
        except URLError as e:
            raise NetworkError(
                f"request failed: {e.reason}",
                context=ErrorContext(provider=self.provider.value, operation="query"),
            ) from e

        records = [self._parse_article(article) for article in papers.get("PubmedArticle", [])]
        logger.info(f"PubMed returned {len(records)} records for {len(names)} author(s)")
        return await classify_records(records, self._classifier)

    async def _entrez_call(self, func: Any, **kwargs: Any) -> Any:
        """Run one Entrez request and parse its response, bounded by the configured timeout."""
        await _rate_limit(self._min_interval)

        def call() -> Any:
            handle = func(**kwargs)
            try:
                return Entrez.read(handle)
            finally:
                handle.close()

        return await asyncio.wait_for(asyncio.to_thread(call), timeout=self._settings.timeout)

    @retry(
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=RETRY_DELAY, min=RETRY_DELAY, max=RETRY_DELAY * 4),
        retry=retry_if_exception(_is_retryable_ncbi),
        reraise=True,
    )
    async def _search_ids(self, term: str, mindate: str | None, maxdate: str | None) -> list[str]:
        params: dict[str, Any] = {"db": "pubmed", "term": term, "retmax": self._settings.max_results}
        if mindate or maxdate:
            params["datetype"] = "pdat"
            # Entrez requires both bounds together.
            params["mindate"] = mindate or "1800/01/01"
            params["maxdate"] = maxdate or "3000/12/31"
        record = await self._entrez_call(Entrez.esearch, **params)
        return [str(pmid) for pmid in record.get("IdList", [])]

    @retry(
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=RETRY_DELAY, min=RETRY_DELAY, max=RETRY_DELAY * 4),
        retry=retry_if_exception(_is_retryable_ncbi),
        reraise=True,
    )
    async def _fetch_articles(self, ids: list[str]) -> dict[str, Any]:
        return await self._entrez_call(Entrez.efetch, db="pubmed", id=",".join(ids), retmode="xml")

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse_article(self, article: dict[str, Any]) -> SourceRecord:
        medline_citation = article.get("MedlineCitation", {})
        article_data = medline_citation.get("Article", {})
        pubmed_data = article.get("PubmedData", {})

        pmid = str(medline_citation.get("PMID", "")).strip() or None
        journal = article_data.get("Journal", {})

        return SourceRecord(
            provider=self.provider,
            title=str(article_data.get("ArticleTitle", "")).strip() or UNTITLED_PUBLICATION,
            authors=self._extract_authors(article_data),
            journal=str(journal.get("Title", "")).strip() or UNKNOWN_JOURNAL,
            publication_date=self._extract_date(journal.get("JournalIssue", {}).get("PubDate", {})),
            citation_count=0,
            doi=self._extract_doi(article_data, pubmed_data),
            provider_url=PUBMED_ARTICLE_URL.format(pmid=pmid) if pmid else None,
            abstract=self._extract_abstract(article_data),
            source_id=pmid,
        )

    @staticmethod
    def _extract_authors(article_data: dict[str, Any]) -> str:
        names = []
        for author in article_data.get("AuthorList", []):
            if "LastName" in author:
                names.append(f"{author.get('ForeName', '')} {author['LastName']}".strip())
            elif "CollectiveName" in author:
                names.append(str(author["CollectiveName"]))
        return ", ".join(names) or NO_AUTHORS

    @staticmethod
    def _extract_abstract(article_data: dict[str, Any]) -> str:
        abstract_parts = article_data.get("Abstract", {}).get("AbstractText", [])
        if isinstance(abstract_parts, str):
            abstract_parts = [abstract_parts]
        return " ".join(str(part).strip() for part in abstract_parts if str(part).strip())

    @staticmethod
    def _extract_date(pub_date: dict[str, Any]) -> str:
        """ISO-style ``YYYY[-MM[-DD]]`` from a PubDate node."""
        year = str(pub_date.get("Year", "")).strip()
        if not year:
            medline_date = str(pub_date.get("MedlineDate", "")).strip()
            return medline_date[:4] if medline_date[:4].isdigit() else UNKNOWN_DATE

        month_raw = str(pub_date.get("Month", "")).strip()
        month = int(month_raw) if month_raw.isdigit() else _MONTHS.get(month_raw[:3].lower())
        if not month:
            return year
        day_raw = str(pub_date.get("Day", "")).strip()
        if not day_raw.isdigit():
            return f"{year}-{month:02d}"
        return f"{year}-{month:02d}-{int(day_raw):02d}"

    @staticmethod
    def _extract_doi(article_data: dict[str, Any], pubmed_data: dict[str, Any]) -> str | None:
        for aid in pubmed_data.get("ArticleIdList", []):
            attributes = getattr(aid, "attributes", {})
            if attributes.get("IdType") == "doi" and str(aid).strip():
                return str(aid).strip()
        for location in article_data.get("ELocationID", []):
            attributes = getattr(location, "attributes", {})
            if attributes.get("EIdType") == "doi" and str(location).strip():
                return str(location).strip()
        return None
