"""
Web of Science Adapter - Clarivate Web of Science Expanded API

Query shape: ``AU=("<name>") OR AU=("<name>") [AND PY=(<start>-<end>)]``
against database WOS, first 25 records.

Web of Science payloads nest most fields several levels deep, and any level
may be a single object, a list, or missing. The ``_extract_*`` helpers here
walk those shapes defensively and never raise.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from faculty_pubs.application.classification.classifier import KeywordClassifier
from faculty_pubs.domain.entities.publication import UNTITLED_PUBLICATION, ProviderId, SourceRecord
from faculty_pubs.shared.exceptions import ConfigurationError, ErrorContext
from faculty_pubs.shared.settings import WebOfScienceSettings

from .base import as_int, as_list, classify_records, clean_names, first_text, text_of
from .base_client import BaseAPIClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from faculty_pubs.application.classification.classifier import Classifier

logger = logging.getLogger(__name__)

WOS_RECORD_URL = "https://www.webofscience.com/wos/woscc/full-record/{uid}"
EARLIEST_YEAR = 1900
NO_AUTHORS = "N/A"
UNKNOWN_JOURNAL = "Unknown journal"
UNKNOWN_DATE = "Unknown date"


def build_author_query(author_names: Sequence[str]) -> str:
    return " OR ".join(f'AU=("{name}")' for name in author_names)


def _year_of(value: str | None) -> int | None:
    if not value or len(value.strip()) < 4:
        return None
    prefix = value.strip()[:4]
    return int(prefix) if prefix.isdigit() else None


def build_year_query(start_date: str | None, end_date: str | None, *, current_year: int | None = None) -> str:
    """``PY=(start-end)``; an open start is 1900 and an open end is the current year."""
    start_year = _year_of(start_date)
    end_year = _year_of(end_date)
    if start_year is None and end_year is None:
        return ""
    return f"PY=({start_year or EARLIEST_YEAR}-{end_year or current_year or date.today().year})"


def _dig(node: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _summary(record: dict[str, Any]) -> Any:
    return _dig(record, "static_data", "summary") or record.get("summary")


def _titles(record: dict[str, Any]) -> list[Any]:
    return as_list(_dig(_summary(record), "titles", "title"))


def _typed_title(titles: list[Any], title_type: str) -> Any:
    for title in titles:
        if isinstance(title, dict) and title.get("type") == title_type:
            return title
    return titles[0] if titles else None


def _extract_records(payload: Any) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    records_node = _dig(payload, "Data", "Records") or payload.get("records")
    record_list = _dig(records_node, "records", "REC") or _dig(records_node, "REC") or payload.get("Records")
    return [item for item in as_list(record_list) if isinstance(item, dict)]


def _extract_title(record: dict[str, Any]) -> str | None:
    return first_text([_typed_title(_titles(record), "item"), record.get("title")])


def _extract_journal(record: dict[str, Any]) -> str | None:
    return first_text([_typed_title(_titles(record), "source"), record.get("journal"), record.get("sourceTitle")])


def _extract_authors(record: dict[str, Any]) -> str | None:
    names: list[str] = []
    for names_node in as_list(_dig(_summary(record), "names")):
        for name in as_list(_dig(names_node, "name")):
            text = first_text([_dig(name, "display_name"), _dig(name, "full_name"), name])
            if text:
                names.append(text)
    return ", ".join(names) or None


def _extract_abstract(record: dict[str, Any]) -> str:
    metadata = _dig(record, "static_data", "fullrecord_metadata") or record.get("fullrecord_metadata")
    texts: list[Any] = []
    for abstract in as_list(_dig(metadata, "abstracts", "abstract")):
        texts.extend(as_list(_dig(abstract, "abstract_text")))
    return first_text(texts) or ""


def _extract_date(record: dict[str, Any]) -> str:
    pub_info = _dig(_summary(record), "pub_info")
    year = first_text([_dig(pub_info, "pubyear"), record.get("pubyear")])
    if year:
        return year
    return first_text([record.get("date"), record.get("pub_date")]) or UNKNOWN_DATE


def _extract_citation_count(record: dict[str, Any]) -> int:
    tc_list = _dig(record, "dynamic_data", "citation_related", "tc_list")
    for candidate in (_dig(tc_list, "silo_tc", "local_count"), _dig(tc_list, "local_count"), record.get("citation_count")):
        if text_of(candidate) is not None:
            return as_int(candidate)
    return 0


def _extract_doi(record: dict[str, Any]) -> str | None:
    identifiers = _dig(record, "dynamic_data", "cluster_related", "identifiers", "identifier")
    for identifier in as_list(identifiers):
        if isinstance(identifier, dict) and identifier.get("type") in ("doi", "xref_doi"):
            value = text_of(identifier.get("value"))
            if value:
                return value
    return text_of(record.get("doi"))


def _extract_uid(record: dict[str, Any]) -> str | None:
    return first_text([record.get("UID"), record.get("uid"), record.get("id"), record.get("identifier")])


class WebOfScienceAdapter(BaseAPIClient):
    """
    Web of Science provider adapter.

    Example:
        adapter = WebOfScienceAdapter(WebOfScienceSettings(api_key="...", base_url="https://wos-api.clarivate.com/api/wos"))
        records = await adapter.query(["Jordan Lee"], start_date="2019-01-01")
    """

    _service_name = "Web of Science"
    provider = ProviderId.WEB_OF_SCIENCE

    def __init__(
        self,
        settings: WebOfScienceSettings | None = None,
        classifier: Classifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or WebOfScienceSettings()
        self._classifier = classifier or KeywordClassifier()
        super().__init__(
            base_url=self._settings.base_url or "",
            timeout=self._settings.timeout,
            min_interval=0.5,
            headers={
                "Accept": "application/json",
                "X-ApiKey": self._settings.api_key or "",
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
                "Web of Science API key or base URL is missing.",
                context=ErrorContext(provider=self.provider.value, suggestion="Set WOS_API_KEY and WOS_BASE_URL"),
            )

        names = clean_names(author_names)
        if not names:
            return []

        user_query = build_author_query(names)
        year_query = build_year_query(start_date, end_date)
        if year_query:
            user_query = f"{user_query} AND {year_query}"

        payload = await self._make_request(
            "",
            params={
                "databaseId": "WOS",
                "usrQuery": user_query,
                "count": self._settings.max_results,
                "firstRecord": 1,
            },
        )

        records = [self._to_record(raw) for raw in _extract_records(payload)]
        logger.info(f"Web of Science returned {len(records)} records for {len(names)} author(s)")
        return await classify_records(records, self._classifier)

    def _to_record(self, raw: dict[str, Any]) -> SourceRecord:
        uid = _extract_uid(raw)
        return SourceRecord(
            provider=self.provider,
            title=_extract_title(raw) or UNTITLED_PUBLICATION,
            authors=_extract_authors(raw) or NO_AUTHORS,
            journal=_extract_journal(raw) or UNKNOWN_JOURNAL,
            publication_date=_extract_date(raw),
            citation_count=_extract_citation_count(raw),
            doi=_extract_doi(raw),
            provider_url=WOS_RECORD_URL.format(uid=uid) if uid else None,
            abstract=_extract_abstract(raw),
            source_id=uid,
        )
