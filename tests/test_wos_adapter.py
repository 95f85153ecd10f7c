"""Tests for the Web of Science provider adapter."""

from __future__ import annotations

import httpx
import pytest

from faculty_pubs.domain.entities.publication import ProviderId, PublicationType
from faculty_pubs.infrastructure.sources.web_of_science import (
    WebOfScienceAdapter,
    _extract_authors,
    _extract_citation_count,
    _extract_date,
    _extract_doi,
    _extract_journal,
    _extract_records,
    _extract_title,
    build_author_query,
    build_year_query,
)
from faculty_pubs.shared.exceptions import ConfigurationError, ParseError
from faculty_pubs.shared.settings import WebOfScienceSettings

WOS_URL = "https://wos-api.clarivate.com/api/wos"
CONFIGURED = WebOfScienceSettings(api_key="wos-key", base_url=WOS_URL)


def _rec(uid: str = "WOS:000900000000001") -> dict:
    return {
        "UID": uid,
        "static_data": {
            "summary": {
                "titles": {
                    "title": [
                        {"type": "source", "content": "NURSING OUTLOOK"},
                        {"type": "item", "content": "Burnout among nurse faculty: a systematic review"},
                    ]
                },
                "names": {"name": [{"display_name": "Lee, Jordan"}, {"full_name": "Shah, Priya"}]},
                "pub_info": {"pubyear": 2023},
            },
            "fullrecord_metadata": {
                "abstracts": {"abstract": {"abstract_text": {"p": "ignored", "content": "A systematic review."}}}
            },
        },
        "dynamic_data": {
            "citation_related": {"tc_list": {"silo_tc": {"coll_id": "WOS", "local_count": 57}}},
            "cluster_related": {
                "identifiers": {
                    "identifier": [
                        {"type": "issn", "value": "0029-6554"},
                        {"type": "xref_doi", "value": "10.1016/j.outlook.2022.11.003"},
                    ]
                }
            },
        },
    }


def _payload(*records):
    return {"Data": {"Records": {"records": {"REC": list(records)}}}}


def _adapter(handler) -> WebOfScienceAdapter:
    return WebOfScienceAdapter(CONFIGURED, transport=httpx.MockTransport(handler))


# =============================================================================
# Query building
# =============================================================================


class TestQueryBuilding:
    def test_author_query(self):
        assert build_author_query(["Jordan Lee", "Priya Shah"]) == 'AU=("Jordan Lee") OR AU=("Priya Shah")'

    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            (None, None, ""),
            ("2019-01-01", "2023-12-31", "PY=(2019-2023)"),
            ("2019-01-01", None, "PY=(2019-2026)"),
            (None, "2023", "PY=(1900-2023)"),
            ("bad", None, ""),
        ],
    )
    def test_year_query(self, start, end, expected):
        assert build_year_query(start, end, current_year=2026) == expected


# =============================================================================
# Extraction helpers
# =============================================================================


class TestExtraction:
    def test_full_record(self):
        record = _rec()
        assert _extract_title(record) == "Burnout among nurse faculty: a systematic review"
        assert _extract_journal(record) == "NURSING OUTLOOK"
        assert _extract_authors(record) == "Lee, Jordan, Shah, Priya"
        assert _extract_date(record) == "2023"
        assert _extract_citation_count(record) == 57
        assert _extract_doi(record) == "10.1016/j.outlook.2022.11.003"

    def test_single_title_object(self):
        record = {"static_data": {"summary": {"titles": {"title": {"type": "item", "content": "Only title"}}}}}
        assert _extract_title(record) == "Only title"

    def test_missing_everything(self):
        record = {"UID": "WOS:1"}
        assert _extract_title(record) is None
        assert _extract_journal(record) is None
        assert _extract_authors(record) is None
        assert _extract_date(record) == "Unknown date"
        assert _extract_citation_count(record) == 0
        assert _extract_doi(record) is None

    def test_flat_fallbacks(self):
        record = {"title": "Flat", "journal": "J", "pubyear": "2020", "citation_count": "4", "doi": "10.1/flat"}
        assert _extract_title(record) == "Flat"
        assert _extract_journal(record) == "J"
        assert _extract_date(record) == "2020"
        assert _extract_citation_count(record) == 4
        assert _extract_doi(record) == "10.1/flat"

    @pytest.mark.parametrize("payload", [None, [], {}, {"Data": {"Records": {"records": ""}}}])
    def test_records_absent(self, payload):
        assert _extract_records(payload) == []

    def test_single_rec_object(self):
        assert len(_extract_records({"Data": {"Records": {"records": {"REC": _rec()}}}})) == 1


# =============================================================================
# query
# =============================================================================


class TestWebOfScienceQuery:
    async def test_unconfigured(self):
        adapter = WebOfScienceAdapter(WebOfScienceSettings(base_url=WOS_URL))
        with pytest.raises(ConfigurationError, match="Web of Science API key or base URL is missing."):
            await adapter.query(["Jordan Lee"])
        await adapter.close()

    async def test_request_and_records(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_payload(_rec()))

        async with _adapter(handler) as adapter:
            [record] = await adapter.query(["Jordan Lee"], start_date="2019-01-01", end_date="2024-06-30")

        request = seen[0]
        assert request.headers["X-ApiKey"] == "wos-key"
        assert request.url.params["databaseId"] == "WOS"
        assert request.url.params["usrQuery"] == 'AU=("Jordan Lee") AND PY=(2019-2024)'
        assert request.url.params["count"] == "25"
        assert request.url.params["firstRecord"] == "1"

        assert record.provider is ProviderId.WEB_OF_SCIENCE
        assert record.citation_count == 57
        assert record.source_id == "WOS:000900000000001"
        assert record.provider_url == "https://www.webofscience.com/wos/woscc/full-record/WOS:000900000000001"
        assert record.abstract == "A systematic review."
        assert record.classification is PublicationType.REVIEW

    async def test_no_year_clause_without_dates(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Data": {"Records": {"records": ""}}})

        async with _adapter(handler) as adapter:
            assert await adapter.query(["Jordan Lee"]) == []

        assert seen[0].url.params["usrQuery"] == 'AU=("Jordan Lee")'

    async def test_untitled_record(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_payload({"UID": "WOS:2"}))

        async with _adapter(handler) as adapter:
            [record] = await adapter.query(["Jordan Lee"])

        assert record.title == "Untitled publication"
        assert record.authors == "N/A"
        assert record.journal == "Unknown journal"

    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        async with _adapter(handler) as adapter:
            with pytest.raises(ParseError):
                await adapter.query(["Jordan Lee"])
