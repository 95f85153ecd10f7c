"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from typing import Any

import pytest

from faculty_pubs.domain.entities.publication import ProviderId, PublicationType, SourceRecord

# ============================================================
# Record Builders
# ============================================================


def build_record(provider: ProviderId = ProviderId.PUBMED, **overrides: Any) -> SourceRecord:
    """SourceRecord with sensible defaults for tests."""
    fields: dict[str, Any] = {
        "title": "Simulation-Based Learning and Clinical Readiness in Undergraduate Nursing",
        "authors": "Jordan Lee, Maria Alvarez, Priya Shah",
        "journal": "Journal of Nursing Education",
        "publication_date": "2023-06-12",
        "citation_count": 0,
        "doi": None,
        "provider_url": None,
        "abstract": "A multi-site study assessing simulation-based learning.",
        "classification": PublicationType.PRIMARY_RESEARCH,
        "source_id": None,
    }
    fields.update(overrides)
    return SourceRecord(provider=provider, **fields)


@pytest.fixture
def make_record():
    """Factory fixture for SourceRecords."""
    return build_record


# ============================================================
# Fake Provider Adapters
# ============================================================


class FakeAdapter:
    """Provider adapter returning canned records or raising a canned error."""

    def __init__(
        self,
        provider: ProviderId,
        records: list[SourceRecord] | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.provider = provider
        self._records = records or []
        self._error = error
        self.calls: list[tuple[list[str], str | None, str | None]] = []
        self.closed = False

    async def query(self, author_names, start_date=None, end_date=None):
        self.calls.append((list(author_names), start_date, end_date))
        if self._error is not None:
            raise self._error
        return list(self._records)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_adapter():
    """Factory fixture for FakeAdapter."""
    return FakeAdapter


# ============================================================
# Sample Publications
# ============================================================


@pytest.fixture
def nursing_records():
    """Same paper seen by PubMed and Scopus, plus a PubMed-only and a WoS-only paper."""
    return {
        ProviderId.PUBMED: [
            build_record(
                ProviderId.PUBMED,
                doi="10.3928/01484834-20230601-01",
                provider_url="https://pubmed.ncbi.nlm.nih.gov/37000001/",
                source_id="37000001",
                citation_count=0,
            ),
            build_record(
                ProviderId.PUBMED,
                title="Telehealth Adoption in Rural Maternal Care",
                journal="Telemedicine and e-Health",
                publication_date="2024-02-19",
                provider_url="https://pubmed.ncbi.nlm.nih.gov/38000002/",
                source_id="38000002",
            ),
        ],
        ProviderId.SCOPUS: [
            build_record(
                ProviderId.SCOPUS,
                title="Simulation based learning and clinical readiness in undergraduate nursing",
                journal="J Nurs Educ",
                doi="https://doi.org/10.3928/01484834-20230601-01",
                provider_url="https://www.scopus.com/record/display.uri?eid=2-s2.0-1",
                source_id="2-s2.0-1",
                citation_count=34,
            ),
        ],
        ProviderId.WEB_OF_SCIENCE: [
            build_record(
                ProviderId.WEB_OF_SCIENCE,
                title="Evidence-Based Interventions for Nurse Burnout: A Systematic Review",
                journal="Nursing Outlook",
                publication_date="2022",
                doi="10.1016/j.outlook.2022.11.003",
                provider_url="https://www.webofscience.com/wos/woscc/full-record/WOS:000900000000001",
                source_id="WOS:000900000000001",
                citation_count=57,
                classification=PublicationType.REVIEW,
            ),
        ],
    }
