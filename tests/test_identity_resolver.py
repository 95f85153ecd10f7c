"""Tests for cross-provider identity resolution."""

from __future__ import annotations

import pytest

from faculty_pubs.application.resolution.identity_resolver import (
    DISPLAY_PRIORITY,
    FOLD_ORDER,
    IdentityResolver,
    merge_key,
    normalize_doi,
    normalize_title,
)
from faculty_pubs.domain.entities.publication import ProviderId, PublicationType

# =============================================================================
# Merge key
# =============================================================================


class TestNormalizeDoi:
    @pytest.mark.parametrize(
        "raw",
        [
            "10.1000/ABC",
            "  10.1000/abc  ",
            "https://doi.org/10.1000/abc",
            "http://dx.doi.org/10.1000/ABC",
            "doi:10.1000/abc",
        ],
    )
    def test_variants_normalize_equal(self, raw):
        assert normalize_doi(raw) == "10.1000/abc"

    @pytest.mark.parametrize("raw", [None, "", "   ", "doi:"])
    def test_empty_is_none(self, raw):
        assert normalize_doi(raw) is None


class TestNormalizeTitle:
    def test_punctuation_and_case(self):
        assert normalize_title("Simulation-Based Learning!!") == "simulation based learning"
        assert normalize_title("simulation based learning") == "simulation based learning"

    def test_untitled_sentinel_is_none(self):
        assert normalize_title("Untitled publication") is None

    def test_only_punctuation_is_none(self):
        assert normalize_title("?!") is None

    def test_accents_stripped(self):
        assert normalize_title("Café-Based Learning") == "cafe based learning"
        assert normalize_title("CAFE BASED LEARNING") == "cafe based learning"

    def test_non_latin_letters_kept(self):
        assert normalize_title("Лечение диабета") == "лечение диабета"
        assert normalize_title("Профилактика гриппа") == "профилактика гриппа"

    def test_cjk_title_kept(self):
        assert normalize_title("「護理教育」的模擬學習") == "護理教育 的模擬學習"

    def test_fullwidth_compatibility_forms(self):
        assert normalize_title("ＣＯＶＩＤ－１９ Care") == "covid 19 care"


class TestMergeKey:
    def test_doi_takes_precedence(self, make_record):
        record = make_record(doi="10.1000/X", title="Anything")
        assert merge_key(record) == "doi:10.1000/x"

    def test_title_fallback(self, make_record):
        record = make_record(doi=None, title="Simulation-Based Learning!!")
        assert merge_key(record) == "title:simulation based learning"

    def test_unidentifiable(self, make_record):
        record = make_record(doi="  ", title="")
        assert merge_key(record) is None

    def test_cjk_title_only_record_has_key(self, make_record):
        record = make_record(doi=None, title="護理教育的模擬學習")
        assert merge_key(record) == "title:護理教育的模擬學習"

    def test_year_variant(self, make_record):
        record = make_record(title="Telehealth", publication_date="2024-02-19")
        assert merge_key(record, include_year=True) == "title:telehealth|2024"

    def test_year_variant_keeps_doi_keys(self, make_record):
        record = make_record(doi="10.1/a", publication_date="2024")
        assert merge_key(record, include_year=True) == "doi:10.1/a"


# =============================================================================
# Merge
# =============================================================================


class TestMerge:
    def test_same_doi_merges_regardless_of_order(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, doi="10.1000/ABC", title="A")
        scopus = make_record(ProviderId.SCOPUS, doi="https://doi.org/10.1000/abc", title="B")
        wos = make_record(ProviderId.WEB_OF_SCIENCE, doi="doi:10.1000/abc", title="C")
        resolver = IdentityResolver()

        forward = resolver.merge({ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus], ProviderId.WEB_OF_SCIENCE: [wos]})
        reverse = resolver.merge({ProviderId.WEB_OF_SCIENCE: [wos], ProviderId.SCOPUS: [scopus], ProviderId.PUBMED: [pubmed]})

        assert len(forward) == 1
        assert forward == reverse
        assert forward[0].doi == "10.1000/abc"

    def test_title_fallback_merges(self, make_record):
        first = make_record(ProviderId.PUBMED, title="Simulation-Based Learning!!")
        second = make_record(ProviderId.SCOPUS, title="simulation based learning")

        merged = IdentityResolver().merge({ProviderId.PUBMED: [first], ProviderId.SCOPUS: [second]})

        assert len(merged) == 1
        assert merged[0].sources == [ProviderId.PUBMED, ProviderId.SCOPUS]

    def test_source_union_and_urls(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, doi="10.1/a", provider_url="https://pubmed.example/1")
        scopus = make_record(ProviderId.SCOPUS, doi="10.1/a", provider_url="https://scopus.example/1")

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus]})

        assert set(merged.sources) == {ProviderId.PUBMED, ProviderId.SCOPUS}
        assert merged.source_urls == {
            ProviderId.PUBMED: "https://pubmed.example/1",
            ProviderId.SCOPUS: "https://scopus.example/1",
        }

    def test_citation_count_takes_max(self, make_record):
        low = make_record(ProviderId.PUBMED, doi="10.1/a", citation_count=5)
        high = make_record(ProviderId.SCOPUS, doi="10.1/a", citation_count=12)

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [low], ProviderId.SCOPUS: [high]})

        assert merged.citation_count == 12

    def test_first_writer_wins_for_scalar_fields(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, doi="10.1/a", title="PubMed Title", journal="PubMed J", abstract="first")
        wos = make_record(
            ProviderId.WEB_OF_SCIENCE,
            doi="10.1/a",
            title="WoS Title",
            journal="WoS J",
            abstract="second",
            classification=PublicationType.REVIEW,
        )

        [merged] = IdentityResolver().merge({ProviderId.WEB_OF_SCIENCE: [wos], ProviderId.PUBMED: [pubmed]})

        assert merged.title == "PubMed Title"
        assert merged.journal == "PubMed J"
        assert merged.abstract == "first"
        assert merged.classification is PublicationType.PRIMARY_RESEARCH

    def test_title_keyed_merge_keeps_first_url(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, title="Same Paper", provider_url="https://pubmed.example/1")
        scopus = make_record(ProviderId.SCOPUS, title="Same paper", provider_url="https://scopus.example/1")

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus]})

        assert merged.doi is None
        assert merged.url == "https://pubmed.example/1"

    def test_url_prefers_doi_link(self, make_record):
        record = make_record(ProviderId.SCOPUS, doi="10.1/A", provider_url="https://scopus.example/1")

        [merged] = IdentityResolver().merge({ProviderId.SCOPUS: [record]})

        assert merged.url == "https://doi.org/10.1/a"

    def test_url_falls_back_to_incoming(self, make_record):
        first = make_record(ProviderId.PUBMED, title="Paper", provider_url=None)
        second = make_record(ProviderId.SCOPUS, title="Paper", provider_url="https://scopus.example/1")

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [first], ProviderId.SCOPUS: [second]})

        assert merged.url == "https://scopus.example/1"

    def test_display_source_priority(self, make_record):
        records = {
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, doi="10.1/a")],
            ProviderId.SCOPUS: [make_record(ProviderId.SCOPUS, doi="10.1/a"), make_record(ProviderId.SCOPUS, doi="10.1/b")],
            ProviderId.WEB_OF_SCIENCE: [make_record(ProviderId.WEB_OF_SCIENCE, doi="10.1/a")],
        }

        first, second = IdentityResolver().merge(records)

        assert first.source is ProviderId.WEB_OF_SCIENCE
        assert first.sources == [ProviderId.PUBMED, ProviderId.SCOPUS, ProviderId.WEB_OF_SCIENCE]
        assert second.source is ProviderId.SCOPUS

    def test_pubmed_over_scopus_for_display(self, make_record):
        records = {
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, doi="10.1/a")],
            ProviderId.SCOPUS: [make_record(ProviderId.SCOPUS, doi="10.1/a")],
        }
        [merged] = IdentityResolver().merge(records)
        assert merged.source is ProviderId.PUBMED

    def test_distinct_non_latin_titles_kept_apart(self, make_record):
        records = {
            ProviderId.SCOPUS: [
                make_record(ProviderId.SCOPUS, title="Лечение диабета", publication_date="2024"),
                make_record(ProviderId.SCOPUS, title="Профилактика гриппа", publication_date="2024"),
            ],
        }

        assert len(IdentityResolver().merge(records)) == 2
        assert len(IdentityResolver(include_year_in_title_key=True).merge(records)) == 2

    def test_cjk_title_only_record_not_dropped(self, make_record):
        records = {ProviderId.WEB_OF_SCIENCE: [make_record(ProviderId.WEB_OF_SCIENCE, title="護理教育的模擬學習")]}

        publications, stats = IdentityResolver().merge_with_stats(records)

        assert [pub.title for pub in publications] == ["護理教育的模擬學習"]
        assert stats.dropped == 0

    def test_accented_and_plain_titles_merge(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, title="Café Culture and Nurse Retention")
        scopus = make_record(ProviderId.SCOPUS, title="Cafe culture and nurse retention")

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus]})

        assert merged.title == "Café Culture and Nurse Retention"
        assert merged.sources == [ProviderId.PUBMED, ProviderId.SCOPUS]

    def test_relative_citation_ratio_copied_on_create(self, make_record):
        record = make_record(ProviderId.PUBMED, doi="10.1/a", relative_citation_ratio=1.8)

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [record]})

        assert merged.relative_citation_ratio == 1.8

    def test_relative_citation_ratio_adopted_when_missing(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, doi="10.1/a")
        scopus = make_record(ProviderId.SCOPUS, doi="10.1/a", relative_citation_ratio=2.4)

        [merged] = IdentityResolver().merge({ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus]})

        assert merged.relative_citation_ratio == 2.4

    def test_relative_citation_ratio_kept_when_set(self, make_record):
        pubmed = make_record(ProviderId.PUBMED, doi="10.1/a", relative_citation_ratio=0.9)
        scopus = make_record(ProviderId.SCOPUS, doi="10.1/a", relative_citation_ratio=2.4)
        wos = make_record(ProviderId.WEB_OF_SCIENCE, doi="10.1/a")

        [merged] = IdentityResolver().merge(
            {ProviderId.PUBMED: [pubmed], ProviderId.SCOPUS: [scopus], ProviderId.WEB_OF_SCIENCE: [wos]}
        )

        assert merged.relative_citation_ratio == 0.9

    def test_pmid_from_pubmed_record(self, make_record):
        records = {
            ProviderId.SCOPUS: [make_record(ProviderId.SCOPUS, doi="10.1/a", source_id="2-s2.0-9")],
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, doi="10.1/a", source_id="37000001")],
        }
        [merged] = IdentityResolver().merge(records)
        assert merged.pmid == "37000001"

    def test_unidentifiable_records_dropped_and_counted(self, make_record):
        records = {
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, title="", doi=None), make_record(ProviderId.PUBMED, doi="10.1/a")],
        }

        publications, stats = IdentityResolver().merge_with_stats(records)

        assert len(publications) == 1
        assert stats.dropped == 1
        assert stats.total_input == 2
        assert stats.unique_publications == 1

    def test_first_seen_order(self, make_record):
        records = {
            ProviderId.WEB_OF_SCIENCE: [make_record(ProviderId.WEB_OF_SCIENCE, doi="10.1/c")],
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, doi="10.1/b"), make_record(ProviderId.PUBMED, doi="10.1/a")],
            ProviderId.SCOPUS: [make_record(ProviderId.SCOPUS, doi="10.1/d")],
        }

        publications = IdentityResolver().merge(records)

        assert [pub.doi for pub in publications] == ["10.1/b", "10.1/a", "10.1/d", "10.1/c"]

    def test_idempotent(self, nursing_records):
        resolver = IdentityResolver()
        assert resolver.merge(nursing_records) == resolver.merge(nursing_records)
        assert [p.to_dict() for p in resolver.merge(nursing_records)] == [
            p.to_dict() for p in resolver.merge(nursing_records)
        ]

    def test_input_not_mutated(self, nursing_records):
        before = {provider: [record.title for record in records] for provider, records in nursing_records.items()}
        IdentityResolver().merge(nursing_records)
        after = {provider: [record.title for record in records] for provider, records in nursing_records.items()}
        assert before == after

    def test_stats_by_provider(self, nursing_records):
        _, stats = IdentityResolver().merge_with_stats(nursing_records)
        assert stats.by_provider == {"PubMed": 2, "Scopus": 1, "Web of Science": 1}
        assert stats.merged_records == 1
        assert stats.to_dict()["unique_publications"] == 3

    def test_empty_input(self):
        assert IdentityResolver().merge({}) == []


class TestYearInclusiveKey:
    def test_same_title_different_year_kept_apart(self, make_record):
        records = {
            ProviderId.PUBMED: [make_record(ProviderId.PUBMED, title="Annual Report", publication_date="2022")],
            ProviderId.SCOPUS: [make_record(ProviderId.SCOPUS, title="Annual report", publication_date="2023-01-01")],
        }

        assert len(IdentityResolver().merge(records)) == 1
        assert len(IdentityResolver(include_year_in_title_key=True).merge(records)) == 2


class TestOrderingConstants:
    def test_fold_order(self):
        assert FOLD_ORDER == (ProviderId.PUBMED, ProviderId.SCOPUS, ProviderId.WEB_OF_SCIENCE)

    def test_display_priority(self):
        assert DISPLAY_PRIORITY[0] is ProviderId.WEB_OF_SCIENCE
