"""Tests for shared text normalization."""

from __future__ import annotations

import pytest

from faculty_pubs.shared.text import normalize_text_for_matching, strip_accents


class TestStripAccents:
    def test_removes_combining_marks(self):
        assert strip_accents("García Núñez") == "Garcia Nunez"

    def test_plain_text_unchanged(self):
        assert strip_accents("Jordan Lee") == "Jordan Lee"


class TestNormalizeTextForMatching:
    @pytest.mark.parametrize("value", [None, "", "  ", "?!", "___"])
    def test_empty_results(self, value):
        assert normalize_text_for_matching(value) == ""

    def test_casefold_and_collapse(self):
        assert normalize_text_for_matching("  Café-Based   Learning!! ") == "cafe based learning"

    def test_casefold_beyond_lower(self):
        assert normalize_text_for_matching("Straße") == "strasse"

    def test_greek_kept(self):
        assert normalize_text_for_matching("Νοσηλευτική Εκπαίδευση") == "νοσηλευτικη εκπαιδευση"

    def test_underscores_are_separators(self):
        assert normalize_text_for_matching("nurse_led care") == "nurse led care"
