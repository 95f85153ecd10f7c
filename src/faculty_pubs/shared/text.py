"""
Text normalization for identity matching.

Titles and author names are compared after NFKC normalization, casefolding
and accent stripping, with every run of non-word characters (and underscores)
collapsed to a single space. Letters and digits of any script are kept, so
Cyrillic, Greek or CJK text keeps its identity instead of vanishing.

Example:
    >>> normalize_text_for_matching("Café-Based Learning!!")
    'cafe based learning'
"""

from __future__ import annotations

import re
import unicodedata

_NON_WORD = re.compile(r"[\W_]+")


def strip_accents(text: str) -> str:
    """Remove combining marks ("García" -> "Garcia")."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def normalize_text_for_matching(text: str | None) -> str:
    """NFKC, casefold, strip accents, collapse non-word runs to one space, trim."""
    if not text:
        return ""
    value = unicodedata.normalize("NFKC", text).casefold()
    value = strip_accents(value)
    return _NON_WORD.sub(" ", value).strip()
