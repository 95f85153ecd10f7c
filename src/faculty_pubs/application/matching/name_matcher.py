"""
Author Name Matcher

Decides whether a free-text author string names the same person as a target
full name. Used to post-filter providers whose upstream author search is a
loose text match rather than a structured author lookup.

Two tiers:
    1. Containment: every token of the normalized target appears as a
       substring of the normalized candidate.
    2. Structured: the candidate is parsed into (last, first, initial) and
       compared to the target's last name plus first name or initial.

Example:
    >>> matches("Lee, J.", "Jordan Lee")
    True
    >>> matches("Jordan Smith", "Jordan Lee")
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from faculty_pubs.shared.text import normalize_text_for_matching

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class ParsedName:
    """A person name split into comparable parts (casefolded, accents stripped)."""

    last: str | None
    first: str | None = None
    initial: str | None = None


def normalize_name(value: str) -> str:
    """Casefold, strip accents, collapse every non-word run to one space, trim."""
    return normalize_text_for_matching(value)


def parse_candidate(candidate: str) -> ParsedName:
    """
    Parse a free-text author string into last/first/initial.

    Handles "Last, First ..." and "First ... Last" forms, plus the
    "Last F" form where the trailing token is a lone initial.
    """
    if "," in candidate:
        before, _, after = candidate.partition(",")
        last = normalize_name(before) or None
        after_tokens = normalize_name(after).split()
        first = after_tokens[0] if after_tokens else None
        return ParsedName(last=last, first=first, initial=first[0] if first else None)

    tokens = normalize_name(candidate).split()
    if not tokens:
        return ParsedName(last=None)
    if len(tokens) == 2 and len(tokens[1]) == 1:
        return ParsedName(last=tokens[0], first=None, initial=tokens[1])
    if len(tokens) >= 2:
        first = tokens[0]
        return ParsedName(last=tokens[-1], first=first, initial=first[0])
    return ParsedName(last=tokens[-1])


def matches(candidate: str, target_full_name: str) -> bool:
    """Return True if ``candidate`` plausibly names ``target_full_name``."""
    target_tokens = normalize_name(target_full_name).split()
    if not target_tokens:
        return False

    normalized_candidate = normalize_name(candidate)
    if all(token in normalized_candidate for token in target_tokens):
        return True

    parsed = parse_candidate(candidate)
    if parsed.last is None or parsed.last != target_tokens[-1]:
        return False

    if len(target_tokens) < 2:
        return False
    target_first = target_tokens[0]
    if parsed.first is not None and parsed.first == target_first:
        return True
    return parsed.initial is not None and parsed.initial == target_first[0]


def matches_any(candidates: Iterable[str], targets: Iterable[str]) -> bool:
    """True if any candidate author matches any target name."""
    target_list = [target for target in targets if target and target.strip()]
    return any(matches(candidate, target) for candidate in candidates for target in target_list)
