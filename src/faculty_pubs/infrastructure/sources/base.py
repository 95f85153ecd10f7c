"""
Provider adapter contract and helpers shared by the three adapters.

An adapter turns one provider's search API into a list of normalized
SourceRecords. It raises a FacultyPubsError subclass when the provider
cannot answer; the fan-out orchestrator records that as a per-provider error.
"""

from __future__ import annotations

import asyncio
import re
from datetime import date
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from faculty_pubs.application.classification.classifier import Classifier
    from faculty_pubs.domain.entities.publication import ProviderId, SourceRecord

_DATE_PREFIX = re.compile(r"^\s*(\d{4})(?:[-/](\d{1,2}))?(?:[-/](\d{1,2}))?")


@runtime_checkable
class ProviderAdapter(Protocol):
    """Anything that can search one provider by author names."""

    provider: ProviderId

    async def query(
        self,
        author_names: Sequence[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[SourceRecord]: ...


def clean_names(author_names: Iterable[str] | None) -> list[str]:
    """Trim names and drop empty ones."""
    return [name.strip() for name in author_names or () if name and name.strip()]


def parse_date(value: str | None) -> date | None:
    """
    Parse the leading ``YYYY[-MM[-DD]]`` part of a free-form date.

    Missing month or day default to 1. Returns None when nothing usable is found.
    """
    if not value:
        return None
    match = _DATE_PREFIX.match(value)
    if not match:
        return None
    year, month, day = match.group(1), match.group(2), match.group(3)
    try:
        return date(int(year), int(month or 1), int(day or 1))
    except ValueError:
        return None


def text_of(value: Any) -> str | None:
    """Best-effort text from a scalar or a ``{"content"|"text"|"value": ...}`` node."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        for key in ("content", "text", "value"):
            if key in value:
                return text_of(value[key])
    return None


def first_text(values: Iterable[Any]) -> str | None:
    for value in values:
        text = text_of(value)
        if text:
            return text
    return None


def as_list(value: Any) -> list[Any]:
    """Wrap a single node in a list; None becomes an empty list."""
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]


def as_int(value: Any) -> int:
    """Parse a non-negative integer, 0 when missing or malformed."""
    text = text_of(value)
    if text is None:
        return 0
    try:
        return max(int(float(text)), 0)
    except (ValueError, OverflowError):
        return 0


async def classify_records(records: list[SourceRecord], classifier: Classifier) -> list[SourceRecord]:
    """Set ``classification`` on every record from its abstract, concurrently."""
    labels = await asyncio.gather(*(classifier.classify(record.abstract) for record in records))
    for record, label in zip(records, labels, strict=True):
        record.classification = label
    return records
