"""
Fan-out Orchestrator

Queries every provider adapter concurrently and waits for all of them to
settle. A failing provider never cancels the others; its failure becomes one
"<Provider>: <reason>" error string, in adapter order.

    author names
         │
    ┌────┴─────────┬──────────────┐
    ▼              ▼              ▼
  PubMed        Scopus     Web of Science   ← concurrent, all-settled
    │              │              │
    └────┬─────────┴──────────────┘
         ▼
    FanOutResult(records_by_provider, errors)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from faculty_pubs.shared.async_utils import gather_settled

if TYPE_CHECKING:
    from collections.abc import Sequence

    from faculty_pubs.domain.entities.publication import ProviderId, SourceRecord
    from faculty_pubs.infrastructure.sources.base import ProviderAdapter

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Unable to fetch publications."


@dataclass
class FanOutResult:
    """Raw per-provider outcome of one fan-out."""

    records_by_provider: dict[ProviderId, list[SourceRecord]] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(len(records) for records in self.records_by_provider.values())


def format_provider_error(provider: ProviderId, error: BaseException) -> str:
    reason = str(error).strip() or type(error).__name__
    return f"{provider.value}: {reason}"


class FanOutOrchestrator:
    """
    Concurrent all-settled fan-out over provider adapters.

    Owns no retries or timeouts; adapters apply their own.
    """

    def __init__(self, adapters: Sequence[ProviderAdapter]) -> None:
        self._adapters = list(adapters)

    @property
    def adapters(self) -> list[ProviderAdapter]:
        return list(self._adapters)

    async def collect(
        self,
        author_names: Sequence[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> FanOutResult:
        outcomes = await gather_settled(
            *(adapter.query(author_names, start_date, end_date) for adapter in self._adapters)
        )

        result = FanOutResult()
        for adapter, outcome in zip(self._adapters, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                message = format_provider_error(adapter.provider, outcome)
                logger.warning(f"Provider failed: {message}")
                result.errors.append(message)
            else:
                result.records_by_provider[adapter.provider] = list(outcome)

        if not result.records_by_provider and not result.errors:
            result.errors.append(GENERIC_FAILURE_MESSAGE)

        logger.info(
            "Fan-out complete: "
            + ", ".join(f"{provider.value}={len(records)}" for provider, records in result.records_by_provider.items())
            + f" ({len(result.errors)} failed)"
        )
        return result
