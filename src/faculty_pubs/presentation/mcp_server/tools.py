"""
Publication Tools - MCP tools over the PublicationEngine.

Tools:
- resolve_publications: Fan out, merge and score publications for authors
- compare_impact_benchmark: Compare an impact index to a track/rank benchmark
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from faculty_pubs.application.metrics.benchmarks import compare_to_benchmark
from faculty_pubs.shared.exceptions import FacultyPubsError, InvalidParameterError

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from faculty_pubs.application.search.engine import PublicationEngine

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}(-\d{2}(-\d{2})?)?$")


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def parse_author_names(author_names: str) -> list[str]:
    """Split a comma-separated name list, dropping blanks."""
    return [name.strip() for name in (author_names or "").split(",") if name.strip()]


def _validate_date(param_name: str, value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not _ISO_DATE.match(value):
        raise InvalidParameterError(param_name, value, "YYYY, YYYY-MM or YYYY-MM-DD")
    return value


async def run_resolve_publications(
    engine: PublicationEngine,
    author_names: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> str:
    """Tool body for ``resolve_publications``; returns a JSON document."""
    try:
        names = parse_author_names(author_names)
        if not names:
            raise InvalidParameterError("author_names", author_names, "one or more comma-separated names")
        start = _validate_date("start_date", start_date)
        end = _validate_date("end_date", end_date)
    except FacultyPubsError as e:
        return _dumps(e.to_dict())

    result = await engine.resolve_publications(names, start, end)
    return _dumps({"author_names": names, **result.to_dict()})


def run_compare_impact_benchmark(impact_index: float, track: str, rank: str) -> str:
    """Tool body for ``compare_impact_benchmark``; returns a JSON document."""
    try:
        comparison = compare_to_benchmark(impact_index, track, rank)
    except FacultyPubsError as e:
        return _dumps(e.to_dict())
    return _dumps(comparison.to_dict())


def register_publication_tools(mcp: FastMCP, engine: PublicationEngine) -> list[str]:
    """Register publication tools. Returns the registered tool names."""

    @mcp.tool()
    async def resolve_publications(
        author_names: str,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> str:
        """
        Find and reconcile publications for faculty members across PubMed,
        Scopus and Web of Science.

        Records for the same paper from different providers are merged
        (DOI first, then normalized title). A provider that fails is reported
        in "errors" without failing the whole request.

        Args:
            author_names: Comma-separated full names, e.g. "Jordan Lee, Priya Shah"
            start_date: Optional lower bound, YYYY-MM-DD
            end_date: Optional upper bound, YYYY-MM-DD

        Returns:
            JSON with publications, errors, metrics (impact index, weighted
            citation rate sum, totals) and resolution stats
        """
        logger.info(f"resolve_publications: {author_names!r} [{start_date} - {end_date}]")
        return await run_resolve_publications(engine, author_names, start_date, end_date)

    @mcp.tool()
    def compare_impact_benchmark(impact_index: float, track: str, rank: str) -> str:
        """
        Compare an impact index against the benchmark for a faculty track and rank.

        Args:
            impact_index: Impact index to compare
            track: "tenure_track" or "non_tenure"
            rank: "assistant", "associate" or "professor"

        Returns:
            JSON with the benchmark, whether it is met, and the gap
        """
        return run_compare_impact_benchmark(impact_index, track, rank)

    return ["resolve_publications", "compare_impact_benchmark"]
