"""
iCite Module - NIH Relative Citation Ratio lookup

Fetches the relative citation ratio (RCR) for PubMed IDs from NIH's iCite
API. Lookups are deduplicated, split into batches of MAX_PMIDS_PER_REQUEST,
and cached for ICITE_CACHE_TTL seconds. A failed batch is logged and skipped;
the remaining batches still contribute.

API Documentation: https://icite.od.nih.gov/api
"""

from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Any

from faculty_pubs.infrastructure.sources.base_client import BaseAPIClient
from faculty_pubs.shared.async_utils import chunked
from faculty_pubs.shared.exceptions import FacultyPubsError

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

logger = logging.getLogger(__name__)

ICITE_API_BASE = "https://icite.od.nih.gov/api/pubs"
MAX_PMIDS_PER_REQUEST = 200  # iCite API limit
ICITE_CACHE_TTL = 1800  # 30 minutes
ICITE_FIELDS = ("pmid", "relative_citation_ratio")


class _ICiteCache:
    """Simple in-memory TTL cache of PMID -> RCR."""

    def __init__(self, ttl: int = ICITE_CACHE_TTL):
        self._cache: dict[str, tuple[float, float]] = {}
        self._ttl = ttl

    def get(self, pmid: str) -> float | None:
        """Get cached RCR for a PMID, or None if expired/missing."""
        entry = self._cache.get(pmid)
        if entry is None:
            return None
        timestamp, rcr = entry
        if time.monotonic() - timestamp > self._ttl:
            del self._cache[pmid]
            return None
        return rcr

    def get_many(self, pmids: list[str]) -> tuple[dict[str, float], list[str]]:
        """Returns (cached, missing)."""
        cached: dict[str, float] = {}
        missing: list[str] = []
        for pmid in pmids:
            rcr = self.get(pmid)
            if rcr is not None:
                cached[pmid] = rcr
            else:
                missing.append(pmid)
        return cached, missing

    def put_many(self, results: dict[str, float]) -> None:
        now = time.monotonic()
        for pmid, rcr in results.items():
            self._cache[pmid] = (now, rcr)


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def unique_identifiers(identifiers: Iterable[str | None]) -> list[str]:
    """Strip, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for identifier in identifiers:
        value = str(identifier).strip() if identifier is not None else ""
        if value:
            seen.setdefault(value, None)
    return list(seen)


class ICiteClient(BaseAPIClient):
    """
    Relative citation ratio lookups against iCite.

    Example:
        async with ICiteClient() as icite:
            rates = await icite.lookup(["31452104", "30742071"])
    """

    _service_name = "iCite"

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        batch_size: int = MAX_PMIDS_PER_REQUEST,
        cache_ttl: int = ICITE_CACHE_TTL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=ICITE_API_BASE, timeout=timeout, min_interval=0.1, transport=transport)
        self._batch_size = batch_size
        self._cache = _ICiteCache(ttl=cache_ttl)

    async def lookup(self, identifiers: Iterable[str | None]) -> dict[str, float]:
        """
        Map each PMID to its relative citation ratio.

        PMIDs without a finite RCR, and PMIDs in failed batches, are absent
        from the result.
        """
        pmids = unique_identifiers(identifiers)
        if not pmids:
            return {}

        cached, missing = self._cache.get_many(pmids)
        if not missing:
            logger.debug(f"iCite cache hit: all {len(pmids)} PMIDs cached")
            return cached

        results = dict(cached)
        for batch in chunked(missing, self._batch_size):
            try:
                batch_results = await self._fetch_batch(batch)
            except FacultyPubsError as e:
                logger.warning(f"iCite batch of {len(batch)} PMIDs failed: {e}")
                continue
            results.update(batch_results)
            self._cache.put_many(batch_results)

        return results

    async def _fetch_batch(self, pmids: list[str]) -> dict[str, float]:
        params = {"pmids": ",".join(pmids), "fl": ",".join(ICITE_FIELDS)}
        payload = await self._make_request("", params=params)

        results: dict[str, float] = {}
        items = payload.get("data") if isinstance(payload, dict) else None
        for item in items or []:
            if not isinstance(item, dict):
                continue
            pmid = str(item.get("pmid") or "").strip()
            rcr = _finite_number(item.get("relative_citation_ratio"))
            if pmid and rcr is not None:
                results[pmid] = rcr
        return results
