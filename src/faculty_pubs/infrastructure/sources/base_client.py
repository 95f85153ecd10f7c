"""
Base API Client - Shared HTTP request pattern for provider adapters.

Provides a reusable base class with:
- Automatic retry on 429 (rate limit) with Retry-After support
- Retry with backoff on transport errors
- Rate limiting (configurable interval between requests)
- Circuit breaker for fault tolerance
- Typed errors instead of silent failures, so the fan-out orchestrator can
  report why a provider failed
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from typing_extensions import Self

from faculty_pubs.shared.async_utils import CircuitBreaker
from faculty_pubs.shared.exceptions import (
    ErrorContext,
    NetworkError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for HTTP provider clients.

    Provides common infrastructure:
    - httpx.AsyncClient management
    - Rate limiting with configurable interval
    - Retry on 429 and on transport errors with exponential backoff
    - Circuit breaker for fault tolerance

    Subclasses set ``_service_name`` and call :meth:`_make_request`.

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            def __init__(self):
                super().__init__(base_url="https://api.example.com", min_interval=0.1)

            async def get_item(self, item_id: str) -> dict:
                return await self._make_request(f"/items/{item_id}")
    """

    _service_name: str = "API"
    _MAX_RETRIES: int = 3

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        min_interval: float = 0.1,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests (rate limiting)
            headers: Default headers for all requests
            circuit_breaker: Optional circuit breaker for fault tolerance.
                             If None, a default one is created (threshold=10, recovery=60s).
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_interval = min_interval
        self._last_request_time = 0.0
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
            transport=transport,
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(failure_threshold=10, recovery_timeout=60.0)

    async def _rate_limit(self) -> None:
        """Enforce minimum interval between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_interval:
            await asyncio.sleep(self._min_interval - elapsed)
        self._last_request_time = time.time()

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    def _context(self, operation: str, **metadata: Any) -> ErrorContext:
        return ErrorContext(provider=self._service_name, operation=operation, metadata=metadata)

    async def _make_request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        expect_json: bool = True,
    ) -> Any:
        """
        Make HTTP request with retry on 429 and circuit breaker protection.

        Args:
            url: Full URL or path (appended to base_url)
            method: HTTP method (GET or POST)
            params: Query string parameters
            data: JSON body for POST requests
            headers: Additional headers for this request
            expect_json: If True, parse response as JSON; otherwise return text

        Returns:
            Parsed JSON payload or response text

        Raises:
            RateLimitError: 429 after all retries, or circuit breaker open
            ServiceUnavailableError: Non-success HTTP status
            NetworkError: Transport failure after all retries
            ParseError: Body is not valid JSON
        """
        full_url = self._build_url(url)

        for attempt in range(self._MAX_RETRIES + 1):
            await self._rate_limit()
            try:
                async with self._circuit_breaker:
                    response = await self._execute_request(
                        full_url, method=method, params=params, data=data, headers=headers
                    )

                    if response.status_code == 429:
                        if attempt < self._MAX_RETRIES:
                            retry_after = self._get_retry_after(response, attempt)
                            logger.warning(
                                f"{self._service_name}: Rate limited (429), "
                                f"retry {attempt + 1}/{self._MAX_RETRIES} in {retry_after:.1f}s"
                            )
                            await asyncio.sleep(retry_after)
                            continue
                        logger.warning(f"{self._service_name}: Rate limit exceeded after retries")
                        raise RateLimitError(
                            "Rate limit exceeded after retries",
                            retry_after=self._get_retry_after(response, attempt),
                            context=self._context("request", url=full_url),
                        )

                    response.raise_for_status()
                    return self._parse_response(response, expect_json)

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                logger.warning(f"{self._service_name} HTTP error {status}: {e.response.reason_phrase}")
                raise ServiceUnavailableError(
                    f"request failed with status {status}",
                    service=self._service_name,
                    status_code=status,
                    context=self._context("request", url=full_url),
                ) from e
            except httpx.RequestError as e:
                if attempt < self._MAX_RETRIES:
                    logger.warning(f"{self._service_name} request error (attempt {attempt + 1}): {e}")
                    await asyncio.sleep(2 ** (attempt + 1))
                    continue
                logger.warning(f"{self._service_name} request failed: {e}")
                raise NetworkError(
                    f"request failed: {e}",
                    context=self._context("request", url=full_url),
                ) from e

        # Unreachable: the final attempt either returns or raises.
        raise NetworkError("request failed", context=self._context("request", url=full_url))

    async def _execute_request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request. Override for custom behavior."""
        if method == "POST":
            return await self._client.post(url, params=params, json=data, headers=headers or {})
        return await self._client.get(url, params=params, headers=headers or {})

    def _parse_response(self, response: httpx.Response, expect_json: bool) -> Any:
        """Parse response body. Override for custom extraction logic."""
        if not expect_json:
            return response.text
        try:
            return response.json()
        except ValueError as e:
            raise ParseError("response body is not valid JSON", context=self._context("parse")) from e

    @staticmethod
    def _get_retry_after(response: httpx.Response, attempt: int) -> float:
        """Extract Retry-After from response headers, with exponential backoff fallback."""
        try:
            return float(response.headers.get("Retry-After", 2 ** (attempt + 1)))
        except (ValueError, TypeError):
            return float(2 ** (attempt + 1))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
