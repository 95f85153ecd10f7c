"""
Settings objects for provider adapters and the abstract classifier.

Inner layers never read the process environment. The presentation layer
builds an :class:`AppSettings` once (usually via :meth:`AppSettings.from_env`
with ``os.environ`` passed in) and hands it to the DI container, which passes
each section to the adapter that owns it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_EMAIL = "faculty-pubs@example.com"
DEFAULT_MAX_RESULTS = 25
DEFAULT_TIMEOUT = 25.0
DEFAULT_AZURE_API_VERSION = "2024-06-01"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class PubMedSettings:
    """NCBI Entrez settings. The API key is optional (it only raises rate limits)."""

    email: str = DEFAULT_EMAIL
    api_key: str | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class ScopusSettings:
    """Elsevier Scopus Search API settings."""

    api_key: str | None = None
    base_url: str | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_url)


@dataclass(frozen=True)
class WebOfScienceSettings:
    """Clarivate Web of Science Expanded API settings."""

    api_key: str | None = None
    base_url: str | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_url)


@dataclass(frozen=True)
class ClassifierSettings:
    """Azure OpenAI deployment used to label abstracts."""

    endpoint: str | None = None
    api_key: str | None = None
    deployment: str | None = None
    api_version: str = DEFAULT_AZURE_API_VERSION
    timeout: float = 20.0

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key and self.deployment)


@dataclass(frozen=True)
class AppSettings:
    """All settings needed to build the engine."""

    pubmed: PubMedSettings = field(default_factory=PubMedSettings)
    scopus: ScopusSettings = field(default_factory=ScopusSettings)
    web_of_science: WebOfScienceSettings = field(default_factory=WebOfScienceSettings)
    classifier: ClassifierSettings = field(default_factory=ClassifierSettings)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> AppSettings:
        """
        Build settings from an environment mapping.

        Recognized variables:
            NCBI_EMAIL, NCBI_API_KEY (or PUBMED_API_KEY)
            SCOPUS_API_KEY, SCOPUS_BASE_URL
            WOS_API_KEY, WOS_BASE_URL
            AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY,
            AZURE_OPENAI_DEPLOYMENT_NAME, AZURE_OPENAI_API_VERSION
        """
        return cls(
            pubmed=PubMedSettings(
                email=_clean(environ.get("NCBI_EMAIL")) or DEFAULT_EMAIL,
                api_key=_clean(environ.get("NCBI_API_KEY")) or _clean(environ.get("PUBMED_API_KEY")),
            ),
            scopus=ScopusSettings(
                api_key=_clean(environ.get("SCOPUS_API_KEY")),
                base_url=_clean(environ.get("SCOPUS_BASE_URL")),
            ),
            web_of_science=WebOfScienceSettings(
                api_key=_clean(environ.get("WOS_API_KEY")),
                base_url=_clean(environ.get("WOS_BASE_URL")),
            ),
            classifier=ClassifierSettings(
                endpoint=_clean(environ.get("AZURE_OPENAI_ENDPOINT")),
                api_key=_clean(environ.get("AZURE_OPENAI_API_KEY")),
                deployment=_clean(environ.get("AZURE_OPENAI_DEPLOYMENT_NAME")),
                api_version=_clean(environ.get("AZURE_OPENAI_API_VERSION")) or DEFAULT_AZURE_API_VERSION,
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, as consumed by ``ApplicationContainer.config.from_dict``."""
        return asdict(self)
