"""
Shared kernel for Faculty Publications.

Provides:
- Unified exception hierarchy
- Async utilities (all-settled gather, batching, circuit breaker)
- Settings objects injected into adapters
- Unicode-aware text normalization for identity matching
"""

from .async_utils import (
    CircuitBreaker,
    chunked,
    gather_settled,
)
from .exceptions import (
    APIError,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    FacultyPubsError,
    InvalidParameterError,
    NetworkError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)
from .settings import (
    AppSettings,
    ClassifierSettings,
    PubMedSettings,
    ScopusSettings,
    WebOfScienceSettings,
)
from .text import normalize_text_for_matching, strip_accents

__all__ = [
    # Exceptions
    "APIError",
    "ConfigurationError",
    "DataError",
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    "FacultyPubsError",
    "InvalidParameterError",
    "NetworkError",
    "ParseError",
    "RateLimitError",
    "ServiceUnavailableError",
    "ValidationError",
    # Async utilities
    "CircuitBreaker",
    "chunked",
    "gather_settled",
    # Settings
    "AppSettings",
    "ClassifierSettings",
    "PubMedSettings",
    "ScopusSettings",
    "WebOfScienceSettings",
    # Text
    "normalize_text_for_matching",
    "strip_accents",
]
