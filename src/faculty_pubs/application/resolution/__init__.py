"""Cross-provider identity resolution."""

from .identity_resolver import (
    DISPLAY_PRIORITY,
    FOLD_ORDER,
    IdentityResolver,
    ResolutionStats,
    merge_key,
    normalize_doi,
    normalize_title,
)

__all__ = [
    "DISPLAY_PRIORITY",
    "FOLD_ORDER",
    "IdentityResolver",
    "ResolutionStats",
    "merge_key",
    "normalize_doi",
    "normalize_title",
]
