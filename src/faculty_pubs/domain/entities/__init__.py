"""
Domain Entities

Core business objects for multi-provider publication reconciliation.
"""

from __future__ import annotations

from .publication import (
    DOI_RESOLVER_BASE,
    UNTITLED_PUBLICATION,
    MergedPublication,
    ProviderId,
    PublicationType,
    SourceRecord,
)

__all__ = [
    "DOI_RESOLVER_BASE",
    "UNTITLED_PUBLICATION",
    "MergedPublication",
    "ProviderId",
    "PublicationType",
    "SourceRecord",
]
