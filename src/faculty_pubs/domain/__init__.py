"""
Domain Layer - Core Business Objects

Contains:
- entities: SourceRecord, MergedPublication, ProviderId, PublicationType
"""

from .entities import (
    MergedPublication,
    ProviderId,
    PublicationType,
    SourceRecord,
)

__all__ = [
    "MergedPublication",
    "ProviderId",
    "PublicationType",
    "SourceRecord",
]
