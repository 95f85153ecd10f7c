"""NCBI services beyond Entrez search."""

from .icite import ICITE_API_BASE, MAX_PMIDS_PER_REQUEST, ICiteClient

__all__ = ["ICITE_API_BASE", "MAX_PMIDS_PER_REQUEST", "ICiteClient"]
