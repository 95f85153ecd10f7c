"""
Provider adapters.

Each adapter searches one bibliographic provider by author names and returns
normalized SourceRecords:

- PubMedAdapter: NCBI Entrez (esearch + efetch)
- ScopusAdapter: Elsevier Scopus Search API, name-matched post-filter
- WebOfScienceAdapter: Clarivate Web of Science Expanded API
"""

from .base import ProviderAdapter
from .base_client import BaseAPIClient
from .pubmed import PubMedAdapter
from .scopus import ScopusAdapter
from .web_of_science import WebOfScienceAdapter

__all__ = [
    "BaseAPIClient",
    "ProviderAdapter",
    "PubMedAdapter",
    "ScopusAdapter",
    "WebOfScienceAdapter",
]
