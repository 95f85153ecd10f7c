"""Publication type classification."""

from .classifier import REVIEW_KEYWORDS, Classifier, KeywordClassifier, classify_by_keywords

__all__ = [
    "REVIEW_KEYWORDS",
    "Classifier",
    "KeywordClassifier",
    "classify_by_keywords",
]
