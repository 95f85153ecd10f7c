"""Author name matching heuristics."""

from .name_matcher import ParsedName, matches, matches_any, normalize_name, parse_candidate

__all__ = [
    "ParsedName",
    "matches",
    "matches_any",
    "normalize_name",
    "parse_candidate",
]
