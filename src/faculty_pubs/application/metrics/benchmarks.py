"""
Impact-index benchmarks by appointment track and academic rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from faculty_pubs.shared.exceptions import InvalidParameterError


class Track(Enum):
    TENURE_TRACK = "tenure_track"
    NON_TENURE = "non_tenure"


class Rank(Enum):
    ASSISTANT = "assistant"
    ASSOCIATE = "associate"
    PROFESSOR = "professor"


BENCHMARKS: dict[Track, dict[Rank, float]] = {
    Track.TENURE_TRACK: {
        Rank.ASSISTANT: 4,
        Rank.ASSOCIATE: 10,
        Rank.PROFESSOR: 20,
    },
    Track.NON_TENURE: {
        Rank.ASSISTANT: 1,
        Rank.ASSOCIATE: 4,
        Rank.PROFESSOR: 8.5,
    },
}


@dataclass(frozen=True)
class BenchmarkComparison:
    track: Track
    rank: Rank
    impact_index: float
    benchmark: float

    @property
    def meets_benchmark(self) -> bool:
        return self.impact_index >= self.benchmark

    @property
    def gap(self) -> float:
        """Positive when above the benchmark."""
        return self.impact_index - self.benchmark

    def to_dict(self) -> dict[str, Any]:
        return {
            "track": self.track.value,
            "rank": self.rank.value,
            "impact_index": self.impact_index,
            "benchmark": self.benchmark,
            "meets_benchmark": self.meets_benchmark,
            "gap": self.gap,
        }


E = TypeVar("E", bound=Enum)


def _coerce(enum_type: type[E], value: E | str, param_name: str) -> E:
    if isinstance(value, enum_type):
        return value
    normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    for member in enum_type:
        if member.value == normalized:
            return member
    expected = " | ".join(member.value for member in enum_type)
    raise InvalidParameterError(param_name, value, expected)


def get_benchmark(track: Track | str, rank: Rank | str) -> float:
    """Look up the impact-index threshold for a track and rank."""
    return BENCHMARKS[_coerce(Track, track, "track")][_coerce(Rank, rank, "rank")]


def compare_to_benchmark(impact_index: float, track: Track | str, rank: Rank | str) -> BenchmarkComparison:
    """
    Compare an impact index to its track/rank benchmark.

    Raises:
        InvalidParameterError: Unknown track or rank
    """
    track_value = _coerce(Track, track, "track")
    rank_value = _coerce(Rank, rank, "rank")
    return BenchmarkComparison(
        track=track_value,
        rank=rank_value,
        impact_index=impact_index,
        benchmark=BENCHMARKS[track_value][rank_value],
    )
