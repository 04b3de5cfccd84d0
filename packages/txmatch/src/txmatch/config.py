"""Constants of the txmatch scoring function.

The weights, tolerances and thresholds were tuned together against the
Jaro-Winkler similarity in ``txmatch.scoring``; they are frozen and are not
meant to be overridden per call.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringWeights:
    exact_amount: float = 0.4
    similar_amount: float = 0.3
    date_proximity: float = 0.3
    description_similarity: float = 0.2


@dataclass(frozen=True)
class Tolerances:
    amount_ratio: float = 0.01  # 1% of the existing amount
    date_days: int = 3
    description_full: float = 0.8
    description_partial: float = 0.5


@dataclass(frozen=True)
class Thresholds:
    min_match: float = 0.6
    likely_duplicate: float = 0.8


@dataclass(frozen=True)
class MatchConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    tolerances: Tolerances = field(default_factory=Tolerances)
    thresholds: Thresholds = field(default_factory=Thresholds)
    max_score: float = 1.0
    winkler_prefix_max: int = 4
    winkler_prefix_scale: float = 0.1


CONFIG = MatchConfig()
