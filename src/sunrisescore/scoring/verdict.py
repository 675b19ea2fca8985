"""
Verdict and recommendation tiers.

Two independent threshold ladders over the same final score. The tables are part of the
output contract (alert rules and tests assert exact boundaries), so they are published here
as fixed module-level constants rather than tunable settings. Each row is
`(minimum score, tier)`, checked top-down.
"""

from __future__ import annotations

from sunrisescore.domain.models import Recommendation, Verdict

VERDICT_TABLE: tuple[tuple[int, Verdict], ...] = (
    (85, "EXCELLENT"),
    (70, "VERY GOOD"),
    (55, "GOOD"),
    (40, "FAIR"),
    (25, "POOR"),
    (0, "UNFAVORABLE"),
)

RECOMMENDATION_TABLE: tuple[tuple[int, Recommendation], ...] = (
    (70, "GO"),
    (50, "MAYBE"),
    (30, "SKIP"),
    (0, "NO"),
)


def get_verdict(score: int) -> Verdict:
    for minimum, verdict in VERDICT_TABLE:
        if score >= minimum:
            return verdict
    return VERDICT_TABLE[-1][1]


def get_recommendation(score: int) -> Recommendation:
    for minimum, recommendation in RECOMMENDATION_TABLE:
        if score >= minimum:
            return recommendation
    return RECOMMENDATION_TABLE[-1][1]
