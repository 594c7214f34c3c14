"""
Risk Scoring Module.

Combines per-dimension sub-scores (mood, language, sleep, social, stress)
into a composite 0-100 risk score and a discrete risk level.

Dimensions with no data contribute zero and are described as
"No data available"; nothing in this module raises for short or empty
histories.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from .language_analysis import LanguageAnalysis
from .mood_series import (
    MoodEntry,
    MoodScale,
    MoodSeriesAggregator,
    SeriesSummary,
    as_utc,
    detect_downward_trend,
    mood_series_aggregator,
)

logger = logging.getLogger(__name__)

NO_DATA_DESCRIPTION = "No data available"

MOOD_WINDOW_DAYS = 14
SLEEP_WINDOW_DAYS = 7
SOCIAL_WINDOW_DAYS = 7
STRESS_WINDOW_DAYS = 7

# Weights only sum to 1.0 when all five terms are present
RISK_WEIGHTS = {
    "mood": 0.35,
    "language": 0.25,
    "sleep": 0.15,
    "social": 0.15,
    "stress": 0.10,
}


class RiskLevel(str, Enum):
    """Discrete bucket of the composite risk score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Checked from the highest threshold down; score >= threshold selects the level
RISK_LEVEL_THRESHOLDS = [
    (90.0, RiskLevel.CRITICAL),
    (75.0, RiskLevel.CRITICAL),
    (50.0, RiskLevel.HIGH),
    (25.0, RiskLevel.MEDIUM),
]


def get_risk_level(score: float) -> RiskLevel:
    """Classify a composite score."""
    for threshold, level in RISK_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def composite_score(
    factor_scores: Mapping[str, float],
    weights: Mapping[str, float] = RISK_WEIGHTS,
    renormalize: bool = False,
) -> float:
    """
    Weighted sum of per-dimension scores.

    Missing dimensions contribute nothing. With renormalize=True the
    result is divided by the total weight of the dimensions present.
    """
    present = [key for key in weights if key in factor_scores]
    total = sum(weights[key] * factor_scores[key] for key in present)
    if renormalize:
        weight_sum = sum(weights[key] for key in present)
        return total / weight_sum if weight_sum else 0.0
    return total


@dataclass
class RiskFactor:
    """Contribution of one dimension to the overall risk."""

    type: str  # mood, language, sleep, social, stress
    name: str
    score: float = 0.0
    description: str = NO_DATA_DESCRIPTION
    concerns: List[str] = field(default_factory=list)
    has_data: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "name": self.name,
            "score": self.score,
            "description": self.description,
            "concerns": list(self.concerns),
            "has_data": self.has_data,
        }


@dataclass
class RiskAssessment:
    """Composite risk derived from the current mood series."""

    score: float
    risk_level: RiskLevel
    factors: List[RiskFactor]
    weights: Dict[str, float] = field(default_factory=lambda: dict(RISK_WEIGHTS))
    language_available: bool = False
    assessed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_data(self) -> bool:
        return any(f.has_data for f in self.factors)

    def factor(self, factor_type: str) -> Optional[RiskFactor]:
        for f in self.factors:
            if f.type == factor_type:
                return f
        return None

    @property
    def concerns(self) -> List[str]:
        return [c for f in self.factors for c in f.concerns]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "risk_level": self.risk_level.value,
            "factors": [f.to_dict() for f in self.factors],
            "weights": dict(self.weights),
            "language_available": self.language_available,
            "has_data": self.has_data,
            "assessed_at": self.assessed_at.isoformat(),
        }


class RiskScorer:
    """
    Scores mental-health risk from a user's mood entries.

    Lookback windows: mood uses the last 14 days, sleep/social/stress
    the last 7 days. The language term comes from an external analysis
    and is optional.
    """

    def __init__(
        self,
        aggregator: Optional[MoodSeriesAggregator] = None,
        weights: Optional[Mapping[str, float]] = None,
    ):
        self.aggregator = aggregator or mood_series_aggregator
        self.weights = dict(weights or RISK_WEIGHTS)

    # ------------------------------------------------------------------
    # Per-dimension scoring
    # ------------------------------------------------------------------

    def score_mood(self, summary: SeriesSummary) -> RiskFactor:
        """Mood risk from a RISK-scale summary."""
        factor = RiskFactor(type="mood", name="Mood Pattern")
        if not summary.has_data:
            return factor

        if summary.scale is not MoodScale.RISK:
            raise ValueError(f"Mood risk needs a risk-scale summary, got {summary.scale.value}")

        # Per-entry risk on 0-100 (25 points per mood step)
        risk_values = [v * 25.0 for v in summary.mood_values]
        average = sum(risk_values) / len(risk_values)
        volatility = summary.normalized_volatility
        declining = detect_downward_trend(risk_values)

        factor.score = clamp(0.6 * average + 0.2 * volatility + (20.0 if declining else 0.0))
        factor.has_data = True
        factor.description = (
            f"Average mood risk {average:.0f}/100 with volatility {volatility:.0f} "
            f"over {summary.entry_count} entries"
        )

        if average > 75:
            factor.concerns.append("Consistently low mood")
        if volatility > 50:
            factor.concerns.append("High mood volatility")
        if declining:
            factor.concerns.append("Declining mood trend")
        return factor

    def score_sleep(self, summary: SeriesSummary) -> RiskFactor:
        factor = RiskFactor(type="sleep", name="Sleep Quality")
        if not summary.has_data:
            return factor

        avg_sleep = summary.average_sleep_quality
        factor.score = max(0.0, 100.0 - avg_sleep * 20)
        factor.has_data = True
        factor.description = f"Average sleep quality {avg_sleep:.1f}/5"

        if avg_sleep < 3:
            factor.concerns.append("Poor sleep quality")
        if avg_sleep < 2:
            factor.concerns.append("Severe sleep issues")
        return factor

    def score_social(self, summary: SeriesSummary) -> RiskFactor:
        factor = RiskFactor(type="social", name="Social Connection")
        if not summary.has_data:
            return factor

        avg_social = summary.average_social_interaction_count
        factor.score = max(0.0, 100.0 - avg_social * 10)
        factor.has_data = True
        factor.description = f"Average {avg_social:.1f} social interactions per entry"

        if avg_social < 2:
            factor.concerns.append("Limited social interaction")
        if avg_social < 1:
            factor.concerns.append("Social isolation")
        return factor

    def score_stress(self, summary: SeriesSummary) -> RiskFactor:
        factor = RiskFactor(type="stress", name="Stress Level")
        if not summary.has_data:
            return factor

        avg_stress = summary.average_stress_level
        factor.score = avg_stress * 20
        factor.has_data = True
        factor.description = f"Average stress level {avg_stress:.1f}/5"

        if avg_stress > 3:
            factor.concerns.append("Elevated stress levels")
        if avg_stress > 4:
            factor.concerns.append("Severe stress")
        return factor

    def score_language(self, analysis: Optional[LanguageAnalysis]) -> RiskFactor:
        factor = RiskFactor(type="language", name="Journal Language")
        if analysis is None:
            return factor

        factor.score = clamp(analysis.score)
        factor.has_data = True
        factor.description = analysis.explanation or f"Language risk {factor.score:.0f}/100"
        factor.concerns.extend(analysis.concerns)
        return factor

    # ------------------------------------------------------------------
    # Composite
    # ------------------------------------------------------------------

    def assess(
        self,
        entries: Iterable[MoodEntry],
        language: Optional[LanguageAnalysis] = None,
        now: Optional[datetime] = None,
    ) -> RiskAssessment:
        """
        Compute the composite risk assessment.

        Args:
            entries: The user's mood entries (not mutated)
            language: Result from the language collaborator, if any
            now: Reference time for the lookback windows

        Returns:
            RiskAssessment with one factor per dimension
        """
        entries = list(entries)
        now = as_utc(now) if now else datetime.now(timezone.utc)

        mood = self.aggregator.summarize(entries, MOOD_WINDOW_DAYS, MoodScale.RISK, now)
        sleep = self.aggregator.summarize(entries, SLEEP_WINDOW_DAYS, now=now)
        social = self.aggregator.summarize(entries, SOCIAL_WINDOW_DAYS, now=now)
        stress = self.aggregator.summarize(entries, STRESS_WINDOW_DAYS, now=now)

        factors = [
            self.score_mood(mood),
            self.score_language(language),
            self.score_sleep(sleep),
            self.score_social(social),
            self.score_stress(stress),
        ]

        score = composite_score({f.type: f.score for f in factors}, self.weights)
        assessment = RiskAssessment(
            score=score,
            risk_level=get_risk_level(score),
            factors=factors,
            weights=dict(self.weights),
            language_available=language is not None,
            assessed_at=now,
        )

        logger.info(
            f"[RISK] score={score:.1f} level={assessment.risk_level.value} "
            f"language={'yes' if language else 'no'} concerns={len(assessment.concerns)}"
        )
        return assessment


# Global shared instance
risk_scorer = RiskScorer()


def assess_risk(
    entries: Iterable[MoodEntry],
    language: Optional[LanguageAnalysis] = None,
    now: Optional[datetime] = None,
) -> RiskAssessment:
    """Convenience function to assess risk with the shared scorer."""
    return risk_scorer.assess(entries, language, now)
