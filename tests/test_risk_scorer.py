"""
Unit tests for composite risk scoring.
"""
import pytest

from mood_engine import (
    LanguageAnalysis,
    MoodScale,
    RiskLevel,
    RiskScorer,
    assess_risk,
    composite_score,
    get_risk_level,
    summarize_series,
)
from mood_engine.risk_scorer import NO_DATA_DESCRIPTION, RISK_WEIGHTS


class TestRiskLevels:
    """Test composite score classification at each boundary."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.LOW),
            (24.99, RiskLevel.LOW),
            (25, RiskLevel.MEDIUM),
            (49.99, RiskLevel.MEDIUM),
            (50, RiskLevel.HIGH),
            (74.99, RiskLevel.HIGH),
            (75, RiskLevel.CRITICAL),
            (90, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_boundaries(self, score, expected):
        assert get_risk_level(score) is expected

    def test_levels_are_monotonic(self):
        order = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL]
        ranks = [order.index(get_risk_level(score)) for score in range(0, 101)]
        assert ranks == sorted(ranks)


class TestCompositeScore:
    """Test the weighted sum of factor scores."""

    def test_weights_sum_to_one(self):
        assert sum(RISK_WEIGHTS.values()) == pytest.approx(1.0)

    def test_missing_dimensions_contribute_nothing(self):
        assert composite_score({"mood": 60}) == pytest.approx(21.0)

    def test_renormalize_divides_by_present_weight(self):
        assert composite_score({"mood": 60}, renormalize=True) == pytest.approx(60.0)
        assert composite_score({}, renormalize=True) == 0.0


class TestDimensionScores:
    """Test each per-dimension sub-score."""

    def test_sleep_score_and_concern(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Neutral"] * 3, sleep_quality=2), 7, now=now)

        factor = RiskScorer().score_sleep(summary)

        assert factor.score == pytest.approx(60.0)
        assert factor.concerns == ["Poor sleep quality"]

    def test_severe_sleep_issues(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Neutral"] * 3, sleep_quality=1), 7, now=now)

        factor = RiskScorer().score_sleep(summary)

        assert factor.score == pytest.approx(80.0)
        assert factor.concerns == ["Poor sleep quality", "Severe sleep issues"]

    def test_maximum_stress(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Neutral"] * 3, stress_level=5), 7, now=now)

        factor = RiskScorer().score_stress(summary)

        assert factor.score == pytest.approx(100.0)
        assert factor.concerns == ["Elevated stress levels", "Severe stress"]

    def test_social_isolation(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Neutral"] * 3, social_interaction_count=0), 7, now=now)

        factor = RiskScorer().score_social(summary)

        assert factor.score == pytest.approx(100.0)
        assert factor.concerns == ["Limited social interaction", "Social isolation"]

    def test_frequent_social_contact_floors_at_zero(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Neutral"] * 3, social_interaction_count=15), 7, now=now)
        assert RiskScorer().score_social(summary).score == 0.0

    def test_mood_requires_risk_scale(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Sad"]), 14, MoodScale.WELLBEING, now)

        with pytest.raises(ValueError):
            RiskScorer().score_mood(summary)

    def test_declining_mood_adds_trend_term(self, daily_entries, now):
        entries = daily_entries(["Very Happy"] * 4 + ["Very Sad"] * 3)
        summary = summarize_series(entries, 14, MoodScale.RISK, now)

        factor = RiskScorer().score_mood(summary)

        # avg 300/7, normalized volatility 100/6, trend +20
        assert factor.score == pytest.approx(0.6 * 300 / 7 + 0.2 * 100 / 6 + 20)
        assert factor.concerns == ["Declining mood trend"]

    def test_high_volatility_concern(self, daily_entries, now):
        entries = daily_entries(["Very Happy", "Very Sad"] * 3)
        summary = summarize_series(entries, 14, MoodScale.RISK, now)

        factor = RiskScorer().score_mood(summary)

        assert factor.score == pytest.approx(50.0)
        assert factor.concerns == ["High mood volatility"]

    def test_consistently_low_mood(self, daily_entries, now):
        summary = summarize_series(daily_entries(["Very Sad"] * 5), 14, MoodScale.RISK, now)

        factor = RiskScorer().score_mood(summary)

        assert factor.score == pytest.approx(60.0)
        assert factor.concerns == ["Consistently low mood"]

    def test_language_none_has_no_data(self):
        factor = RiskScorer().score_language(None)

        assert factor.has_data is False
        assert factor.score == 0.0
        assert factor.description == NO_DATA_DESCRIPTION


class TestRiskAssessment:
    """Test the full assessment over a user's entries."""

    def test_no_entries(self, now):
        assessment = assess_risk([], now=now)

        assert assessment.score == 0.0
        assert assessment.risk_level is RiskLevel.LOW
        assert assessment.has_data is False
        assert all(f.description == NO_DATA_DESCRIPTION for f in assessment.factors)

    def test_only_stale_entries(self, make_entry, now):
        assessment = assess_risk([make_entry(days_ago=20, mood="Very Sad", stress_level=5)], now=now)

        assert assessment.score == 0.0
        assert assessment.factor("mood").has_data is False
        assert assessment.factor("stress").has_data is False

    def test_factor_order(self, daily_entries, now):
        assessment = assess_risk(daily_entries(["Happy"]), now=now)
        assert [f.type for f in assessment.factors] == ["mood", "language", "sleep", "social", "stress"]

    def test_worst_case_without_language(self, daily_entries, now):
        entries = daily_entries(
            ["Very Sad"] * 14,
            sleep_quality=1,
            stress_level=5,
            social_interaction_count=0,
        )

        assessment = assess_risk(entries, now=now)

        # mood 60, sleep 80, social 100, stress 100
        assert assessment.factor("mood").score == pytest.approx(60.0)
        assert assessment.score == pytest.approx(58.0)
        assert assessment.risk_level is RiskLevel.HIGH
        assert assessment.language_available is False
        assert "Consistently low mood" in assessment.concerns
        assert "Social isolation" in assessment.concerns

    def test_language_term_is_weighted(self, daily_entries, now):
        entries = daily_entries(["Very Sad"] * 14, sleep_quality=1, stress_level=5)
        analysis = LanguageAnalysis(score=80, concerns=["Hopeless language"], explanation="Bleak tone")

        without = assess_risk(entries, now=now)
        with_language = assess_risk(entries, analysis, now)

        assert with_language.score == pytest.approx(without.score + 0.25 * 80)
        assert with_language.risk_level is RiskLevel.CRITICAL
        assert with_language.language_available is True
        assert with_language.factor("language").description == "Bleak tone"
        assert "Hopeless language" in with_language.concerns

    def test_more_stress_never_lowers_score(self, daily_entries, now):
        scores = [
            assess_risk(daily_entries(["Neutral"] * 5, stress_level=level), now=now).score
            for level in range(1, 6)
        ]
        assert scores == sorted(scores)

    def test_score_stays_in_range(self, daily_entries, now):
        entries = daily_entries(["Very Happy", "Very Sad"] * 7, sleep_quality=1, stress_level=5)
        analysis = LanguageAnalysis(score=100)

        assessment = assess_risk(entries, analysis, now)

        assert 0.0 <= assessment.score <= 100.0

    def test_mixed_week_with_poor_sleep(self, daily_entries, week_of_moods, now):
        entries = daily_entries(week_of_moods, sleep_quality=2)

        assessment = assess_risk(entries, now=now)
        sleep = assessment.factor("sleep")

        assert summarize_series(entries, scale=MoodScale.RATING, now=now).average_mood == pytest.approx(3.0)
        assert sleep.score == pytest.approx(60.0)
        assert sleep.concerns == ["Poor sleep quality"]

    def test_week_of_maximum_stress(self, daily_entries, now):
        entries = daily_entries(["Neutral"] * 7, stress_level=5)

        stress = assess_risk(entries, now=now).factor("stress")

        assert len(entries) == 7
        assert stress.score == pytest.approx(100.0)
        assert stress.concerns == ["Elevated stress levels", "Severe stress"]

    def test_composite_reproduces_score(self, daily_entries, now):
        entries = daily_entries(["Sad", "Happy", "Very Sad", "Neutral"], sleep_quality=2, stress_level=4)

        assessment = assess_risk(entries, LanguageAnalysis(score=35), now)

        assert composite_score({f.type: f.score for f in assessment.factors}) == pytest.approx(assessment.score)

    def test_defaults_alone_reach_medium(self, daily_entries, now):
        # mood 15, sleep 40, social 100 and stress 60 from the default fields
        assessment = assess_risk(daily_entries(["Happy"]), now=now)

        assert assessment.score == pytest.approx(32.25)
        assert assessment.risk_level is RiskLevel.MEDIUM

    def test_to_dict(self, daily_entries, now):
        entries = daily_entries(["Happy"], sleep_quality=5, social_interaction_count=10, stress_level=1)

        data = assess_risk(entries, now=now).to_dict()

        assert data["score"] == pytest.approx(7.25)
        assert data["risk_level"] == "low"
        assert data["assessed_at"] == now.isoformat()
        assert len(data["factors"]) == 5
        assert data["weights"] == RISK_WEIGHTS
