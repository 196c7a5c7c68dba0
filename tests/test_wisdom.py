"""
Advisor and Strategic Orchestrator Tests

Test Scenarios:
---------------
1. Gaps against benchmarks (lower-is-better metrics inverted), urgency
2. Trends, anomalies (z-score), weekly patterns, next-value predictions
3. get_advice: template recommendations ranked by adjusted priority, phased plan
4. Strategy per user; strategy-tuned options; presentation hints
5. System insights (None when nothing to measure), ranked decisions, decision history
6. Content trend predictions

Run:
----
    pytest tests/test_wisdom.py -v
"""

from datetime import datetime, timezone

import pytest

from recommender.models.request import RecommendationContext
from recommender.wisdom import AdvisoryRequest, AIAdvisor, StrategicOrchestrator, SystemInsights, SystemState

from .factories import NOW, make_interaction, make_item, make_popular_user, make_user


@pytest.fixture
def advisor():
    return AIAdvisor()


@pytest.fixture
def orchestrator():
    return StrategicOrchestrator()


class TestAnalysis:
    def test_gaps(self, advisor):
        gaps = advisor.identify_gaps(
            "user_experience",
            {"user_satisfaction": 0.6, "engagement_rate": 0.9, "unknown_metric": 0.1},
        )
        assert [g.metric for g in gaps] == ["user_satisfaction"]
        assert gaps[0].gap == pytest.approx(0.25 / 0.85)

    def test_lower_is_better(self, advisor):
        [gap] = advisor.identify_gaps("system_performance", {"response_time": 1500, "uptime": 0.9995})
        assert gap.metric == "response_time"
        assert gap.gap == pytest.approx(0.5)

    def test_urgency(self, advisor):
        gaps = advisor.identify_gaps("user_experience", {"user_satisfaction": 0.6})
        assert advisor.calculate_urgency("low", gaps) == pytest.approx(0.25 + 0.25 / 0.85)
        assert advisor.calculate_urgency("urgent", gaps) == 1.0
        assert advisor.calculate_urgency("medium", []) == 0.5

    def test_trends(self, advisor):
        trends = advisor.analyze_trends({"up": [1, 2, 3, 4, 5], "flat": [5, 5, 5], "short": [1, 2]})
        by_metric = {t.metric: t for t in trends}
        assert set(by_metric) == {"up", "flat"}
        assert by_metric["up"].direction == "positive"
        assert by_metric["up"].magnitude == pytest.approx(1.0)
        assert by_metric["up"].confidence == 0.6
        assert by_metric["flat"].direction == "stable"

    def test_anomalies(self, advisor):
        history = {"latency": [10, 11, 9, 10, 10], "short": [1, 2]}
        [anomaly] = advisor.detect_anomalies({"latency": 13, "short": 100}, history)
        assert anomaly.z_score == pytest.approx(3 / 0.4 ** 0.5)
        assert anomaly.severity == 0.9
        assert anomaly.confidence == 1.0
        assert advisor.detect_anomalies({"latency": 10.5}, history) == []

    def test_flat_history_is_not_anomalous(self, advisor):
        assert advisor.detect_anomalies({"m": 50}, {"m": [5, 5, 5, 5, 5]}) == []

    def test_weekly_pattern(self, advisor):
        week = [10, 1, 1, 1, 1, 1, 1]
        pattern = advisor.detect_weekly_pattern("visits", week * 2)
        assert pattern.peak_day == 0
        assert pattern.trough_day == 1
        assert pattern.amplitude == pytest.approx(9 / 5.5)
        assert advisor.detect_weekly_pattern("visits", week) is None

    def test_prediction(self, advisor):
        prediction = advisor.predict_metric("users", [1, 2, 3, 4, 5])
        assert prediction.predicted_value == pytest.approx(6.0)
        assert prediction.slope == pytest.approx(1.0)
        assert prediction.confidence_interval == pytest.approx([5.4, 6.6])
        assert [s.name for s in prediction.scenarios] == ["optimistic", "expected", "pessimistic"]
        assert advisor.predict_metric("users", [1, 2, 3]) is None


class TestAdvice:
    def test_user_experience_advice(self, advisor):
        request = AdvisoryRequest(
            domain="user_experience",
            current_metrics={"user_satisfaction": 0.6, "engagement_rate": 0.5},
        )
        advice = advisor.get_advice(request)
        assert [r.id for r in advice.recommendations] == ["ux_personalization", "ux_gamification"]
        assert advice.recommendations[0].adjusted_priority == pytest.approx(0.765)
        assert advice.recommendations[1].adjusted_priority == pytest.approx(0.525)
        assert [p.name for p in advice.action_plan] == ["Strategic Improvements"]
        assert advice.action_plan[0].phase == 1
        assert advice.confidence == pytest.approx(0.8)
        assert advice.reasoning == ["Identified 1 high-priority recommendations"]

    def test_no_gaps_no_recommendations(self, advisor):
        advice = advisor.get_advice(AdvisoryRequest(domain="user_experience", current_metrics={"user_satisfaction": 0.9}))
        assert advice.recommendations == []
        assert advice.action_plan == []
        assert advice.confidence == 0.0

    def test_performance_risk(self, advisor):
        request = AdvisoryRequest(domain="system_performance", current_metrics={"response_time": 1500})
        advice = advisor.get_advice(request)
        assert [r.risk_type for r in advice.risks] == ["technical"]
        assert advice.recommendations[0].id == "perf_caching_optimization"
        assert advice.action_plan[0].name == "Strategic Improvements"

    def test_immediate_bonus_needs_two_week_payoff(self, advisor):
        rec = advisor.templates[4].recommendation
        assert rec.time_to_value == 21
        assert advisor.adjusted_priority(rec, "immediate") == pytest.approx(0.9 * 0.9)


class TestUserStrategy:
    def test_strategies(self, orchestrator):
        context = RecommendationContext()
        regular = make_user("regular", stats={"posts": 10})
        recent = datetime.now(timezone.utc).isoformat()
        assert orchestrator.determine_user_strategy(make_user(), context) == "onboarding"
        assert orchestrator.determine_user_strategy(make_popular_user(last_active_at=recent), context) == "premium"
        interactions = [make_interaction(str(i)) for i in range(51)]
        assert orchestrator.determine_user_strategy(regular, context, interactions) == "power_user"
        engaged = RecommendationContext(session_duration=2000)
        assert orchestrator.determine_user_strategy(regular, engaged) == "engaged"
        assert orchestrator.determine_user_strategy(regular, context) == "standard"

    def test_options(self, orchestrator):
        onboarding = orchestrator.optimal_recommendation_options("onboarding")
        assert onboarding.diversity_weight == 0.8
        assert onboarding.novelty_weight == 0.1
        assert orchestrator.optimal_recommendation_options("premium").max_items == 30
        assert orchestrator.optimal_recommendation_options("standard").max_items == 20

    def test_orchestrate(self, orchestrator):
        experience = orchestrator.orchestrate_user_experience(
            make_user(),
            RecommendationContext(device="mobile"),
            [make_item("a"), make_item("b", author_id="author_2")],
            [make_interaction()],
            now=NOW,
        )
        assert experience.strategy == "onboarding"
        assert {s.item.id for s in experience.recommendations.items} <= {"a", "b"}
        assert experience.user_interface["accessibility"] == "mobile_optimized"
        assert experience.ai_strategy["response_time"] == "fast"
        assert experience.content_strategy["depth"] == "summary"


class TestSystemDecisions:
    def test_insights(self, orchestrator):
        items = [make_item("a"), make_item("b", metadata={"is_trending": True})]
        insights = orchestrator.analyze_system_insights([make_user(stats={"engagement_rate": 4.0})], items, [make_interaction()])
        assert insights.content_quality == pytest.approx(0.8)
        assert insights.diversity_index == pytest.approx(0.5)
        assert insights.trending_ratio == pytest.approx(0.5)
        assert insights.personalization == pytest.approx(0.5)
        assert insights.average_engagement == pytest.approx(4.0)

    def test_empty_insights(self, orchestrator):
        insights = orchestrator.analyze_system_insights([], [], [])
        assert insights == SystemInsights()
        assert insights.content_quality is None

    def test_default_state_only_triggers_growth(self, orchestrator):
        decisions = orchestrator.make_strategic_decisions(SystemInsights(), SystemState())
        assert [d.id for d in decisions] == ["growth_strategy"]

    def test_ranked_decisions(self, orchestrator):
        insights = SystemInsights(content_quality=0.5, personalization=0.6)
        state = SystemState.model_validate(
            {"performance": {"response_time": 2500, "error_rate": 0.1}, "users": {"growth_rate": 0.1}}
        )
        decisions = orchestrator.make_strategic_decisions(insights, state)
        assert [d.id for d in decisions] == ["performance_optimization", "personalization", "content_quality"]
        assert [d.priority_score for d in decisions] == pytest.approx([222.5, 140.0, 117.5])
        assert len(orchestrator.decision_history) == 3

    def test_max_decisions(self):
        orchestrator = StrategicOrchestrator(max_decisions=1)
        insights = SystemInsights(content_quality=0.5, personalization=0.6)
        assert len(orchestrator.make_strategic_decisions(insights, SystemState())) == 1

    def test_decision_history_is_bounded(self):
        orchestrator = StrategicOrchestrator(history_limit=2)
        for _ in range(3):
            orchestrator.make_strategic_decisions(SystemInsights(), SystemState())
        assert len(orchestrator.decision_history) == 2
        assert [d.id for d in orchestrator.decision_history] == ["growth_strategy", "growth_strategy"]

    def test_predict_content_trends(self, orchestrator):
        items = [
            make_item("a"),
            make_item("b", engagement={"trending_score": 50.0}, metadata={"tags": [{"name": "ai"}, {"name": "python"}]}),
        ]
        predictions = orchestrator.predict_content_trends(items, limit=2)
        assert [p.topic for p in predictions] == ["python", "ai"]
        assert predictions[0].confidence == pytest.approx(0.07)
        assert predictions[0].timeline == "week"
