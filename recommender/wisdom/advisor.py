"""
AI advisor: turns platform metrics into trends, gaps, anomalies, forecasts and a
prioritized, phased set of recommendations.

The benchmarks, templates and weights below are a default policy to be re-tuned
against real outcome data; none of them is a contractual requirement.
"""

import logging
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..utils.stats import linear_fit, trend_slope, z_score

logger = logging.getLogger(__name__)

Domain = Literal[
    "user_experience",
    "content_optimization",
    "business_strategy",
    "system_performance",
    "ai_enhancement",
]
Priority = Literal["low", "medium", "high", "urgent"]
Timeframe = Literal["immediate", "short_term", "medium_term", "long_term"]
Impact = Literal["low", "medium", "high", "transformational"]
Effort = Literal["minimal", "moderate", "significant", "major"]

BENCHMARKS: Dict[str, Dict[str, float]] = {
    "user_experience": {"user_satisfaction": 0.85, "engagement_rate": 0.7, "retention_rate": 0.8},
    "content_optimization": {"content_quality_score": 0.8, "diversity_index": 0.6, "trending_ratio": 0.1},
    "system_performance": {"response_time": 1000, "error_rate": 0.01, "uptime": 0.999},
    "business_strategy": {"growth_rate": 0.1, "retention_rate": 0.8},
    "ai_enhancement": {"ai_quality": 0.85, "ai_usage_rate": 0.5},
}

# Metrics where a value above the benchmark is the shortfall.
LOWER_IS_BETTER = {"response_time", "error_rate"}

PRIORITY_WEIGHTS: Dict[str, float] = {"low": 0.25, "medium": 0.5, "high": 0.75, "urgent": 1.0}

TREND_EPSILON = 0.05
TREND_WINDOW = 5
MIN_TREND_VALUES = 3
MIN_HISTORY = 5
ANOMALY_Z = 2.0
WEEKLY_MIN_VALUES = 14


class AdvisoryRequest(BaseModel):
    domain: Domain
    priority: Priority = "medium"
    timeframe: Timeframe = "short_term"
    current_metrics: Dict[str, float] = Field(default_factory=dict)
    historical_data: Dict[str, List[float]] = Field(default_factory=dict)
    constraints: List[str] = Field(default_factory=list)


class MetricTrend(BaseModel):
    metric: str
    direction: Literal["positive", "negative", "stable"]
    magnitude: float
    confidence: float


class MetricGap(BaseModel):
    metric: str
    value: float
    benchmark: float
    # Relative shortfall; positive means below target.
    gap: float


class Anomaly(BaseModel):
    metric: str
    value: float
    z_score: float
    confidence: float
    severity: float
    description: str


class WeeklyPattern(BaseModel):
    metric: str
    peak_day: int
    trough_day: int
    amplitude: float
    confidence: float


class Scenario(BaseModel):
    name: str
    probability: float
    outcome: float


class Prediction(BaseModel):
    metric: str
    timeframe: str = "next_period"
    predicted_value: float
    confidence_interval: List[float]
    slope: float
    scenarios: List[Scenario] = Field(default_factory=list)


class Recommendation(BaseModel):
    id: str
    title: str
    description: str
    category: str
    priority: float
    impact: Impact
    effort: Effort
    time_to_value: int  # days
    success_probability: float
    kpis: List[str] = Field(default_factory=list)
    adjusted_priority: float = 0.0

    @property
    def timeframe(self) -> str:
        if self.time_to_value <= 14:
            return "immediate"
        if self.time_to_value <= 30:
            return "short_term"
        if self.time_to_value <= 90:
            return "medium_term"
        return "long_term"


class RiskAssessment(BaseModel):
    risk_type: str
    severity: Literal["low", "medium", "high", "critical"]
    probability: float
    impact: str
    mitigation_strategies: List[str] = Field(default_factory=list)


class ActionPhase(BaseModel):
    phase: int
    name: str
    duration: int  # days
    objectives: List[str] = Field(default_factory=list)


class AdvisoryResponse(BaseModel):
    urgency: float
    trends: List[MetricTrend] = Field(default_factory=list)
    gaps: List[MetricGap] = Field(default_factory=list)
    anomalies: List[Anomaly] = Field(default_factory=list)
    patterns: List[WeeklyPattern] = Field(default_factory=list)
    predictions: List[Prediction] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    risks: List[RiskAssessment] = Field(default_factory=list)
    confidence: float = 0.0
    reasoning: List[str] = Field(default_factory=list)
    action_plan: List[ActionPhase] = Field(default_factory=list)


class _Template(BaseModel):
    domain: str
    metric: str
    min_gap: float
    recommendation: Recommendation


TEMPLATES: List[_Template] = [
    _Template(
        domain="user_experience",
        metric="user_satisfaction",
        min_gap=0.2,
        recommendation=Recommendation(
            id="ux_personalization",
            title="Enhance Personalization Engine",
            description="Improve personalization to raise user satisfaction",
            category="personalization",
            priority=0.9,
            impact="high",
            effort="significant",
            time_to_value=45,
            success_probability=0.85,
            kpis=["user_satisfaction", "engagement_rate", "session_duration"],
        ),
    ),
    _Template(
        domain="user_experience",
        metric="engagement_rate",
        min_gap=0.1,
        recommendation=Recommendation(
            id="ux_gamification",
            title="Implement Gamification Elements",
            description="Add achievements and progress tracking to boost engagement",
            category="engagement",
            priority=0.7,
            impact="medium",
            effort="moderate",
            time_to_value=30,
            success_probability=0.75,
            kpis=["daily_active_users", "session_frequency"],
        ),
    ),
    _Template(
        domain="content_optimization",
        metric="content_quality_score",
        min_gap=0.15,
        recommendation=Recommendation(
            id="content_ai_enhancement",
            title="AI-Powered Content Quality Enhancement",
            description="Assist authors with AI prompt and content quality suggestions",
            category="content_quality",
            priority=0.95,
            impact="transformational",
            effort="significant",
            time_to_value=60,
            success_probability=0.8,
            kpis=["content_quality_score", "engagement_rate"],
        ),
    ),
    _Template(
        domain="business_strategy",
        metric="growth_rate",
        min_gap=0.1,
        recommendation=Recommendation(
            id="business_viral_features",
            title="Implement Viral Growth Features",
            description="Improve sharing and invitations to accelerate growth",
            category="growth",
            priority=0.85,
            impact="high",
            effort="moderate",
            time_to_value=45,
            success_probability=0.7,
            kpis=["user_growth_rate", "viral_coefficient"],
        ),
    ),
    _Template(
        domain="system_performance",
        metric="response_time",
        min_gap=0.2,
        recommendation=Recommendation(
            id="perf_caching_optimization",
            title="Advanced Caching Strategy",
            description="Cache recommendation results and precompute hot feeds",
            category="performance",
            priority=0.9,
            impact="high",
            effort="moderate",
            time_to_value=21,
            success_probability=0.9,
            kpis=["response_time", "cache_hit_ratio"],
        ),
    ),
    _Template(
        domain="ai_enhancement",
        metric="ai_quality",
        min_gap=0.1,
        recommendation=Recommendation(
            id="ai_model_optimization",
            title="AI Model Performance Optimization",
            description="Tune prompts and model parameters for higher response quality",
            category="ai",
            priority=0.88,
            impact="high",
            effort="significant",
            time_to_value=60,
            success_probability=0.8,
            kpis=["ai_quality_score", "ai_user_satisfaction"],
        ),
    ),
]


class AIAdvisor:
    """Stateless advisor over metric snapshots and histories."""

    def __init__(self, templates: Optional[List[_Template]] = None, max_recommendations: int = 10):
        self.templates = templates if templates is not None else TEMPLATES
        self.max_recommendations = max_recommendations

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def analyze_trends(self, historical_data: Dict[str, List[float]]) -> List[MetricTrend]:
        trends = []
        for metric, values in historical_data.items():
            if len(values) < MIN_TREND_VALUES:
                continue
            slope = trend_slope(values, TREND_WINDOW)
            if slope > TREND_EPSILON:
                direction = "positive"
            elif slope < -TREND_EPSILON:
                direction = "negative"
            else:
                direction = "stable"
            trends.append(
                MetricTrend(
                    metric=metric,
                    direction=direction,
                    magnitude=abs(slope),
                    confidence=0.8 if len(values) >= 10 else 0.6,
                )
            )
        return trends

    def identify_gaps(self, domain: str, current_metrics: Dict[str, float]) -> List[MetricGap]:
        """Shortfalls against the domain benchmarks; metrics at or above target are omitted."""
        benchmarks = BENCHMARKS.get(domain, {})
        gaps = []
        for metric, value in current_metrics.items():
            benchmark = benchmarks.get(metric)
            if not benchmark:
                continue
            if metric in LOWER_IS_BETTER:
                gap = (value - benchmark) / benchmark
            else:
                gap = (benchmark - value) / benchmark
            if gap > 0:
                gaps.append(MetricGap(metric=metric, value=value, benchmark=benchmark, gap=gap))
        return gaps

    def calculate_urgency(self, priority: str, gaps: List[MetricGap]) -> float:
        weight = PRIORITY_WEIGHTS.get(priority, 0.5)
        severity = max((abs(g.gap) for g in gaps), default=0.0)
        return min(weight + severity, 1.0)

    def detect_anomalies(
        self,
        current_metrics: Dict[str, float],
        historical_data: Dict[str, List[float]],
    ) -> List[Anomaly]:
        anomalies = []
        for metric, value in current_metrics.items():
            history = historical_data.get(metric) or []
            if len(history) < MIN_HISTORY:
                continue
            z = z_score(value, history)
            if z is None or z <= ANOMALY_Z:
                continue
            anomalies.append(
                Anomaly(
                    metric=metric,
                    value=value,
                    z_score=z,
                    confidence=min(z / 3, 1.0),
                    severity=0.9 if z > 3 else 0.6,
                    description=f"{metric} is {z:.2f} standard deviations from normal",
                )
            )
        return anomalies

    def detect_weekly_pattern(self, metric: str, values: List[float]) -> Optional[WeeklyPattern]:
        """Day-of-week averages over daily values; None with fewer than two weeks of data."""
        if len(values) < WEEKLY_MIN_VALUES:
            return None
        averages = []
        for day in range(7):
            day_values = values[day::7]
            averages.append(sum(day_values) / len(day_values))
        high, low = max(averages), min(averages)
        midpoint = (high + low) / 2
        amplitude = (high - low) / midpoint if midpoint else 0.0
        return WeeklyPattern(
            metric=metric,
            peak_day=averages.index(high),
            trough_day=averages.index(low),
            amplitude=amplitude,
            confidence=0.8 if amplitude > 0.1 else 0.4,
        )

    def predict_metric(self, metric: str, values: List[float]) -> Optional[Prediction]:
        """Next value from a least-squares line; None with fewer than five values."""
        if len(values) < MIN_HISTORY:
            return None
        slope, intercept = linear_fit(values)
        next_value = slope * len(values) + intercept
        return Prediction(
            metric=metric,
            predicted_value=next_value,
            confidence_interval=[next_value * 0.9, next_value * 1.1],
            slope=slope,
            scenarios=[
                Scenario(name="optimistic", probability=0.25, outcome=next_value * 1.15),
                Scenario(name="expected", probability=0.5, outcome=next_value),
                Scenario(name="pessimistic", probability=0.25, outcome=next_value * 0.85),
            ],
        )

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def adjusted_priority(self, rec: Recommendation, timeframe: str) -> float:
        score = rec.priority
        if timeframe == "immediate" and rec.time_to_value <= 14:
            score += 0.2
        if timeframe == "long_term" and rec.impact == "transformational":
            score += 0.3
        if rec.effort == "minimal" and rec.impact == "high":
            score += 0.25
        score *= rec.success_probability
        return min(score, 1.0)

    def generate_recommendations(self, request: AdvisoryRequest, gaps: List[MetricGap]) -> List[Recommendation]:
        gap_by_metric = {g.metric: g.gap for g in gaps}
        recommendations = []
        for template in self.templates:
            if template.domain != request.domain:
                continue
            if gap_by_metric.get(template.metric, 0.0) <= template.min_gap:
                continue
            rec = template.recommendation.model_copy()
            rec.adjusted_priority = self.adjusted_priority(rec, request.timeframe)
            recommendations.append(rec)
        recommendations.sort(key=lambda r: r.adjusted_priority, reverse=True)
        return recommendations[: self.max_recommendations]

    def assess_risks(
        self,
        request: AdvisoryRequest,
        gaps: List[MetricGap],
        trends: List[MetricTrend],
    ) -> List[RiskAssessment]:
        risks = []
        performance_gap = max(
            (g.gap for g in gaps if g.metric in BENCHMARKS["system_performance"]), default=0.0
        )
        if performance_gap > 0.2:
            risks.append(
                RiskAssessment(
                    risk_type="technical",
                    severity="high",
                    probability=0.7,
                    impact="System performance degradation could affect user experience",
                    mitigation_strategies=["Scale infrastructure", "Optimize algorithms", "Implement caching"],
                )
            )
        if any(t.metric == "user_satisfaction" and t.direction == "negative" for t in trends):
            risks.append(
                RiskAssessment(
                    risk_type="user_experience",
                    severity="medium",
                    probability=0.6,
                    impact="Declining user satisfaction could lead to churn",
                    mitigation_strategies=["Improve personalization", "Enhance features"],
                )
            )
        if request.domain == "business_strategy":
            risks.append(
                RiskAssessment(
                    risk_type="market",
                    severity="medium",
                    probability=0.4,
                    impact="Competitive pressure could affect market position",
                    mitigation_strategies=["Innovation acceleration", "Strategic partnerships"],
                )
            )
        return risks

    def create_action_plan(self, recommendations: List[Recommendation]) -> List[ActionPhase]:
        """Quick wins, strategic improvements, transformational changes (empty phases omitted)."""
        ordered = sorted(recommendations, key=lambda r: r.adjusted_priority, reverse=True)
        quick, strategic, transformational = [], [], []
        for rec in ordered:
            if rec.timeframe == "immediate" or (rec.timeframe == "short_term" and rec.effort == "minimal"):
                quick.append(rec)
            elif rec.timeframe in ("short_term", "medium_term"):
                strategic.append(rec)
            else:
                transformational.append(rec)
        buckets = [
            ("Quick Wins", 30, quick),
            ("Strategic Improvements", 90, strategic),
            ("Transformational Changes", 180, transformational),
        ]
        phases = []
        for name, duration, recs in buckets:
            if recs:
                phases.append(
                    ActionPhase(phase=len(phases) + 1, name=name, duration=duration, objectives=[r.title for r in recs])
                )
        return phases

    def _confidence(
        self,
        trends: List[MetricTrend],
        anomalies: List[Anomaly],
        recommendations: List[Recommendation],
    ) -> float:
        parts = [
            [t.confidence for t in trends],
            [a.confidence for a in anomalies],
            [r.success_probability for r in recommendations],
        ]
        means = [sum(p) / len(p) for p in parts if p]
        return sum(means) / len(means) if means else 0.0

    def _reasoning(
        self,
        recommendations: List[Recommendation],
        anomalies: List[Anomaly],
        risks: List[RiskAssessment],
        predictions: List[Prediction],
    ) -> List[str]:
        reasoning = []
        high = [r for r in recommendations if r.adjusted_priority > 0.7]
        if high:
            reasoning.append(f"Identified {len(high)} high-priority recommendations")
        if anomalies:
            reasoning.append(f"Detected {len(anomalies)} metric anomalies requiring attention")
        high_risks = [r for r in risks if r.severity in ("high", "critical")]
        if high_risks:
            reasoning.append(f"{len(high_risks)} high-severity risks identified")
        if predictions:
            reasoning.append(f"Forecasts available for {len(predictions)} metrics")
        return reasoning

    def get_advice(self, request: AdvisoryRequest) -> AdvisoryResponse:
        trends = self.analyze_trends(request.historical_data)
        gaps = self.identify_gaps(request.domain, request.current_metrics)
        anomalies = self.detect_anomalies(request.current_metrics, request.historical_data)
        patterns = []
        predictions = []
        for metric, values in request.historical_data.items():
            pattern = self.detect_weekly_pattern(metric, values)
            if pattern is not None and pattern.confidence > 0.7:
                patterns.append(pattern)
            prediction = self.predict_metric(metric, values)
            if prediction is not None:
                predictions.append(prediction)
        recommendations = self.generate_recommendations(request, gaps)
        risks = self.assess_risks(request, gaps, trends)
        logger.debug(
            "advice for %s: %d gaps, %d anomalies, %d recommendations",
            request.domain,
            len(gaps),
            len(anomalies),
            len(recommendations),
        )
        return AdvisoryResponse(
            urgency=self.calculate_urgency(request.priority, gaps),
            trends=trends,
            gaps=gaps,
            anomalies=anomalies,
            patterns=patterns,
            predictions=predictions,
            recommendations=recommendations,
            risks=risks,
            confidence=self._confidence(trends, anomalies, recommendations),
            reasoning=self._reasoning(recommendations, anomalies, risks, predictions),
            action_plan=self.create_action_plan(recommendations),
        )
