"""Insight feed combining spending patterns, budgets, goals, anomalies and health"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Sequence

from finsight.domain.aggregation import aggregate_by_category
from finsight.domain.anomalies import detect_anomalies
from finsight.domain.budgeting import goal_status, recommend_budgets
from finsight.domain.exceptions import DomainException
from finsight.domain.health import compute_health_score, validate_income
from finsight.domain.models import (
    Budget,
    Goal,
    Insight,
    InsightReport,
    SpendingAnalysis,
    Transaction,
)

logger = logging.getLogger(__name__)

TOP_CATEGORY_COUNT = 3
CONCENTRATION_THRESHOLD = 40.0
MAX_INSIGHTS = 10
MAX_BUDGET_INSIGHTS = 3
GOAL_ALERT_PROGRESS = 50.0
GOAL_ALERT_DAYS = 90


def concentration_risk_score(category_totals: Dict[str, float]) -> int:
    """
    Risk from spending piled into one category.

    +30 when the largest category exceeds 50% of spending, +20 more above 70%.
    """
    total = sum(category_totals.values())
    if total <= 0:
        return 0

    top_share = max(category_totals.values()) / total * 100
    risk = 0
    if top_share > 50:
        risk += 30
    if top_share > 70:
        risk += 20
    return min(100, risk)


def analyze_spending_patterns(transactions: Sequence[Transaction]) -> SpendingAnalysis:
    """Describe the top expense categories and flag any that dominate spending"""
    category_totals = aggregate_by_category(transactions)
    total = sum(category_totals.values())

    patterns: List[str] = []
    recommendations: List[str] = []
    if total > 0:
        top = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)[:TOP_CATEGORY_COUNT]
        for category, amount in top:
            share = amount / total * 100
            patterns.append(f"{category} accounts for {share:.1f}% of your spending")
            if share > CONCENTRATION_THRESHOLD:
                recommendations.append(
                    f"Consider setting a stricter budget for {category} as it's your largest expense"
                )

    return SpendingAnalysis(
        patterns=patterns,
        recommendations=recommendations,
        risk_score=concentration_risk_score(category_totals),
    )


def _spending_pattern_insights(transactions, budgets, goals, declared_income, now) -> List[Insight]:
    return [
        Insight(
            type="spending_pattern",
            title="Spending Pattern Alert",
            message=recommendation,
            priority="medium",
        )
        for recommendation in analyze_spending_patterns(transactions).recommendations
    ]


def _budget_insights(transactions, budgets, goals, declared_income, now) -> List[Insight]:
    report = recommend_budgets(transactions, budgets)
    return [
        Insight(
            type="budget_recommendation",
            title=f"Budget Suggestion: {rec.category}",
            message=rec.reason,
            priority=rec.priority,
            action={"type": rec.type, "category": rec.category, "amount": rec.recommended_amount},
        )
        for rec in report.recommendations[:MAX_BUDGET_INSIGHTS]
    ]


def _goal_insights(transactions, budgets, goals, declared_income, now) -> List[Insight]:
    insights = []
    for goal in goals:
        status = goal_status(goal, now.date())
        if status.percentage < GOAL_ALERT_PROGRESS and status.days_left < GOAL_ALERT_DAYS:
            insights.append(
                Insight(
                    type="goal_alert",
                    title=f"Goal Behind Schedule: {goal.title}",
                    message=(
                        f"You're {100 - status.percentage:.1f}% away from your goal "
                        f"with {status.days_left} days left"
                    ),
                    priority="high",
                )
            )
    return insights


def _anomaly_insights(transactions, budgets, goals, declared_income, now) -> List[Insight]:
    report = detect_anomalies(transactions, now.date())
    return [
        Insight(
            type="anomaly",
            title=f"Unusual Spending: {anomaly.category}",
            message=anomaly.message,
            priority="high",
            action={"type": "review", "category": anomaly.category},
        )
        for anomaly in report.anomalies
        if anomaly.severity == "high"
    ]


def _health_insights(transactions, budgets, goals, declared_income, now) -> List[Insight]:
    score = compute_health_score(transactions, budgets, goals, declared_income, now.date())
    return [
        Insight(
            type="financial_health",
            title=f"Financial Health: {score.health_level.capitalize()}",
            message=recommendation,
            priority="medium",
        )
        for recommendation in score.recommendations
    ]


INSIGHT_SECTIONS: Dict[str, Callable[..., List[Insight]]] = {
    "spending_patterns": _spending_pattern_insights,
    "budget_recommendations": _budget_insights,
    "goal_alerts": _goal_insights,
    "anomalies": _anomaly_insights,
    "financial_health": _health_insights,
}


def generate_insights(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    goals: Sequence[Goal],
    declared_income: float = 0.0,
    now: datetime | None = None,
) -> InsightReport:
    """
    Main entry point: build the capped insight feed.

    Sections contribute in a fixed order: spending patterns, up to 3 budget
    recommendations, goal alerts, high-severity anomalies, health advice.
    The feed is cut to 10 items; `total_insights` counts before the cut.
    A failing section is skipped and named in `unavailable_sections`.

    Raises:
        InvalidParameterError: If declared_income is not a finite, non-negative number
    """
    declared_income = validate_income("declared_income", declared_income)
    now = now or datetime.now(timezone.utc)

    insights: List[Insight] = []
    unavailable: List[str] = []
    for name, section in INSIGHT_SECTIONS.items():
        try:
            insights.extend(section(transactions, budgets, goals, declared_income, now))
        except (DomainException, ArithmeticError, ValueError, TypeError) as e:
            logger.warning("Insight section failed", extra={"section": name, "error": str(e)})
            unavailable.append(name)

    return InsightReport(
        insights=insights[:MAX_INSIGHTS],
        generated_at=now,
        total_insights=len(insights),
        unavailable_sections=unavailable,
    )
