"""Financial health score - five weighted heuristics over a finance snapshot"""

import logging
import math
import statistics
from datetime import date
from typing import Any, Callable, Dict, List, Sequence, Tuple

from finsight.domain.aggregation import (
    aggregate_by_category,
    filter_by_date,
    monthly_expense_totals,
    total_expenses,
    total_income,
)
from finsight.domain.exceptions import DomainException, InvalidParameterError, MetricUnavailableError
from finsight.domain.models import Budget, Goal, HealthMetric, HealthScore, Transaction
from finsight.utils.date_utils import add_months

logger = logging.getLogger(__name__)

# Declaration order drives breakdown and recommendation order
HEALTH_WEIGHTS: Dict[str, float] = {
    "savings_rate": 0.25,
    "budget_adherence": 0.20,
    "goal_progress": 0.20,
    "spending_stability": 0.20,
    "debt_ratio": 0.15,
}

HEALTH_RECOMMENDATIONS: Dict[str, str] = {
    "savings_rate": "Increase your savings rate by reducing discretionary spending",
    "budget_adherence": "Review and adjust your budgets to be more realistic",
    "goal_progress": "Consider increasing contributions to your financial goals",
    "spending_stability": "Work on creating more consistent spending patterns",
    "debt_ratio": "Focus on paying down high-interest debt",
}

NEUTRAL_SCORE = 50.0
RECOMMENDATION_THRESHOLD = 60.0
TREND_BAND = 5.0
DEBT_CATEGORY_MARKERS = ("Loan", "Credit")


def validate_income(name: str, value: Any) -> float:
    """
    Check a declared income before any metric uses it.

    Raises:
        InvalidParameterError: If value is not a finite, non-negative number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(f"{name} must be finite and >= 0, got {value!r}")
    return float(value)


def _income_with_fallback(transactions: Sequence[Transaction], baseline_income: float) -> float:
    return total_income(transactions) or baseline_income or 0.0


def savings_rate(transactions: Sequence[Transaction], baseline_income: float = 0.0) -> float:
    """
    Percentage of income left after expenses.

    Income comes from income transactions, falling back to the declared
    baseline when they sum to zero. Returns 0 when there is still no income.
    The raw value may be negative (spending above income).
    """
    income = _income_with_fallback(transactions, baseline_income)
    if income == 0:
        return 0.0
    return (income - total_expenses(transactions)) / income * 100


def budget_adherence(transactions: Sequence[Transaction], budgets: Sequence[Budget]) -> float:
    """Average headroom left across budgets; neutral when there are no budgets"""
    if not budgets:
        return NEUTRAL_SCORE

    spent_by_category = aggregate_by_category(transactions)
    adherence = [
        max(0.0, 100 - spent_by_category.get(budget.category, 0.0) / budget.limit * 100)
        for budget in budgets
    ]
    return sum(adherence) / len(adherence)


def goal_progress(goals: Sequence[Goal]) -> float:
    """
    Average goal completion, each goal capped at 100%.

    A goal with a zero target counts as complete.
    """
    if not goals:
        return NEUTRAL_SCORE

    progress = [
        100.0 if goal.target_amount == 0 else min(100.0, goal.current_amount / goal.target_amount * 100)
        for goal in goals
    ]
    return sum(progress) / len(progress)


def spending_stability(transactions: Sequence[Transaction]) -> float:
    """
    Score month-to-month consistency of expenses: 100 - coefficient of variation.

    Fewer than two months of data, or months with no spending at all, score
    neutral.
    """
    monthly_totals = monthly_expense_totals(transactions)
    if len(monthly_totals) < 2:
        return NEUTRAL_SCORE

    mean = statistics.fmean(monthly_totals)
    if mean == 0:
        return NEUTRAL_SCORE

    stddev = statistics.pstdev(monthly_totals)
    return clamp_score(100 - stddev / mean * 100)


def debt_ratio(transactions: Sequence[Transaction], baseline_income: float = 0.0) -> float:
    """Score 100 minus debt payments as a percentage of income"""
    debt_payments = sum(
        t.amount for t in transactions
        if t.is_expense and any(marker in t.category for marker in DEBT_CATEGORY_MARKERS)
    )
    income = _income_with_fallback(transactions, baseline_income) or 1.0
    return max(0.0, 100 - debt_payments / income * 100)


def clamp_score(value: float) -> float:
    return min(100.0, max(0.0, value))


def health_level(score: float) -> str:
    if score >= 80:
        return "excellent"
    elif score >= 60:
        return "good"
    elif score >= 40:
        return "fair"
    else:
        return "poor"


def health_trend(transactions: Sequence[Transaction], today: date | None = None) -> str:
    """
    Compare savings rate over the last 3 months with the 3 months before.

    The recent window has no upper bound, so future-dated entries count as
    recent. Windows with no data compute a savings rate of 0.
    """
    today = today or date.today()
    three_months_ago = add_months(today, -3)
    six_months_ago = add_months(today, -6)

    recent = filter_by_date(transactions, start=three_months_ago)
    older = [t for t in filter_by_date(transactions, start=six_months_ago) if t.date < three_months_ago]

    recent_rate = savings_rate(recent)
    older_rate = savings_rate(older)

    if recent_rate > older_rate + TREND_BAND:
        return "improving"
    if recent_rate < older_rate - TREND_BAND:
        return "declining"
    return "stable"


def health_recommendations(breakdown: Dict[str, HealthMetric]) -> List[str]:
    """One advisory per available metric scoring under the threshold"""
    return [
        HEALTH_RECOMMENDATIONS[name]
        for name in HEALTH_WEIGHTS
        if name in breakdown
        and breakdown[name].available
        and breakdown[name].score < RECOMMENDATION_THRESHOLD
    ]


def _evaluate_metric(name: str, compute: Callable[[], float]) -> Tuple[float, bool]:
    """Run one sub-metric; a failure degrades it to neutral instead of aborting the score"""
    try:
        value = compute()
        if not math.isfinite(value):
            raise MetricUnavailableError(f"{name} evaluated to {value}")
        return value, True
    except (DomainException, ArithmeticError, ValueError, TypeError) as e:
        logger.warning(
            "Health metric unavailable, using neutral score",
            extra={"metric": name, "error": str(e)},
        )
        return NEUTRAL_SCORE, False


def compute_health_score(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    goals: Sequence[Goal],
    baseline_income: float = 0.0,
    today: date | None = None,
) -> HealthScore:
    """
    Main entry point: weighted 0-100 financial health score.

    Weights:
    - 25%: Savings rate
    - 20%: Budget adherence
    - 20%: Goal progress
    - 20%: Spending stability
    - 15%: Debt ratio

    Each sub-score is clamped to [0, 100] before weighting. Levels:
    excellent >= 80, good >= 60, fair >= 40, else poor.

    Raises:
        InvalidParameterError: If baseline_income is not a finite, non-negative number
    """
    baseline_income = validate_income("baseline_income", baseline_income)

    metrics: Dict[str, Callable[[], float]] = {
        "savings_rate": lambda: savings_rate(transactions, baseline_income),
        "budget_adherence": lambda: budget_adherence(transactions, budgets),
        "goal_progress": lambda: goal_progress(goals),
        "spending_stability": lambda: spending_stability(transactions),
        "debt_ratio": lambda: debt_ratio(transactions, baseline_income),
    }

    breakdown: Dict[str, HealthMetric] = {}
    unavailable: List[str] = []
    total = 0.0

    for name, compute in metrics.items():
        value, available = _evaluate_metric(name, compute)
        if not available:
            unavailable.append(name)

        score = clamp_score(value)
        weight = HEALTH_WEIGHTS[name]
        breakdown[name] = HealthMetric(
            score=score,
            weight=weight,
            contribution=score * weight,
            available=available,
        )
        total += breakdown[name].contribution

    # Round half up; the level below is judged on the unrounded total
    overall = int(math.floor(total + 0.5))

    try:
        trend = health_trend(transactions, today)
    except (DomainException, ArithmeticError, ValueError, TypeError) as e:
        logger.warning("Health trend unavailable", extra={"error": str(e)})
        trend = "stable"

    return HealthScore(
        overall_score=overall,
        health_level=health_level(total),
        breakdown=breakdown,
        recommendations=health_recommendations(breakdown),
        trend=trend,
        unavailable_metrics=unavailable,
    )
