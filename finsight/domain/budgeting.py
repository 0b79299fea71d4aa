"""Budget recommendations and budget/goal progress tracking"""

import math
from datetime import date
from typing import List, Optional, Sequence

from finsight.domain.aggregation import aggregate_by_category, monthly_category_average
from finsight.domain.models import (
    Budget,
    BudgetRecommendation,
    BudgetRecommendationReport,
    BudgetStatus,
    Goal,
    GoalStatus,
    Transaction,
)
from finsight.utils.date_utils import days_until
from finsight.utils.formatting import format_currency

BUDGET_BUFFER = 1.1
INCREASE_THRESHOLD = 0.8
HIGH_PRIORITY_AVERAGE = 500.0
MEDIUM_PRIORITY_AVERAGE = 200.0
WARNING_PERCENTAGE = 80.0


def _find_budget(budgets: Sequence[Budget], category: str) -> Optional[Budget]:
    return next((b for b in budgets if b.category == category), None)


def recommended_budget(monthly_average: float) -> int:
    """
    Monthly average plus a 10% buffer, rounded up to a whole unit.

    The buffered value is rounded to cents first so 600 * 1.1 gives 660,
    not 661 from float noise.
    """
    return math.ceil(round(monthly_average * BUDGET_BUFFER, 2))


def _creation_priority(monthly_average: float) -> str:
    if monthly_average > HIGH_PRIORITY_AVERAGE:
        return "high"
    elif monthly_average > MEDIUM_PRIORITY_AVERAGE:
        return "medium"
    else:
        return "low"


def recommend_budgets(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
) -> BudgetRecommendationReport:
    """
    Suggest budgets from average monthly spending per category.

    Flow:
    1. Average each category's expenses over the months present
    2. No budget for the category -> "create", priority by average size
    3. Budget below 80% of the recommendation -> "increase", priority medium
    4. Otherwise the existing budget is adequate and nothing is emitted

    The reported total covers every category with spending, flagged or not.
    """
    averages = monthly_category_average(transactions)

    recommendations: List[BudgetRecommendation] = []
    for category, average in averages.items():
        if average <= 0:
            continue

        recommended = recommended_budget(average)
        existing = _find_budget(budgets, category)

        if existing is None:
            recommendations.append(
                BudgetRecommendation(
                    type="create",
                    category=category,
                    recommended_amount=recommended,
                    reason=f"Based on your average monthly spending of {format_currency(average)}",
                    priority=_creation_priority(average),
                )
            )
        elif existing.limit < recommended * INCREASE_THRESHOLD:
            recommendations.append(
                BudgetRecommendation(
                    type="increase",
                    category=category,
                    recommended_amount=recommended,
                    reason="Your current budget may be too restrictive based on spending patterns",
                    priority="medium",
                    current_amount=existing.limit,
                )
            )

    total = round(sum(average * BUDGET_BUFFER for average in averages.values()), 2)
    return BudgetRecommendationReport(recommendations=recommendations, total_recommended_budget=total)


def budget_status(budget: Budget, transactions: Sequence[Transaction]) -> BudgetStatus:
    """Spending against one budget; `remaining` goes negative once overspent"""
    spent = aggregate_by_category(transactions).get(budget.category, 0.0)
    percentage = spent / budget.limit * 100

    if percentage >= 100:
        status = "exceeded"
    elif percentage >= WARNING_PERCENTAGE:
        status = "warning"
    else:
        status = "good"

    return BudgetStatus(
        category=budget.category,
        limit=budget.limit,
        spent=spent,
        remaining=budget.limit - spent,
        percentage=percentage,
        status=status,
    )


def goal_status(goal: Goal, today: date | None = None) -> GoalStatus:
    today = today or date.today()
    if goal.target_amount == 0:
        percentage = 100.0
    else:
        percentage = min(100.0, goal.current_amount / goal.target_amount * 100)

    return GoalStatus(
        goal_id=goal.id,
        title=goal.title,
        percentage=percentage,
        remaining=max(goal.target_amount - goal.current_amount, 0.0),
        is_completed=goal.current_amount >= goal.target_amount,
        days_left=days_until(goal.deadline, today),
    )
