"""Expense forecasting from recent trend plus a fixed seasonal table"""

from datetime import date
from typing import Dict, List, Sequence

from finsight.domain.aggregation import monthly_expense_totals
from finsight.domain.exceptions import InvalidParameterError
from finsight.domain.models import ExpenseForecast, Prediction, Transaction
from finsight.utils.date_utils import add_months, month_label

# Calendar month -> spending factor (holidays, summer, back to school)
SEASONAL_FACTORS: Dict[int, float] = {
    1: 1.1,
    2: 0.9,
    3: 1.0,
    4: 1.0,
    5: 1.1,
    6: 1.0,
    7: 1.1,
    8: 1.1,
    9: 1.0,
    10: 1.0,
    11: 1.2,
    12: 1.3,
}

SEASONAL_BASE_ADJUSTMENT = 100.0
TREND_WINDOW_MONTHS = 3
PREDICTION_FACTORS = ("historical_trend", "seasonal_patterns", "spending_behavior")


def expense_trend(transactions: Sequence[Transaction]) -> float:
    """Mean monthly expense over the latest (up to) 3 months present in the data"""
    recent = monthly_expense_totals(transactions)[-TREND_WINDOW_MONTHS:]
    if not recent:
        return 0.0
    return sum(recent) / len(recent)


def seasonal_adjustment(month: int) -> float:
    """
    Flat amount added on top of the trend for a calendar month.

    The factor is scaled by a fixed base and added, not multiplied into the
    trend: a December forecast is trend + 130 whatever the trend is.
    """
    return SEASONAL_FACTORS.get(month, 1.0) * SEASONAL_BASE_ADJUSTMENT


def prediction_confidence(horizon_index: int) -> float:
    """0.8 one month out, losing 0.1 per month, never below 0.4"""
    return max(0.4, 0.9 - 0.1 * horizon_index)


def predict_expenses(
    transactions: Sequence[Transaction],
    months: int = 3,
    today: date | None = None,
) -> ExpenseForecast:
    """
    Predict total expenses for each of the next `months` calendar months.

    Args:
        transactions: Full transaction history
        months: Forecast horizon; 0 yields an empty forecast
        today: Reference date for month labels (default: date.today())

    Raises:
        InvalidParameterError: If months is negative or not an integer
    """
    if isinstance(months, bool) or not isinstance(months, int) or months < 0:
        raise InvalidParameterError(f"Forecast horizon must be a non-negative integer, got {months!r}")

    today = today or date.today()
    trend = expense_trend(transactions)

    predictions: List[Prediction] = []
    for i in range(1, months + 1):
        target = add_months(today, i)
        predictions.append(
            Prediction(
                month=month_label(target),
                predicted_expenses=max(0.0, trend + seasonal_adjustment(target.month)),
                confidence=prediction_confidence(i),
                factors=list(PREDICTION_FACTORS),
            )
        )

    return ExpenseForecast(predictions=predictions)
