"""Unit tests for expense forecasting"""

import math
import pytest
from datetime import date
from finsight.domain.exceptions import InvalidParameterError
from finsight.domain.forecasting import (
    SEASONAL_FACTORS,
    expense_trend,
    predict_expenses,
    prediction_confidence,
    seasonal_adjustment,
)
from finsight.domain.models import MAX_AMOUNT, Transaction


def _monthly_expenses(amounts_by_month):
    return [
        Transaction(id=f"e{month}", type="expense", amount=amount, category="Shopping", date=date(2025, month, 10))
        for month, amount in amounts_by_month.items()
    ]


def test_seasonal_table_covers_every_month():
    """Test seasonal table covers every month"""
    assert sorted(SEASONAL_FACTORS) == list(range(1, 13))
    assert SEASONAL_FACTORS[2] == 0.9
    assert SEASONAL_FACTORS[11] == 1.2
    assert SEASONAL_FACTORS[12] == 1.3


def test_seasonal_adjustment_is_additive_offset():
    """Test seasonal adjustment is additive offset"""
    assert seasonal_adjustment(12) == pytest.approx(130.0)
    assert seasonal_adjustment(3) == pytest.approx(100.0)


def test_expense_trend_uses_latest_three_months():
    """Test expense trend uses latest three months"""
    transactions = _monthly_expenses({1: 100.0, 2: 200.0, 3: 300.0, 4: 400.0})
    assert expense_trend(transactions) == 300.0


def test_expense_trend_with_short_history():
    """Test expense trend with short history"""
    assert expense_trend(_monthly_expenses({5: 500.0})) == 500.0
    assert expense_trend([]) == 0.0


def test_predict_expenses_labels_and_amounts():
    """Test predict expenses labels and amounts"""
    transactions = _monthly_expenses({1: 100.0, 2: 200.0, 3: 300.0, 4: 400.0})

    forecast = predict_expenses(transactions, months=3, today=date(2025, 6, 15))

    assert [p.month for p in forecast.predictions] == ["July 2025", "August 2025", "September 2025"]
    assert [p.predicted_expenses for p in forecast.predictions] == pytest.approx([410.0, 410.0, 400.0])
    assert forecast.predictions[0].factors == ["historical_trend", "seasonal_patterns", "spending_behavior"]
    assert forecast.methodology == "time_series_analysis"


def test_predict_expenses_without_history_is_seasonal_only():
    """Test predict expenses without history is seasonal only"""
    forecast = predict_expenses([], months=2, today=date(2025, 10, 15))
    assert [p.predicted_expenses for p in forecast.predictions] == pytest.approx([120.0, 130.0])


def test_confidence_never_increases_and_stays_in_bounds():
    """Test confidence never increases and stays in bounds"""
    forecast = predict_expenses([], months=8, today=date(2025, 1, 1))
    confidences = [p.confidence for p in forecast.predictions]

    assert confidences[:3] == pytest.approx([0.8, 0.7, 0.6])
    assert all(0.4 <= c <= 0.9 for c in confidences)
    assert all(later <= earlier for earlier, later in zip(confidences, confidences[1:]))
    assert confidences[-1] == 0.4


def test_prediction_confidence_floor():
    """Test prediction confidence floor"""
    assert prediction_confidence(10) == 0.4


def test_month_arithmetic_clamps_short_months():
    """Test month arithmetic clamps short months"""
    forecast = predict_expenses([], months=1, today=date(2025, 1, 31))
    assert forecast.predictions[0].month == "February 2025"


def test_zero_horizon_yields_no_predictions():
    """Test zero horizon yields no predictions"""
    assert predict_expenses([], months=0).predictions == []


@pytest.mark.parametrize("months", [-1, 2.5, "3", True])
def test_invalid_horizon_is_rejected(months):
    """Test invalid horizon is rejected"""
    with pytest.raises(InvalidParameterError):
        predict_expenses([], months=months)


def test_largest_amounts_give_finite_predictions():
    """Test maximum-size monthly expenses keep every prediction finite"""
    transactions = _monthly_expenses({1: MAX_AMOUNT, 2: MAX_AMOUNT, 3: MAX_AMOUNT})

    forecast = predict_expenses(transactions, months=12, today=date(2025, 3, 31))

    assert all(math.isfinite(p.predicted_expenses) for p in forecast.predictions)
