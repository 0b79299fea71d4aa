"""Unit tests for anomaly detection"""

import pytest
from datetime import date, timedelta
from finsight.domain import anomalies
from finsight.domain.anomalies import (
    anomaly_risk_level,
    detect_anomalies,
    detect_frequency_anomalies,
    detect_high_amount_anomalies,
)
from finsight.domain.models import Transaction

TODAY = date(2025, 6, 15)


def _expense(id, amount, day, category="Food & Dining"):
    return Transaction(id=id, type="expense", amount=amount, category=category, date=day)


def test_three_times_average_is_high_severity():
    """Test three times average is high severity"""
    # Average over the whole history: (150 + 4 * 25) / 5 = 50
    history = [_expense(f"old{i}", 25.0, date(2025, 3, 1 + i)) for i in range(4)]
    spike = _expense("spike", 150.0, date(2025, 6, 10))

    found = detect_high_amount_anomalies(history + [spike], TODAY)

    assert len(found) == 1
    assert found[0].kind == "high_amount"
    assert found[0].severity == "high"
    assert found[0].transaction == spike
    assert found[0].message == "Unusually high Food & Dining expense: $150.00 vs average $50.00"
    assert found[0].suggestion == "Review this transaction and consider if it fits your budget"


def test_amount_under_absolute_floor_is_not_flagged():
    """Test amount under absolute floor is not flagged"""
    # Average (90 + 10) / 2 = 50; 90 is close to 2x but below the 100 floor
    transactions = [_expense("old", 10.0, date(2025, 3, 1)), _expense("recent", 90.0, date(2025, 6, 10))]

    assert detect_high_amount_anomalies(transactions, TODAY) == []


def test_between_two_and_three_times_average_is_medium():
    """Test between two and three times average is medium"""
    # Average (250 + 4 * 50) / 5 = 90
    history = [_expense(f"old{i}", 50.0, date(2025, 3, 1 + i)) for i in range(4)]
    transactions = history + [_expense("recent", 250.0, date(2025, 6, 1))]

    found = detect_high_amount_anomalies(transactions, TODAY)

    assert [a.severity for a in found] == ["medium"]


def test_only_last_thirty_days_are_checked():
    """Test only last thirty days are checked"""
    history = [_expense(f"old{i}", 20.0, date(2025, 1, 1 + i)) for i in range(10)]
    old_spike = _expense("old_spike", 2000.0, date(2025, 5, 15))  # 31 days before TODAY
    boundary_spike = _expense("boundary", 2000.0, date(2025, 5, 16))  # exactly 30 days

    found = detect_high_amount_anomalies(history + [old_spike, boundary_spike], TODAY)

    assert [a.transaction.id for a in found] == ["boundary"]


def test_income_is_never_flagged():
    """Test income is never flagged"""
    transactions = [
        _expense("small", 10.0, date(2025, 6, 1)),
        Transaction(id="bonus", type="income", amount=5000.0, category="Food & Dining", date=date(2025, 6, 10)),
    ]

    assert detect_high_amount_anomalies(transactions, TODAY) == []


def test_frequency_spike_in_busy_category():
    """Test frequency spike in busy category"""
    # 12 transactions, all in the last 30 days; assumed normal is 1 per month
    coffee = [_expense(f"c{i}", 5.0, TODAY - timedelta(days=i * 2), "Coffee") for i in range(12)]

    found = detect_frequency_anomalies(coffee, TODAY)

    assert len(found) == 1
    assert found[0].kind == "frequency_spike"
    assert found[0].severity == "medium"
    assert found[0].category == "Coffee"
    assert found[0].transaction is None


def test_frequency_skips_categories_with_ten_or_fewer_transactions():
    """Test frequency skips categories with ten or fewer transactions"""
    coffee = [_expense(f"c{i}", 5.0, TODAY - timedelta(days=i), "Coffee") for i in range(10)]
    assert detect_frequency_anomalies(coffee, TODAY) == []


def test_frequency_steady_category_is_not_flagged():
    """Test frequency steady category is not flagged"""
    # Two per month for a year: 24 / 12 = 2 expected, 2 recent
    steady = []
    for month in range(12):
        for offset in (15, 20):
            steady.append(_expense(f"s{month}_{offset}", 5.0, TODAY - timedelta(days=offset + 30 * month), "Coffee"))

    assert detect_frequency_anomalies(steady, TODAY) == []


@pytest.mark.parametrize("count, level", [(0, "low"), (2, "low"), (3, "medium"), (5, "medium"), (6, "high")])
def test_risk_level_thresholds(count, level):
    """Test risk level thresholds"""
    assert anomaly_risk_level(count) == level


def test_eight_month_history_with_one_large_dining_expense():
    """Test eight month history with one large dining expense"""
    transactions = []
    for month in range(8):
        month_start = date(2024, 11, 1) + timedelta(days=31 * month)
        month_start = month_start.replace(day=1)
        transactions.append(
            Transaction(id=f"salary{month}", type="income", amount=3500.0, category="Salary", date=month_start)
        )
        transactions.append(_expense(f"bus{month}", 30.0, month_start.replace(day=5), "Transportation"))
        if month_start.month == 6:
            continue
        for day in range(1, 10):
            transactions.append(_expense(f"food{month}_{day}", 40.0, month_start.replace(day=day)))

    dinner = _expense("dinner", 2000.0, date(2025, 6, 10))
    transactions.append(dinner)

    report = detect_anomalies(transactions, TODAY)

    assert report.total_anomalies == 1
    assert report.anomalies[0].kind == "high_amount"
    assert report.anomalies[0].severity == "high"
    assert report.anomalies[0].transaction == dinner
    assert report.risk_level == "low"
    assert report.unavailable_detectors == []


def test_failing_detector_keeps_other_results(monkeypatch):
    """Test failing detector keeps other results"""
    def broken(transactions, today):
        raise ValueError("bad data")

    monkeypatch.setattr(anomalies, "detect_frequency_anomalies", broken)

    history = [_expense(f"old{i}", 25.0, date(2025, 3, 1 + i)) for i in range(4)]
    report = detect_anomalies(history + [_expense("spike", 150.0, date(2025, 6, 10))], TODAY)

    assert report.unavailable_detectors == ["frequency_spike"]
    assert report.total_anomalies == 1


def test_empty_history():
    """Test detection with no transactions"""
    report = detect_anomalies([], TODAY)

    assert report.anomalies == []
    assert report.total_anomalies == 0
    assert report.risk_level == "low"
