"""Threshold-based anomaly detection over recent expenses"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, List, Sequence

from finsight.domain.aggregation import category_average
from finsight.domain.exceptions import DomainException
from finsight.domain.models import Anomaly, AnomalyReport, Transaction
from finsight.utils.formatting import format_currency

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 30
HIGH_AMOUNT_MULTIPLIER = 2.0
HIGH_SEVERITY_MULTIPLIER = 3.0
MINIMUM_ANOMALY_AMOUNT = 100.0
FREQUENCY_MIN_TRANSACTIONS = 10
ASSUMED_HISTORY_MONTHS = 12
FREQUENCY_SPIKE_MULTIPLIER = 2.0


def _recent_window(today: date) -> date:
    return today - timedelta(days=RECENT_WINDOW_DAYS)


def _is_recent(txn: Transaction, today: date) -> bool:
    return _recent_window(today) <= txn.date <= today


def detect_high_amount_anomalies(
    transactions: Sequence[Transaction],
    today: date | None = None,
) -> List[Anomaly]:
    """
    Flag recent expenses far above their category's per-transaction average.

    Requirements:
    - Only expenses dated in the last 30 days are checked
    - Baseline is the category average over the entire history
    - Flag when amount > 2x average AND amount > 100 (floor skips trivial categories)
    - Severity "high" from 3x average upward, else "medium"
    """
    today = today or date.today()
    averages = category_average(transactions)

    anomalies: List[Anomaly] = []
    for txn in transactions:
        if not txn.is_expense or not _is_recent(txn, today):
            continue

        average = averages.get(txn.category, 0.0)
        if txn.amount > average * HIGH_AMOUNT_MULTIPLIER and txn.amount > MINIMUM_ANOMALY_AMOUNT:
            severity = "high" if txn.amount >= average * HIGH_SEVERITY_MULTIPLIER else "medium"
            anomalies.append(
                Anomaly(
                    kind="high_amount",
                    severity=severity,
                    category=txn.category,
                    message=(
                        f"Unusually high {txn.category} expense: {format_currency(txn.amount)} "
                        f"vs average {format_currency(average)}"
                    ),
                    suggestion="Review this transaction and consider if it fits your budget",
                    transaction=txn,
                )
            )

    return anomalies


def detect_frequency_anomalies(
    transactions: Sequence[Transaction],
    today: date | None = None,
) -> List[Anomaly]:
    """
    Flag categories whose last-30-day transaction count spikes above normal.

    Categories with 10 or fewer expense transactions are skipped. The normal
    monthly count assumes the history spans 12 months, whatever its real span.
    """
    today = today or date.today()

    dates_by_category: Dict[str, List[date]] = defaultdict(list)
    for txn in transactions:
        if txn.is_expense:
            dates_by_category[txn.category].append(txn.date)

    anomalies: List[Anomaly] = []
    for category, dates in dates_by_category.items():
        if len(dates) <= FREQUENCY_MIN_TRANSACTIONS:
            continue

        historical_avg_per_month = len(dates) / ASSUMED_HISTORY_MONTHS
        recent_count = sum(1 for d in dates if _recent_window(today) <= d <= today)

        if recent_count > historical_avg_per_month * FREQUENCY_SPIKE_MULTIPLIER:
            anomalies.append(
                Anomaly(
                    kind="frequency_spike",
                    severity="medium",
                    category=category,
                    message=f"Unusual increase in {category} transactions this month",
                    suggestion="Review recent purchases in this category",
                )
            )

    return anomalies


def anomaly_risk_level(anomaly_count: int) -> str:
    if anomaly_count > 5:
        return "high"
    elif anomaly_count > 2:
        return "medium"
    else:
        return "low"


def detect_anomalies(transactions: Sequence[Transaction], today: date | None = None) -> AnomalyReport:
    """
    Main entry point: run both detectors and summarize the risk.

    A detector that fails is reported in `unavailable_detectors`; the other
    detector's findings are still returned.
    """
    today = today or date.today()
    detectors: Dict[str, Callable[[Sequence[Transaction], date], List[Anomaly]]] = {
        "high_amount": detect_high_amount_anomalies,
        "frequency_spike": detect_frequency_anomalies,
    }

    anomalies: List[Anomaly] = []
    unavailable: List[str] = []
    for name, detector in detectors.items():
        try:
            anomalies.extend(detector(transactions, today))
        except (DomainException, ArithmeticError, ValueError, TypeError) as e:
            logger.warning("Anomaly detector failed", extra={"detector": name, "error": str(e)})
            unavailable.append(name)

    return AnomalyReport(
        anomalies=anomalies,
        total_anomalies=len(anomalies),
        risk_level=anomaly_risk_level(len(anomalies)),
        unavailable_detectors=unavailable,
    )
