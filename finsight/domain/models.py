"""Domain models - pure Python dataclasses representing business entities"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from finsight.domain.exceptions import InvalidRecordError

TRANSACTION_TYPES = ("income", "expense", "transfer")
BUDGET_PERIODS = ("weekly", "monthly", "quarterly", "yearly")

# Largest accepted single amount; sums of bounded amounts stay finite
MAX_AMOUNT = 1e12


def _require_amount(record: str, name: str, value: Any, allow_zero: bool = True) -> float:
    """Coerce a monetary field to float within [0, MAX_AMOUNT], rejecting bools and non-finite values"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRecordError(f"{record}.{name} must be a number, got {value!r}")

    amount = float(value)
    if not math.isfinite(amount):
        raise InvalidRecordError(f"{record}.{name} must be finite, got {value!r}")
    if amount < 0 or (amount == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidRecordError(f"{record}.{name} must be {bound}, got {value!r}")
    if amount > MAX_AMOUNT:
        raise InvalidRecordError(f"{record}.{name} must be <= {MAX_AMOUNT:,.0f}, got {value!r}")
    return amount


def _require_date(record: str, name: str, value: Any) -> date:
    """Accept a date or an ISO 8601 YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise InvalidRecordError(f"{record}.{name} is not an ISO date: {value!r}") from e
    raise InvalidRecordError(f"{record}.{name} must be a date, got {value!r}")


def _require_str(record: str, name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidRecordError(f"{record}.{name} must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class Transaction:
    """Dated income/expense record; the sign lives in `type`, not in `amount`"""

    id: str
    type: str  # "income", "expense" or "transfer"
    amount: float
    category: str
    date: date
    description: str = ""
    tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.type not in TRANSACTION_TYPES:
            raise InvalidRecordError(f"Transaction.type must be one of {TRANSACTION_TYPES}, got {self.type!r}")
        # frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "amount", _require_amount("Transaction", "amount", self.amount))
        object.__setattr__(self, "date", _require_date("Transaction", "date", self.date))
        _require_str("Transaction", "category", self.category)
        _require_str("Transaction", "description", self.description)
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @property
    def is_income(self) -> bool:
        return self.type == "income"


@dataclass(frozen=True)
class Budget:
    """Spending ceiling for one category; `period` is informational only"""

    category: str
    limit: float
    period: str = "monthly"
    id: Optional[str] = None
    name: str = ""

    def __post_init__(self) -> None:
        _require_str("Budget", "category", self.category)
        object.__setattr__(self, "limit", _require_amount("Budget", "limit", self.limit, allow_zero=False))
        if self.period not in BUDGET_PERIODS:
            raise InvalidRecordError(f"Budget.period must be one of {BUDGET_PERIODS}, got {self.period!r}")


@dataclass(frozen=True)
class Goal:
    """Savings target; current_amount may exceed target_amount"""

    id: str
    title: str
    target_amount: float
    current_amount: float
    deadline: date
    category: str = "Savings"

    def __post_init__(self) -> None:
        _require_str("Goal", "title", self.title)
        object.__setattr__(self, "target_amount", _require_amount("Goal", "target_amount", self.target_amount))
        object.__setattr__(self, "current_amount", _require_amount("Goal", "current_amount", self.current_amount))
        object.__setattr__(self, "deadline", _require_date("Goal", "deadline", self.deadline))


@dataclass(frozen=True)
class FinanceSnapshot:
    """Everything the analytics engine needs, handed over by value"""

    transactions: Tuple[Transaction, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    goals: Tuple[Goal, ...] = ()


@dataclass
class MonthlyTotals:
    """Income and expense sums for one YYYY-MM bucket"""

    income: float = 0.0
    expenses: float = 0.0


@dataclass
class HealthMetric:
    """One weighted component of the health score"""

    score: float
    weight: float
    contribution: float
    available: bool = True


@dataclass
class HealthScore:
    """Output of the financial health computation"""

    overall_score: int
    health_level: str
    breakdown: Dict[str, HealthMetric]
    recommendations: List[str]
    trend: str
    unavailable_metrics: List[str] = field(default_factory=list)


@dataclass
class Prediction:
    """Forecast expenses for a single future month"""

    month: str
    predicted_expenses: float
    confidence: float
    factors: List[str]


@dataclass
class ExpenseForecast:
    predictions: List[Prediction]
    methodology: str = "time_series_analysis"
    accuracy: str = "±15%"


@dataclass
class Anomaly:
    """Flagged transaction or category pattern"""

    kind: str  # "high_amount" or "frequency_spike"
    severity: str
    category: str
    message: str
    suggestion: str
    transaction: Optional[Transaction] = None


@dataclass
class AnomalyReport:
    anomalies: List[Anomaly]
    total_anomalies: int
    risk_level: str
    unavailable_detectors: List[str] = field(default_factory=list)


@dataclass
class BudgetRecommendation:
    """Suggested new budget or budget increase for a category"""

    type: str  # "create" or "increase"
    category: str
    recommended_amount: int
    reason: str
    priority: str
    current_amount: Optional[float] = None


@dataclass
class BudgetRecommendationReport:
    recommendations: List[BudgetRecommendation]
    total_recommended_budget: float
    confidence: float = 0.78


@dataclass
class BudgetStatus:
    """Progress of spending against a single budget"""

    category: str
    limit: float
    spent: float
    remaining: float  # limit - spent; negative means overspent
    percentage: float
    status: str  # "good", "warning" or "exceeded"


@dataclass
class GoalStatus:
    goal_id: str
    title: str
    percentage: float
    remaining: float
    is_completed: bool
    days_left: int


@dataclass
class Categorization:
    category: str
    confidence: float
    tags: List[str] = field(default_factory=list)


@dataclass
class SpendingAnalysis:
    """Category concentration patterns across expenses"""

    patterns: List[str]
    recommendations: List[str]
    risk_score: int
    confidence: float = 0.85


@dataclass
class Insight:
    type: str
    title: str
    message: str
    priority: str
    actionable: bool = True
    action: Optional[Dict[str, Any]] = None


@dataclass
class InsightReport:
    insights: List[Insight]
    generated_at: datetime
    total_insights: int
    unavailable_sections: List[str] = field(default_factory=list)
