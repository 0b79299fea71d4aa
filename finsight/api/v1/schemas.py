"""Pydantic schemas for API request/response validation"""

import dataclasses
import datetime
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar
from pydantic import BaseModel, Field

from finsight.domain.models import MAX_AMOUNT

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def to_schema(schema: Type[SchemaT], result: Any) -> SchemaT:
    """Convert a domain dataclass (nested dataclasses included) into a response schema"""
    return schema.model_validate(dataclasses.asdict(result))


# Ingestion


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    type: Literal["income", "expense", "transfer"]
    amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Magnitude; direction comes from type")
    category: str = Field(..., min_length=1)
    description: str = ""
    date: datetime.date
    tags: List[str] = Field(default_factory=list)


class BudgetCreate(BaseModel):
    """Request body for POST /v1/budgets"""

    category: str = Field(..., min_length=1)
    limit: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    period: Literal["weekly", "monthly", "quarterly", "yearly"] = "monthly"
    name: str = ""


class GoalCreate(BaseModel):
    """Request body for POST /v1/goals"""

    title: str = Field(..., min_length=1)
    target_amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    current_amount: float = Field(0.0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    deadline: datetime.date
    category: str = "Savings"


class CategorizeRequest(BaseModel):
    """Request body for POST /v1/analytics/categorize"""

    description: str
    amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)


# Records


class TransactionSchema(BaseModel):
    id: str
    type: str
    amount: float
    category: str
    description: str
    date: datetime.date
    tags: List[str]


class BudgetSchema(BaseModel):
    id: Optional[str] = None
    name: str
    category: str
    limit: float
    period: str


class GoalSchema(BaseModel):
    id: str
    title: str
    target_amount: float
    current_amount: float
    deadline: datetime.date
    category: str


# Analytics


class HealthMetricSchema(BaseModel):
    score: float
    weight: float
    contribution: float
    available: bool


class HealthScoreResponse(BaseModel):
    """Response for GET /v1/analytics/health-score"""

    overall_score: int
    health_level: str
    breakdown: Dict[str, HealthMetricSchema]
    recommendations: List[str]
    trend: str
    unavailable_metrics: List[str]


class PredictionSchema(BaseModel):
    month: str
    predicted_expenses: float
    confidence: float
    factors: List[str]


class ExpenseForecastResponse(BaseModel):
    """Response for GET /v1/analytics/predictions"""

    predictions: List[PredictionSchema]
    methodology: str
    accuracy: str


class AnomalySchema(BaseModel):
    kind: str
    severity: str
    category: str
    message: str
    suggestion: str
    transaction: Optional[TransactionSchema] = None


class AnomalyReportResponse(BaseModel):
    """Response for GET /v1/analytics/anomalies"""

    anomalies: List[AnomalySchema]
    total_anomalies: int
    risk_level: str
    unavailable_detectors: List[str]


class BudgetRecommendationSchema(BaseModel):
    type: str
    category: str
    recommended_amount: int
    reason: str
    priority: str
    current_amount: Optional[float] = None


class BudgetRecommendationResponse(BaseModel):
    """Response for GET /v1/analytics/budget-recommendations"""

    recommendations: List[BudgetRecommendationSchema]
    total_recommended_budget: float
    confidence: float


class BudgetStatusSchema(BaseModel):
    category: str
    limit: float
    spent: float
    remaining: float
    percentage: float
    status: str


class GoalStatusSchema(BaseModel):
    goal_id: str
    title: str
    percentage: float
    remaining: float
    is_completed: bool
    days_left: int


class CategorizationResponse(BaseModel):
    """Response for POST /v1/analytics/categorize"""

    category: str
    confidence: float
    tags: List[str]


class SpendingAnalysisResponse(BaseModel):
    """Response for GET /v1/analytics/spending-patterns"""

    patterns: List[str]
    recommendations: List[str]
    risk_score: int
    confidence: float


class InsightSchema(BaseModel):
    type: str
    title: str
    message: str
    priority: str
    actionable: bool
    action: Optional[Dict[str, Any]] = None


class InsightReportResponse(BaseModel):
    """Response for GET /v1/analytics/insights"""

    insights: List[InsightSchema]
    generated_at: datetime.datetime
    total_insights: int
    unavailable_sections: List[str]
