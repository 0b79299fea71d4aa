"""/v1/analytics/* - analytics engine operations over the stored snapshot"""

import time
import logging
from typing import Any, Iterable, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from finsight.api.dependencies import get_request_id, get_snapshot
from finsight.api.v1.schemas import (
    AnomalyReportResponse,
    BudgetRecommendationResponse,
    BudgetStatusSchema,
    CategorizationResponse,
    CategorizeRequest,
    ExpenseForecastResponse,
    GoalStatusSchema,
    HealthScoreResponse,
    InsightReportResponse,
    SpendingAnalysisResponse,
    to_schema,
)
from finsight.config import settings
from finsight.domain.anomalies import detect_anomalies
from finsight.domain.budgeting import budget_status, goal_status, recommend_budgets
from finsight.domain.categorization import categorize_transaction
from finsight.domain.exceptions import InvalidParameterError
from finsight.domain.forecasting import predict_expenses
from finsight.domain.health import compute_health_score
from finsight.domain.insights import analyze_spending_patterns, generate_insights
from finsight.domain.models import FinanceSnapshot
from finsight.infrastructure.observability.logging import log_analysis
from finsight.infrastructure.observability.metrics import (
    health_score_histogram,
    record_analysis,
    record_anomalies,
)

router = APIRouter(prefix="/analytics")


def _complete(
    request: Request,
    operation: str,
    start_time: float,
    failed_components: Iterable[str] = (),
    **summary: Any,
) -> None:
    """Record metrics and the structured log line for a finished analytics call"""
    failed_components = list(failed_components)
    duration_ms = (time.time() - start_time) * 1000
    record_analysis(operation, failed_components)
    log_analysis(
        get_request_id(request),
        operation,
        duration_ms,
        failed_components=failed_components,
        **summary,
    )


@router.get("/health-score", response_model=HealthScoreResponse)
def get_health_score(
    request: Request,
    baseline_income: Optional[float] = Query(None, ge=0, description="Fallback income when none is recorded"),
    snapshot: FinanceSnapshot = Depends(get_snapshot),
):
    """
    Compute the weighted financial health score.

    Returns:
        Overall score, level, per-metric breakdown, advice and trend
    """
    start_time = time.time()
    income = settings.baseline_income if baseline_income is None else baseline_income

    try:
        score = compute_health_score(snapshot.transactions, snapshot.budgets, snapshot.goals, income)
    except InvalidParameterError as e:
        logging.warning(f"Invalid health score request: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    health_score_histogram.observe(score.overall_score)
    _complete(
        request,
        "health_score",
        start_time,
        score.unavailable_metrics,
        overall_score=score.overall_score,
        health_level=score.health_level,
    )
    return to_schema(HealthScoreResponse, score)


@router.get("/predictions", response_model=ExpenseForecastResponse)
def get_predictions(
    request: Request,
    months: int = Query(settings.forecast_months, ge=1, le=settings.max_forecast_months),
    snapshot: FinanceSnapshot = Depends(get_snapshot),
):
    """Forecast monthly expenses over the requested horizon"""
    start_time = time.time()
    try:
        forecast = predict_expenses(snapshot.transactions, months)
    except InvalidParameterError as e:
        logging.warning(f"Invalid forecast request: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    _complete(request, "predictions", start_time, months=months)
    return to_schema(ExpenseForecastResponse, forecast)


@router.get("/anomalies", response_model=AnomalyReportResponse)
def get_anomalies(request: Request, snapshot: FinanceSnapshot = Depends(get_snapshot)):
    """Flag unusually large recent expenses and category frequency spikes"""
    start_time = time.time()
    report = detect_anomalies(snapshot.transactions)

    record_anomalies(report)
    _complete(
        request,
        "anomalies",
        start_time,
        report.unavailable_detectors,
        total_anomalies=report.total_anomalies,
        risk_level=report.risk_level,
    )
    return to_schema(AnomalyReportResponse, report)


@router.get("/budget-recommendations", response_model=BudgetRecommendationResponse)
def get_budget_recommendations(request: Request, snapshot: FinanceSnapshot = Depends(get_snapshot)):
    start_time = time.time()
    report = recommend_budgets(snapshot.transactions, snapshot.budgets)

    _complete(request, "budget_recommendations", start_time, recommendations=len(report.recommendations))
    return to_schema(BudgetRecommendationResponse, report)


@router.get("/budget-status", response_model=List[BudgetStatusSchema])
def get_budget_status(request: Request, snapshot: FinanceSnapshot = Depends(get_snapshot)):
    """Spending progress for every budget over the (optionally windowed) transactions"""
    start_time = time.time()
    statuses = [budget_status(budget, snapshot.transactions) for budget in snapshot.budgets]

    _complete(request, "budget_status", start_time, budgets=len(statuses))
    return [to_schema(BudgetStatusSchema, status) for status in statuses]


@router.get("/goal-status", response_model=List[GoalStatusSchema])
def get_goal_status(request: Request, snapshot: FinanceSnapshot = Depends(get_snapshot)):
    start_time = time.time()
    statuses = [goal_status(goal) for goal in snapshot.goals]

    _complete(request, "goal_status", start_time, goals=len(statuses))
    return [to_schema(GoalStatusSchema, status) for status in statuses]


@router.get("/spending-patterns", response_model=SpendingAnalysisResponse)
def get_spending_patterns(request: Request, snapshot: FinanceSnapshot = Depends(get_snapshot)):
    start_time = time.time()
    analysis = analyze_spending_patterns(snapshot.transactions)

    _complete(request, "spending_patterns", start_time, risk_score=analysis.risk_score)
    return to_schema(SpendingAnalysisResponse, analysis)


@router.get("/insights", response_model=InsightReportResponse)
def get_insights(
    request: Request,
    declared_income: Optional[float] = Query(None, ge=0),
    snapshot: FinanceSnapshot = Depends(get_snapshot),
):
    """Capped insight feed combining every analytics section"""
    start_time = time.time()
    income = settings.baseline_income if declared_income is None else declared_income

    try:
        report = generate_insights(snapshot.transactions, snapshot.budgets, snapshot.goals, income)
    except InvalidParameterError as e:
        logging.warning(f"Invalid insights request: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    _complete(
        request,
        "insights",
        start_time,
        report.unavailable_sections,
        total_insights=report.total_insights,
    )
    return to_schema(InsightReportResponse, report)


@router.post("/categorize", response_model=CategorizationResponse)
def categorize(body: CategorizeRequest, request: Request):
    """Suggest a category for a transaction description"""
    start_time = time.time()
    try:
        result = categorize_transaction(body.description, body.amount)
    except InvalidParameterError as e:
        raise HTTPException(status_code=422, detail=str(e))

    _complete(request, "categorize", start_time, category=result.category)
    return to_schema(CategorizationResponse, result)
