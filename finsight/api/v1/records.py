"""/v1/transactions, /v1/budgets, /v1/goals - record ingestion and listing"""

import logging
import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finsight.api.dependencies import get_request_id
from finsight.api.v1.schemas import (
    BudgetCreate,
    BudgetSchema,
    GoalCreate,
    GoalSchema,
    TransactionCreate,
    TransactionSchema,
    to_schema,
)
from finsight.domain.exceptions import InvalidRecordError, RecordNotFoundError
from finsight.domain.models import Budget, Goal, Transaction
from finsight.infrastructure.database.repositories import FinanceRepository
from finsight.infrastructure.database.session import get_db
from finsight.infrastructure.observability.metrics import records_ingested_counter

router = APIRouter()


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(body: TransactionCreate, request: Request, db: Session = Depends(get_db)):
    """Validate and store a transaction"""
    request_id = get_request_id(request)
    try:
        transaction = FinanceRepository(db).add_transaction(
            Transaction(id=str(uuid.uuid4()), **body.model_dump())
        )
        db.commit()
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Rejected transaction: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    records_ingested_counter.labels(record_type="transaction").inc()
    return to_schema(TransactionSchema, transaction)


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """List transactions oldest first, optionally windowed by date"""
    transactions = FinanceRepository(db).list_transactions(start, end)
    return [to_schema(TransactionSchema, t) for t in transactions]


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        FinanceRepository(db).delete_transaction(transaction_id)
        db.commit()
    except RecordNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
    return Response(status_code=204)


@router.post("/budgets", response_model=BudgetSchema, status_code=201)
def create_budget(body: BudgetCreate, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        budget = FinanceRepository(db).add_budget(Budget(**body.model_dump()))
        db.commit()
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Rejected budget: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    records_ingested_counter.labels(record_type="budget").inc()
    return to_schema(BudgetSchema, budget)


@router.get("/budgets", response_model=List[BudgetSchema])
def list_budgets(db: Session = Depends(get_db)):
    return [to_schema(BudgetSchema, b) for b in FinanceRepository(db).list_budgets()]


@router.post("/goals", response_model=GoalSchema, status_code=201)
def create_goal(body: GoalCreate, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        goal = FinanceRepository(db).add_goal(Goal(id=str(uuid.uuid4()), **body.model_dump()))
        db.commit()
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Rejected goal: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    records_ingested_counter.labels(record_type="goal").inc()
    return to_schema(GoalSchema, goal)


@router.get("/goals", response_model=List[GoalSchema])
def list_goals(db: Session = Depends(get_db)):
    return [to_schema(GoalSchema, g) for g in FinanceRepository(db).list_goals()]
