"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from finsight.domain.models import FinanceSnapshot
from finsight.infrastructure.database.repositories import FinanceRepository
from finsight.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_repository(db: Session = Depends(get_db)) -> FinanceRepository:
    """Provide a repository bound to the request's session"""
    return FinanceRepository(db)


def get_snapshot(
    start: Optional[date] = Query(None, description="Only transactions on or after this date"),
    end: Optional[date] = Query(None, description="Only transactions on or before this date"),
    repository: FinanceRepository = Depends(get_repository),
) -> FinanceSnapshot:
    """Load the finance snapshot, windowing transactions by the optional date range"""
    return repository.load_snapshot(start, end)
