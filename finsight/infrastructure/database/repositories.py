"""Data access layer - load/save boundary between storage and the analytics engine"""

import dataclasses
import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from finsight.domain.exceptions import RecordNotFoundError
from finsight.domain.models import Budget, FinanceSnapshot, Goal, Transaction
from finsight.infrastructure.database.models import BudgetRecord, GoalRecord, TransactionRecord


def _to_transaction(row: TransactionRecord) -> Transaction:
    return Transaction(
        id=row.id,
        type=row.type,
        amount=row.amount,
        category=row.category,
        date=row.date,
        description=row.description or "",
        tags=tuple(row.tags or ()),
    )


def _to_budget(row: BudgetRecord) -> Budget:
    return Budget(
        id=row.id,
        name=row.name or "",
        category=row.category,
        limit=row.limit_amount,
        period=row.period,
    )


def _to_goal(row: GoalRecord) -> Goal:
    return Goal(
        id=row.id,
        title=row.title,
        target_amount=row.target_amount,
        current_amount=row.current_amount,
        deadline=row.deadline,
        category=row.category,
    )


class FinanceRepository:
    """Repository for transactions, budgets and goals"""

    def __init__(self, db: Session):
        self.db = db

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a validated transaction"""
        self.db.add(
            TransactionRecord(
                id=transaction.id,
                type=transaction.type,
                amount=transaction.amount,
                category=transaction.category,
                description=transaction.description,
                date=transaction.date,
                tags=list(transaction.tags),
            )
        )
        self.db.flush()
        return transaction

    def list_transactions(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Transaction]:
        """Fetch transactions oldest first, optionally windowed by date (inclusive)"""
        query = self.db.query(TransactionRecord)
        if start is not None:
            query = query.filter(TransactionRecord.date >= start)
        if end is not None:
            query = query.filter(TransactionRecord.date <= end)
        rows = query.order_by(TransactionRecord.date, TransactionRecord.created_at).all()
        return [_to_transaction(row) for row in rows]

    def delete_transaction(self, transaction_id: str) -> None:
        """
        Remove a transaction.

        Raises:
            RecordNotFoundError: If no transaction has this id
        """
        row = self.db.query(TransactionRecord).filter(TransactionRecord.id == transaction_id).first()
        if row is None:
            raise RecordNotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete(row)
        self.db.flush()

    def add_budget(self, budget: Budget) -> Budget:
        """Persist a budget, assigning an id when it has none"""
        if budget.id is None:
            budget = dataclasses.replace(budget, id=str(uuid.uuid4()))
        self.db.add(
            BudgetRecord(
                id=budget.id,
                name=budget.name,
                category=budget.category,
                limit_amount=budget.limit,
                period=budget.period,
            )
        )
        self.db.flush()
        return budget

    def list_budgets(self) -> List[Budget]:
        rows = self.db.query(BudgetRecord).order_by(BudgetRecord.created_at).all()
        return [_to_budget(row) for row in rows]

    def add_goal(self, goal: Goal) -> Goal:
        self.db.add(
            GoalRecord(
                id=goal.id,
                title=goal.title,
                target_amount=goal.target_amount,
                current_amount=goal.current_amount,
                deadline=goal.deadline,
                category=goal.category,
            )
        )
        self.db.flush()
        return goal

    def list_goals(self) -> List[Goal]:
        rows = self.db.query(GoalRecord).order_by(GoalRecord.deadline).all()
        return [_to_goal(row) for row in rows]

    def load_snapshot(self, start: Optional[date] = None, end: Optional[date] = None) -> FinanceSnapshot:
        """
        Load everything the analytics engine needs in one immutable snapshot.

        Budgets and goals are never windowed; only transactions honor start/end.
        """
        return FinanceSnapshot(
            transactions=tuple(self.list_transactions(start, end)),
            budgets=tuple(self.list_budgets()),
            goals=tuple(self.list_goals()),
        )
