"""
Ledger store: the single owner of persisted finance records.

A ``LedgerStore`` wraps a SQLAlchemy session and is attached to the Flask
application by ``Config.init_db``. Request handlers reach it through
``get_store()``; tests may construct their own around any session.
"""
import logging
from contextlib import contextmanager
from decimal import Decimal

from flask import current_app
from sqlalchemy import func, or_, select

from errors import NotFound, ValidationFailed
from models import (CENT, Budget, BudgetAlert, Expense, FinancialReport, Goal, Income,
                    RecurringTransaction)

logger = logging.getLogger(__name__)


def get_store():
    return current_app.extensions['ledger']


def to_decimal(value):
    """Normalise an aggregate result to a cent-precision Decimal."""
    if value is None:
        value = 0
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT)


def _within(stmt, column, start, end):
    if start is not None:
        stmt = stmt.where(column >= start)
    if end is not None:
        stmt = stmt.where(column < end)
    return stmt


class LedgerStore:

    def __init__(self, session):
        self.session = session

    @contextmanager
    def transaction(self):
        """Commit everything done in the block, or roll all of it back."""
        try:
            yield self.session
            self.session.commit()
        except Exception as exc:
            self.session.rollback()
            logger.warning('Ledger transaction rolled back: %r', exc)
            raise

    # Expenses

    def add_expense(self, data, receipt_url=None):
        fields = data.model_dump(exclude_none=True)
        expense = Expense(receipt_url=receipt_url, **fields)
        self.session.add(expense)
        self.session.flush()
        return expense

    def list_expenses(self):
        return self.session.scalars(
            select(Expense).order_by(Expense.date.desc(), Expense.id.desc())
        ).all()

    def expenses_by_category(self, category):
        return self.session.scalars(
            select(Expense).where(Expense.category == category).order_by(Expense.date.desc())
        ).all()

    def expenses_between(self, start, end):
        """Expenses dated in the half-open range ``[start, end)``."""
        return self.session.scalars(
            select(Expense).where(Expense.date >= start, Expense.date < end)
        ).all()

    def search_expenses(self, query):
        query = (query or '').strip()
        if not query:
            raise ValidationFailed('Search query is required',
                                   [{'field': 'q', 'message': 'Field required'}])
        term = f'%{query.lower()}%'
        return self.session.scalars(
            select(Expense).where(or_(
                func.lower(Expense.description).like(term),
                func.lower(Expense.category).like(term),
                func.lower(Expense.merchant_name).like(term),
                func.lower(Expense.location).like(term),
            )).order_by(Expense.date.desc())
        ).all()

    def expense_categories(self):
        return self.session.scalars(
            select(Expense.category).distinct().order_by(Expense.category)
        ).all()

    def sum_expenses(self, start=None, end=None):
        stmt = _within(select(func.coalesce(func.sum(Expense.amount), 0)), Expense.date, start, end)
        return to_decimal(self.session.scalar(stmt))

    def expense_totals_by_category(self, start=None, end=None):
        stmt = _within(
            select(Expense.category, func.sum(Expense.amount)).group_by(Expense.category),
            Expense.date, start, end,
        )
        return {category: to_decimal(total) for category, total in self.session.execute(stmt)}

    # Incomes

    def add_income(self, data):
        income = Income(**data.model_dump(exclude_none=True))
        self.session.add(income)
        self.session.flush()
        return income

    def list_incomes(self):
        return self.session.scalars(
            select(Income).order_by(Income.date.desc(), Income.id.desc())
        ).all()

    def incomes_between(self, start, end):
        return self.session.scalars(
            select(Income).where(Income.date >= start, Income.date < end)
        ).all()

    def sum_incomes(self, start=None, end=None):
        stmt = _within(select(func.coalesce(func.sum(Income.amount), 0)), Income.date, start, end)
        return to_decimal(self.session.scalar(stmt))

    # Budgets

    def add_budget(self, data):
        budget = Budget(**data.model_dump(exclude_none=True))
        self.session.add(budget)
        self.session.flush()
        return budget

    def list_budgets(self):
        return self.session.scalars(select(Budget).order_by(Budget.id)).all()

    def active_budgets(self):
        return self.session.scalars(
            select(Budget).where(Budget.is_active.is_(True)).order_by(Budget.id)
        ).all()

    def get_budget(self, budget_id):
        budget = self.session.get(Budget, budget_id)
        if budget is None:
            raise NotFound('Budget not found')
        return budget

    def delete_budget(self, budget_id):
        self.session.delete(self.get_budget(budget_id))
        self.session.flush()

    # Goals

    def add_goal(self, data):
        goal = Goal(**data.model_dump(exclude_none=True))
        self.session.add(goal)
        self.session.flush()
        return goal

    def list_goals(self):
        return self.session.scalars(select(Goal).order_by(Goal.id)).all()

    def get_goal(self, goal_id):
        goal = self.session.get(Goal, goal_id)
        if goal is None:
            raise NotFound('Goal not found')
        return goal

    def delete_goal(self, goal_id):
        self.session.delete(self.get_goal(goal_id))
        self.session.flush()

    # Recurring templates

    def add_recurring(self, data):
        template = RecurringTransaction(**data.model_dump(exclude_none=True))
        self.session.add(template)
        self.session.flush()
        return template

    def list_recurring(self):
        return self.session.scalars(
            select(RecurringTransaction)
            .where(RecurringTransaction.is_active.is_(True))
            .order_by(RecurringTransaction.next_date)
        ).all()

    def due_recurring(self, now):
        return self.session.scalars(
            select(RecurringTransaction)
            .where(RecurringTransaction.is_active.is_(True),
                   RecurringTransaction.next_date <= now)
            .order_by(RecurringTransaction.id)
        ).all()

    # Reports

    def add_report(self, report):
        self.session.add(report)
        self.session.flush()
        return report

    def list_reports(self):
        return self.session.scalars(
            select(FinancialReport)
            .order_by(FinancialReport.created_at.desc(), FinancialReport.id.desc())
        ).all()

    # Alerts

    def add_alert(self, alert):
        self.session.add(alert)
        self.session.flush()
        return alert

    def list_alerts(self, unread_only=False):
        stmt = select(BudgetAlert).order_by(BudgetAlert.created_at.desc(), BudgetAlert.id.desc())
        if unread_only:
            stmt = stmt.where(BudgetAlert.is_read.is_(False))
        return self.session.scalars(stmt).all()

    def open_alert(self, budget_id, alert_type):
        return self.session.scalars(
            select(BudgetAlert).where(
                BudgetAlert.budget_id == budget_id,
                BudgetAlert.alert_type == alert_type,
                BudgetAlert.is_read.is_(False),
            ).order_by(BudgetAlert.id)
        ).first()

    def get_alert(self, alert_id):
        alert = self.session.get(BudgetAlert, alert_id)
        if alert is None:
            raise NotFound('Alert not found')
        return alert
