import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select, update

from models import Budget, BudgetAlert

logger = logging.getLogger(__name__)

ONE_PLACE = Decimal('0.1')


def _pct(value):
    return value.quantize(ONE_PLACE, rounding=ROUND_HALF_UP)


def alert_for(budget):
    """Return ``(alert_type, message)`` for a budget at or over its threshold, else None."""
    spent_percentage = budget.spent_percentage
    if spent_percentage < Decimal(budget.alert_threshold):
        return None
    if spent_percentage >= 100:
        return ('overspent',
                f'Budget "{budget.name}" has exceeded its limit by {_pct(spent_percentage - 100)}%')
    return ('threshold',
            f'Budget "{budget.name}" has reached {_pct(spent_percentage)}% of its limit')


class BudgetTracker:
    """Keeps budget ``spent`` totals in step with new expenses and raises alerts."""

    def __init__(self, store):
        self.store = store

    def record_expense(self, data, receipt_url=None):
        """Insert an expense and charge it to its budget.

        Both writes share the caller's transaction, so a failure in either
        leaves neither applied.
        """
        expense = self.store.add_expense(data, receipt_url=receipt_url)
        self.on_expense_created(expense)
        logger.info('Recorded expense %s: %s in %s', expense.id, expense.amount, expense.category)
        return expense

    def on_expense_created(self, expense):
        session = self.store.session
        budget_id = session.scalar(
            select(Budget.id)
            .where(Budget.category == expense.category, Budget.is_active.is_(True))
            .order_by(Budget.id)
            .limit(1)
        )
        if budget_id is None:
            return None

        # Single UPDATE so concurrent expenses cannot lose increments
        session.execute(
            update(Budget)
            .where(Budget.id == budget_id)
            .values(spent=Budget.spent + expense.amount)
            .execution_options(synchronize_session='fetch')
        )
        logger.info('Budget %s spent increased by %s', budget_id, expense.amount)
        return budget_id

    def check_alerts(self):
        """Return the alerts that currently apply to active budgets.

        An unread alert of the same type for a budget is reused rather than
        duplicated, with its message brought up to date. Once it is marked
        read, the next check may raise a new one.
        """
        alerts = []
        for budget in self.store.active_budgets():
            found = alert_for(budget)
            if found is None:
                continue
            alert_type, message = found
            alert = self.store.open_alert(budget.id, alert_type)
            if alert is None:
                alert = self.store.add_alert(BudgetAlert(
                    budget_id=budget.id,
                    alert_type=alert_type,
                    message=message,
                    is_read=False,
                ))
                logger.info('Raised %s alert %s for budget %s', alert_type, alert.id, budget.id)
            elif alert.message != message:
                alert.message = message
                self.store.session.flush()
            alerts.append(alert)
        return alerts

    def mark_read(self, alert_id):
        alert = self.store.get_alert(alert_id)
        alert.is_read = True
        self.store.session.flush()
        return alert
