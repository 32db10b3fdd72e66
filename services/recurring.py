import logging
from datetime import datetime

from dateutil.relativedelta import relativedelta

from schemas import ExpenseIn, IncomeIn
from services.budgets import BudgetTracker

logger = logging.getLogger(__name__)

RECURRING_SUFFIX = ' (Recurring)'

STEPS = {
    'daily': relativedelta(days=1),
    'weekly': relativedelta(weeks=1),
    'monthly': relativedelta(months=1),
    'yearly': relativedelta(years=1),
}


def advance(when, frequency):
    """Move ``when`` forward one period. Month ends clamp (Jan 31 -> Feb 28/29)."""
    try:
        step = STEPS[frequency]
    except KeyError:
        raise ValueError(f'Unknown frequency: {frequency}')
    return when + step


class RecurringProcessor:
    """Turns due recurring templates into ledger records.

    By default each due template yields one record per call, however many
    periods have passed. With ``catch_up`` it keeps going until the
    template's next date is in the future.
    """

    def __init__(self, store, budgets=None, catch_up=False):
        self.store = store
        self.budgets = budgets or BudgetTracker(store)
        self.catch_up = catch_up

    def process_due(self, now=None):
        now = now or datetime.now()
        records = []
        for template in self.store.due_recurring(now):
            while template.is_active and template.next_date <= now:
                if self._expired(template):
                    break
                records.append(self._materialize(template))
                template.next_date = advance(template.next_date, template.frequency)
                if self._expired(template) or not self.catch_up:
                    break
        self.store.session.flush()
        logger.info('Processed recurring templates: %d record(s) created', len(records))
        return records

    @staticmethod
    def _expired(template):
        if template.end_date is not None and template.next_date > template.end_date:
            template.is_active = False
            logger.info('Recurring template %s reached its end date', template.id)
            return True
        return False

    def _materialize(self, template):
        description = f'{template.description}{RECURRING_SUFFIX}'
        if template.type == 'expense':
            return self.budgets.record_expense(ExpenseIn(
                amount=template.amount,
                category=template.category,
                description=description,
                date=template.next_date,
                is_recurring=True,
            ))
        return self.store.add_income(IncomeIn(
            amount=template.amount,
            source=template.category,
            description=description,
            date=template.next_date,
            is_recurring=True,
            frequency=template.frequency,
        ))
