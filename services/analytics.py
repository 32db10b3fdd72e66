"""
Read-side statistics over the ledger.

Nothing here is persisted. Every method that depends on the current
date takes an optional ``now`` so results can be pinned in tests.
Amounts come back as cent-precision ``Decimal`` values.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from errors import ValidationFailed
from storage import to_decimal

DEFAULT_STARTING_BALANCE = Decimal('10000')
TREND_DAYS = 30
MAX_MONTHS = 60
MAX_TOP_CATEGORIES = 50


def month_start(when):
    return when.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _check_range(name, value, upper):
    if not 1 <= value <= upper:
        raise ValidationFailed(f'Invalid {name}', [
            {'field': name, 'message': f'must be between 1 and {upper}'},
        ])


class AnalyticsAggregator:

    def __init__(self, store, starting_balance=DEFAULT_STARTING_BALANCE):
        self.store = store
        self.starting_balance = Decimal(starting_balance)

    def total_balance(self):
        """Starting balance less every expense ever recorded."""
        return to_decimal(self.starting_balance - self.store.sum_expenses())

    def monthly_spending(self, now=None):
        start = month_start(now or datetime.now())
        return self.store.sum_expenses(start, start + relativedelta(months=1))

    def category_spending(self):
        return self.store.expense_totals_by_category()

    def income_vs_expenses(self, months, now=None):
        """Income and expense totals for the last ``months`` calendar months.

        The current month is the last entry; the oldest month comes first.
        """
        _check_range('months', months, MAX_MONTHS)
        first = month_start(now or datetime.now()) - relativedelta(months=months - 1)
        series = []
        for offset in range(months):
            start = first + relativedelta(months=offset)
            end = start + relativedelta(months=1)
            series.append({
                'month': start.strftime('%b %Y'),
                'income': self.store.sum_incomes(start, end),
                'expenses': self.store.sum_expenses(start, end),
            })
        return series

    def cash_flow(self, now=None):
        now = now or datetime.now()
        start = month_start(now)
        inflow = self.store.sum_incomes(start, now)
        outflow = self.store.sum_expenses(start, now)
        return {'inflow': inflow, 'outflow': outflow, 'netFlow': inflow - outflow}

    def spending_trends(self, now=None):
        """Daily expense totals over the trailing 30 days, keyed by ISO date."""
        now = now or datetime.now()
        daily = defaultdict(Decimal)
        for expense in self.store.expenses_between(now - timedelta(days=TREND_DAYS), now):
            daily[expense.date.date().isoformat()] += Decimal(expense.amount)
        return [{'date': day, 'amount': to_decimal(daily[day])} for day in sorted(daily)]

    def budget_performance(self):
        performance = []
        for budget in self.store.active_budgets():
            budgeted = to_decimal(budget.amount)
            spent = to_decimal(budget.spent)
            performance.append({
                'budgetId': budget.id,
                'name': budget.name,
                'category': budget.category,
                'budgeted': budgeted,
                'spent': spent,
                'variance': budgeted - spent,
            })
        return performance

    def top_expense_categories(self, limit):
        _check_range('limit', limit, MAX_TOP_CATEGORIES)
        ranked = sorted(self.category_spending().items(), key=lambda item: (-item[1], item[0]))
        return [{'category': category, 'amount': amount} for category, amount in ranked[:limit]]
