import logging
from collections import defaultdict
from datetime import datetime, time, timedelta
from decimal import Decimal

from models import FinancialReport
from schemas import (BudgetSnapshot, ExpenseBreakdown, IncomeBreakdown, ReportPayload,
                     ReportSummary)
from storage import to_decimal

logger = logging.getLogger(__name__)


def report_name(report_type, start_date, end_date):
    return f'{report_type.capitalize()} Report - {start_date.isoformat()} to {end_date.isoformat()}'


class ReportGenerator:
    """Snapshots ledger totals and budget state into a stored report.

    The payload is serialized once at generation time; later ledger
    changes never touch an existing report.
    """

    def __init__(self, store):
        self.store = store

    def build_payload(self, start_date, end_date):
        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date + timedelta(days=1), time.min)
        expenses = self.store.expenses_between(start, end)
        incomes = self.store.incomes_between(start, end)

        by_category = defaultdict(Decimal)
        for expense in expenses:
            by_category[expense.category] += Decimal(expense.amount)
        total_expenses = to_decimal(sum(by_category.values(), Decimal('0')))
        total_income = to_decimal(sum((Decimal(i.amount) for i in incomes), Decimal('0')))

        budgets = [
            BudgetSnapshot(
                name=budget.name,
                category=budget.category,
                budgeted=to_decimal(budget.amount),
                spent=to_decimal(budget.spent),
                remaining=to_decimal(Decimal(budget.amount) - Decimal(budget.spent)),
            )
            for budget in self.store.list_budgets()
        ]

        return ReportPayload(
            summary=ReportSummary(
                total_income=total_income,
                total_expenses=total_expenses,
                net_income=total_income - total_expenses,
                transaction_count=len(expenses) + len(incomes),
            ),
            expenses=ExpenseBreakdown(
                total=total_expenses,
                by_category={k: to_decimal(v) for k, v in sorted(by_category.items())},
                transactions=len(expenses),
            ),
            income=IncomeBreakdown(total=total_income, transactions=len(incomes)),
            budgets=budgets,
        )

    def generate(self, report_type, start_date, end_date):
        payload = self.build_payload(start_date, end_date)
        report = self.store.add_report(FinancialReport(
            name=report_name(report_type, start_date, end_date),
            type=report_type,
            start_date=start_date,
            end_date=end_date,
            data=payload.to_json(),
        ))
        logger.info('Generated %s report %s for %s..%s', report_type, report.id, start_date, end_date)
        return report
