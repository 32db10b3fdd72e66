from flask import Blueprint, current_app, jsonify

from services.analytics import AnalyticsAggregator
from storage import get_store

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


def _aggregator():
    return AnalyticsAggregator(get_store(), current_app.config['STARTING_BALANCE'])


@analytics_bp.route('/balance')
def balance():
    return jsonify({'balance': _aggregator().total_balance()})


@analytics_bp.route('/monthly-spending')
def monthly_spending():
    return jsonify({'spending': _aggregator().monthly_spending()})


@analytics_bp.route('/category-spending')
def category_spending():
    return jsonify(_aggregator().category_spending())


@analytics_bp.route('/income-vs-expenses/<int:months>')
def income_vs_expenses(months):
    return jsonify(_aggregator().income_vs_expenses(months))


@analytics_bp.route('/cash-flow')
def cash_flow():
    return jsonify(_aggregator().cash_flow())


@analytics_bp.route('/spending-trends')
def spending_trends():
    return jsonify(_aggregator().spending_trends())


@analytics_bp.route('/budget-performance')
def budget_performance():
    return jsonify(_aggregator().budget_performance())


@analytics_bp.route('/top-categories/<int:limit>')
def top_categories(limit):
    return jsonify(_aggregator().top_expense_categories(limit))
