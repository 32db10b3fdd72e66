from flask import Blueprint, current_app, jsonify, request

from schemas import BudgetIn, parse_payload
from services.budgets import BudgetTracker
from storage import get_store

budgets_bp = Blueprint('budgets', __name__, url_prefix='/api/budgets')
alerts_bp = Blueprint('alerts', __name__, url_prefix='/api/budget-alerts')


@budgets_bp.route('', methods=['GET'])
def index():
    return jsonify([budget.to_dict() for budget in get_store().list_budgets()])


@budgets_bp.route('', methods=['POST'])
def add_budget():
    data = parse_payload(BudgetIn, request.get_json(silent=True), 'Invalid budget data')

    store = get_store()
    with store.transaction():
        budget = store.add_budget(data)
    current_app.logger.info('Created budget %s for %s', budget.id, budget.category)
    return jsonify(budget.to_dict()), 201


@budgets_bp.route('/<int:budget_id>', methods=['DELETE'])
def delete_budget(budget_id):
    store = get_store()
    with store.transaction():
        store.delete_budget(budget_id)
    current_app.logger.info('Deleted budget %s', budget_id)
    return jsonify({'success': True})


@alerts_bp.route('', methods=['GET'])
def check():
    store = get_store()
    with store.transaction():
        alerts = BudgetTracker(store).check_alerts()
    return jsonify([alert.to_dict() for alert in alerts])


@alerts_bp.route('/<int:alert_id>/read', methods=['PATCH'])
def mark_read(alert_id):
    store = get_store()
    with store.transaction():
        alert = BudgetTracker(store).mark_read(alert_id)
    return jsonify(alert.to_dict())
