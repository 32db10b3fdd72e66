from flask import Blueprint, current_app, jsonify, request

from schemas import IncomeIn, parse_payload
from storage import get_store

income_bp = Blueprint('income', __name__, url_prefix='/api/incomes')


@income_bp.route('', methods=['GET'])
def index():
    return jsonify([income.to_dict() for income in get_store().list_incomes()])


@income_bp.route('', methods=['POST'])
def add_income():
    data = parse_payload(IncomeIn, request.get_json(silent=True), 'Invalid income data')

    store = get_store()
    with store.transaction():
        income = store.add_income(data)
    current_app.logger.info('Recorded income %s from %s', income.id, income.source)
    return jsonify(income.to_dict()), 201
