import os
import uuid

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from errors import ValidationFailed
from schemas import ExpenseIn, parse_payload
from services.budgets import BudgetTracker
from storage import get_store

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api/expenses')


def allowed_receipt(filename):
    allowed = current_app.config['ALLOWED_RECEIPT_EXT']
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in allowed


def save_receipt(file):
    """Store an uploaded receipt; returns ``(path, url)``."""
    filename = f"{uuid.uuid4().hex}_{secure_filename(file.filename)}"
    folder = current_app.config['RECEIPT_FOLDER']
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, filename)
    file.save(path)
    return path, f'/uploads/receipts/{filename}'


def _request_payload():
    if request.mimetype in ('multipart/form-data', 'application/x-www-form-urlencoded'):
        return {key: value for key, value in request.form.items() if value.strip()}
    return request.get_json(silent=True) or {}


@expenses_bp.route('', methods=['GET'])
def index():
    return jsonify([expense.to_dict() for expense in get_store().list_expenses()])


@expenses_bp.route('', methods=['POST'])
def add_expense():
    data = parse_payload(ExpenseIn, _request_payload(), 'Invalid expense data')

    receipt = request.files.get('receipt')
    receipt_path = receipt_url = None
    if receipt and receipt.filename:
        if not allowed_receipt(receipt.filename):
            raise ValidationFailed('Invalid expense data', [
                {'field': 'receipt', 'message': 'Only image files are allowed'},
            ])
        receipt_path, receipt_url = save_receipt(receipt)

    store = get_store()
    try:
        with store.transaction():
            expense = BudgetTracker(store).record_expense(data, receipt_url=receipt_url)
    except Exception:
        if receipt_path and os.path.exists(receipt_path):
            os.remove(receipt_path)
        raise

    return jsonify(expense.to_dict()), 201


@expenses_bp.route('/category/<category>')
def by_category(category):
    return jsonify([expense.to_dict() for expense in get_store().expenses_by_category(category)])


@expenses_bp.route('/search')
def search():
    expenses = get_store().search_expenses(request.args.get('q', ''))
    return jsonify([expense.to_dict() for expense in expenses])
