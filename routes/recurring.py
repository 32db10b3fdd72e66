from flask import Blueprint, current_app, jsonify, request

from models import Expense
from schemas import RecurringIn, parse_payload
from services.recurring import RecurringProcessor
from storage import get_store

recurring_bp = Blueprint('recurring', __name__, url_prefix='/api/recurring')


@recurring_bp.route('', methods=['GET'])
def index():
    return jsonify([template.to_dict() for template in get_store().list_recurring()])


@recurring_bp.route('', methods=['POST'])
def add_recurring():
    data = parse_payload(RecurringIn, request.get_json(silent=True),
                         'Invalid recurring transaction data')

    store = get_store()
    with store.transaction():
        template = store.add_recurring(data)
    current_app.logger.info('Created %s recurring template %s', template.frequency, template.id)
    return jsonify(template.to_dict()), 201


@recurring_bp.route('/process', methods=['POST'])
def process():
    store = get_store()
    processor = RecurringProcessor(store, catch_up=current_app.config['RECURRING_CATCH_UP'])
    with store.transaction():
        records = processor.process_due()

    return jsonify({
        'message': 'Recurring transactions processed successfully',
        'processed': len(records),
        'records': [
            dict(record.to_dict(), kind='expense' if isinstance(record, Expense) else 'income')
            for record in records
        ],
    })
