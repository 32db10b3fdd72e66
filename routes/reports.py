from flask import Blueprint, jsonify, request

from schemas import ReportRequest, parse_payload
from services.reports import ReportGenerator
from storage import get_store

reports_bp = Blueprint('reports', __name__, url_prefix='/api/reports')


@reports_bp.route('', methods=['GET'])
def index():
    return jsonify([report.to_dict() for report in get_store().list_reports()])


@reports_bp.route('/generate', methods=['POST'])
def generate():
    data = parse_payload(ReportRequest, request.get_json(silent=True), 'Invalid report request')

    store = get_store()
    with store.transaction():
        report = ReportGenerator(store).generate(data.report_type, data.start_date, data.end_date)
    return jsonify(report.to_dict()), 201
