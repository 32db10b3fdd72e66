from flask import Blueprint, current_app, jsonify

from storage import get_store

categories_bp = Blueprint('categories', __name__, url_prefix='/api/categories')


@categories_bp.route('', methods=['GET'])
def index():
    categories = list(current_app.config['EXPENSE_CATEGORIES'])
    for name in get_store().expense_categories():
        if name not in categories:
            categories.append(name)
    return jsonify(categories)
