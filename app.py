import logging
import os
from flask import Flask, send_from_directory
from config import Config
from errors import register_error_handlers
from routes.analytics import analytics_bp
from routes.budgets import alerts_bp, budgets_bp
from routes.categories import categories_bp
from routes.expenses import expenses_bp
from routes.goals import goals_bp
from routes.income import income_bp
from routes.recurring import recurring_bp
from routes.reports import reports_bp

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'], format=LOG_FORMAT)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    config_class.init_db(app)

    os.makedirs(app.config['RECEIPT_FOLDER'], exist_ok=True)

    app.register_blueprint(expenses_bp)
    app.register_blueprint(income_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(alerts_bp)
    app.register_blueprint(goals_bp)
    app.register_blueprint(recurring_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(categories_bp)

    register_error_handlers(app)

    @app.route('/uploads/receipts/<path:filename>')
    def receipt_file(filename):
        return send_from_directory(os.path.abspath(app.config['RECEIPT_FOLDER']), filename)

    return app


if __name__ == "__main__":
    create_app().run()
