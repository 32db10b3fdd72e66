import os
from decimal import Decimal
from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _database_uri():
    if os.getenv('DATABASE_URL'):
        return os.getenv('DATABASE_URL')
    return URL.create(
        'mysql+mysqlconnector',
        username=os.getenv('MYSQL_USER'),
        password=os.getenv('MYSQL_PASSWORD'),
        host=os.getenv('MYSQL_HOST', 'localhost'),
        database=os.getenv('MYSQL_DATABASE', 'finance_db'),
    ).render_as_string(hide_password=False)


class Config:
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True, 'pool_recycle': 3600}

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads')
    RECEIPT_FOLDER = os.path.join(UPLOAD_FOLDER, 'receipts')
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_RECEIPT_EXT = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

    STARTING_BALANCE = Decimal(os.getenv('STARTING_BALANCE', '10000'))
    RECURRING_CATCH_UP = _env_flag('RECURRING_CATCH_UP')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    EXPENSE_CATEGORIES = [
        'Food & Dining',
        'Transportation',
        'Shopping',
        'Entertainment',
        'Bills & Utilities',
        'Healthcare',
        'Travel',
        'Education',
        'Other',
    ]

    @staticmethod
    def init_db(app):
        from models import db
        from storage import LedgerStore

        db.init_app(app)
        app.extensions['ledger'] = LedgerStore(db.session)
