from app import create_app
from models import db


def init_db(app=None):
    app = app or create_app()
    with app.app_context():
        db.create_all()
        app.logger.info('Created tables: %s', ', '.join(sorted(db.metadata.tables)))


if __name__ == "__main__":
    init_db()
