from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class LedgerError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'message': self.message}


class ValidationFailed(LedgerError):
    status_code = 400
    message = 'Invalid request data'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, message, exc):
        errors = []
        for err in exc.errors():
            field = '.'.join(str(part) for part in err['loc']) or 'body'
            errors.append({'field': field, 'message': err['msg']})
        return cls(message, errors)

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class NotFound(LedgerError):
    status_code = 404
    message = 'Not found'


def register_error_handlers(app):
    from models import db

    @app.errorhandler(LedgerError)
    def handle_ledger_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(exc):
        db.session.rollback()
        app.logger.exception('Database error: %s', exc)
        return jsonify({'message': 'Database error'}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'message': exc.description}), exc.code
