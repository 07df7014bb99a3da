import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class EconomyError(Exception):
    """Base error for the fuel economy. Carries an HTTP status and extra details."""

    status_code = 500

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        return {"error": self.message, **self.details}


class NotFound(EconomyError):
    status_code = 404


class Conflict(EconomyError):
    status_code = 409


class Forbidden(EconomyError):
    status_code = 403


class InsufficientFunds(EconomyError):
    status_code = 400

    def __init__(self, required, current, message="Not enough fuel!"):
        super().__init__(message, required=required, current=current)
        self.required = required
        self.current = current


class ValidationError(EconomyError):
    status_code = 400


class InternalFailure(EconomyError):
    status_code = 500

    def __init__(self, message="Internal server error."):
        super().__init__(message)


def register_error_handlers(app):
    from models import db

    @app.errorhandler(EconomyError)
    def handle_economy_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Unhandled database error")
        failure = InternalFailure()
        return jsonify(failure.to_dict()), failure.status_code
