import logging

from flask import jsonify
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

from models import db

logger = logging.getLogger(__name__)


class SmartExpenseError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFound(SmartExpenseError):
    """Referenced row is absent, inactive where it matters, or owned by another user."""
    status_code = 404


class Forbidden(SmartExpenseError):
    """Pro-tier gate refused the operation."""
    status_code = 403


class ValidationError(SmartExpenseError):
    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(SmartExpenseError)
    def handle_domain_error(error):
        db.session.rollback()
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        return jsonify({"message": error.description}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error: %s", error)
        db.session.rollback()
        return jsonify({"message": "Internal server error"}), 500
