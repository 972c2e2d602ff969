"""Error taxonomy and the JSON error handlers registered on the app.

Core modules raise these exceptions; the handlers below are the only place
that turns them into HTTP responses.
"""
import logging

import pydantic
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .models import db

logger = logging.getLogger(__name__)


class DeadlineDashError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors or []

    def to_dict(self):
        payload = {"message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(DeadlineDashError):
    status_code = 400
    default_message = "Validation failed"

    @classmethod
    def for_field(cls, field, message):
        return cls(f"{field}: {message}", errors=[{"field": field, "message": message}])


class InvalidInput(ValidationError):
    default_message = "Invalid input"


class NotFound(DeadlineDashError):
    status_code = 404
    default_message = "Not found"


class InvalidSchedule(DeadlineDashError):
    status_code = 400
    default_message = "Cannot build a schedule"


class InternalError(DeadlineDashError):
    status_code = 500


def _field_errors(exc):
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return errors


def register_error_handlers(app):
    @app.errorhandler(DeadlineDashError)
    def handle_domain_error(e):
        if e.status_code >= 500:
            logger.error(f"Internal error: {e.message}")
            e = InternalError()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_schema_error(e):
        errors = _field_errors(e)
        logger.debug(f"Request validation failed: {errors}")
        return jsonify(ValidationError(errors=errors).to_dict()), 400

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        logger.error(f"Database error: {str(e)}")
        db.session.rollback()
        return jsonify(InternalError().to_dict()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception(f"Unexpected error: {str(e)}")
        return jsonify(InternalError().to_dict()), 500
