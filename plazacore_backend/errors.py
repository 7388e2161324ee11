# plazacore_backend/errors.py
from flask import jsonify, request

from .extensions import db


class PlazaError(Exception):
    """Base class for errors raised by the billing domain."""

    status_code = 400
    error = "bad_request"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self):
        body = {"error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PlazaError):
    error = "validation_error"


class NotFoundError(PlazaError):
    status_code = 404
    error = "not_found"


class InvalidStateError(PlazaError):
    status_code = 409
    error = "invalid_status"


def require_fields(data, fields):
    """Raise ValidationError for the first missing or empty field."""
    for field in fields:
        if data.get(field) in (None, ""):
            raise ValidationError(f"{field} is required")


def register_error_handlers(app):
    @app.errorhandler(PlazaError)
    def plaza_error(e):
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify(error="bad_request", message=msg), 400

    @app.errorhandler(401)
    def unauthorized(e):
        return jsonify(error="unauthorized"), 401

    @app.errorhandler(403)
    def forbidden(e):
        return jsonify(error="forbidden"), 403

    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="not_found", path=request.path), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(500)
    def server_error(e):
        db.session.rollback()
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error"), 500
