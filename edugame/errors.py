"""
API errors and their JSON rendering.

Handlers raise one of the ``ApiError`` subclasses below; the error handlers
registered by ``register_error_handlers`` turn them into::

    {"success": false, "error": "<kind>", "message": "<text>"}

with the HTTP status of the error class. Database failures and unexpected
exceptions become ``Internal`` (500) and are logged with a traceback; their
original text never reaches the client.
"""
from __future__ import annotations

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .db import db


class ApiError(Exception):
    kind = "Internal"
    status = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class MissingField(ApiError):
    kind = "MissingField"
    status = 400
    default_message = "A required field is missing"


class InvalidField(ApiError):
    kind = "InvalidField"
    status = 400
    default_message = "A field has an invalid value"


class Conflict(ApiError):
    kind = "Conflict"
    status = 409
    default_message = "Username already exists"


class InsufficientCoins(ApiError):
    kind = "InsufficientCoins"
    status = 400
    default_message = "Not enough coins"


class InvalidCredential(ApiError):
    kind = "InvalidCredential"
    status = 401
    default_message = "Invalid password"


class Unauthenticated(ApiError):
    kind = "Unauthenticated"
    status = 401
    default_message = "Authentication required"


class NotFound(ApiError):
    kind = "NotFound"
    status = 404
    default_message = "Player not found"


class Internal(ApiError):
    pass


def error_response(err: ApiError):
    return jsonify(err.to_dict()), err.status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def _api_error(err):
        if err.status >= 500:
            app.logger.error("%s %s failed: %s", request.method, request.path, err.message)
        else:
            app.logger.info("%s %s -> %s: %s", request.method, request.path, err.kind, err.message)
        return error_response(err)

    @app.errorhandler(SQLAlchemyError)
    def _database_error(err):
        db.session.rollback()
        current_app.logger.exception("Database error on %s %s", request.method, request.path)
        return error_response(Internal("Database operation failed"))

    @app.errorhandler(HTTPException)
    def _http_error(err):
        # static pages keep werkzeug's HTML error pages
        if not request.path.startswith("/api") and request.accept_mimetypes.accept_html \
                and not request.is_json:
            return err
        kind = {404: "NotFound", 401: "Unauthenticated"}.get(err.code, err.name.replace(" ", ""))
        return jsonify({"success": False, "error": kind, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def _unexpected(err):
        db.session.rollback()
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response(Internal())
