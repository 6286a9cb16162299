# backend/errors.py
from __future__ import annotations

from flask import jsonify, current_app
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for failures that map to a JSON error response."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, **extra):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, **self.extra}


class BadRequestError(ApiError):
    status_code = 400


class ConflictError(BadRequestError):
    """Duplicate unique values (phone, email, username...)."""


class UnauthorizedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


def format_validation_errors(exc: ValidationError) -> list[str]:
    out = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = err.get("msg", "invalid value")
        out.append(f"{loc}: {msg}" if loc else msg)
    return out


def register_error_handlers(app):
    """Every error leaves the app as JSON with at least a `message` field."""

    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify(
            success=False,
            message="Invalid request data",
            errors=format_validation_errors(e),
        ), 400

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify(success=False, message=e.description or e.name), e.code

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        current_app.logger.exception("Unhandled error: %s", e)
        return jsonify(success=False, message=str(e) or "Server error"), 500


def register_jwt_handlers(jwt):
    """Flask-JWT-Extended answers with {"msg": ...} by default; keep our envelope."""

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify(success=False, message="No token, authorization denied"), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify(success=False, message="Token is not valid"), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify(success=False, message="Token has expired"), 401
