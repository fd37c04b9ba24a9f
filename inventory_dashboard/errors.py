from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class DashboardError(Exception):
    """Base error; carries an HTTP status and context for the operator message."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, **context):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        body.update(self.context)
        return body


class ValidationError(DashboardError):
    status_code = 400


class AuthError(DashboardError):
    status_code = 401


class NotFoundError(DashboardError):
    status_code = 404


class ConflictError(DashboardError):
    status_code = 409


class UpstreamError(DashboardError):
    status_code = 502


def register_error_handlers(app):
    @app.errorhandler(DashboardError)
    def _dashboard_error(e: DashboardError):
        if e.status_code >= 500:
            current_app.logger.error(f"[error] {type(e).__name__}: {e.message} {e.context}")
        else:
            current_app.logger.warning(f"[error] {type(e).__name__}: {e.message} {e.context}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e):
        current_app.logger.exception(f"[error] Unhandled: {e}")
        return jsonify({"success": False, "message": "Internal Server Error"}), 500
