"""
Application-wide JSON error handlers.

Business exceptions carry their own status; framework HTTP errors keep
theirs; anything else becomes a logged 500 with a generic message.
"""
from flask import jsonify, request
from flask_login import current_user
from werkzeug.exceptions import HTTPException

from inventory_api import db
from inventory_api.business.core.errors import InventoryApiError
from inventory_api.logger import get_logger
from inventory_api.utils.logging_sanitizer import sanitize_exception_message, sanitize_payload

logger = get_logger("inventory_api.errors")


def _current_user_id():
    return current_user.id if current_user.is_authenticated else None


def register_error_handlers(app):

    @app.errorhandler(InventoryApiError)
    def handle_inventory_api_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.code.value} on {request.method} {request.path}: {error.message}")
        else:
            logger.info(
                f"{error.code.value} ({error.status_code}) on {request.method} {request.path} "
                f"user={_current_user_id()}: {error.message}"
            )
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.error(
            f"Unexpected error on {request.method} {request.path} user={_current_user_id()} "
            f"payload={sanitize_payload(request.get_json(silent=True))}: "
            f"{sanitize_exception_message(error)}",
            exc_info=True,
        )
        return jsonify({'message': 'An unexpected error occurred'}), 500
