"""
Business-layer exceptions.

Each exception carries the HTTP status it maps to; the presentation layer
turns them into ``{message, errors?}`` JSON bodies.
"""

from enum import Enum


class InventoryErrorCode(str, Enum):
    INVALID = "invalid"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_TRANSITION = "invalid_transition"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    ERROR = "error"


class InventoryApiError(Exception):
    status_code = 500
    code = InventoryErrorCode.ERROR

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationError(InventoryApiError):
    """Missing or malformed request fields; `errors` maps field -> [messages]."""
    status_code = 422
    code = InventoryErrorCode.INVALID

    def __init__(self, errors, message="The given data was invalid."):
        super().__init__(message, errors)


class InsufficientStockError(InventoryApiError):
    status_code = 400
    code = InventoryErrorCode.INSUFFICIENT_STOCK

    def __init__(self, message, available=None, requested=None):
        super().__init__(message)
        self.available = available
        self.requested = requested


class InvalidTransitionError(InventoryApiError):
    status_code = 400
    code = InventoryErrorCode.INVALID_TRANSITION

    def __init__(self, message, from_status=None, to_status=None):
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status


class AuthorizationError(InventoryApiError):
    status_code = 403
    code = InventoryErrorCode.FORBIDDEN

    def __init__(self, message="This action is unauthorized."):
        super().__init__(message)


class NotFoundError(InventoryApiError):
    status_code = 404
    code = InventoryErrorCode.NOT_FOUND

    def __init__(self, resource, resource_id):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id
