"""
Logging Sanitizer Utility

Redacts credentials and tokens from request payloads before they are logged.
"""

from typing import Any, Dict


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'apikey',
    'api_token',
    'auth_token',
    'access_token',
    'refresh_token',
    'authorization',
    'session_id',
    'csrf_token',
}


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Args:
        data: Dictionary to sanitize
        redact_text: Text to use for redacted values (default: '[REDACTED]')

    Returns:
        Sanitized dictionary with sensitive values replaced

    Example:
        >>> sanitize_dict({'username': 'admin', 'password': 'secret123'})
        {'username': 'admin', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        else:
            sanitized[key] = sanitize_payload(value, redact_text)

    return sanitized


def sanitize_payload(payload: Any, redact_text: str = '[REDACTED]') -> Any:
    """
    Sanitize a decoded JSON request body of any shape.

    Dicts are sanitized key by key, lists element by element (batch requests
    carry lists of dicts); scalars are returned unchanged.
    """
    if isinstance(payload, dict):
        return sanitize_dict(payload, redact_text)
    if isinstance(payload, list):
        return [sanitize_payload(item, redact_text) for item in payload]
    return payload


def sanitize_exception_message(exception: Exception) -> str:
    """
    Sanitize exception messages to ensure they don't contain sensitive data.

    Args:
        exception: Exception to sanitize

    Returns:
        Sanitized exception message
    """
    message = str(exception)

    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message
