"""
Field-level helpers for validating decoded JSON request bodies.

Each helper appends messages to an ``errors`` dict (field -> [messages]) and
returns the cleaned value, or None when the field is missing or invalid, so a
validator can collect every problem before raising a single ValidationError.
"""

from __future__ import annotations

from datetime import date, datetime

from inventory_api import db
from inventory_api.business.core.errors import ValidationError


# Largest value an Integer column holds on every supported database
MAX_INT = 2**31 - 1


def add_error(errors: dict, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def coerce_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def require_int(data: dict, field: str, errors: dict, *, min_value: int | None = None,
                max_value: int = MAX_INT,
                key: str | None = None, required: bool = True):
    key = key or field
    label = field.replace('_', ' ')
    raw = data.get(field)
    if raw is None or raw == '':
        if required:
            add_error(errors, key, f"The {label} field is required.")
        return None
    value = coerce_int(raw)
    if value is None:
        add_error(errors, key, f"The {label} must be an integer.")
        return None
    if min_value is not None and value < min_value:
        add_error(errors, key, f"The {label} must be at least {min_value}.")
        return None
    if value > max_value:
        add_error(errors, key, f"The {label} may not be greater than {max_value}.")
        return None
    return value


def optional_str(data: dict, field: str, errors: dict, *, max_length: int,
                 key: str | None = None, required: bool = False):
    key = key or field
    label = field.replace('_', ' ')
    raw = data.get(field)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            add_error(errors, key, f"The {label} field is required.")
        return None
    if not isinstance(raw, str):
        add_error(errors, key, f"The {label} must be a string.")
        return None
    if len(raw) > max_length:
        add_error(errors, key, f"The {label} may not be greater than {max_length} characters.")
        return None
    return raw


def one_of(data: dict, field: str, choices, errors: dict, *, default=None,
           key: str | None = None, required: bool = False):
    key = key or field
    label = field.replace('_', ' ')
    raw = data.get(field)
    if raw is None or raw == '':
        if required:
            add_error(errors, key, f"The {label} field is required.")
        return default
    if raw not in choices:
        add_error(errors, key, f"The selected {label} is invalid.")
        return None
    return raw


def must_exist(model, value, field: str, errors: dict, *, key: str | None = None):
    """Append an error when ``value`` is not a primary key of ``model``."""
    if value is None:
        return None
    instance = db.session.get(model, value)
    if instance is None:
        add_error(errors, key or field, f"The selected {field.replace('_', ' ')} is invalid.")
    return instance


def optional_date(args, field: str, errors: dict):
    raw = args.get(field)
    if not raw:
        return None
    try:
        return datetime.strptime(raw, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        add_error(errors, field, f"The {field.replace('_', ' ')} is not a valid date (YYYY-MM-DD).")
        return None


def check_date_range(start: date | None, end: date | None, errors: dict) -> None:
    if start and end and end < start:
        add_error(errors, 'end_date', "The end date must be a date after or equal to start date.")


def raise_if_errors(errors: dict) -> None:
    if errors:
        raise ValidationError(errors)


def require_json_object(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError({'body': ["The request body must be a JSON object."]})
    return payload
