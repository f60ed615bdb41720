"""
Shared helpers for API routes: actor resolution, paging and query-string parsing.
"""

from flask import current_app, request
from flask_login import current_user

from inventory_api.business.core.actor_context import ActorContext
from inventory_api.business.core.request_validation import (
    MAX_INT,
    check_date_range,
    coerce_int,
    optional_date,
    raise_if_errors,
    require_int,
)


def current_actor() -> ActorContext:
    return ActorContext.from_user(current_user)


def json_body():
    return request.get_json(silent=True)


def page_args():
    """Return (page, per_page) from the query string, clamped to configured limits."""
    default_per_page = current_app.config.get('API_DEFAULT_PER_PAGE', 15)
    max_per_page = current_app.config.get('API_MAX_PER_PAGE', 100)

    page = coerce_int(request.args.get('page')) or 1
    per_page = coerce_int(request.args.get('per_page')) or default_per_page
    return min(max(page, 1), MAX_INT), min(max(per_page, 1), max_per_page)


def int_arg(name):
    """Optional integer filter from the query string; malformed values are a 422"""
    errors = {}
    value = require_int(request.args, name, errors, required=False)
    raise_if_errors(errors)
    return value


def date_range_args():
    errors = {}
    start = optional_date(request.args, 'start_date', errors)
    end = optional_date(request.args, 'end_date', errors)
    check_date_range(start, end, errors)
    raise_if_errors(errors)
    return start, end


def paginated(pagination, serialize):
    return {
        'data': [serialize(item) for item in pagination.items],
        'meta': {
            'current_page': pagination.page,
            'per_page': pagination.per_page,
            'total': pagination.total,
            'last_page': pagination.pages,
        },
    }
